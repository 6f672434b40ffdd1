"""Sequential decoder for the interval/class framing of flowtuple files.

A flowtuple stream nests records inside classes inside intervals::

    EDGR INTR <interval:u16> <start:u32>
        SIXT <class:u16> <keys:u32> <record> * keys  SIXT <class:u16>
        ...
    EDGR INTR <interval:u16> <end:u32>
    ...
    00000000

Every integer is big-endian. The outer ``EDGR`` magic that closes an interval
is consumed by :meth:`FlowtupleReader.read_class_header`, which is how the
reader learns that no further classes follow.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import IO, Iterator, Optional, Tuple

from .errors import ConsistencyMismatch, ShortRead, StructuralMismatch
from .record import FlowTuple, decode_record
from .source import read_exact

logger = logging.getLogger(__name__)

OUTER_MAGIC = 0x45444752
INTERVAL_MAGIC = 0x494E5452
CLASS_MAGIC = 0x53495854
END_OF_STREAM = 0x00000000

CLASS_NAMES = {
    0: "flowtuple_backscatter",
    1: "flowtuple_icmpreq",
    2: "flowtuple_other",
}


@dataclass(frozen=True)
class IntervalHeader:
    number: int
    start_time: int


@dataclass(frozen=True)
class IntervalTail:
    number: int
    end_time: int


@dataclass(frozen=True)
class ClassHeader:
    class_id: int
    key_count: int

    @property
    def name(self) -> str:
        return CLASS_NAMES.get(self.class_id, f"class_{self.class_id}")


@dataclass(frozen=True)
class ClassTail:
    class_id: int


class FlowtupleReader:
    """Walks a flowtuple byte stream one framing element at a time.

    Callers nest the operations as interval header, class headers, records,
    class tail, interval tail. The end of each level is reported in-band by
    a ``None`` return; malformed input raises a :class:`FlowtupleError`.
    Call order is the caller's responsibility and is not checked here.

    *logger*, when given, receives the interval and class bookkeeping lines
    at INFO level. Decoding is identical with or without it.
    """

    def __init__(self, stream: IO[bytes], *, logger: Optional[logging.Logger] = None) -> None:
        self._stream = stream
        self._diagnostics = logger

        self._interval_number = 0
        self._class_id = 0
        self._key_count = 0
        self._records_read = 0

    # ------------------------------------------------------------------
    @property
    def interval_number(self) -> int:
        return self._interval_number

    @property
    def class_id(self) -> int:
        return self._class_id

    @property
    def key_count(self) -> int:
        return self._key_count

    @property
    def records_read(self) -> int:
        return self._records_read

    # ------------------------------------------------------------------
    def read_interval_header(self) -> Optional[IntervalHeader]:
        """Open the next interval, or return ``None`` at the end of the stream."""
        try:
            magic = self._read_u32("outer magic")
        except ShortRead as exc:
            if exc.got == 0:
                logger.debug("Source exhausted at interval boundary")
                return None
            raise
        if magic == END_OF_STREAM:
            return None
        if magic != OUTER_MAGIC:
            raise StructuralMismatch(magic, (OUTER_MAGIC, END_OF_STREAM), "interval header")

        magic = self._read_u32("interval magic")
        if magic == END_OF_STREAM:
            logger.debug("End-of-stream marker after outer magic")
            return None
        if magic != INTERVAL_MAGIC:
            raise StructuralMismatch(magic, (INTERVAL_MAGIC,), "interval header")

        number = self._read_u16("interval number")
        self._emit("Interval number: %d", number)
        start_time = self._read_u32("interval start time")
        self._emit("Interval start time: %d", start_time)

        self._interval_number = number
        self._class_id = 0
        self._key_count = 0
        self._records_read = 0
        return IntervalHeader(number=number, start_time=start_time)

    def read_class_header(self) -> Optional[ClassHeader]:
        """Open the next class, or return ``None`` when the interval has no more."""
        magic = self._read_u32("class magic")
        if magic == OUTER_MAGIC:
            return None
        if magic != CLASS_MAGIC:
            raise StructuralMismatch(magic, (CLASS_MAGIC, OUTER_MAGIC), "class header")

        class_id = self._read_u16("class id")
        self._emit("Class id: %d", class_id)
        key_count = self._read_u32("key count")
        self._emit("Key count: %d", key_count)

        self._class_id = class_id
        self._key_count = key_count
        self._records_read = 0
        return ClassHeader(class_id=class_id, key_count=key_count)

    def read_record(self, record: Optional[FlowTuple] = None) -> Optional[FlowTuple]:
        """Decode the next record of the current class.

        Returns ``None`` without touching the stream once the declared key
        count has been read. *record* is reused for storage when supplied.
        """
        if self._records_read >= self._key_count:
            return None
        record = decode_record(self._stream, record)
        self._records_read += 1
        return record

    def read_class_tail(self) -> ClassTail:
        magic = self._read_u32("class tail magic")
        if magic != CLASS_MAGIC:
            raise StructuralMismatch(magic, (CLASS_MAGIC,), "class tail")

        class_id = self._read_u16("class tail id")
        if class_id != self._class_id:
            raise ConsistencyMismatch("class id", self._class_id, class_id)
        return ClassTail(class_id=class_id)

    def read_interval_tail(self) -> IntervalTail:
        magic = self._read_u32("interval tail magic")
        if magic != INTERVAL_MAGIC:
            raise StructuralMismatch(magic, (INTERVAL_MAGIC,), "interval tail")

        number = self._read_u16("interval tail number")
        self._emit("Interval number: %d", number)
        if number != self._interval_number:
            raise ConsistencyMismatch("interval number", self._interval_number, number)

        end_time = self._read_u32("interval end time")
        self._emit("Interval end time: %d", end_time)
        return IntervalTail(number=number, end_time=end_time)

    # ------------------------------------------------------------------
    def iter_records(self) -> Iterator[Tuple[int, int, FlowTuple]]:
        """Yield ``(interval_number, class_id, record)`` for the whole stream."""
        while self.read_interval_header() is not None:
            while self.read_class_header() is not None:
                while True:
                    record = self.read_record()
                    if record is None:
                        break
                    yield self._interval_number, self._class_id, record
                self.read_class_tail()
            self.read_interval_tail()

    def __iter__(self) -> Iterator[Tuple[int, int, FlowTuple]]:
        return self.iter_records()

    # ------------------------------------------------------------------
    def _read_u16(self, what: str) -> int:
        return int.from_bytes(read_exact(self._stream, 2, what), "big")

    def _read_u32(self, what: str) -> int:
        return int.from_bytes(read_exact(self._stream, 4, what), "big")

    def _emit(self, message: str, *args: object) -> None:
        if self._diagnostics is not None:
            self._diagnostics.info(message, *args)


__all__ = [
    "OUTER_MAGIC",
    "INTERVAL_MAGIC",
    "CLASS_MAGIC",
    "END_OF_STREAM",
    "CLASS_NAMES",
    "IntervalHeader",
    "IntervalTail",
    "ClassHeader",
    "ClassTail",
    "FlowtupleReader",
]
