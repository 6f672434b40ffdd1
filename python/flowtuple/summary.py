"""Per-class roll-ups and array export of decoded flowtuple records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .reader import CLASS_NAMES, FlowtupleReader
from .record import FlowTuple

FLOWTUPLE_DTYPE = np.dtype(
    [
        ("interval", np.uint16),
        ("class_id", np.uint16),
        ("src_ip", np.uint32),
        ("dst_ip", np.uint32),
        ("src_port", np.uint16),
        ("dst_port", np.uint16),
        ("protocol", np.uint8),
        ("flags", np.uint8),
        ("ttl", np.uint8),
        ("ip_len", np.uint16),
        ("count", np.uint32),
    ]
)

SUMMARY_HEADER = "interval,class,records,packets,ip_len_min,ip_len_max,ip_len_mean"


@dataclass
class ClassSummary:
    """Aggregate view of one class section inside one interval."""

    interval_number: int
    class_id: int
    key_count: int = 0
    record_count: int = 0
    packet_total: int = 0
    ip_len_sum: int = 0
    ip_len_min: Optional[int] = None
    ip_len_max: Optional[int] = None

    @property
    def class_name(self) -> str:
        return CLASS_NAMES.get(self.class_id, f"class_{self.class_id}")

    @property
    def ip_len_mean(self) -> float:
        if self.record_count == 0:
            return 0.0
        return self.ip_len_sum / self.record_count

    def add_record(self, record: FlowTuple) -> None:
        self.record_count += 1
        self.packet_total += record.count
        self.ip_len_sum += record.ip_len
        self.ip_len_min = record.ip_len if self.ip_len_min is None else min(self.ip_len_min, record.ip_len)
        self.ip_len_max = record.ip_len if self.ip_len_max is None else max(self.ip_len_max, record.ip_len)

    def to_row(self) -> str:
        return ",".join(
            [
                str(self.interval_number),
                self.class_name,
                str(self.record_count),
                str(self.packet_total),
                str(self.ip_len_min or 0),
                str(self.ip_len_max or 0),
                f"{self.ip_len_mean:.2f}",
            ]
        )


def summarize(reader: FlowtupleReader) -> List[ClassSummary]:
    """Walk *reader* to the end of the stream, one summary per class section.

    Classes that declare zero keys still get an entry.
    """
    summaries: List[ClassSummary] = []
    scratch = FlowTuple()

    while reader.read_interval_header() is not None:
        while True:
            header = reader.read_class_header()
            if header is None:
                break
            summary = ClassSummary(
                interval_number=reader.interval_number,
                class_id=header.class_id,
                key_count=header.key_count,
            )
            while reader.read_record(scratch) is not None:
                summary.add_record(scratch)
            reader.read_class_tail()
            summaries.append(summary)
        reader.read_interval_tail()

    return summaries


def records_to_array(entries: Iterable[Tuple[int, int, FlowTuple]]) -> np.ndarray:
    """Pack ``(interval, class_id, record)`` triples into a structured array."""
    rows = [
        (
            interval,
            class_id,
            record.src_ip,
            record.dst_ip,
            record.src_port,
            record.dst_port,
            record.protocol,
            record.flags,
            record.ttl,
            record.ip_len,
            record.count,
        )
        for interval, class_id, record in entries
    ]
    return np.array(rows, dtype=FLOWTUPLE_DTYPE)


__all__ = [
    "FLOWTUPLE_DTYPE",
    "SUMMARY_HEADER",
    "ClassSummary",
    "summarize",
    "records_to_array",
]
