from __future__ import annotations

import struct
from types import SimpleNamespace
from typing import Sequence, Tuple

import pytest

from flowtuple.reader import CLASS_MAGIC, INTERVAL_MAGIC, OUTER_MAGIC
from flowtuple.record import FlowTuple

IntervalSpec = Tuple[int, Sequence[Tuple[int, int]]]


def sample_record(index: int) -> FlowTuple:
    return FlowTuple(
        src_ip=0x0A000000 + index,
        dst_ip=0x000B0000 + index,
        src_port=1000 + index,
        dst_port=80,
        protocol=6,
        flags=0x02,
        ttl=64,
        ip_len=40 + index,
        count=index + 1,
    )


def interval_head(number: int, start_time: int = 1_000) -> bytes:
    return struct.pack(">IIHI", OUTER_MAGIC, INTERVAL_MAGIC, number, start_time)


def class_head(class_id: int, key_count: int) -> bytes:
    return struct.pack(">IHI", CLASS_MAGIC, class_id, key_count)


def class_tail(class_id: int) -> bytes:
    return struct.pack(">IH", CLASS_MAGIC, class_id)


def interval_tail(number: int, end_time: int = 1_060) -> bytes:
    # The leading outer magic is what ends the class loop.
    return struct.pack(">IIHI", OUTER_MAGIC, INTERVAL_MAGIC, number, end_time)


def build_stream(intervals: Sequence[IntervalSpec], *, terminator: bool = True) -> bytes:
    """Encode ``[(interval_number, [(class_id, record_count), ...]), ...]``."""
    chunks = []
    index = 0
    for number, classes in intervals:
        chunks.append(interval_head(number))
        for class_id, count in classes:
            chunks.append(class_head(class_id, count))
            for _ in range(count):
                chunks.append(bytes(sample_record(index)))
                index += 1
            chunks.append(class_tail(class_id))
        chunks.append(interval_tail(number))
    if terminator:
        chunks.append(struct.pack(">I", 0))
    return b"".join(chunks)


@pytest.fixture
def frames() -> SimpleNamespace:
    """Frame builders for synthetic flowtuple streams."""
    return SimpleNamespace(
        record=sample_record,
        interval_head=interval_head,
        class_head=class_head,
        class_tail=class_tail,
        interval_tail=interval_tail,
        build=build_stream,
    )
