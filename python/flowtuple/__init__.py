"""Sequential decoder for binary flowtuple traffic summary files."""

from .errors import ConsistencyMismatch, FlowtupleError, ShortRead, StructuralMismatch
from .export import IncrementalCSVWriter
from .reader import (
    CLASS_MAGIC,
    CLASS_NAMES,
    END_OF_STREAM,
    INTERVAL_MAGIC,
    OUTER_MAGIC,
    ClassHeader,
    ClassTail,
    FlowtupleReader,
    IntervalHeader,
    IntervalTail,
)
from .record import RECORD_LEN, FlowTuple, decode_record
from .source import open_source
from .summary import ClassSummary, records_to_array, summarize
from .utils import format_ip

__all__ = [
    "FlowtupleError",
    "StructuralMismatch",
    "ConsistencyMismatch",
    "ShortRead",
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
    "RECORD_LEN",
    "FlowTuple",
    "decode_record",
    "open_source",
    "ClassSummary",
    "summarize",
    "records_to_array",
    "IncrementalCSVWriter",
    "format_ip",
]
