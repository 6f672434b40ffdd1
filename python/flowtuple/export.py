"""CSV output for decoded flowtuple records."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

from .record import FIELD_NAMES, FlowTuple
from .utils import LINE_SEP

RECORD_HEADER = ",".join(("interval", "class_id") + FIELD_NAMES)


def record_row(interval_number: int, class_id: int, record: FlowTuple) -> str:
    values = record.to_dict()
    return ",".join([str(interval_number), str(class_id)] + [str(values[name]) for name in FIELD_NAMES])


class IncrementalCSVWriter:
    """Appends rows to a CSV file, emitting the header only once."""

    def __init__(self, file_path: Union[str, Path], header: Optional[str] = None) -> None:
        self.file_path = Path(file_path)
        self.header = header
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        self._header_written = (
            self.file_path.exists() and self.file_path.stat().st_size > 0
        )

    def append_rows(self, rows: Iterable[str]) -> int:
        row_list = [row for row in rows if row]
        if not row_list:
            return 0

        with self.file_path.open("a", encoding="utf-8", newline="") as handle:
            if not self._header_written and self.header is not None:
                handle.write(self.header + LINE_SEP)
                self._header_written = True
            for row in row_list:
                handle.write(row + LINE_SEP)

        return len(row_list)


__all__ = ["RECORD_HEADER", "IncrementalCSVWriter", "record_row"]
