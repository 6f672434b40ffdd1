"""Command-line entry point for dumping flowtuple captures."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .errors import FlowtupleError
from .export import RECORD_HEADER, IncrementalCSVWriter, record_row
from .reader import FlowtupleReader
from .source import open_source
from .summary import SUMMARY_HEADER, summarize

logger = logging.getLogger(__name__)

DIAGNOSTICS_LOGGER = "flowtuple.diagnostics"
CSV_BATCH_ROWS = 1024


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowtuple-dump",
        description="Decode a (optionally gzipped) flowtuple file.",
    )
    parser.add_argument(
        "path",
        type=Path,
        help="Path to a flowtuple file, e.g. *.flowtuple.cors.gz.",
    )
    parser.add_argument(
        "--csv",
        type=Path,
        metavar="FILE",
        help="Write records to a CSV file instead of printing them.",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print one line per interval/class instead of individual records.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=0,
        help="Stop after this many records (default: 0, no limit).",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Log level for diagnostic output.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        metavar="FILE",
        help="Write interval and class bookkeeping lines to this file.",
    )
    return parser


def dump_records(
    reader: FlowtupleReader,
    out: TextIO,
    *,
    csv_path: Optional[Path] = None,
    limit: int = 0,
) -> int:
    """Emit records from *reader* as text lines or CSV rows, returning the count."""
    writer = IncrementalCSVWriter(csv_path, RECORD_HEADER) if csv_path is not None else None
    pending: List[str] = []
    written = 0

    for interval_number, class_id, record in reader.iter_records():
        if writer is not None:
            pending.append(record_row(interval_number, class_id, record))
            if len(pending) >= CSV_BATCH_ROWS:
                writer.append_rows(pending)
                pending = []
        else:
            out.write(f"{record}\n")
        written += 1
        if limit > 0 and written >= limit:
            break

    if writer is not None and pending:
        writer.append_rows(pending)
    return written


def _attach_log_file(path: Path) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(message)s", datefmt="%H:%M:%S"))
    diagnostics = logging.getLogger(DIAGNOSTICS_LOGGER)
    diagnostics.addHandler(handler)
    diagnostics.setLevel(logging.INFO)
    diagnostics.propagate = False
    return handler


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level))

    if args.limit < 0:
        parser.error("--limit must not be negative.")
    if args.summary and args.csv is not None:
        parser.error("--summary and --csv are mutually exclusive.")

    handler: Optional[logging.Handler] = None
    diagnostics: Optional[logging.Logger] = None

    try:
        if args.csv is not None and args.csv.exists():
            args.csv.unlink()
        if args.log_file is not None:
            handler = _attach_log_file(args.log_file)
            diagnostics = logging.getLogger(DIAGNOSTICS_LOGGER)

        with open_source(args.path) as stream:
            reader = FlowtupleReader(stream, logger=diagnostics)
            if args.summary:
                sys.stdout.write(SUMMARY_HEADER + "\n")
                for summary in summarize(reader):
                    sys.stdout.write(summary.to_row() + "\n")
            else:
                count = dump_records(reader, sys.stdout, csv_path=args.csv, limit=args.limit)
                logger.info("Decoded %d records from %s", count, args.path)
    except (FlowtupleError, OSError, EOFError) as exc:
        logger.error("Failed processing %s: %s", args.path, exc)
        return 1
    finally:
        if handler is not None:
            logging.getLogger(DIAGNOSTICS_LOGGER).removeHandler(handler)
            handler.close()

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
