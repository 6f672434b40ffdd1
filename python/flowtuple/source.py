"""Byte-source helpers: opening capture files and exact-width reads."""

from __future__ import annotations

import gzip
import logging
from pathlib import Path
from typing import IO, Union

from .errors import ShortRead

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"


def read_exact(stream: IO[bytes], size: int, what: str) -> bytes:
    """Read exactly *size* bytes from *stream* or raise :class:`ShortRead`.

    Buffered and decompressing streams may hand back fewer bytes than asked
    for, so reads are repeated until the field is complete or the source
    reports no more data.
    """
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    data = b"".join(chunks)
    if len(data) != size:
        raise ShortRead(what, size, len(data))
    return data


def open_source(path: Union[str, Path]) -> IO[bytes]:
    """Open a flowtuple capture for sequential reading.

    Files starting with the gzip magic (the usual ``.cors.gz`` captures) are
    wrapped in a :class:`gzip.GzipFile`; anything else is read as-is.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Flowtuple file does not exist: {path}")
    if not path.is_file():
        raise OSError(f"Flowtuple path is not a regular file: {path}")

    with path.open("rb") as handle:
        head = handle.read(len(GZIP_MAGIC))
    if head == GZIP_MAGIC:
        logger.debug("Opening %s as gzip stream", path)
        return gzip.open(path, "rb")
    return path.open("rb")


__all__ = ["GZIP_MAGIC", "read_exact", "open_source"]
