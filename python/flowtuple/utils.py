"""Formatting helpers shared by the decoder and its outputs."""

from __future__ import annotations

import os
from typing import Union

LINE_SEP = os.linesep


def format_ip(value: Union[int, bytes, bytearray]) -> str:
    """Render an IPv4 address as a dotted quad, most significant octet first."""
    if isinstance(value, (bytes, bytearray)):
        return ".".join(str(b & 0xFF) for b in value)
    value = int(value) & 0xFFFFFFFF
    return ".".join(str((value >> shift) & 0xFF) for shift in (24, 16, 8, 0))


__all__ = ["LINE_SEP", "format_ip"]
