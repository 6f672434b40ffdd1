"""Exceptions raised while decoding flowtuple streams."""

from __future__ import annotations

from typing import Sequence


class FlowtupleError(Exception):
    """Base class for all flowtuple decoding failures."""


class StructuralMismatch(FlowtupleError):
    """A magic number did not match any value allowed at its position."""

    def __init__(self, value: int, expected: Sequence[int], where: str) -> None:
        self.value = value
        self.expected = tuple(expected)
        self.where = where
        wanted = " or ".join(f"0x{item:08x}" for item in self.expected)
        super().__init__(
            f"Incorrect magic number 0x{value:08x} in {where} (expected {wanted})"
        )


class ConsistencyMismatch(FlowtupleError):
    """A tail marker disagrees with the header that opened its section."""

    def __init__(self, field: str, expected: int, actual: int) -> None:
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(f"Incorrect {field}: {expected} != {actual}")


class ShortRead(FlowtupleError):
    """The source ran dry before a field was complete."""

    def __init__(self, what: str, needed: int, got: int) -> None:
        self.what = what
        self.needed = needed
        self.got = got
        super().__init__(f"Incomplete read of {what}: got {got} of {needed} bytes")


__all__ = ["FlowtupleError", "StructuralMismatch", "ConsistencyMismatch", "ShortRead"]
