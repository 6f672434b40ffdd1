"""Fixed-width flowtuple record decoding."""

from __future__ import annotations

from typing import IO, Any, Dict, Optional

import dpkt

from .source import read_exact
from .utils import format_ip

RECORD_LEN = 20

FIELD_NAMES = (
    "src_ip",
    "dst_ip",
    "src_port",
    "dst_port",
    "protocol",
    "flags",
    "ttl",
    "ip_len",
    "count",
)


class FlowTuple(dpkt.Packet):
    """One aggregated flow entry as stored on the wire.

    The destination address occupies only three octets in the file. The
    decoded :attr:`dst_ip` is those octets zero-extended, so its most
    significant octet is always 0.
    """

    __hdr__ = (
        ("src_ip", "I", 0),
        ("dst_ip_low", "3s", b"\x00\x00\x00"),
        ("src_port", "H", 0),
        ("dst_port", "H", 0),
        ("protocol", "B", 0),
        ("flags", "B", 0),
        ("ttl", "B", 0),
        ("ip_len", "H", 0),
        ("count", "I", 0),
    )

    @property
    def dst_ip(self) -> int:
        return int.from_bytes(b"\x00" + self.dst_ip_low, "big")

    @dst_ip.setter
    def dst_ip(self, value: int) -> None:
        self.dst_ip_low = (int(value) & 0xFFFFFF).to_bytes(3, "big")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "src_ip": format_ip(self.src_ip),
            "dst_ip": format_ip(self.dst_ip),
            "src_port": self.src_port,
            "dst_port": self.dst_port,
            "protocol": self.protocol,
            "flags": self.flags,
            "ttl": self.ttl,
            "ip_len": self.ip_len,
            "count": self.count,
        }

    def __str__(self) -> str:
        return "|".join(
            [
                format_ip(self.src_ip),
                format_ip(self.dst_ip),
                str(self.src_port),
                str(self.dst_port),
                str(self.protocol),
                str(self.flags),
                hex(self.ttl),
                str(self.ip_len),
                str(self.count),
            ]
        )


def decode_record(stream: IO[bytes], record: Optional[FlowTuple] = None) -> FlowTuple:
    """Decode the next 20-byte record from *stream*.

    When *record* is supplied its fields are overwritten and it is returned;
    a failed read leaves it untouched.
    """
    buf = read_exact(stream, RECORD_LEN, "flowtuple record")
    if record is None:
        return FlowTuple(buf)
    record.unpack(buf)
    return record


__all__ = ["RECORD_LEN", "FIELD_NAMES", "FlowTuple", "decode_record"]
