"""Validation of textual ``sender,port,receiver`` records fed to the bridge."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from bridge_sim.utils import MAC_LENGTH, is_valid_mac

__all__ = ["RECORD_LENGTH", "STOP_SENTINEL", "Frame", "RecordRejected", "parse_record"]

RECORD_LENGTH = 40
STOP_SENTINEL = "stop"

_FIRST_COMMA = MAC_LENGTH
_SECOND_COMMA = RECORD_LENGTH - MAC_LENGTH - 1


@dataclass(frozen=True)
class Frame:
    """ブリッジが観測したフレームのアドレス情報です。"""

    src_mac: str
    port: int
    dst_mac: str


@dataclass(frozen=True)
class RecordRejected:
    """破棄されたレコードと、その理由です。"""

    line: str
    reason: str


def parse_record(line: str) -> Union[Frame, RecordRejected]:
    """Validate one record and return a :class:`Frame` or the rejection reason.

    The record must be exactly 40 characters long with commas at offsets 17
    and 22. Both MAC fields are checked with :func:`is_valid_mac`, and the
    port field must be a positive decimal integer. Fields such as ``" 100"``
    or ``"10a0"`` are rejected instead of being read leniently as a C
    ``atoi`` would (giving 100 and 10).
    """

    if len(line) != RECORD_LENGTH:
        return RecordRejected(line, f"expected {RECORD_LENGTH} characters, got {len(line)}")
    if line[_FIRST_COMMA] != "," or line[_SECOND_COMMA] != ",":
        return RecordRejected(line, "commas must be at offsets 17 and 22")

    src_mac = line[:_FIRST_COMMA]
    port_text = line[_FIRST_COMMA + 1 : _SECOND_COMMA]
    dst_mac = line[_SECOND_COMMA + 1 :]

    if not is_valid_mac(src_mac):
        return RecordRejected(line, f"invalid sender MAC: {src_mac}")
    if not is_valid_mac(dst_mac):
        return RecordRejected(line, f"invalid receiver MAC: {dst_mac}")
    if not (port_text.isascii() and port_text.isdigit()):
        return RecordRejected(line, f"invalid port: {port_text}")
    port = int(port_text)
    if port <= 0:
        return RecordRejected(line, "ports must be positive integers")
    return Frame(src_mac=src_mac, port=port, dst_mac=dst_mac)
