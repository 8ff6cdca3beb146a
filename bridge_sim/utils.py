"""Utility helpers for address validation and formatting used by bridge_sim."""

from __future__ import annotations

from datetime import UTC, datetime

__all__ = ["MAC_LENGTH", "is_valid_mac", "format_timestamp", "format_ctime"]

MAC_LENGTH = 17
_HEX_DIGITS = frozenset("0123456789ABCDEF")


def is_valid_mac(mac: str) -> bool:
    """Return ``True`` when ``mac`` is in strict ``XX:XX:XX:XX:XX:XX`` form.

    Only uppercase hexadecimal digits are accepted and the colons must sit at
    offsets 2, 5, 8, 11 and 14. Lowercase digits and alternative separators
    are rejected rather than normalised.
    """

    if len(mac) != MAC_LENGTH:
        return False
    for index, char in enumerate(mac):
        if index % 3 == 2:
            if char != ":":
                return False
        elif char not in _HEX_DIGITS:
            return False
    return True


def _as_utc(dt: datetime | None) -> datetime:
    if dt is None:
        return datetime.now(UTC)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_timestamp(dt: datetime | None = None) -> str:
    """Format the provided UTC datetime (or the current time) as ``HH:MM:SS``."""

    return _as_utc(dt).strftime("%H:%M:%S")


def format_ctime(dt: datetime | None = None) -> str:
    """Format a datetime like C ``ctime``, e.g. ``Mon Oct  6 17:36:28 2025``."""

    return _as_utc(dt).ctime()
