from __future__ import annotations

from datetime import datetime


def ensure_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return dt


def to_iso(dt: datetime) -> str:
    ensure_aware(dt)
    # stored as ISO 8601 with offset
    return dt.isoformat()


def from_iso(s: str) -> datetime:
    return datetime.fromisoformat(s)


def parse_hhmm(value: str) -> tuple[int, int] | None:
    """Parse a strict HH:MM (24h) string. Returns (hour, minute) or None."""
    if not value or len(value) != 5 or value[2] != ":":
        return None
    hh, mm = value[:2], value[3:]
    if not (hh.isdigit() and mm.isdigit()):
        return None
    hour, minute = int(hh), int(mm)
    if 0 <= hour <= 23 and 0 <= minute <= 59:
        return hour, minute
    return None
