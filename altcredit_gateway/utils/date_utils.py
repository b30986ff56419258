"""Date manipulation utilities"""

import math
from datetime import date, datetime, timezone
from typing import Any, Optional

_DAY_FIRST_FORMATS = (
    "%d-%m-%Y %H:%M:%S",
    "%d-%m-%Y %H:%M",
    "%d-%m-%Y",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
)

# Epoch values above this are taken to be milliseconds
_EPOCH_MS_THRESHOLD = 100_000_000_000


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a loosely typed timestamp into a naive wall-clock datetime.

    Accepts datetime/date objects, ISO-8601 strings, day-first strings and
    epoch seconds or milliseconds. Returns None for anything unparseable.
    """
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, datetime):
        return value.replace(tzinfo=None)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    if isinstance(value, (int, float)):
        try:
            if not math.isfinite(value):
                return None
            seconds = value / 1000 if abs(value) >= _EPOCH_MS_THRESHOLD else value
            return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).replace(tzinfo=None)
        except ValueError:
            pass
        for fmt in _DAY_FIRST_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue

    return None


def month_key(ts: datetime) -> str:
    """Calendar month bucket, e.g. '2024-03'"""
    return ts.strftime("%Y-%m")


def days_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 86400


def as_utc(ts: datetime) -> datetime:
    """Treat naive datetimes (as returned by SQLite) as UTC"""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)
