"""Conversion between in-memory dates and store timestamps.

The store's native timestamp is a timezone-aware UTC datetime (what the
Firestore client accepts and returns). Calendar days are stored as midnight
UTC so that a day never drifts across the conversion, whatever the local
timezone of the process.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any


def utc_now() -> datetime:
    """Current instant, timezone-aware UTC."""
    return datetime.now(timezone.utc)


def to_timestamp(value: date | datetime) -> datetime:
    """Convert a date or datetime to the store representation.

    Naive datetimes are taken to be UTC already.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def from_timestamp(value: Any, as_date: bool = False) -> date | datetime | None:
    """Convert a store timestamp back to a datetime (or a calendar day).

    Accepts datetime subclasses (e.g. DatetimeWithNanoseconds) and ISO-8601
    strings. Returns None for None.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        value = to_timestamp(value)
        # Normalize subclasses to a plain datetime
        value = datetime(
            value.year,
            value.month,
            value.day,
            value.hour,
            value.minute,
            value.second,
            value.microsecond,
            tzinfo=timezone.utc,
        )
        return value.date() if as_date else value
    if isinstance(value, date):
        return value if as_date else to_timestamp(value)
    raise TypeError(f"Unsupported timestamp value: {value!r}")


def strip_time(value: date | datetime) -> date:
    """Calendar day of a date or datetime, read on the datetime's own clock."""
    if isinstance(value, datetime):
        return value.date()
    return value
