"""
Calendar-day keys for streak comparisons.

Every stream compares days through ``to_date_key`` so that "same day",
"yesterday" and "gap" are decided in one reference zone, independent of the
server's or the user's local clock.
"""
from datetime import date, datetime, timedelta, timezone as dt_timezone
from typing import Optional, Union

import pytz

DEFAULT_REFERENCE_TZ = "UTC"

Timestamp = Union[datetime, date]


def _zone(reference_tz: str):
    return pytz.timezone(reference_tz)


def to_date_key(timestamp: Timestamp, reference_tz: str = DEFAULT_REFERENCE_TZ) -> date:
    """
    Map a timestamp to the calendar day it falls on in ``reference_tz``.

    Aware datetimes are converted into the reference zone first. Naive
    datetimes are treated as already being wall-clock time in that zone (the
    database stores naive UTC). A ``date`` is already a key and is returned
    as-is.

    Raises:
        ValueError: if ``timestamp`` is None or not a date/datetime
    """
    if timestamp is None:
        raise ValueError("timestamp is required")
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone(_zone(reference_tz))
        return timestamp.date()
    if isinstance(timestamp, date):
        return timestamp
    raise ValueError(f"cannot derive a day key from {type(timestamp).__name__}")


def today_key(now: Optional[datetime] = None, reference_tz: str = DEFAULT_REFERENCE_TZ) -> date:
    """Day key for ``now`` (the current UTC time when omitted)."""
    if now is None:
        now = datetime.now(dt_timezone.utc)
    return to_date_key(now, reference_tz)


def previous_day(key: date) -> date:
    return key - timedelta(days=1)


def days_between(earlier: date, later: date) -> int:
    """Signed number of days from ``earlier`` to ``later``."""
    return (later - earlier).days


def is_previous_day(candidate: date, key: date) -> bool:
    """True when ``candidate`` is exactly the day before ``key``."""
    return days_between(candidate, key) == 1


def utc_naive(ts: datetime) -> datetime:
    """Normalize a datetime to naive UTC for storage."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(dt_timezone.utc).replace(tzinfo=None)
