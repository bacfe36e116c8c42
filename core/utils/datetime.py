"""Datetime utilities for common operations."""

from datetime import datetime, date, time, timedelta, timezone
from typing import Optional
import re

_CLOCK_TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")

SATURDAY = 5
SUNDAY = 6


def now() -> datetime:
    """Get current datetime in UTC."""
    return datetime.now(timezone.utc)


def add_hours(dt: datetime, hours: float) -> datetime:
    """
    Add hours to a datetime.

    Args:
        dt: Datetime
        hours: Number of hours to add (can be negative)

    Returns:
        New datetime
    """
    return dt + timedelta(hours=hours)


def parse_clock_time(value: str) -> Optional[time]:
    """
    Parse a 24-hour ``HH:MM`` string.

    Args:
        value: Clock time such as ``"10:00"`` or ``"9:30"``

    Returns:
        Parsed time or None if the string is not a valid 24h clock time
    """
    if not isinstance(value, str):
        return None
    match = _CLOCK_TIME_RE.match(value.strip())
    if not match:
        return None
    return time(hour=int(match.group(1)), minute=int(match.group(2)))


def at_clock_time(dt: datetime, clock: time) -> datetime:
    """Keep the date of ``dt`` and replace its time of day."""
    return dt.replace(hour=clock.hour, minute=clock.minute, second=0, microsecond=0)


def is_weekend(dt: datetime | date) -> bool:
    """Check if a date falls on Saturday or Sunday."""
    return dt.weekday() in (SATURDAY, SUNDAY)


def roll_to_weekday(dt: datetime) -> datetime:
    """Advance one day at a time until the date is Monday to Friday."""
    while is_weekend(dt):
        dt = dt + timedelta(days=1)
    return dt


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime as ISO 8601, passing None through."""
    return dt.isoformat() if dt else None


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Attach UTC to naive datetimes.

    Some database drivers hand back naive values for timezone-aware
    columns; those values are stored in UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
