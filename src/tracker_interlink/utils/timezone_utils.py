"""
Timezone and date utilities.

Provides local calendar-day handling for epoch-millisecond timestamps.
"""

from datetime import date, datetime, timedelta

import pytz
from dateutil import parser


def local_datetime(timestamp_ms: int | float, timezone_str: str = "UTC") -> datetime:
    """
    Convert an epoch-millisecond timestamp to a timezone-aware local datetime.

    Args:
        timestamp_ms: Milliseconds since the Unix epoch.
        timezone_str: Timezone string (e.g., "America/Santiago").

    Returns:
        Timezone-aware datetime in the requested timezone.
    """
    utc_dt = datetime.fromtimestamp(timestamp_ms / 1000.0, tz=pytz.utc)
    return utc_dt.astimezone(pytz.timezone(timezone_str))


def local_date(timestamp_ms: int | float, timezone_str: str = "UTC") -> date:
    """
    Get the local calendar day an epoch-millisecond timestamp falls on.

    An entry logged at 23:00 local time belongs to that local day, not to the
    UTC day it happens to fall in.

    Args:
        timestamp_ms: Milliseconds since the Unix epoch.
        timezone_str: Timezone string.

    Returns:
        Local calendar date.
    """
    return local_datetime(timestamp_ms, timezone_str).date()


def shift_date(day: date, days: int) -> date:
    """Shift a calendar date by a number of days."""
    return day + timedelta(days=days)


def date_span_days(start: date, end: date) -> int:
    """
    Count calendar days from start to end, both inclusive.

    Args:
        start: First day.
        end: Last day.

    Returns:
        Number of days, or 0 if end is before start.
    """
    if end < start:
        return 0
    return (end - start).days + 1


def parse_date(date_str: str) -> date:
    """
    Parse a date string in any format dateutil understands.

    Args:
        date_str: Date string (e.g., "2024-01-15" or "Jan 15 2024").

    Returns:
        Parsed calendar date.
    """
    return parser.parse(date_str).date()
