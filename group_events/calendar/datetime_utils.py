"""Datetime helpers for event display labels.

All label helpers are locale-independent and avoid platform-specific strftime
codes (such as ``%-I``) so output is identical on every OS.
"""

from __future__ import annotations

from datetime import UTC, datetime

MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def ensure_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime, treating naive values as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_clock_time(dt: datetime, with_zone: bool = False) -> str:
    """Format a time in 12-hour form without a leading zero.

    Args:
        dt: Datetime already converted to the display timezone
        with_zone: Append the zone abbreviation

    Returns:
        Time string such as "9:30 AM" or "2:45 PM PDT"

    Examples:
        >>> format_clock_time(datetime(2025, 11, 4, 9, 30))
        '9:30 AM'
        >>> format_clock_time(datetime(2025, 11, 4, 0, 5))
        '12:05 AM'
    """
    hour = dt.hour % 12 or 12
    am_pm = "AM" if dt.hour < 12 else "PM"
    time_str = f"{hour}:{dt.minute:02d} {am_pm}"

    if with_zone:
        zone = dt.tzname()
        if zone:
            time_str += f" {zone}"

    return time_str


def format_month_day(dt: datetime) -> str:
    """Format a date as "Mon D", e.g. "Mar 5"."""
    return f"{MONTH_ABBREVIATIONS[dt.month - 1]} {dt.day}"


def format_month_day_time(dt: datetime) -> str:
    """Format a date and time as "Mon D H:MM AM ZONE", e.g. "Mar 5 2:30 PM PST"."""
    return f"{format_month_day(dt)} {format_clock_time(dt, with_zone=True)}"


def month_abbreviation(dt: datetime) -> str:
    """Return the three-letter month name of ``dt``."""
    return MONTH_ABBREVIATIONS[dt.month - 1]
