"""Timezone resolution and clock utilities for group_events."""

from __future__ import annotations

import datetime
import logging
import os
import zoneinfo
from functools import lru_cache

logger = logging.getLogger(__name__)

# Default display timezone when nothing is configured
DEFAULT_DISPLAY_TIMEZONE = "America/Los_Angeles"


class TimeProvider:
    """Provides the reference "now" used when resolving relative dates."""

    def now_utc(self) -> datetime.datetime:
        """Return current UTC time with tzinfo.

        Can be overridden for testing via GROUP_EVENTS_TEST_TIME environment variable.
        Format: ISO 8601 datetime string (e.g., "2025-10-27T08:20:00-07:00")

        Returns:
            Current time in UTC with timezone info
        """
        test_time = os.environ.get("GROUP_EVENTS_TEST_TIME")
        if test_time:
            try:
                from dateutil import parser as date_parser

                dt = date_parser.isoparse(test_time)
                if dt.tzinfo is not None:
                    return dt.astimezone(datetime.UTC)
                # Assume naive datetime is already UTC
                return dt.replace(tzinfo=datetime.UTC)

            except ValueError as e:
                logger.warning("Failed to parse GROUP_EVENTS_TEST_TIME=%r: %s", test_time, e)

        return datetime.datetime.now(datetime.UTC)


_time_provider = TimeProvider()


def now_utc() -> datetime.datetime:
    """Get current UTC time (convenience function).

    Returns:
        Current time in UTC
    """
    return _time_provider.now_utc()


def get_default_timezone(fallback: str = DEFAULT_DISPLAY_TIMEZONE) -> str:
    """Get the configured display timezone with validation.

    Checks the GROUP_EVENTS_TIMEZONE environment variable first, then falls
    back to the provided fallback timezone.

    Args:
        fallback: Fallback timezone if not configured or invalid

    Returns:
        Valid IANA timezone string
    """
    timezone = os.environ.get("GROUP_EVENTS_TIMEZONE", fallback)

    try:
        zoneinfo.ZoneInfo(timezone)
        return timezone
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        logger.warning("Invalid timezone %r, falling back to %r", timezone, fallback)
        return fallback


@lru_cache(maxsize=20)
def get_display_zone(tz_str: str | None) -> datetime.tzinfo:
    """Parse a display timezone name, falling back to the default timezone.

    Args:
        tz_str: IANA timezone identifier or None

    Returns:
        Timezone info object
    """
    if not tz_str:
        return zoneinfo.ZoneInfo(get_default_timezone())

    try:
        return zoneinfo.ZoneInfo(tz_str)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        logger.warning("Invalid timezone %r, falling back to %r", tz_str, DEFAULT_DISPLAY_TIMEZONE)
        return zoneinfo.ZoneInfo(DEFAULT_DISPLAY_TIMEZONE)


def _standard_time_zone(tz: datetime.tzinfo, year: int) -> datetime.timezone:
    """Build a fixed-offset zone carrying the standard (non-DST) offset of ``tz``.

    Probes January and July of ``year`` and picks whichever is not in DST.
    """
    for month in (1, 7):
        probe = datetime.datetime(year, month, 1, 12, tzinfo=tz)
        if not probe.dst():
            offset = probe.utcoffset() or datetime.timedelta(0)
            return datetime.timezone(offset, probe.tzname())
    # Zone observes DST all year; strip the DST component from January
    probe = datetime.datetime(year, 1, 1, 12, tzinfo=tz)
    offset = (probe.utcoffset() or datetime.timedelta(0)) - (probe.dst() or datetime.timedelta(0))
    return datetime.timezone(offset, probe.tzname())


def to_local(
    dt: datetime.datetime, tz: datetime.tzinfo, ignore_dst: bool = False
) -> datetime.datetime:
    """Convert an aware datetime into the display timezone.

    Args:
        dt: Timezone-aware datetime
        tz: Display timezone
        ignore_dst: Use the zone's standard offset even when DST is in effect

    Returns:
        Datetime in the display timezone
    """
    local = dt.astimezone(tz)
    if ignore_dst and local.dst():
        return dt.astimezone(_standard_time_zone(tz, local.year))
    return local
