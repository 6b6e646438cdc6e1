"""Resolution of date tokens and duration expressions used by macro arguments.

Date tokens are either absolute dates (``YYYY-MM-DD`` or ``YYYY/MM/DD``) or one
of the relative words ``today``, ``yesterday`` and ``tomorrow``. Durations are
``<integer> <unit>`` with unit day, week, month or year (plural allowed).
"""

from __future__ import annotations

import datetime
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from dateutil.relativedelta import relativedelta

from group_events.calendar.datetime_utils import ensure_utc

logger = logging.getLogger(__name__)

ABSOLUTE_DATE_PATTERN = re.compile(r"^(\d{4})([-/])(\d{2})\2(\d{2})$")
DURATION_PATTERN = re.compile(r"^(\d+)\s*(day|week|month|year)s?$", re.IGNORECASE)

RELATIVE_DAY_OFFSETS = {
    "yesterday": -1,
    "today": 0,
    "tomorrow": 1,
}

START_OF_DAY = datetime.time(0, 0, 0)
END_OF_DAY = datetime.time(23, 59, 59)


class Boundary(str, Enum):
    """Which end of a day a relative date token resolves to."""

    START = "start"
    END = "end"


class DurationUnit(str, Enum):
    """Calendar units accepted in duration expressions."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class DurationExpression:
    """A non-negative quantity of a calendar unit, e.g. "3 months"."""

    quantity: int
    unit: DurationUnit

    def as_relativedelta(self) -> relativedelta:
        """Convert to a calendar-aware delta (month/year addition clamps the day)."""
        return relativedelta(**{f"{self.unit.value}s": self.quantity})

    def __str__(self) -> str:
        suffix = "" if self.quantity == 1 else "s"
        return f"{self.quantity} {self.unit.value}{suffix}"


def parse_duration(text: str) -> Optional[DurationExpression]:
    """Parse a duration expression.

    Args:
        text: Expression such as "3 months" or "1 year"

    Returns:
        Parsed duration, or None if the text is not a valid duration

    Examples:
        >>> parse_duration("2 weeks")
        DurationExpression(quantity=2, unit=<DurationUnit.WEEK: 'week'>)
        >>> parse_duration("5 bananas") is None
        True
    """
    match = DURATION_PATTERN.match(text.strip())
    if not match:
        return None
    return DurationExpression(int(match.group(1)), DurationUnit(match.group(2).lower()))


class DateExpressionResolver:
    """Turns date tokens into concrete timestamps in the display timezone."""

    def __init__(self, timezone: datetime.tzinfo):
        """Initialize resolver.

        Args:
            timezone: Zone in which calendar days are interpreted
        """
        self.timezone = timezone

    def resolve(
        self,
        token: str,
        reference_now: datetime.datetime,
        boundary: Boundary = Boundary.START,
    ) -> Optional[datetime.datetime]:
        """Resolve a date token.

        Relative words resolve to 00:00:00 (START) or 23:59:59 (END) of the
        referenced day. Absolute dates resolve to the start of that date.

        Args:
            token: Date token from a macro argument
            reference_now: Current instant; naive values are treated as UTC
            boundary: Day boundary wanted for relative words

        Returns:
            Aware datetime, or None if the token is invalid
        """
        text = token.strip()

        offset = RELATIVE_DAY_OFFSETS.get(text.lower())
        if offset is not None:
            today = ensure_utc(reference_now).astimezone(self.timezone).date()
            day = today + datetime.timedelta(days=offset)
            return self._at_boundary(day, boundary)

        match = ABSOLUTE_DATE_PATTERN.match(text)
        if not match:
            logger.debug("Unrecognised date token %r", token)
            return None

        try:
            day = datetime.date(int(match.group(1)), int(match.group(3)), int(match.group(4)))
        except ValueError:
            logger.debug("Impossible calendar date %r", token)
            return None

        return self._at_boundary(day, Boundary.START)

    def apply_duration(
        self, base: datetime.datetime, duration: DurationExpression
    ) -> datetime.datetime:
        """Add a duration to a timestamp using calendar arithmetic."""
        return base + duration.as_relativedelta()

    def _at_boundary(self, day: datetime.date, boundary: Boundary) -> datetime.datetime:
        clock = END_OF_DAY if boundary == Boundary.END else START_OF_DAY
        return datetime.datetime.combine(day, clock, tzinfo=self.timezone)
