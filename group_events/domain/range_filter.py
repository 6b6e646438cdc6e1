"""Builds the date window for the events macro from its raw arguments.

Recognised arguments (keys are case-sensitive)::

    from=<date>       window start, defaults to today
    to=<date>         window end (end of day for relative words)
    for=<duration>    window length when 'to' is absent, defaults to 1 year

Each key is taken from the first argument that matches it, and that argument
is removed from the list so the remaining ones stay available to other
consumers. Values hold word characters, hyphens and slashes, plus spaces
for 'for'; an argument whose value does not fit is not treated as a match.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from functools import lru_cache
from typing import Optional

from group_events.calendar.models import DateRange
from group_events.core.config_manager import DEFAULT_DURATION
from group_events.core.timezone_utils import now_utc
from group_events.domain.date_expressions import (
    Boundary,
    DateExpressionResolver,
    parse_duration,
)
from group_events.exceptions import (
    InvalidForError,
    InvalidFromError,
    InvalidToError,
    RangeOrderError,
)

logger = logging.getLogger(__name__)

DEFAULT_FROM = "today"


# Argument values: word characters, hyphens and slashes; 'for' may also hold
# spaces between words ("3 months")
VALUE_PATTERN = r"[\w/-]*"
SPACED_VALUE_PATTERN = r"(?:[\w/-]+(?: +[\w/-]+)*)?"
SPACED_KEYS = frozenset({"for"})


@lru_cache(maxsize=8)
def _argument_pattern(key: str) -> re.Pattern[str]:
    value = SPACED_VALUE_PATTERN if key in SPACED_KEYS else VALUE_PATTERN
    return re.compile(rf"^\s*{re.escape(key)}\s*=\s*({value})\s*$")


def extract_argument(args: list[str], key: str) -> Optional[str]:
    """Remove and return the value of the first ``key=value`` argument.

    Args:
        args: Macro arguments; the matching entry is deleted in place
        key: Argument name, matched case-sensitively

    Returns:
        The argument value, or None if no argument matches

    Examples:
        >>> args = ["for=3 months", "from=today", "from=tomorrow"]
        >>> extract_argument(args, "from")
        'today'
        >>> args
        ['for=3 months', 'from=tomorrow']
    """
    pattern = _argument_pattern(key)
    for index, arg in enumerate(args):
        match = pattern.match(arg)
        if match:
            del args[index]
            return match.group(1)
    return None


class RangeFilterBuilder:
    """Resolves and validates the ``from``/``to``/``for`` macro arguments."""

    def __init__(self, resolver: DateExpressionResolver, default_duration: str = DEFAULT_DURATION):
        """Initialize builder.

        Args:
            resolver: Resolver for date tokens and durations
            default_duration: Window length used when neither 'to' nor 'for' is given

        Raises:
            ValueError: If ``default_duration`` is not a valid duration expression
        """
        duration = parse_duration(default_duration)
        if duration is None:
            raise ValueError(f"Invalid default duration: {default_duration!r}")
        self.resolver = resolver
        self.default_duration = duration

    def build(self, args: list[str], now: Optional[datetime] = None) -> DateRange:
        """Build the date window described by the macro arguments.

        ``from``, ``to`` and ``for`` arguments are consumed from ``args``.

        Args:
            args: Raw macro arguments
            now: Reference instant for relative dates (defaults to the current time)

        Returns:
            Resolved window with both ends set

        Raises:
            InvalidFromError: 'from' is given but is not a date, or is too late
                for the default duration
            InvalidToError: 'to' is given but is not a date
            InvalidForError: 'for' is given but is not a duration, or the window
                end it gives is past the supported date range
            RangeOrderError: 'from' resolves to a later instant than 'to'
        """
        reference = now or now_utc()

        from_value = extract_argument(args, "from")
        to_value = extract_argument(args, "to")
        for_value = extract_argument(args, "for")

        start = self.resolver.resolve(
            from_value if from_value is not None else DEFAULT_FROM, reference, Boundary.START
        )
        if start is None:
            raise InvalidFromError(from_value or "")

        end = None
        if to_value is not None:
            end = self.resolver.resolve(to_value, reference, Boundary.END)
            if end is None:
                raise InvalidToError(to_value)

        duration = self.default_duration
        if for_value is not None:
            parsed = parse_duration(for_value)
            if parsed is None:
                raise InvalidForError(for_value)
            duration = parsed

        if end is None:
            try:
                end = self.resolver.apply_duration(start, duration)
            except (OverflowError, ValueError):
                # Window end falls outside the representable date range
                if for_value is not None:
                    raise InvalidForError(for_value) from None
                raise InvalidFromError(from_value or DEFAULT_FROM) from None
        elif start > end:
            raise RangeOrderError(from_value or DEFAULT_FROM, to_value or "")

        logger.debug("Resolved date window %s .. %s", start.isoformat(), end.isoformat())
        return DateRange(start=start, end=end)
