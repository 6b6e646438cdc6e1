"""Group events macro: argument handling through to year-grouped display records.

Usage:
    macro = EventsMacro(calendar, settings)
    result = macro.render(["from=2025-01-01", "for=3 months"], Scope(id=1042, cn="mygroup"))
    if result.error:
        ...  # show result.error inline
    for group in result.groups:
        ...  # hand group.year / group.events to templating
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from group_events.calendar.collaborator import CalendarCollaborator
from group_events.calendar.models import DateRange, Scope, YearGroup
from group_events.core.config_manager import MacroSettings
from group_events.core.timezone_utils import get_display_zone
from group_events.domain.date_expressions import DateExpressionResolver
from group_events.domain.display_mapper import EventDisplayMapper
from group_events.domain.event_aggregator import EventAggregator
from group_events.domain.range_filter import RangeFilterBuilder
from group_events.domain.year_grouping import YearGroupedRenderer
from group_events.events_logging import new_render_id
from group_events.exceptions import MacroError, UnsupportedScopeError

logger = logging.getLogger(__name__)

MACRO_DESCRIPTION = """Displays group events. All dates are in YYYY-MM-DD format.

Examples:
  [[Group.Events()]]                                - Displays all future events
  [[Group.Events(from=2021-04-15)]]                 - Displays events from 2021-04-15
  [[Group.Events(from=2021-04-15, for=3 months)]]   - Displays 3 months of events from 2021-04-15 (can use days, weeks, months, years)
  [[Group.Events(from=today, to=2025-01-01)]]       - Displays events from today to 2025-01-01
  [[Group.Events(to=today)]]                        - Displays events up to the end of today
"""


@dataclass
class MacroResult:
    """Outcome of one macro render: either an error message or year groups."""

    groups: list[YearGroup] = field(default_factory=list)
    error: Optional[str] = None
    date_range: Optional[DateRange] = None
    remaining_args: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if the render produced events output rather than an error."""
        return self.error is None

    @property
    def is_empty(self) -> bool:
        """Check if a successful render found no events (show the fallback text)."""
        return self.success and not self.groups

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "error": self.error,
            "date_range": self.date_range.model_dump() if self.date_range else None,
            "groups": [group.model_dump() for group in self.groups],
            "remaining_args": self.remaining_args,
        }


def add_event_path(scope: Scope) -> str:
    """Unrouted path of the group's "add event" page, used by the empty-list fallback."""
    return f"index.php?option=com_groups&cn={scope.cn or scope.id}&active=calendar&action=add"


class EventsMacro:
    """Renders the list of a group's events for the window given by the macro arguments."""

    # Macro may be used when a page is only partially parsed
    allow_partial = True

    def __init__(
        self, calendar: CalendarCollaborator, settings: MacroSettings | dict[str, Any] | None = None
    ):
        """Initialize macro.

        Args:
            calendar: Calendar collaborator used to list events
            settings: MacroSettings or a plain dict of overrides
        """
        if settings is None:
            settings = MacroSettings()
        elif isinstance(settings, dict):
            settings = MacroSettings(**settings)

        timezone = get_display_zone(settings.timezone)

        self.range_builder = RangeFilterBuilder(
            DateExpressionResolver(timezone), settings.default_duration
        )
        self.aggregator = EventAggregator(calendar)
        self.mapper = EventDisplayMapper(
            timezone,
            about_max_chars=settings.about_max_chars,
            open_ended_label=settings.open_ended_label,
            all_day_label=settings.all_day_label,
        )
        self.renderer = YearGroupedRenderer()

    @staticmethod
    def description() -> str:
        """Usage help shown to page authors."""
        return MACRO_DESCRIPTION

    def render(
        self,
        args: Sequence[str],
        scope: Optional[Scope],
        calendar_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> MacroResult:
        """Render the macro.

        Validation problems are returned as ``MacroResult.error`` before any
        calendar lookup. Errors raised by the calendar collaborator propagate.

        Args:
            args: Raw macro arguments
            scope: Group the page belongs to, or None outside a group
            calendar_id: Restrict to one of the group's calendars
            now: Reference instant for relative dates

        Returns:
            Render result
        """
        render_id = new_render_id()
        remaining = list(args)

        try:
            if scope is None or not scope.is_group:
                raise UnsupportedScopeError(scope.type if scope else None)
            date_range = self.range_builder.build(remaining, now)
        except MacroError as e:
            logger.info("Events macro not rendered: %s", e.user_message)
            return MacroResult(error=e.user_message, remaining_args=remaining)

        raw_events = self.aggregator.aggregate(scope, calendar_id, date_range)
        display_events = [self.mapper.map(raw) for raw in raw_events]
        groups = self.renderer.group(display_events)

        logger.debug(
            "Render %s: %d events in %d year groups", render_id, len(display_events), len(groups)
        )
        return MacroResult(groups=groups, date_range=date_range, remaining_args=remaining)
