"""Collects non-repeating and repeating events for a scope and date window."""

from __future__ import annotations

import logging
from typing import Optional

from dateutil.relativedelta import relativedelta

from group_events.calendar.collaborator import CalendarCollaborator
from group_events.calendar.models import DateRange, EventState, RawEvent, Scope

logger = logging.getLogger(__name__)

PUBLISHED_STATES = (int(EventState.PUBLISHED),)

# Horizon for repeating occurrences when the window has no end
DEFAULT_REPEAT_HORIZON = relativedelta(years=1)


class EventAggregator:
    """Fetches events from the calendar collaborator and orders them by start."""

    def __init__(self, calendar: CalendarCollaborator):
        """Initialize aggregator.

        Args:
            calendar: Collaborator that lists events for a scope
        """
        self.calendar = calendar

    def aggregate(
        self, scope: Scope, calendar_id: Optional[int], date_range: DateRange
    ) -> list[RawEvent]:
        """Return every published event and occurrence in the window.

        Events are ordered by start instant. Events starting at the same instant
        keep the order in which the collaborator returned them, non-repeating
        events first. Nothing is dropped or deduplicated.

        Args:
            scope: Scope whose events are listed
            calendar_id: Restrict to one calendar, or None/0 for all
            date_range: Window to list events for

        Returns:
            Ordered raw events
        """
        until = date_range.end or date_range.start + DEFAULT_REPEAT_HORIZON

        single = self.calendar.list_non_repeating(
            scope, calendar_id, PUBLISHED_STATES, date_range.start, date_range.end
        )
        repeating = self.calendar.list_repeating(
            scope, calendar_id, PUBLISHED_STATES, date_range.start, date_range.end, until
        )

        merged = [*single, *repeating]
        merged.sort(key=lambda event: event.publish_up.timestamp())

        logger.debug(
            "Aggregated %d events (%d single, %d repeating) for %s %s",
            len(merged),
            len(single),
            len(repeating),
            scope.type,
            scope.id,
        )
        return merged
