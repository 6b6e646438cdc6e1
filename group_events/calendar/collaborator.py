"""Calendar collaborator interface and an in-memory implementation.

The macro never looks up a calendar on its own; it is handed an object that
satisfies :class:`CalendarCollaborator`. Recurrence expansion is the
collaborator's job: ``list_repeating`` returns concrete occurrences.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from group_events.calendar.models import RawEvent, Scope

logger = logging.getLogger(__name__)


class CalendarCollaborator(Protocol):
    """Source of raw calendar events for a scope and date window."""

    def list_non_repeating(
        self,
        scope: Scope,
        calendar_id: Optional[int],
        states: Sequence[int],
        start: datetime,
        end: Optional[datetime],
    ) -> list[RawEvent]:
        """Return non-repeating events starting within ``[start, end]``."""
        ...

    def list_repeating(
        self,
        scope: Scope,
        calendar_id: Optional[int],
        states: Sequence[int],
        start: datetime,
        end: Optional[datetime],
        until: datetime,
    ) -> list[RawEvent]:
        """Return occurrences of repeating events within the window, bounded by ``until``."""
        ...


class InMemoryCalendar:
    """Calendar collaborator backed by a list of already-expanded events.

    Repeating events are expected to be stored as individual occurrences,
    each carrying the series' ``repeating_rule``.
    """

    def __init__(self, events: Iterable[RawEvent]):
        self._events = list(events)

    @classmethod
    def from_json_file(cls, path: Path) -> InMemoryCalendar:
        """Load events from a JSON file holding a list of event objects.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the content is not valid JSON or not a list
        """
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON list of events in {path}")

        events = [RawEvent.model_validate(item) for item in data]
        logger.debug("Loaded %d events from %s", len(events), path)
        return cls(events)

    def _visible(
        self, event: RawEvent, scope: Scope, calendar_id: Optional[int], states: Sequence[int]
    ) -> bool:
        if event.scope != scope.type or event.scope_id != scope.id:
            return False
        if calendar_id and event.calendar_id != calendar_id:
            return False
        return event.state in states

    def list_non_repeating(
        self,
        scope: Scope,
        calendar_id: Optional[int],
        states: Sequence[int],
        start: datetime,
        end: Optional[datetime],
    ) -> list[RawEvent]:
        return [
            e
            for e in self._events
            if not e.is_repeating
            and self._visible(e, scope, calendar_id, states)
            and e.publish_up >= start
            and (end is None or e.publish_up <= end)
        ]

    def list_repeating(
        self,
        scope: Scope,
        calendar_id: Optional[int],
        states: Sequence[int],
        start: datetime,
        end: Optional[datetime],
        until: datetime,
    ) -> list[RawEvent]:
        return [
            e
            for e in self._events
            if e.is_repeating
            and self._visible(e, scope, calendar_id, states)
            and start <= e.publish_up <= until
            and (end is None or e.publish_up <= end)
        ]
