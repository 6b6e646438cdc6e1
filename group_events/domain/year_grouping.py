"""Groups ordered display events by calendar year."""

from __future__ import annotations

from collections.abc import Iterable

from group_events.calendar.models import DisplayEvent, YearGroup


class YearGroupedRenderer:
    """Splits an ordered event sequence into consecutive per-year groups."""

    def group(self, events: Iterable[DisplayEvent]) -> list[YearGroup]:
        """Group events in a single pass, opening a group whenever the year changes.

        Input order is kept as-is; nothing is re-sorted.
        """
        groups: list[YearGroup] = []
        for event in events:
            if not groups or groups[-1].year != event.year:
                groups.append(YearGroup(year=event.year))
            groups[-1].events.append(event)
        return groups
