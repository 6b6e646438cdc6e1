"""Transforms raw calendar events into display-ready records.

Time labels follow four mutually exclusive cases:

1. timed event without an end: start time with zone, fixed open-ended label
2. timed event within one day: start time, end time with zone
3. timed event over several days: month/day and time with zone on both ends
4. all-day event: "All day" when it covers a single day, otherwise month/day
   of start and end

Timed events are shown in the display timezone. All-day events are stored at
midnight and are labelled from their stored calendar dates.
"""

from __future__ import annotations

import html
import logging
import re
from datetime import datetime, timedelta, tzinfo

from group_events.calendar.datetime_utils import (
    format_clock_time,
    format_month_day,
    format_month_day_time,
    month_abbreviation,
)
from group_events.calendar.models import DisplayEvent, RawEvent
from group_events.core.config_manager import (
    DEFAULT_ABOUT_MAX_CHARS,
    DEFAULT_ALL_DAY_LABEL,
    DEFAULT_OPEN_ENDED_LABEL,
)
from group_events.core.timezone_utils import to_local

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(hours=24)

MORE_LINK = ' <a href="{url}">[more]</a>'
TRUNCATION_ENDING = "..."

LOCATION_URL_PATTERN = re.compile(
    r"(http|ftp|https)://([\w-]+(?:(?:\.[\w_-]+)+))([\w.,@?^=%&:/~+#-]*[\w@?^=%&/~+#-])?"
)
LINE_BREAK_PATTERN = re.compile(r"(\r\n|\n\r|\n|\r)")
TAG_PATTERN = re.compile(r"<(/?)([a-zA-Z][\w-]*)[^>]*?(/?)>")
ENTITY_PATTERN = re.compile(r"&(?:#\d+|#x[0-9a-fA-F]+|\w+);")

# Elements that never take a closing tag
VOID_TAGS = frozenset({"br", "hr", "img", "input", "meta", "link", "wbr", "col", "area"})


def nl2br(text: str) -> str:
    """Insert ``<br />`` before every line break, keeping the break itself."""
    return LINE_BREAK_PATTERN.sub(r"<br />\1", text)


def visible_length(markup: str) -> int:
    """Count displayed characters: tags are ignored, entities count as one."""
    text = TAG_PATTERN.sub("", markup)
    return len(ENTITY_PATTERN.sub("_", text))


def truncate_html(markup: str, length: int, ending: str = TRUNCATION_ENDING) -> str:
    """Cut markup after ``length`` visible characters, closing open tags.

    Args:
        markup: HTML fragment
        length: Maximum number of visible characters to keep
        ending: Text appended where the cut happens

    Returns:
        The fragment unchanged if short enough, otherwise the truncated fragment
    """
    if visible_length(markup) <= length:
        return markup

    pieces: list[str] = []
    open_tags: list[str] = []
    count = 0
    i = 0

    while i < len(markup) and count < length:
        if markup[i] == "<":
            tag = TAG_PATTERN.match(markup, i)
            if tag:
                closing, name, self_closing = tag.group(1), tag.group(2).lower(), tag.group(3)
                if closing:
                    if name in open_tags:
                        # Drop the innermost matching tag
                        del open_tags[len(open_tags) - 1 - open_tags[::-1].index(name)]
                elif not self_closing and name not in VOID_TAGS:
                    open_tags.append(name)
                pieces.append(tag.group(0))
                i = tag.end()
                continue

        if markup[i] == "&":
            entity = ENTITY_PATTERN.match(markup, i)
            if entity:
                pieces.append(entity.group(0))
                count += 1
                i = entity.end()
                continue

        pieces.append(markup[i])
        count += 1
        i += 1

    pieces.append(ending)
    pieces.extend(f"</{name}>" for name in reversed(open_tags))
    return "".join(pieces)


class EventDisplayMapper:
    """Maps a RawEvent to a DisplayEvent. Pure: equal input gives equal output."""

    def __init__(
        self,
        timezone: tzinfo,
        about_max_chars: int = DEFAULT_ABOUT_MAX_CHARS,
        open_ended_label: str = DEFAULT_OPEN_ENDED_LABEL,
        all_day_label: str = DEFAULT_ALL_DAY_LABEL,
    ):
        """Initialize mapper.

        Args:
            timezone: Display timezone for clock labels
            about_max_chars: Description length before it is truncated
            open_ended_label: End label for timed events without an end
            all_day_label: Start label for single-day all-day events
        """
        self.timezone = timezone
        self.about_max_chars = about_max_chars
        self.open_ended_label = open_ended_label
        self.all_day_label = all_day_label

    def map(self, raw: RawEvent) -> DisplayEvent:
        """Build the display record for one event or occurrence."""
        url = self.event_url(raw)
        start_label, end_label = self.time_labels(raw)

        # Calendar fields follow the day the event is shown on: timed events use
        # the display zone rather than the stored UTC date, all-day events keep
        # their stored date
        anchor = raw.publish_up if raw.allday else self._local(raw.publish_up, raw)

        return DisplayEvent(
            title=raw.title,
            url=url,
            location=raw.location,
            location_is_url=bool(LOCATION_URL_PATTERN.search(raw.location)),
            about=self.about(raw.content, url),
            all_day=raw.allday,
            class_name=f"calendar-{raw.calendar_id or 0}",
            start_month=month_abbreviation(anchor),
            start_day=f"{anchor.day:02d}",
            iso_timestamp=anchor.isoformat(),
            year=anchor.year,
            start=start_label,
            end=end_label,
            sort_key=raw.start_timestamp,
        )

    def event_url(self, raw: RawEvent) -> str:
        """Link to the event; occurrences carry their own start/end instants."""
        url = raw.link
        if not raw.is_repeating:
            return url

        separator = "&" if "?" in url else "?"
        url += f"{separator}start={raw.start_timestamp}"
        if raw.publish_down is not None:
            url += f"&end={int(raw.publish_down.timestamp())}"
        return url

    def about(self, content: str, url: str) -> str:
        """Escape the description, keep its line breaks and cap its length."""
        text = nl2br(html.escape(content, quote=False))
        if len(text) > self.about_max_chars:
            text = truncate_html(text, self.about_max_chars) + MORE_LINK.format(
                url=html.escape(url)
            )
        return text

    def time_labels(self, raw: RawEvent) -> tuple[str, str]:
        """Return the (start, end) labels for an event."""
        start = raw.publish_up
        end = raw.publish_down

        if raw.allday:
            if end is None or end - ONE_DAY <= start:
                # Short or open all-day events cover exactly their start day
                return self.all_day_label, ""
            return format_month_day(start), format_month_day(end)

        local_start = self._local(start, raw)
        if end is None:
            return format_clock_time(local_start, with_zone=True), self.open_ended_label

        local_end = self._local(end, raw)
        # Same-day test in the display zone, not on the stored UTC dates
        if local_start.date() == local_end.date():
            return format_clock_time(local_start), format_clock_time(local_end, with_zone=True)

        return format_month_day_time(local_start), format_month_day_time(local_end)

    def _local(self, dt: datetime, raw: RawEvent) -> datetime:
        return to_local(dt, self.timezone, ignore_dst=raw.params.ignore_dst)
