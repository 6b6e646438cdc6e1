"""Data models for group calendar events and their display records."""

from __future__ import annotations

import json
from datetime import datetime
from enum import IntEnum
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from group_events.calendar.datetime_utils import ensure_utc

# Placeholder stored by the calendar for "no end specified"
ZERO_DATETIME = "0000-00-00 00:00:00"


class EventState(IntEnum):
    """Publication state of a calendar event."""

    UNPUBLISHED = 0
    PUBLISHED = 1
    TRASHED = 2


class Scope(BaseModel):
    """Owning context that constrains which events are visible."""

    type: str = Field(default="group", description="Scope type, e.g. 'group'")
    id: int = Field(..., description="Scope identifier (group gidNumber)")
    cn: Optional[str] = Field(default=None, description="Group short name used in routes")

    model_config = ConfigDict(frozen=True)

    @property
    def is_group(self) -> bool:
        """Check if this scope is a group."""
        return self.type == "group"


class EventParams(BaseModel):
    """Per-event parameters stored alongside a calendar event."""

    ignore_dst: bool = Field(default=False, description="Show times without DST shifting")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _parse_registry(cls, data: Any) -> Any:
        """Accept params as a dict, a JSON object string or INI-style key=value lines."""
        if data is None or data == "":
            return {}
        if not isinstance(data, str):
            return data

        text = data.strip()
        if text.startswith("{"):
            return json.loads(text)

        parsed: dict[str, str] = {}
        for line in text.splitlines():
            if "=" not in line:
                continue
            key, val = line.split("=", 1)
            parsed[key.strip()] = val.strip().strip('"')
        return parsed

    @field_validator("ignore_dst", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)


def _parse_stored_datetime(value: Any) -> Any:
    """Parse a stored calendar datetime, mapping the zero sentinel to None."""
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text or text == ZERO_DATETIME:
            return None
        return datetime.fromisoformat(text)
    return value


class RawEvent(BaseModel):
    """Calendar event record as returned by the calendar collaborator.

    Stored datetimes are UTC. Naive values are treated as UTC.
    """

    id: int = Field(default=0, description="Event ID")
    title: str = Field(default="", description="Event title")
    location: str = Field(
        default="",
        validation_alias=AliasChoices("location", "adresse_info"),
        description="Free-text location or URL",
    )
    content: str = Field(default="", description="Event description")

    publish_up: datetime = Field(..., description="Start of the event or occurrence")
    publish_down: Optional[datetime] = Field(default=None, description="End; None if open-ended")
    allday: bool = Field(default=False, description="All-day event flag")

    repeating_rule: str = Field(default="", description="Recurrence rule, empty if non-repeating")
    calendar_id: Optional[int] = Field(default=None, description="Owning calendar")
    state: int = Field(default=EventState.PUBLISHED, description="Publication state")
    scope: str = Field(default="group", description="Owning scope type")
    scope_id: int = Field(default=0, description="Owning scope identifier")

    link: str = Field(default="", description="Base URL of the event page")
    params: EventParams = Field(default_factory=EventParams, description="Event parameters")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("publish_up", "publish_down", mode="before")
    @classmethod
    def _parse_dates(cls, value: Any) -> Any:
        return _parse_stored_datetime(value)

    @field_validator("publish_up", "publish_down", mode="after")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None

    @field_validator("repeating_rule", "location", "content", "title", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def is_repeating(self) -> bool:
        """Check if this record is an occurrence of a repeating event."""
        return self.repeating_rule != ""

    @property
    def start_timestamp(self) -> int:
        """Start instant as epoch seconds."""
        return int(self.publish_up.timestamp())


class DateRange(BaseModel):
    """Resolved window of time the macro lists events for."""

    start: datetime = Field(..., description="Window start ('from')")
    end: Optional[datetime] = Field(default=None, description="Window end ('to')")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_order(self) -> DateRange:
        if self.end is not None and self.start > self.end:
            raise ValueError("range start must not be after range end")
        return self

    @field_serializer("start", "end", when_used="unless-none")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime fields to ISO format."""
        return dt.isoformat()


class DisplayEvent(BaseModel):
    """Display-ready event record handed to templating."""

    title: str
    url: str
    location: str = ""
    location_is_url: bool = False
    about: str = ""
    all_day: bool = False
    class_name: str = "calendar-0"

    start_month: str = Field(..., description="Abbreviated month name, e.g. 'Mar'")
    start_day: str = Field(..., description="Zero-padded day of month, e.g. '05'")
    iso_timestamp: str = Field(..., description="ISO 8601 start instant")
    year: int

    start: str = Field(..., description="Start label")
    end: str = Field(default="", description="End label, empty when not shown")
    sort_key: int = Field(..., description="Start instant as epoch seconds")

    model_config = ConfigDict(frozen=True)


class YearGroup(BaseModel):
    """Events sharing a calendar year, in display order."""

    year: int
    events: list[DisplayEvent] = Field(default_factory=list)
