"""Shared fixtures for group_events tests."""

from collections.abc import Generator
from datetime import UTC, datetime
from typing import Any, Callable
from zoneinfo import ZoneInfo

import pytest

from group_events.calendar.models import RawEvent, Scope


def pytest_configure(config: Any) -> None:
    config.addinivalue_line("markers", "unit: fast isolated unit tests")
    config.addinivalue_line("markers", "smoke: critical path checks")


@pytest.fixture
def test_timezone() -> str:
    """Return a deterministic timezone identifier for tests.

    Using a fixed timezone string avoids host-local timezone differences
    which can make datetime-sensitive tests flaky.
    """
    return "America/Los_Angeles"


@pytest.fixture
def display_zone(test_timezone: str) -> ZoneInfo:
    return ZoneInfo(test_timezone)


@pytest.fixture
def fixed_now() -> datetime:
    """Noon UTC on 2025-03-10 (early morning of the same day in Los Angeles)."""
    return datetime(2025, 3, 10, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def group_scope() -> Scope:
    return Scope(id=1042, cn="physics")


@pytest.fixture
def make_event() -> Callable[..., RawEvent]:
    """Factory for raw events with sensible group defaults."""

    def _make(**overrides: Any) -> RawEvent:
        data: dict[str, Any] = {
            "id": 1,
            "title": "Seminar",
            "publish_up": "2025-03-05 18:00:00",
            "publish_down": "2025-03-05 19:30:00",
            "scope": "group",
            "scope_id": 1042,
            "calendar_id": 3,
            "link": "/groups/physics/calendar/details/1",
        }
        data.update(overrides)
        return RawEvent.model_validate(data)

    return _make


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Keep group_events environment overrides from leaking between tests."""
    for name in (
        "GROUP_EVENTS_TEST_TIME",
        "GROUP_EVENTS_TIMEZONE",
        "GROUP_EVENTS_DEFAULT_DURATION",
        "GROUP_EVENTS_ABOUT_MAX_CHARS",
        "GROUP_EVENTS_OPEN_ENDED_LABEL",
        "GROUP_EVENTS_ALL_DAY_LABEL",
        "GROUP_EVENTS_DEBUG",
        "GROUP_EVENTS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
