"""Unit tests for date_expressions module."""

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from group_events.domain.date_expressions import (
    Boundary,
    DateExpressionResolver,
    DurationExpression,
    DurationUnit,
    parse_duration,
)

pytestmark = pytest.mark.unit

LA = ZoneInfo("America/Los_Angeles")


class TestResolveRelativeTokens:
    """Tests for today/yesterday/tomorrow."""

    def setup_method(self):
        self.resolver = DateExpressionResolver(LA)
        # 2025-03-10 04:00 in Los Angeles
        self.now = datetime(2025, 3, 10, 11, 0, 0, tzinfo=UTC)

    @pytest.mark.smoke
    def test_today_start_boundary(self):
        result = self.resolver.resolve("today", self.now)
        assert result == datetime(2025, 3, 10, 0, 0, 0, tzinfo=LA)

    def test_today_end_boundary(self):
        result = self.resolver.resolve("today", self.now, Boundary.END)
        assert result == datetime(2025, 3, 10, 23, 59, 59, tzinfo=LA)

    def test_yesterday_and_tomorrow(self):
        assert self.resolver.resolve("yesterday", self.now).date() == date(2025, 3, 9)
        assert self.resolver.resolve("tomorrow", self.now).date() == date(2025, 3, 11)

    def test_tomorrow_end_boundary(self):
        result = self.resolver.resolve("tomorrow", self.now, Boundary.END)
        assert result == datetime(2025, 3, 11, 23, 59, 59, tzinfo=LA)

    def test_today_is_one_calendar_day_before_tomorrow(self):
        today = self.resolver.resolve("today", self.now)
        tomorrow = self.resolver.resolve("tomorrow", self.now)
        assert tomorrow.date() - today.date() == timedelta(days=1)
        assert today.time() == tomorrow.time()

    def test_reference_day_uses_display_timezone(self):
        # 02:00 UTC on the 10th is still the 9th in Los Angeles
        now = datetime(2025, 3, 10, 2, 0, 0, tzinfo=UTC)
        assert self.resolver.resolve("today", now).date() == date(2025, 3, 9)

    def test_naive_reference_treated_as_utc(self):
        now = datetime(2025, 3, 10, 2, 0, 0)
        assert self.resolver.resolve("today", now).date() == date(2025, 3, 9)


class TestResolveAbsoluteDates:
    """Tests for YYYY-MM-DD and YYYY/MM/DD tokens."""

    def setup_method(self):
        self.resolver = DateExpressionResolver(LA)
        self.now = datetime(2025, 3, 10, 12, 0, 0, tzinfo=UTC)

    def test_dashed_date(self):
        assert self.resolver.resolve("2021-04-15", self.now) == datetime(2021, 4, 15, tzinfo=LA)

    def test_slashed_date(self):
        assert self.resolver.resolve("2021/04/15", self.now) == datetime(2021, 4, 15, tzinfo=LA)

    def test_absolute_date_ignores_boundary(self):
        result = self.resolver.resolve("2021-04-15", self.now, Boundary.END)
        assert result == datetime(2021, 4, 15, tzinfo=LA)

    @pytest.mark.parametrize("token", ["2021-02-30", "2021-13-01", "2023-02-29"])
    def test_impossible_dates_are_invalid(self, token):
        assert self.resolver.resolve(token, self.now) is None

    @pytest.mark.parametrize("token", ["next week", "2021-4-15", "2021-04/15", "", "15-04-2021"])
    def test_unrecognised_tokens_are_invalid(self, token):
        assert self.resolver.resolve(token, self.now) is None

    def test_leap_day_is_valid(self):
        assert self.resolver.resolve("2024-02-29", self.now) == datetime(2024, 2, 29, tzinfo=LA)


class TestDurations:
    """Tests for parse_duration and apply_duration."""

    def setup_method(self):
        self.resolver = DateExpressionResolver(LA)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1 year", DurationExpression(1, DurationUnit.YEAR)),
            ("3 months", DurationExpression(3, DurationUnit.MONTH)),
            ("2 weeks", DurationExpression(2, DurationUnit.WEEK)),
            ("10 days", DurationExpression(10, DurationUnit.DAY)),
            ("1 days", DurationExpression(1, DurationUnit.DAY)),
            ("0 weeks", DurationExpression(0, DurationUnit.WEEK)),
        ],
    )
    def test_parse_valid(self, text, expected):
        assert parse_duration(text) == expected

    @pytest.mark.parametrize("text", ["5 bananas", "three months", "-1 days", "months", ""])
    def test_parse_invalid(self, text):
        assert parse_duration(text) is None

    def test_str_uses_plural(self):
        assert str(DurationExpression(3, DurationUnit.MONTH)) == "3 months"
        assert str(DurationExpression(1, DurationUnit.YEAR)) == "1 year"

    def test_month_addition_clamps_day(self):
        base = datetime(2025, 1, 31, tzinfo=LA)
        result = self.resolver.apply_duration(base, DurationExpression(1, DurationUnit.MONTH))
        assert result == datetime(2025, 2, 28, tzinfo=LA)

    def test_three_months_from_end_of_january(self):
        base = datetime(2025, 1, 31, tzinfo=LA)
        result = self.resolver.apply_duration(base, DurationExpression(3, DurationUnit.MONTH))
        assert result.date() == date(2025, 4, 30)

    def test_year_addition_from_leap_day(self):
        base = datetime(2024, 2, 29, tzinfo=LA)
        result = self.resolver.apply_duration(base, DurationExpression(1, DurationUnit.YEAR))
        assert result.date() == date(2025, 2, 28)

    def test_week_addition(self):
        base = datetime(2025, 3, 1, tzinfo=LA)
        result = self.resolver.apply_duration(base, DurationExpression(2, DurationUnit.WEEK))
        assert result.date() == date(2025, 3, 15)
