"""Tests for the calendar-date helpers."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from repeat_calendar import ParseError
from repeat_calendar.date_utils import (
    format_date,
    is_date_in_range,
    month_bounds,
    parse_date,
    parse_time,
    to_date,
    week_bounds,
    week_dates,
)


class TestWeekDates:
    def test_week_starts_on_sunday(self):
        days = week_dates(date(2025, 10, 15))  # Wednesday
        assert days[0] == date(2025, 10, 12)
        assert days[-1] == date(2025, 10, 18)
        assert days[0].weekday() == 6

    def test_seven_consecutive_days(self):
        days = week_dates(date(2025, 10, 15))
        assert len(days) == 7
        assert all((b - a).days == 1 for a, b in zip(days, days[1:]))

    def test_sunday_is_first_day_of_its_own_week(self):
        assert week_dates(date(2025, 10, 12))[0] == date(2025, 10, 12)

    def test_saturday_is_last_day_of_its_week(self):
        assert week_dates(date(2025, 10, 18))[-1] == date(2025, 10, 18)

    def test_week_across_month_boundary(self):
        assert week_bounds(date(2025, 10, 1)) == (date(2025, 9, 28), date(2025, 10, 4))

    def test_accepts_datetime(self):
        assert week_dates(datetime(2025, 10, 15, 23, 59)) == week_dates(date(2025, 10, 15))


class TestMonthBounds:
    @pytest.mark.parametrize(
        ("day", "last"),
        [
            (date(2025, 10, 15), date(2025, 10, 31)),
            (date(2025, 2, 1), date(2025, 2, 28)),
            (date(2024, 2, 29), date(2024, 2, 29)),
            (date(2025, 4, 30), date(2025, 4, 30)),
            (date(2025, 12, 5), date(2025, 12, 31)),
        ],
    )
    def test_last_day(self, day, last):
        first, end = month_bounds(day)
        assert first == day.replace(day=1)
        assert end == last


class TestIsDateInRange:
    def test_inclusive_both_ends(self):
        start, end = date(2025, 10, 1), date(2025, 10, 31)
        assert is_date_in_range(start, start, end)
        assert is_date_in_range(end, start, end)

    def test_outside(self):
        start, end = date(2025, 10, 1), date(2025, 10, 31)
        assert not is_date_in_range(date(2025, 9, 30), start, end)
        assert not is_date_in_range(date(2025, 11, 1), start, end)

    def test_time_of_day_ignored(self):
        assert is_date_in_range(
            datetime(2025, 10, 31, 23, 59), date(2025, 10, 1), datetime(2025, 10, 31, 0, 0)
        )


class TestFormatAndParse:
    def test_format_zero_pads(self):
        assert format_date(date(2025, 1, 5)) == "2025-01-05"

    def test_format_datetime(self):
        assert format_date(datetime(2025, 10, 15, 9, 30)) == "2025-10-15"

    def test_parse_date(self):
        assert parse_date("2025-10-15") == date(2025, 10, 15)

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "   ",
            "2025-13-01",
            "2025-02-30",
            "not a date",
            # Truncated or non-calendar ISO forms must not pick a default day.
            "2025-10",
            "2025",
            "20251015",
            "2025-10-15T09:00",
        ],
    )
    def test_parse_date_rejects_malformed(self, value):
        with pytest.raises(ParseError):
            parse_date(value)

    def test_parse_date_rejects_non_string(self):
        with pytest.raises(ParseError):
            parse_date(20251015)  # type: ignore[arg-type]

    def test_to_date_passthrough_and_string(self):
        assert to_date(date(2025, 1, 1)) == date(2025, 1, 1)
        assert to_date("2025-01-01") == date(2025, 1, 1)

    def test_to_date_rejects_other_types(self):
        with pytest.raises(ParseError):
            to_date(3.14)  # type: ignore[arg-type]

    @pytest.mark.parametrize("value", ["00:00", "09:05", "23:59"])
    def test_parse_time_valid(self, value):
        assert parse_time(value) == value

    @pytest.mark.parametrize("value", ["24:00", "9:00", "09:60", "0900", ""])
    def test_parse_time_rejects_malformed(self, value):
        with pytest.raises(ParseError):
            parse_time(value)
