"""Tests for calendar window utilities."""

import pytest
from datetime import date, datetime, timezone, timedelta

from budgetsnap.domain.errors import ValidationError
from budgetsnap.domain.windows import (
    as_calendar_date,
    clamp_day,
    covering_months,
    days_in_month,
    in_window,
    month_window,
    months_between,
    next_month_start,
    normalize_interval,
    parse_window_bound,
)


class TestAsCalendarDate:
    """Tests for loose date coercion."""

    def test_date_passes_through(self):
        assert as_calendar_date(date(2024, 3, 5)) == date(2024, 3, 5)

    def test_iso_string(self):
        assert as_calendar_date("2024-03-05") == date(2024, 3, 5)

    def test_naive_datetime_keeps_calendar_day(self):
        assert as_calendar_date(datetime(2024, 3, 5, 23, 30)) == date(2024, 3, 5)

    def test_aware_datetime_normalized_to_utc(self):
        plus_five = timezone(timedelta(hours=5))
        assert as_calendar_date(datetime(2024, 3, 5, 2, 0, tzinfo=plus_five)) == date(2024, 3, 4)

    def test_iso_timestamp_string_with_offset(self):
        assert as_calendar_date("2024-03-05T02:00:00+05:00") == date(2024, 3, 4)

    @pytest.mark.parametrize("value", [None, "", "   ", "not-a-date", "2024-13-40", 12345])
    def test_unusable_values_become_none(self, value):
        assert as_calendar_date(value) is None


def test_parse_window_bound_raises_on_garbage():
    with pytest.raises(ValidationError):
        parse_window_bound("garbage", "month_start")


def test_in_window_is_half_open():
    start, end = date(2024, 4, 1), date(2024, 5, 1)
    assert in_window(date(2024, 4, 1), start, end)
    assert in_window(date(2024, 4, 30), start, end)
    assert not in_window(date(2024, 5, 1), start, end)
    assert not in_window(date(2024, 3, 31), start, end)


def test_days_in_month_handles_leap_years():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2023, 2) == 28
    assert days_in_month(2024, 4) == 30


def test_clamp_day():
    assert clamp_day(2024, 4, 31) == date(2024, 4, 30)
    assert clamp_day(2023, 2, 30) == date(2023, 2, 28)
    assert clamp_day(2024, 1, 0) == date(2024, 1, 1)


def test_months_between_crosses_years():
    assert months_between(date(2023, 11, 20), date(2024, 2, 1)) == 3
    assert months_between(date(2024, 2, 1), date(2023, 11, 20)) == -3


@pytest.mark.parametrize("value, expected", [(None, 1), (0, 1), (-3, 1), (1, 1), (3, 3)])
def test_normalize_interval(value, expected):
    assert normalize_interval(value) == expected


def test_next_month_start_from_december():
    assert next_month_start(date(2024, 12, 31)) == date(2025, 1, 1)


class TestMonthWindow:
    """Tests for month window normalization."""

    def test_end_is_start_of_next_month(self):
        assert month_window(date(2024, 2, 1), date(2024, 2, 29)) == (
            date(2024, 2, 1),
            date(2024, 3, 1),
        )

    def test_mid_month_start(self):
        assert month_window(date(2024, 1, 15)) == (date(2024, 1, 15), date(2024, 2, 1))

    def test_inverted_range_rejected(self):
        with pytest.raises(ValidationError):
            month_window(date(2024, 2, 10), date(2024, 2, 1))


def test_covering_months_spans_boundary():
    months = list(covering_months(date(2024, 1, 29), date(2024, 2, 5)))
    assert months == [date(2024, 1, 1), date(2024, 2, 1)]


def test_covering_months_excludes_exclusive_end_month():
    months = list(covering_months(date(2024, 1, 29), date(2024, 2, 1)))
    assert months == [date(2024, 1, 1)]
