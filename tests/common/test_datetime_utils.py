from datetime import date, time, timedelta

import pytest

from src.childcare_dashboard.childcare_dashboard.common.datetime_utils import (
    format_duration,
    from_store_time,
    js_day_of_week,
    month_bounds,
    parse_time_minutes,
    short_time,
    to_store_time,
    week_bounds,
)
from src.childcare_dashboard.childcare_dashboard.core.exceptions import ValidationError


def test_parse_valid_times_for_every_hour_and_minute():
    for hour in range(24):
        for minute in (0, 1, 30, 59):
            assert parse_time_minutes(f"{hour:02d}:{minute:02d}") == hour * 60 + minute


@pytest.mark.parametrize("value,expected", [("08:30:45", 510), ("7:05", 425), ("00:00:00", 0)])
def test_parse_ignores_seconds_and_padding(value, expected):
    assert parse_time_minutes(value) == expected


@pytest.mark.parametrize(
    "value",
    [None, "", "0830", "8", "08:30:00:00", "24:00", "12:60", "-1:10", "ab:10", "10:xx", ":", 830],
)
def test_parse_malformed_returns_sentinel(value):
    assert parse_time_minutes(value) == -1


def test_format_duration():
    assert format_duration(240) == "4h00"
    assert format_duration(125) == "2h05"
    assert format_duration(0) == "0h00"
    assert format_duration(-30) == "0h00"


def test_to_store_time_normalizes_and_rejects():
    assert to_store_time("8:05") == "08:05:00"
    assert to_store_time("17:45:10") == "17:45:10"
    assert to_store_time("  ") is None
    assert to_store_time(None) is None
    with pytest.raises(ValidationError):
        to_store_time("25:00")


def test_from_store_time_handles_driver_types():
    assert from_store_time(timedelta(hours=8, minutes=30)) == "08:30:00"
    assert from_store_time(time(17, 5)) == "17:05:00"
    assert from_store_time("09:00:00") == "09:00:00"
    assert from_store_time(None) is None


def test_from_store_time_maps_legacy_departure_placeholders_to_none():
    assert from_store_time("00:00:00", legacy_unset=True) is None
    assert from_store_time("", legacy_unset=True) is None
    assert from_store_time(timedelta(0), legacy_unset=True) is None
    assert from_store_time("00:00:00") == "00:00:00"


def test_short_time():
    assert short_time("08:30:00") == "08:30"
    assert short_time(None) is None


def test_week_bounds_monday_to_sunday():
    # 2025-03-12 is a Wednesday
    assert week_bounds(date(2025, 3, 12)) == (date(2025, 3, 10), date(2025, 3, 16))
    assert week_bounds(date(2025, 3, 16)) == (date(2025, 3, 10), date(2025, 3, 16))
    # across a year boundary
    assert week_bounds(date(2025, 1, 1)) == (date(2024, 12, 30), date(2025, 1, 5))


def test_month_bounds():
    assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(date(2025, 12, 31)) == (date(2025, 12, 1), date(2025, 12, 31))


def test_js_day_of_week():
    assert js_day_of_week(date(2025, 3, 9)) == 0  # Sunday
    assert js_day_of_week(date(2025, 3, 10)) == 1  # Monday
    assert js_day_of_week(date(2025, 3, 15)) == 6  # Saturday
