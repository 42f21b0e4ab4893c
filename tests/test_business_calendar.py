"""Tests for settings parsing and the BusinessCalendar policy snapshot."""

import pytest

from smartbooking.scheduling.availability import compute_slots
from smartbooking.scheduling.business_calendar import (
    DEFAULT_MAX_DAYS_AHEAD,
    DEFAULT_SLOT_INTERVAL_MIN,
    DEFAULT_TIMEZONE,
    BusinessCalendar,
)
from smartbooking.schemas.settings_schema import BusinessSettings
from tests.conftest import NOW, WEDNESDAY, SATURDAY, make_calendar


class TestSettingsRecord:
    def test_defaults(self):
        record = BusinessSettings()
        assert record.id == 1
        assert record.business_name == "SmartBooking"
        assert record.working_hours == {}

    def test_numeric_strings_are_parsed(self):
        record = BusinessSettings(slot_interval_min="15", min_notice_hours="1.5")
        assert record.slot_interval_min == 15
        assert record.min_notice_hours == 1.5

    def test_unparseable_numbers_become_none(self):
        record = BusinessSettings(slot_interval_min="abc", buffer_min=[], max_days_ahead="")
        assert record.slot_interval_min is None
        assert record.buffer_min is None
        assert record.max_days_ahead is None

    @pytest.mark.parametrize(
        "field", ["slot_interval_min", "buffer_min", "max_days_ahead", "min_notice_hours"]
    )
    @pytest.mark.parametrize("value", ["nan", "inf", "-inf", float("nan"), float("inf"), "1e400"])
    def test_non_finite_numbers_become_none(self, field, value):
        assert getattr(BusinessSettings(**{field: value}), field) is None

    def test_hours_are_zero_padded(self):
        record = BusinessSettings(working_hours={"1": {"open": "9:00", "close": "17:30"}})
        assert record.working_hours["1"].open == "09:00"

    def test_non_dict_hours_mean_closed_every_day(self):
        assert BusinessSettings(working_hours="not json").working_hours == {}

    def test_unknown_weekday_keys_are_dropped(self):
        record = BusinessSettings(working_hours={
            "7": {"open": "09:00", "close": "10:00"},
            "2": None,
            "3": {"open": "09:00", "close": "10:00"},
        })
        assert list(record.working_hours) == ["3"]


class TestCalendarDefaults:
    def test_missing_values_use_defaults(self):
        cal = BusinessCalendar.from_settings(BusinessSettings())
        assert cal.slot_interval_min == DEFAULT_SLOT_INTERVAL_MIN
        assert cal.buffer_min == 0
        assert cal.min_notice_hours == 0
        assert cal.max_days_ahead == DEFAULT_MAX_DAYS_AHEAD

    def test_negative_values_use_defaults(self):
        cal = BusinessCalendar.from_settings(
            BusinessSettings(buffer_min=-5, min_notice_hours=-1, max_days_ahead=-3)
        )
        assert cal.buffer_min == 0
        assert cal.min_notice_hours == 0
        assert cal.max_days_ahead == DEFAULT_MAX_DAYS_AHEAD

    @pytest.mark.parametrize("value", ["nan", "inf"])
    def test_non_finite_settings_fall_back_to_defaults(self, value):
        cal = make_calendar(
            slot_interval_min=value, buffer_min=value, min_notice_hours=value, max_days_ahead=value
        )
        assert cal.slot_interval_min == DEFAULT_SLOT_INTERVAL_MIN
        assert cal.buffer_min == 0
        assert cal.min_notice_hours == 0
        assert cal.max_days_ahead == DEFAULT_MAX_DAYS_AHEAD
        assert len(compute_slots(cal, WEDNESDAY, 30, [], NOW)) == 6

    def test_degenerate_interval_is_kept(self):
        assert make_calendar(slot_interval_min=0).slot_interval_min == 0

    def test_unknown_timezone_falls_back(self):
        cal = BusinessCalendar.from_settings(BusinessSettings(timezone="Mars/Olympus"))
        assert cal.grid.zone.key == DEFAULT_TIMEZONE

    def test_notice_in_minutes(self):
        assert make_calendar(min_notice_hours=1.5).min_notice_minutes == 90


class TestHoursAndHorizon:
    def test_hours_for_working_day(self):
        hours = make_calendar().hours_for(WEDNESDAY)
        assert (hours.open, hours.close) == ("09:00", "12:00")

    def test_hours_for_closed_day(self):
        assert make_calendar().hours_for(SATURDAY) is None

    def test_horizon_is_inclusive(self):
        horizon = make_calendar(max_days_ahead=3).horizon(NOW)
        assert (horizon.min, horizon.max) == ("2026-10-18", "2026-10-21")
        assert horizon.contains("2026-10-18")
        assert horizon.contains("2026-10-21")
        assert not horizon.contains("2026-10-22")
        assert not horizon.contains("2026-10-17")

    def test_zero_horizon_allows_only_today(self):
        horizon = make_calendar(max_days_ahead=0).horizon(NOW)
        assert horizon.min == horizon.max == "2026-10-18"

    def test_horizon_compares_dates_not_text(self):
        horizon = make_calendar(max_days_ahead=30).horizon(NOW)
        assert horizon.contains("2026-11-4")
        assert horizon.contains(" 2026-11-17 ")
        assert not horizon.contains("2026-10-2")
