"""Tests for local-day and minute arithmetic."""

from datetime import datetime, timedelta, timezone

import pytest

from smartbooking.scheduling.time_grid import (
    TimeGrid,
    add_days,
    add_minutes,
    parse_date_key,
    start_of_week_monday,
)

GRID = TimeGrid.for_zone("Europe/Bucharest")


class TestDayKeys:
    def test_local_day_key_uses_business_zone(self):
        # 22:30 UTC is already the next day in Bucharest (UTC+3 in October)
        instant = datetime(2026, 10, 20, 22, 30, tzinfo=timezone.utc)
        assert GRID.local_day_key(instant) == "2026-10-21"

    def test_naive_instant_is_taken_as_local(self):
        assert GRID.local_day_key(datetime(2026, 10, 21, 23, 59)) == "2026-10-21"

    def test_parse_rejects_malformed_key(self):
        with pytest.raises(ValueError):
            parse_date_key("21/10/2026")

    def test_add_days_crosses_month(self):
        assert add_days("2026-10-30", 3) == "2026-11-02"

    def test_start_of_week_monday(self):
        assert start_of_week_monday("2026-10-21") == "2026-10-19"
        assert start_of_week_monday("2026-10-25") == "2026-10-19"
        assert start_of_week_monday("2026-10-19") == "2026-10-19"


class TestWeekdayKey:
    @pytest.mark.parametrize(
        "date_key, expected",
        [
            ("2026-10-18", "0"),  # Sunday
            ("2026-10-19", "1"),
            ("2026-10-21", "3"),
            ("2026-10-24", "6"),  # Saturday
        ],
    )
    def test_sunday_is_zero(self, date_key, expected):
        assert GRID.weekday_key(date_key) == expected

    def test_dst_change_day_keeps_weekday(self):
        # Clocks go back on Sunday 2026-10-25 in Europe/Bucharest
        assert GRID.weekday_key("2026-10-25") == "0"


class TestDayBoundaries:
    def test_day_is_half_open_midnight_range(self):
        start = GRID.start_of_local_day("2026-10-21")
        end = GRID.start_of_next_local_day("2026-10-21")
        assert (start.hour, start.minute) == (0, 0)
        assert end.date().isoformat() == "2026-10-22"

    def test_dst_day_lasts_twenty_five_hours(self):
        start = GRID.start_of_local_day("2026-10-25").astimezone(timezone.utc)
        end = GRID.start_of_next_local_day("2026-10-25").astimezone(timezone.utc)
        assert end - start == timedelta(hours=25)

    def test_combine_builds_local_instant(self):
        instant = GRID.combine("2026-10-21", "09:30")
        assert instant.astimezone(timezone.utc) == datetime(2026, 10, 21, 6, 30, tzinfo=timezone.utc)
        assert GRID.format_hhmm(instant) == "09:30"


class TestAddMinutes:
    def test_adds_and_subtracts(self):
        base = GRID.combine("2026-10-21", "10:00")
        assert GRID.format_hhmm(add_minutes(base, 45)) == "10:45"
        assert GRID.format_hhmm(add_minutes(base, -10)) == "09:50"

    def test_keeps_zone(self):
        base = GRID.combine("2026-10-21", "10:00")
        assert add_minutes(base, 30).tzinfo == base.tzinfo

    def test_uses_absolute_time_across_dst(self):
        before = GRID.combine("2026-10-25", "02:00")
        after = add_minutes(before, 120)
        # one wall-clock hour is repeated, so two real hours later reads 03:00
        assert GRID.format_hhmm(after) == "03:00"
        elapsed = after.astimezone(timezone.utc) - before.astimezone(timezone.utc)
        assert elapsed == timedelta(hours=2)
