"""
Calendar and clock arithmetic in the business's civil time zone.

All day keys ("YYYY-MM-DD"), weekday keys and "HH:MM" strings are
interpreted in one explicit zone, never the host machine's clock.
Instants are timezone-aware datetimes; minute arithmetic is done on
absolute time so DST transitions do not stretch or shrink intervals.

Usage:
    grid = TimeGrid.for_zone("Europe/Bucharest")
    open_at = grid.combine("2026-10-21", "09:00")
    grid.weekday_key("2026-10-21")  # -> "3" (Wednesday)
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

DATE_KEY_FORMAT = "%Y-%m-%d"


def parse_date_key(date_key: str) -> date:
    """Parse a "YYYY-MM-DD" key. Raises ValueError on malformed input."""
    return datetime.strptime(date_key.strip(), DATE_KEY_FORMAT).date()


def parse_hhmm(value: str) -> time:
    """Parse an "HH:MM" string. Raises ValueError on malformed input."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def add_minutes(instant: datetime, minutes: float) -> datetime:
    """Shift an aware instant by absolute minutes, keeping its zone."""
    shifted = instant.astimezone(timezone.utc) + timedelta(minutes=minutes)
    return shifted.astimezone(instant.tzinfo)


def add_days(date_key: str, days: int) -> str:
    return (parse_date_key(date_key) + timedelta(days=days)).isoformat()


def start_of_week_monday(date_key: str) -> str:
    """Return the date key of the Monday starting the week of ``date_key``."""
    day = parse_date_key(date_key)
    return (day - timedelta(days=day.weekday())).isoformat()


@dataclass(frozen=True)
class TimeGrid:
    """Local-day arithmetic bound to a single time zone."""

    zone: ZoneInfo

    @classmethod
    def for_zone(cls, name: str) -> "TimeGrid":
        return cls(ZoneInfo(name))

    def localize(self, instant: datetime) -> datetime:
        """Express ``instant`` in the business zone. Naive values are taken as local."""
        if instant.tzinfo is None:
            return instant.replace(tzinfo=self.zone)
        return instant.astimezone(self.zone)

    def local_day_key(self, instant: datetime) -> str:
        return self.localize(instant).date().isoformat()

    def weekday_key(self, date_key: str) -> str:
        """Weekday as "0".."6" with Sunday = "0", taken at local noon."""
        noon = self.combine(date_key, "12:00")
        return str(noon.isoweekday() % 7)

    def start_of_local_day(self, date_key: str) -> datetime:
        day = parse_date_key(date_key)
        return datetime(day.year, day.month, day.day, tzinfo=self.zone)

    def start_of_next_local_day(self, date_key: str) -> datetime:
        return self.start_of_local_day(add_days(date_key, 1))

    def combine(self, date_key: str, hhmm: str) -> datetime:
        """Build the local instant for ``date_key`` at wall-clock ``hhmm``."""
        return datetime.combine(parse_date_key(date_key), parse_hhmm(hhmm), tzinfo=self.zone)

    def format_hhmm(self, instant: datetime) -> str:
        return self.localize(instant).strftime("%H:%M")
