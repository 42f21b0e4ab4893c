"""
Read-only scheduling policy snapshot.

A BusinessCalendar is built once per computation from a BusinessSettings
record and passed explicitly into the availability engine, the ledger's
conflict guard and the booking workflow.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfoNotFoundError

from smartbooking.scheduling.time_grid import TimeGrid, add_days, parse_date_key
from smartbooking.schemas.settings_schema import BusinessSettings, DayHours

logger = logging.getLogger(__name__)

DEFAULT_SLOT_INTERVAL_MIN = 30
DEFAULT_BUFFER_MIN = 0
DEFAULT_MIN_NOTICE_HOURS = 0.0
DEFAULT_MAX_DAYS_AHEAD = 30
DEFAULT_TIMEZONE = "Europe/Bucharest"


@dataclass(frozen=True)
class Horizon:
    """Inclusive range of bookable date keys."""

    min: str
    max: str

    def contains(self, date_key: str) -> bool:
        return parse_date_key(self.min) <= parse_date_key(date_key) <= parse_date_key(self.max)


@dataclass(frozen=True)
class BusinessCalendar:
    """Immutable policy view with defaults applied."""

    grid: TimeGrid
    working_hours: dict[str, DayHours] = field(default_factory=dict)
    slot_interval_min: int = DEFAULT_SLOT_INTERVAL_MIN
    buffer_min: int = DEFAULT_BUFFER_MIN
    min_notice_hours: float = DEFAULT_MIN_NOTICE_HOURS
    max_days_ahead: int = DEFAULT_MAX_DAYS_AHEAD
    allow_pending: bool = True
    require_phone: bool = True
    business_name: str = "SmartBooking"

    @classmethod
    def from_settings(cls, record: BusinessSettings) -> "BusinessCalendar":
        """
        Apply defaults to a raw settings record.

        Missing values fall back to the documented defaults; negative buffer,
        notice and horizon values are treated as missing. The slot interval
        is kept as given so a degenerate value is visible to the engine,
        which refuses to generate slots for it.
        """
        try:
            grid = TimeGrid.for_zone(record.timezone or DEFAULT_TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(
                "Unknown timezone %r, falling back to %s", record.timezone, DEFAULT_TIMEZONE
            )
            grid = TimeGrid.for_zone(DEFAULT_TIMEZONE)

        return cls(
            grid=grid,
            working_hours=dict(record.working_hours),
            slot_interval_min=_or_default(record.slot_interval_min, DEFAULT_SLOT_INTERVAL_MIN),
            buffer_min=_non_negative(record.buffer_min, DEFAULT_BUFFER_MIN),
            min_notice_hours=_non_negative(record.min_notice_hours, DEFAULT_MIN_NOTICE_HOURS),
            max_days_ahead=_non_negative(record.max_days_ahead, DEFAULT_MAX_DAYS_AHEAD),
            allow_pending=record.allow_pending,
            require_phone=record.require_phone,
            business_name=record.business_name,
        )

    def hours_for(self, date_key: str) -> Optional[DayHours]:
        """Working hours for the date's weekday, or None when closed."""
        return self.working_hours.get(self.grid.weekday_key(date_key))

    def horizon(self, today: datetime) -> Horizon:
        """Bookable date range starting from the local day of ``today``."""
        first = self.grid.local_day_key(today)
        return Horizon(min=first, max=add_days(first, self.max_days_ahead))

    @property
    def min_notice_minutes(self) -> float:
        return self.min_notice_hours * 60


def _or_default(value, default):
    return default if value is None else value


def _non_negative(value, default):
    if value is None or value < 0:
        return default
    return value
