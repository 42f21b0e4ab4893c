"""Shared test fixtures and helpers."""

from datetime import datetime
from typing import Optional

import pytest

from smartbooking.scheduling.business_calendar import BusinessCalendar
from smartbooking.scheduling.time_grid import TimeGrid
from smartbooking.schemas.booking_schema import Booking, BookingStatus
from smartbooking.schemas.service_schema import Service
from smartbooking.schemas.settings_schema import BusinessSettings
from smartbooking.store.customers import CustomerStore
from smartbooking.store.ledger import BookingLedger
from smartbooking.store.services import ServiceCatalog
from smartbooking.workflow.booking_workflow import BookingWorkflow

ZONE = "Europe/Bucharest"
GRID = TimeGrid.for_zone(ZONE)

# Sunday 2026-10-18, 08:00 local
NOW = GRID.combine("2026-10-18", "08:00")
WEDNESDAY = "2026-10-21"
THURSDAY = "2026-10-22"
SATURDAY = "2026-10-24"


def make_settings(**overrides) -> BusinessSettings:
    """Wednesday and Thursday 09:00-12:00, 30 min grid, no buffer, no notice."""
    values = {
        "timezone": ZONE,
        "slot_interval_min": 30,
        "buffer_min": 0,
        "min_notice_hours": 0,
        "max_days_ahead": 30,
        "allow_pending": True,
        "require_phone": True,
        "working_hours": {
            "3": {"open": "09:00", "close": "12:00"},
            "4": {"open": "09:00", "close": "12:00"},
        },
    }
    values.update(overrides)
    return BusinessSettings(**values)


def make_calendar(**overrides) -> BusinessCalendar:
    return BusinessCalendar.from_settings(make_settings(**overrides))


def make_booking(
    date_key: str,
    start: str,
    end: str,
    status: BookingStatus = BookingStatus.CONFIRMED,
    booking_id: str = "BK-TEST",
) -> Booking:
    """Helper to create a Booking between two local wall-clock times."""
    return Booking(
        id=booking_id,
        service_id="haircut",
        customer_id="CU-TEST",
        start_at=GRID.combine(date_key, start),
        end_at=GRID.combine(date_key, end),
        status=status,
    )


def at(date_key: str, hhmm: str) -> datetime:
    return GRID.combine(date_key, hhmm)


class FixedClock:
    """Injectable clock that returns a settable instant."""

    def __init__(self, now: Optional[datetime] = None) -> None:
        self.now = now or NOW

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def calendar():
    return make_calendar()


@pytest.fixture
def ledger():
    return BookingLedger(lock_timeout_sec=2.0)


@pytest.fixture
def customers():
    return CustomerStore()


@pytest.fixture
def catalog():
    return ServiceCatalog([
        Service(id="haircut", name="Haircut", duration_min=30),
        Service(id="coloring", name="Coloring", duration_min=90),
        Service(id="consult", name="Consultation", duration_min=None),
        Service(id="retired", name="Retired", duration_min=30, active=False),
    ])


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def workflow(ledger, customers, catalog, clock):
    return BookingWorkflow(ledger, customers, catalog, clock=clock)
