"""
Offline console demo: lists slots and books them against in-memory stores.

Uses the real availability engine, ledger and workflow with a small
seeded service catalog. No datastore, no network calls.

Usage:
    python console_demo.py
    python console_demo.py --scenario race
    python console_demo.py --scenario cancel
    python console_demo.py --date 2026-10-21 --service haircut
"""

import argparse
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Optional

from smartbooking.config import settings
from smartbooking.errors import BookingError, ConflictError
from smartbooking.scheduling.business_calendar import BusinessCalendar
from smartbooking.scheduling.time_grid import add_days
from smartbooking.schemas.booking_schema import Slot
from smartbooking.schemas.service_schema import Service
from smartbooking.store.customers import CustomerStore
from smartbooking.store.ledger import BookingLedger
from smartbooking.store.services import ServiceCatalog
from smartbooking.workflow.booking_workflow import BookingWorkflow

GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

DEMO_SERVICES = [
    Service(id="haircut", name="Haircut", duration_min=30),
    Service(id="coloring", name="Coloring", duration_min=90),
    Service(id="consult", name="Consultation", duration_min=None),
]


class ConsoleSession:
    """Drives the booking workflow from the terminal."""

    SCENARIOS = ("booking", "race", "cancel")

    def __init__(self, calendar: Optional[BusinessCalendar] = None) -> None:
        self.calendar = calendar or BusinessCalendar.from_settings(settings.default_settings())
        self.ledger = BookingLedger(lock_timeout_sec=settings.ledger.lock_timeout_sec)
        self.catalog = ServiceCatalog(
            DEMO_SERVICES, default_duration_min=settings.ledger.default_duration_min
        )
        self.workflow = BookingWorkflow(self.ledger, CustomerStore(), self.catalog)

    def say(self, text: str) -> None:
        print(f"{GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def show_slots(self, slots: list[Slot]) -> None:
        if not slots:
            self.say("No open slots.")
            return
        self.say("Open slots: " + ", ".join(s.time for s in slots))

    def next_open_day(self, service_id: str) -> Optional[str]:
        """First day in the booking horizon that still has a slot."""
        today = self.calendar.grid.local_day_key(datetime.now(self.calendar.grid.zone))
        for offset in range(self.calendar.max_days_ahead + 1):
            day = add_days(today, offset)
            if self.workflow.list_slots(self.calendar, service_id, day):
                return day
        return None

    def book(self, service_id: str, date_key: str, time: str, name: str, phone: str) -> bool:
        try:
            result = self.workflow.submit_public(self.calendar, {
                "service_id": service_id,
                "name": name,
                "phone": phone,
                "date": date_key,
                "time": time,
            })
        except ConflictError as exc:
            print(f"{YELLOW}{exc.message}{RESET}")
            self.show_slots(exc.slots)
            return False
        except BookingError as exc:
            print(f"{RED}{exc.message}{RESET}")
            return False

        booking = result.booking
        self.say(f"Booked {booking.id} for {result.customer.name} at {time} ({booking.status.value}).")
        self.show_slots(result.slots)
        return True

    def run_scenario(self, scenario: str, service_id: str = "haircut") -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  SMARTBOOKING - Scenario: {scenario}{RESET}")
        print(f"{BOLD}  Business: {self.calendar.business_name}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

        date_key = self.next_open_day(service_id)
        if date_key is None:
            print(f"{RED}No bookable day in the horizon.{RESET}")
            return
        slots = self.workflow.list_slots(self.calendar, service_id, date_key)
        self.system_log(f"Day: {date_key}")
        self.show_slots(slots)
        first = slots[0].time

        if scenario == "booking":
            self.book(service_id, date_key, first, "Ana Popescu", "0722 000 111")
        elif scenario == "race":
            self._race(service_id, date_key, first)
        elif scenario == "cancel":
            self.book(service_id, date_key, first, "Ana Popescu", "0722 000 111")
            booking = self.ledger.recent(limit=1)[0]
            self.workflow.cancel(booking.id)
            self.system_log(f"Canceled {booking.id}")
            self.show_slots(self.workflow.list_slots(self.calendar, service_id, date_key))
        else:
            print(f"{RED}Unknown scenario: {scenario}{RESET}")

    def _race(self, service_id: str, date_key: str, time: str) -> None:
        barrier = threading.Barrier(2)

        def attempt(name: str, phone: str) -> bool:
            barrier.wait()
            return self.book(service_id, date_key, time, name, phone)

        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [
                pool.submit(attempt, "Ana Popescu", "0722000111"),
                pool.submit(attempt, "Ion Ionescu", "0733000222"),
            ]
            outcomes = [f.result() for f in futures]
        self.system_log(f"Race outcomes: {outcomes}")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="SmartBooking console demo")
    parser.add_argument("--scenario", choices=ConsoleSession.SCENARIOS, default="booking")
    parser.add_argument("--service", default="haircut", help="service id")
    parser.add_argument("--date", help="list slots for this YYYY-MM-DD and exit")
    args = parser.parse_args(argv)

    session = ConsoleSession()
    if args.date:
        try:
            session.show_slots(session.workflow.list_slots(session.calendar, args.service, args.date))
        except BookingError as exc:
            print(f"{RED}{exc.message}{RESET}")
        return
    session.run_scenario(args.scenario, args.service)


if __name__ == "__main__":
    main()
