from smartbooking.scheduling.availability import compute_slots, grid_starts
from smartbooking.scheduling.business_calendar import BusinessCalendar, Horizon
from smartbooking.scheduling.status_machine import BookingStatusMachine
from smartbooking.scheduling.time_grid import TimeGrid

__all__ = [
    "BusinessCalendar",
    "BookingStatusMachine",
    "Horizon",
    "TimeGrid",
    "compute_slots",
    "grid_starts",
]
