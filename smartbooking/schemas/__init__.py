from smartbooking.schemas.booking_schema import (
    Booking,
    BookingResult,
    BookingStatus,
    DashboardBookingRequest,
    PublicBookingRequest,
    Slot,
)
from smartbooking.schemas.customer_schema import Customer
from smartbooking.schemas.service_schema import Service
from smartbooking.schemas.settings_schema import BusinessSettings, DayHours

__all__ = [
    "Booking",
    "BookingResult",
    "BookingStatus",
    "BusinessSettings",
    "Customer",
    "DashboardBookingRequest",
    "DayHours",
    "PublicBookingRequest",
    "Service",
    "Slot",
]
