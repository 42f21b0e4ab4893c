from smartbooking.store.customers import CustomerStore
from smartbooking.store.ledger import BookingLedger
from smartbooking.store.services import ServiceCatalog

__all__ = ["BookingLedger", "CustomerStore", "ServiceCatalog"]
