"""
Customer store with phone-keyed identity resolution.

Phone is the natural dedup key: the booking workflow reuses the customer
whose phone matches exactly (after trimming) and refreshes their name.
Customers without a phone are never deduplicated.
"""

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Optional

from smartbooking.errors import NotFoundError
from smartbooking.schemas.customer_schema import Customer

logger = logging.getLogger(__name__)


def _clean_phone(phone: Optional[str]) -> Optional[str]:
    if phone is None:
        return None
    return phone.strip() or None


class CustomerStore:
    """In-memory customer records."""

    def __init__(self) -> None:
        self._customers: dict[str, Customer] = {}
        self._lock = threading.Lock()

    def get(self, customer_id: str) -> Customer:
        customer = self._customers.get(customer_id)
        if customer is None:
            raise NotFoundError(f"Customer {customer_id} not found.")
        return customer.model_copy()

    def find_by_phone(self, phone: str) -> Optional[Customer]:
        """Return the first customer with exactly this phone, or None."""
        cleaned = _clean_phone(phone)
        if cleaned is None:
            return None
        with self._lock:
            found = self._find_unlocked(cleaned)
        return found.model_copy() if found else None

    def _find_unlocked(self, phone: str) -> Optional[Customer]:
        for customer in self._customers.values():
            if customer.phone == phone:
                return customer
        return None

    def create(
        self, name: str, phone: Optional[str] = None, email: Optional[str] = None
    ) -> Customer:
        with self._lock:
            customer = self._create_unlocked(name, _clean_phone(phone), email)
        return customer.model_copy()

    def _create_unlocked(
        self, name: str, phone: Optional[str], email: Optional[str]
    ) -> Customer:
        customer = Customer(
            id=f"CU-{uuid.uuid4().hex[:8].upper()}",
            name=name,
            phone=phone,
            email=email or None,
            created_at=datetime.now(timezone.utc),
        )
        self._customers[customer.id] = customer
        logger.info("New customer created: %s (%s)", customer.id, phone or "no phone")
        return customer

    def update_name(self, customer_id: str, name: str) -> Customer:
        with self._lock:
            current = self._customers.get(customer_id)
            if current is None:
                raise NotFoundError(f"Customer {customer_id} not found.")
            updated = current.model_copy(update={"name": name})
            self._customers[customer_id] = updated
        return updated.model_copy()

    def upsert_by_phone(self, name: str, phone: Optional[str]) -> tuple[Customer, bool]:
        """
        Resolve the customer for a submission.

        Returns:
            ``(customer, created)``. With a phone, an existing match has its
            name refreshed and is reused; otherwise a new record is created.
            Without a phone a new record is always created.
        """
        cleaned = _clean_phone(phone)
        with self._lock:
            existing = self._find_unlocked(cleaned) if cleaned else None
            if existing is None:
                return self._create_unlocked(name, cleaned, None).model_copy(), True
            updated = existing.model_copy(update={"name": name})
            self._customers[existing.id] = updated

        logger.debug("Returning customer matched by phone: %s", updated.id)
        return updated.model_copy(), False

    def reset(self) -> None:
        """Clear all customers. Used by test fixtures for isolation."""
        with self._lock:
            self._customers.clear()
