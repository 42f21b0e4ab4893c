"""Customer data model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Customer(BaseModel):
    """Customer record. ``phone`` is the identity key used by the booking workflow."""
    id: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    created_at: datetime
