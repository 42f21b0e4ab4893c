"""Service catalog entry."""

from typing import Optional

from pydantic import BaseModel


class Service(BaseModel):
    """A bookable service. ``duration_min`` is the default slot length."""
    id: str
    name: str
    duration_min: Optional[int] = None
    active: bool = True
