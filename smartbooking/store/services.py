"""Service catalog: bookable services and their default durations."""

import logging
import uuid
from typing import Iterable, Optional

from smartbooking.errors import NotFoundError, ValidationError
from smartbooking.schemas.service_schema import Service

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MIN = 30


class ServiceCatalog:
    """In-memory service catalog."""

    def __init__(
        self,
        services: Optional[Iterable[Service]] = None,
        default_duration_min: int = DEFAULT_DURATION_MIN,
    ) -> None:
        self._services: dict[str, Service] = {s.id: s for s in services or []}
        self.default_duration_min = default_duration_min

    def add(self, name: str, duration_min: Optional[int] = None, active: bool = True) -> Service:
        service = Service(
            id=f"SV-{uuid.uuid4().hex[:6].upper()}",
            name=name,
            duration_min=duration_min,
            active=active,
        )
        self._services[service.id] = service
        logger.info("Service added: %s (%s, %s min)", service.id, name, duration_min)
        return service

    def get(self, service_id: str) -> Service:
        service = self._services.get(service_id)
        if service is None:
            raise NotFoundError(f"Service {service_id} not found.")
        return service

    def list_active(self) -> list[Service]:
        """Active services ordered by name."""
        return sorted(
            (s for s in self._services.values() if s.active), key=lambda s: s.name.lower()
        )

    def require_active(self, service_id: str) -> Service:
        """Return the service if it exists and is active, else raise ValidationError."""
        if not service_id:
            raise ValidationError("Choose a service.", ["service_id"])
        service = self._services.get(service_id)
        if service is None or not service.active:
            raise ValidationError(f"Service {service_id} is not available.", ["service_id"])
        return service

    def duration_for(self, service: Service, override: Optional[int] = None) -> int:
        """Per-request override, else the service default, else the catalog default."""
        if override is not None and override > 0:
            return override
        if service.duration_min is not None and service.duration_min > 0:
            return service.duration_min
        return self.default_duration_min
