"""Tests for the service catalog."""

import pytest

from smartbooking.errors import NotFoundError, ValidationError
from smartbooking.store.services import ServiceCatalog


class TestCatalog:
    def test_list_active_sorted_by_name(self, catalog):
        assert [s.name for s in catalog.list_active()] == ["Coloring", "Consultation", "Haircut"]

    def test_add(self):
        catalog = ServiceCatalog()
        service = catalog.add("Massage", 60)
        assert service.id.startswith("SV-")
        assert catalog.get(service.id).duration_min == 60

    def test_get_unknown(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.get("nope")


class TestRequireActive:
    def test_active_service(self, catalog):
        assert catalog.require_active("haircut").name == "Haircut"

    @pytest.mark.parametrize("service_id", ["", "retired", "nope"])
    def test_missing_inactive_or_unknown(self, catalog, service_id):
        with pytest.raises(ValidationError) as exc_info:
            catalog.require_active(service_id)
        assert exc_info.value.fields == ["service_id"]


class TestDuration:
    def test_service_default(self, catalog):
        assert catalog.duration_for(catalog.get("coloring")) == 90

    def test_override_wins(self, catalog):
        assert catalog.duration_for(catalog.get("coloring"), 45) == 45

    def test_non_positive_override_ignored(self, catalog):
        assert catalog.duration_for(catalog.get("coloring"), 0) == 90

    def test_missing_duration_falls_back(self, catalog):
        assert catalog.duration_for(catalog.get("consult")) == 30

    def test_custom_fallback(self):
        catalog = ServiceCatalog(default_duration_min=45)
        service = catalog.add("Quick chat")
        assert catalog.duration_for(service) == 45
