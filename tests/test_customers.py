"""Tests for phone-keyed customer resolution."""

import pytest

from smartbooking.errors import NotFoundError


class TestUpsertByPhone:
    def test_creates_new_customer(self, customers):
        customer, created = customers.upsert_by_phone("Ana Popescu", "0722000111")
        assert created
        assert customer.id.startswith("CU-")
        assert customer.phone == "0722000111"

    def test_reuses_and_renames_existing(self, customers):
        first, _ = customers.upsert_by_phone("Ana", "0722000111")
        second, created = customers.upsert_by_phone("Ana Popescu", "0722000111")
        assert not created
        assert second.id == first.id
        assert customers.get(first.id).name == "Ana Popescu"

    def test_phone_is_trimmed(self, customers):
        first, _ = customers.upsert_by_phone("Ana", " 0722000111 ")
        second, created = customers.upsert_by_phone("Ana", "0722000111")
        assert not created
        assert second.id == first.id

    def test_phone_match_is_exact(self, customers):
        customers.upsert_by_phone("Ana", "0722000111")
        _, created = customers.upsert_by_phone("Ana", "0722 000 111")
        assert created

    @pytest.mark.parametrize("phone", [None, "", "   "])
    def test_no_phone_always_creates(self, customers, phone):
        first, _ = customers.upsert_by_phone("Walk-in", phone)
        second, created = customers.upsert_by_phone("Walk-in", phone)
        assert created
        assert first.id != second.id
        assert second.phone is None


class TestLookup:
    def test_find_by_phone(self, customers):
        created = customers.create("Ion", "0733000222", email="ion@example.com")
        found = customers.find_by_phone("0733000222")
        assert found.id == created.id
        assert found.email == "ion@example.com"

    def test_find_by_phone_missing(self, customers):
        assert customers.find_by_phone("0700000000") is None
        assert customers.find_by_phone("") is None

    def test_update_name(self, customers):
        created = customers.create("Ion", "0733000222")
        assert customers.update_name(created.id, "Ion Ionescu").name == "Ion Ionescu"

    def test_unknown_customer(self, customers):
        with pytest.raises(NotFoundError):
            customers.get("CU-NOPE")
        with pytest.raises(NotFoundError):
            customers.update_name("CU-NOPE", "x")

    def test_reset(self, customers):
        customers.create("Ion", "0733000222")
        customers.reset()
        assert customers.find_by_phone("0733000222") is None
