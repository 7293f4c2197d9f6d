"""Tests for the in-memory relational store."""

import pytest

from sacco_portal.exceptions import StoreError
from sacco_portal.store import InMemoryRelationalStore


@pytest.fixture
def store() -> InMemoryRelationalStore:
    store = InMemoryRelationalStore()
    store.insert("users", [{"id": "u1", "email": "a@example.com"}])
    return store


class TestInsert:
    """Tests for bulk inserts."""

    def test_assigns_id_and_created_at(self, store: InMemoryRelationalStore) -> None:
        inserted = store.insert("loans", [{"user_id": "u1", "amount": 100}])

        assert inserted[0]["id"]
        assert inserted[0]["created_at"]
        assert inserted[0]["amount"] == 100

    def test_keeps_supplied_created_at(self, store: InMemoryRelationalStore) -> None:
        inserted = store.insert("transactions", [{"user_id": "u1", "created_at": "2024-01-28T14:30:00"}])

        assert inserted[0]["created_at"] == "2024-01-28T14:30:00"

    def test_returned_rows_are_copies(self, store: InMemoryRelationalStore) -> None:
        inserted = store.insert("loans", [{"user_id": "u1", "amount": 100}])
        inserted[0]["amount"] = 0

        assert store.select("loans")[0]["amount"] == 100

    def test_empty_insert(self, store: InMemoryRelationalStore) -> None:
        assert store.insert("loans", []) == []
        assert "loans" not in store.summary()

    def test_counts_calls(self, store: InMemoryRelationalStore) -> None:
        store.insert("loans", [{"user_id": "u1"}, {"user_id": "u1"}])

        assert store.insert_calls == 2
        assert store.summary() == {"users": 1, "loans": 2}


class TestConstraints:
    """Tests for referential integrity."""

    def test_duplicate_user(self, store: InMemoryRelationalStore) -> None:
        with pytest.raises(StoreError) as exc_info:
            store.insert("users", [{"id": "u1"}])

        assert exc_info.value.code == "23505"

    def test_duplicate_within_batch(self) -> None:
        store = InMemoryRelationalStore()

        with pytest.raises(StoreError):
            store.insert("users", [{"id": "u2"}, {"id": "u2"}])

        assert store.select("users") == []

    def test_unknown_owner(self, store: InMemoryRelationalStore) -> None:
        with pytest.raises(StoreError) as exc_info:
            store.insert("savings_goals", [{"user_id": "ghost"}])

        assert exc_info.value.code == "23503"

    def test_batch_is_all_or_nothing(self, store: InMemoryRelationalStore) -> None:
        rows = [{"user_id": "u1", "name": "ok"}, {"user_id": "ghost", "name": "bad"}]

        with pytest.raises(StoreError):
            store.insert("savings_accounts", rows)

        assert store.select("savings_accounts") == []

    def test_unowned_tables_unchecked(self, store: InMemoryRelationalStore) -> None:
        store.insert("audit_log", [{"event": "x"}])

        assert store.summary()["audit_log"] == 1


class TestSelect:
    """Tests for filtered reads."""

    @pytest.fixture
    def populated(self, store: InMemoryRelationalStore) -> InMemoryRelationalStore:
        store.insert("users", [{"id": "u2"}])
        store.insert(
            "transactions",
            [
                {"user_id": "u1", "amount": 10, "created_at": "2024-01-02T00:00:00"},
                {"user_id": "u2", "amount": 20, "created_at": "2024-01-03T00:00:00"},
                {"user_id": "u1", "amount": 30, "created_at": "2024-01-01T00:00:00"},
                {"user_id": "u1", "amount": 40, "created_at": None},
            ],
        )
        return store

    def test_filters(self, populated: InMemoryRelationalStore) -> None:
        rows = populated.select("transactions", {"user_id": "u1"})

        assert [row["amount"] for row in rows] == [10, 30, 40]

    def test_order_and_limit(self, populated: InMemoryRelationalStore) -> None:
        rows = populated.select("transactions", {"user_id": "u1"}, order_by="created_at", limit=2)

        assert [row["amount"] for row in rows] == [30, 10]

    def test_descending_puts_missing_first(self, populated: InMemoryRelationalStore) -> None:
        rows = populated.select("transactions", order_by="created_at", descending=True)

        assert [row["amount"] for row in rows] == [40, 20, 10, 30]

    def test_unknown_table(self, store: InMemoryRelationalStore) -> None:
        assert store.select("nothing") == []
