"""In-memory relational store with owner referential integrity."""

import copy
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from sacco_portal.exceptions import StoreError
from sacco_portal.store.base import (
    OWNED_TABLES,
    OWNER_COLUMN,
    USERS_TABLE,
    RelationalStore,
    Row,
)


@dataclass
class InMemoryRelationalStore(RelationalStore):
    """In-process tables keyed by name.

    Mirrors the constraints the portal schema declares: ``users.id`` is
    unique and every owned row must reference an existing user.
    """

    tables: dict[str, list[Row]] = field(default_factory=dict)
    insert_calls: int = 0

    def insert(self, table: str, rows: list[Row]) -> list[Row]:
        """Insert all rows or none of them."""
        self.insert_calls += 1
        if not rows:
            return []

        stored = [self._prepare(table, row) for row in rows]
        self._check_constraints(table, stored)

        self.tables.setdefault(table, []).extend(stored)
        return copy.deepcopy(stored)

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        """Return copies of matching rows."""
        rows = [
            row
            for row in self.tables.get(table, [])
            if all(row.get(col) == value for col, value in (filters or {}).items())
        ]
        if order_by:
            rows = sorted(rows, key=lambda r: _sort_key(r.get(order_by)), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return copy.deepcopy(rows)

    def summary(self) -> dict[str, int]:
        """Return row counts per table."""
        return {table: len(rows) for table, rows in self.tables.items()}

    def _prepare(self, table: str, row: Row) -> Row:
        stored = dict(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        return stored

    def _check_constraints(self, table: str, rows: list[Row]) -> None:
        user_ids = {row["id"] for row in self.tables.get(USERS_TABLE, [])}

        if table == USERS_TABLE:
            for row in rows:
                if row["id"] in user_ids:
                    raise StoreError(
                        f'duplicate key value violates unique constraint "users_pkey": {row["id"]}',
                        code="23505",
                    )
                user_ids.add(row["id"])
            return

        if table in OWNED_TABLES:
            for row in rows:
                if row.get(OWNER_COLUMN) not in user_ids:
                    raise StoreError(
                        f"insert on {table} violates foreign key: user {row.get(OWNER_COLUMN)} not found",
                        code="23503",
                    )


def _sort_key(value: Any) -> tuple[bool, Any]:
    # Missing values sort last in ascending order
    return (value is None, "" if value is None else value)
