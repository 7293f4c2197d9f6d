"""Relational store boundary consumed by migration and member services."""

from abc import ABC, abstractmethod
from typing import Any

USERS_TABLE = "users"
SAVINGS_ACCOUNTS_TABLE = "savings_accounts"
LOANS_TABLE = "loans"
TRANSACTIONS_TABLE = "transactions"
SAVINGS_GOALS_TABLE = "savings_goals"

# Tables whose rows carry a foreign key to users.id
OWNED_TABLES = (
    SAVINGS_ACCOUNTS_TABLE,
    LOANS_TABLE,
    TRANSACTIONS_TABLE,
    SAVINGS_GOALS_TABLE,
)
OWNER_COLUMN = "user_id"

Row = dict[str, Any]


class RelationalStore(ABC):
    """Row-level access to the portal's relational backend.

    ``insert`` is a single bulk operation: the backend either accepts every
    row or rejects the request with a ``StoreError``.
    """

    @abstractmethod
    def insert(self, table: str, rows: list[Row]) -> list[Row]:
        """Insert rows and return them as stored."""

    @abstractmethod
    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        """Return rows matching every equality filter."""

    def close(self) -> None:
        """Release backend resources."""
