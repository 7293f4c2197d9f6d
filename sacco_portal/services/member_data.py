"""Dashboard reads and single-record writes for the signed-in member."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from sacco_portal.auth.session import SessionManager
from sacco_portal.exceptions import NotAuthenticatedError, StoreError
from sacco_portal.migration.mapping import default_reference
from sacco_portal.store.base import (
    LOANS_TABLE,
    OWNER_COLUMN,
    SAVINGS_ACCOUNTS_TABLE,
    SAVINGS_GOALS_TABLE,
    TRANSACTIONS_TABLE,
    USERS_TABLE,
    RelationalStore,
    Row,
)

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS_LIMIT = 50


@dataclass
class MemberDashboard:
    """Everything the dashboard shows for one member."""

    user: Row | None
    savings_accounts: list[Row] = field(default_factory=list)
    loans: list[Row] = field(default_factory=list)
    transactions: list[Row] = field(default_factory=list)
    savings_goals: list[Row] = field(default_factory=list)

    @property
    def total_savings(self) -> float:
        return sum(float(a.get("balance") or 0) for a in self.savings_accounts)

    @property
    def total_outstanding(self) -> float:
        return sum(float(loan.get("outstanding") or 0) for loan in self.loans)


class MemberDataService:
    """Reads and writes rows owned by the signed-in member."""

    def __init__(
        self,
        session: SessionManager,
        store: RelationalStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.session = session
        self.store = store
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def fetch_dashboard(self) -> MemberDashboard | None:
        """Load profile and record groups, newest first. None when signed out."""
        identity = self.session.get_current_identity()
        if identity is None:
            return None

        owner = {OWNER_COLUMN: identity.id}
        try:
            users = self.store.select(USERS_TABLE, {"id": identity.id}, limit=1)
            return MemberDashboard(
                user=users[0] if users else None,
                savings_accounts=self.store.select(SAVINGS_ACCOUNTS_TABLE, owner, order_by="created_at", descending=True),
                loans=self.store.select(LOANS_TABLE, owner, order_by="created_at", descending=True),
                transactions=self.store.select(
                    TRANSACTIONS_TABLE,
                    owner,
                    order_by="created_at",
                    descending=True,
                    limit=RECENT_TRANSACTIONS_LIMIT,
                ),
                savings_goals=self.store.select(SAVINGS_GOALS_TABLE, owner, order_by="created_at", descending=True),
            )
        except StoreError as e:
            logger.error("Error fetching member data for %s: %s", identity.id, e)
            raise

    def create_savings_account(self, account: dict[str, Any]) -> Row:
        return self._insert_owned(SAVINGS_ACCOUNTS_TABLE, account)

    def create_transaction(self, transaction: dict[str, Any]) -> Row:
        """Record a transaction, generating a reference when none is given."""
        values = dict(transaction)
        if not values.get("reference"):
            values["reference"] = default_reference(values["type"], self.clock())
        return self._insert_owned(TRANSACTIONS_TABLE, values)

    def create_savings_goal(self, goal: dict[str, Any]) -> Row:
        return self._insert_owned(SAVINGS_GOALS_TABLE, goal)

    def apply_for_loan(self, loan: dict[str, Any]) -> Row:
        return self._insert_owned(LOANS_TABLE, loan)

    def _insert_owned(self, table: str, values: dict[str, Any]) -> Row:
        identity = self.session.get_current_identity()
        if identity is None:
            raise NotAuthenticatedError("Not authenticated")
        try:
            return self.store.insert(table, [{**values, OWNER_COLUMN: identity.id}])[0]
        except StoreError as e:
            logger.error("Error inserting into %s: %s", table, e)
            raise
