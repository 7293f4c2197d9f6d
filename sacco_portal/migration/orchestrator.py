"""Member data migration into the relational backend."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from sacco_portal.auth.session import SessionManager
from sacco_portal.exceptions import BackendError, MissingOwnerError
from sacco_portal.migration.fixtures import get_mock_data
from sacco_portal.migration.mapping import (
    loan_row,
    savings_account_row,
    savings_goal_row,
    transaction_row,
)
from sacco_portal.models.identity import ProfileFields
from sacco_portal.models.records import (
    Loan,
    MemberDataset,
    MemberProfile,
    SavingsAccount,
    SavingsGoal,
    Transaction,
)
from sacco_portal.store.base import (
    LOANS_TABLE,
    SAVINGS_ACCOUNTS_TABLE,
    SAVINGS_GOALS_TABLE,
    TRANSACTIONS_TABLE,
    USERS_TABLE,
    RelationalStore,
    Row,
)

logger = logging.getLogger(__name__)

USER_ERROR = "Failed to migrate user data"
SAVINGS_ACCOUNTS_ERROR = "Failed to migrate savings accounts"
LOANS_ERROR = "Failed to migrate loans"
TRANSACTIONS_ERROR = "Failed to migrate transactions"
SAVINGS_GOALS_ERROR = "Failed to migrate savings goals"


@dataclass
class MigrationResult:
    """Aggregate outcome of a migration run."""

    success: bool
    errors: list[str] = field(default_factory=list)


class DataMigration:
    """Copy one member's record groups into the relational backend.

    The profile step signs the member up and records the new identity id
    as ``owner_id``; every other group is tagged with it. Groups are
    best-effort: each reports its own success and none raises.

    One instance handles one migration at a time.

    Parameters
    ----------
    session : SessionManager
        Session used to create the owning identity. Must be in remote mode.
    store : RelationalStore | None
        Target store; None when no backend is configured.
    clock : Callable[[], datetime] | None
        Source of the migration instant.
    temp_password : str
        Password given to the migrated account; the member changes it later.
    goal_horizon_days : int
        Default distance of a savings goal's target date.
    """

    def __init__(
        self,
        session: SessionManager,
        store: RelationalStore | None,
        clock: Callable[[], datetime] | None = None,
        temp_password: str = "TempPassword123!",
        goal_horizon_days: int = 365,
    ) -> None:
        self.session = session
        self.store = store
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.temp_password = temp_password
        self.goal_horizon_days = goal_horizon_days
        self.owner_id: str | None = None

    @property
    def is_configured(self) -> bool:
        """Migration needs a real backing store and a remote session."""
        return self.store is not None and self.session.is_remote

    @staticmethod
    def get_mock_data() -> MemberDataset:
        """Reference dataset to migrate."""
        return get_mock_data()

    def migrate_user(self, profile: MemberProfile) -> bool:
        """Create the owning identity for the member."""
        self.owner_id = None
        if not self._check_configured("user"):
            return False

        result = self.session.sign_up(
            profile.email,
            self.temp_password,
            ProfileFields(
                first_name=profile.first_name,
                last_name=profile.last_name,
                phone=profile.phone,
                national_id=profile.national_id,
                occupation=profile.occupation,
            ),
        )
        if not result.ok:
            logger.error("Error creating member account for %s: %s", profile.email, result.error)
            return False

        self.owner_id = result.identity.id
        logger.info("Migrated user %s as %s", profile.email, self.owner_id, extra={"owner_id": self.owner_id})
        return True

    def migrate_savings_accounts(self, accounts: list[SavingsAccount]) -> bool:
        return self._migrate_group("savings accounts", SAVINGS_ACCOUNTS_TABLE, accounts, savings_account_row)

    def migrate_loans(self, loans: list[Loan]) -> bool:
        return self._migrate_group("loans", LOANS_TABLE, loans, loan_row)

    def migrate_transactions(self, transactions: list[Transaction]) -> bool:
        return self._migrate_group(
            "transactions",
            TRANSACTIONS_TABLE,
            transactions,
            lambda tx, owner_id: transaction_row(tx, owner_id, self.clock()),
        )

    def migrate_savings_goals(self, goals: list[SavingsGoal]) -> bool:
        migrated_at = self.clock()
        return self._migrate_group(
            "savings goals",
            SAVINGS_GOALS_TABLE,
            goals,
            lambda goal, owner_id: savings_goal_row(goal, owner_id, migrated_at, self.goal_horizon_days),
        )

    def migrate_all_data(self, data: MemberDataset) -> MigrationResult:
        """Run every group in order.

        A failed profile step stops the run; later groups are always all
        attempted.
        """
        if not self.migrate_user(data.profile):
            return MigrationResult(success=False, errors=[USER_ERROR])

        errors: list[str] = []
        steps = (
            (self.migrate_savings_accounts, data.savings_accounts, SAVINGS_ACCOUNTS_ERROR),
            (self.migrate_loans, data.loans, LOANS_ERROR),
            (self.migrate_transactions, data.transactions, TRANSACTIONS_ERROR),
            (self.migrate_savings_goals, data.savings_goals, SAVINGS_GOALS_ERROR),
        )
        for migrate, records, error in steps:
            if not migrate(records):
                errors.append(error)

        return MigrationResult(success=not errors, errors=errors)

    def fetch_owner_profile(self) -> Row | None:
        """Read the ``users`` row of the owner, or of the signed-in member."""
        if not self._check_configured("profile lookup"):
            return None

        owner_id = self.owner_id
        if owner_id is None:
            identity = self.session.get_current_identity()
            if identity is None:
                return None
            owner_id = identity.id

        try:
            rows = self.store.select(USERS_TABLE, {"id": owner_id}, limit=1)
        except BackendError as e:
            logger.error("Error fetching user %s: %s", owner_id, e)
            return None
        return rows[0] if rows else None

    def _check_configured(self, what: str) -> bool:
        if self.is_configured:
            return True
        logger.warning("Backend not configured, skipping %s migration", what)
        return False

    def _require_owner(self) -> str:
        if self.owner_id is None:
            raise MissingOwnerError("No user ID available for migration")
        return self.owner_id

    def _migrate_group(
        self,
        label: str,
        table: str,
        records: list[Any],
        build_row: Callable[[Any, str], Row],
    ) -> bool:
        if not self._check_configured(label):
            return False

        try:
            owner_id = self._require_owner()
            rows = [build_row(record, owner_id) for record in records]
            self.store.insert(table, rows)
        except MissingOwnerError as e:
            logger.error("Cannot migrate %s: %s", label, e)
            return False
        except BackendError as e:
            logger.error("Error migrating %s: %s", label, e, extra={"table": table, "owner_id": self.owner_id})
            return False
        except Exception:
            logger.exception("Error migrating %s", label)
            return False

        logger.info(
            "Migrated %d %s",
            len(rows),
            label,
            extra={"table": table, "owner_id": owner_id, "rows": len(rows)},
        )
        return True
