"""Step-by-step migration runner with per-step status and progress."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from sacco_portal.migration.fixtures import get_mock_data
from sacco_portal.migration.orchestrator import (
    LOANS_ERROR,
    SAVINGS_ACCOUNTS_ERROR,
    SAVINGS_GOALS_ERROR,
    TRANSACTIONS_ERROR,
    USER_ERROR,
    DataMigration,
    MigrationResult,
)
from sacco_portal.models.records import MemberDataset

logger = logging.getLogger(__name__)

UNCONFIGURED_MESSAGE = "Backend is not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY first."


class StepStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class MigrationStep:
    """One visible migration step."""

    id: str
    name: str
    description: str
    status: StepStatus = StepStatus.PENDING


STEP_DEFINITIONS = (
    ("user", "User Profile", "Migrate user account and profile information"),
    ("savings", "Savings Accounts", "Migrate savings accounts and balances"),
    ("loans", "Loan Records", "Migrate loan applications and repayment data"),
    ("transactions", "Transaction History", "Migrate all transaction records"),
    ("goals", "Savings Goals", "Migrate savings goals and targets"),
)

# Progress after the user step starts and after each step finishes
USER_STARTED_PROGRESS = 10
STEP_DONE_PROGRESS = (25, 40, 60, 80, 100)


class MigrationDriver:
    """Runs the five migration steps in order and tracks their state.

    Parameters
    ----------
    migration : DataMigration
        Orchestrator to drive. A fresh run resets its owning id.
    on_update : Callable[[MigrationDriver], None] | None
        Called after every visible state change.
    """

    def __init__(
        self,
        migration: DataMigration,
        on_update: Callable[["MigrationDriver"], None] | None = None,
    ) -> None:
        self.migration = migration
        self.on_update = on_update
        self.steps = [MigrationStep(*definition) for definition in STEP_DEFINITIONS]
        self.progress = 0
        self.current_step = 0
        self.errors: list[str] = []
        self.is_running = False

    def run(self, dataset: MemberDataset | None = None) -> MigrationResult:
        """Migrate ``dataset`` (the reference dataset by default)."""
        self._reset()

        if not self.migration.is_configured:
            logger.error(UNCONFIGURED_MESSAGE)
            self.errors.append(UNCONFIGURED_MESSAGE)
            self._notify()
            return MigrationResult(success=False, errors=list(self.errors))

        data = dataset or get_mock_data()
        self.is_running = True
        try:
            self._start(0)
            self._advance(USER_STARTED_PROGRESS)
            if not self.migration.migrate_user(data.profile):
                self._finish(0, False, USER_ERROR)
                return self._result()
            self._finish(0, True, USER_ERROR)
            self._advance(STEP_DONE_PROGRESS[0])

            later_steps = (
                (self.migration.migrate_savings_accounts, data.savings_accounts, SAVINGS_ACCOUNTS_ERROR),
                (self.migration.migrate_loans, data.loans, LOANS_ERROR),
                (self.migration.migrate_transactions, data.transactions, TRANSACTIONS_ERROR),
                (self.migration.migrate_savings_goals, data.savings_goals, SAVINGS_GOALS_ERROR),
            )
            for index, (migrate, records, error) in enumerate(later_steps, start=1):
                self._start(index)
                self._finish(index, migrate(records), error)
                self._advance(STEP_DONE_PROGRESS[index])
        finally:
            self.is_running = False
            self._notify()

        result = self._result()
        if result.success:
            logger.info("Migration completed successfully")
        else:
            logger.warning("Migration completed with %d errors", len(result.errors))
        return result

    def _reset(self) -> None:
        for step in self.steps:
            step.status = StepStatus.PENDING
        self.progress = 0
        self.current_step = 0
        self.errors = []
        self.migration.owner_id = None

    def _start(self, index: int) -> None:
        self.current_step = index
        step = self.steps[index]
        step.status = StepStatus.RUNNING
        logger.info("Step %d/%d: %s", index + 1, len(self.steps), step.name, extra={"step": step.id})
        self._notify()

    def _finish(self, index: int, ok: bool, error: str) -> None:
        self.steps[index].status = StepStatus.COMPLETED if ok else StepStatus.FAILED
        if not ok:
            self.errors.append(error)
        self._notify()

    def _advance(self, value: int) -> None:
        # Checkpoints only move forward
        self.progress = max(self.progress, value)
        self._notify()

    def _notify(self) -> None:
        if self.on_update is not None:
            self.on_update(self)

    def _result(self) -> MigrationResult:
        return MigrationResult(success=not self.errors, errors=list(self.errors))
