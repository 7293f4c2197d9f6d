"""Field mapping from source records to target rows."""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from sacco_portal.models.enums import GoalCategory
from sacco_portal.models.records import Loan, SavingsAccount, SavingsGoal, Transaction
from sacco_portal.store.base import OWNER_COLUMN, Row

# Scanned in order; the first keyword found in the goal name wins
GOAL_CATEGORY_KEYWORDS: tuple[tuple[tuple[str, ...], GoalCategory], ...] = (
    (("emergency",), GoalCategory.EMERGENCY),
    (("business",), GoalCategory.BUSINESS),
    (("home", "house"), GoalCategory.HOUSING),
    (("education",), GoalCategory.EDUCATION),
)


def goal_category(name: str) -> GoalCategory:
    """Derive a savings-goal category from keywords in its name."""
    lowered = name.lower()
    for keywords, category in GOAL_CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return GoalCategory.OTHER


def default_reference(transaction_type: Any, now: datetime) -> str:
    """Reference of the form ``<TYPE>-<epochMillis>``."""
    return f"{_plain(transaction_type).upper()}-{int(now.timestamp() * 1000)}"


def savings_account_row(account: SavingsAccount, owner_id: str) -> Row:
    return {
        OWNER_COLUMN: owner_id,
        "name": account.name,
        "balance": account.balance,
        "interest_rate": account.interest_rate,
        "type": _plain(account.account_type),
        "monthly_contribution": account.monthly_contribution,
    }


def loan_row(loan: Loan, owner_id: str) -> Row:
    return {
        OWNER_COLUMN: owner_id,
        "type": loan.loan_type,
        "amount": loan.amount,
        "outstanding": loan.outstanding,
        "interest_rate": loan.interest_rate,
        "monthly_payment": loan.monthly_payment,
        "status": _plain(loan.status),
        "disbursed_date": loan.disbursed.isoformat(),
        "maturity_date": loan.maturity.isoformat(),
    }


def transaction_row(transaction: Transaction, owner_id: str, now: datetime) -> Row:
    """Map a transaction; ``created_at`` joins its separate date and time fields.

    The joined timestamp takes the timezone of ``now``, so an aware clock
    yields an explicit instant.
    """
    occurred = datetime.combine(transaction.transaction_date, transaction.transaction_time, tzinfo=now.tzinfo)
    return {
        OWNER_COLUMN: owner_id,
        "type": _plain(transaction.transaction_type),
        "category": transaction.category,
        "amount": transaction.amount,
        "description": transaction.description,
        "reference": transaction.reference or default_reference(transaction.transaction_type, now),
        "status": _plain(transaction.status),
        "balance_after": transaction.balance,
        "created_at": occurred.isoformat(),
    }


def savings_goal_row(
    goal: SavingsGoal,
    owner_id: str,
    migrated_at: datetime,
    horizon_days: int = 365,
) -> Row:
    """Map a goal; without a target date it is due ``horizon_days`` after migration."""
    target_date = goal.target_date or (migrated_at + timedelta(days=horizon_days)).date()
    return {
        OWNER_COLUMN: owner_id,
        "name": goal.name,
        "target_amount": goal.target,
        "current_amount": goal.current,
        "target_date": target_date.isoformat(),
        "category": goal_category(goal.name).value,
    }


def _plain(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)
