"""Source record groups copied by the data migration."""

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal

from sacco_portal.models.enums import (
    LoanStatus,
    SavingsAccountType,
    TransactionStatus,
    TransactionType,
)


@dataclass
class MemberProfile:
    """Member profile as held by the legacy portal."""

    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    national_id: str
    occupation: str


@dataclass
class SavingsAccount:
    """Member savings account."""

    id: int
    name: str
    balance: Decimal
    interest_rate: Decimal  # Annual percentage, e.g. 7 for 7%
    account_type: SavingsAccountType
    monthly_contribution: Decimal
    last_contribution: date


@dataclass
class Loan:
    """Member loan."""

    id: int
    loan_type: str  # Product name, e.g. "Emergency Loan"
    amount: Decimal
    outstanding: Decimal
    interest_rate: Decimal
    monthly_payment: Decimal
    next_payment: date
    status: LoanStatus
    disbursed: date
    maturity: date


@dataclass
class Transaction:
    """Account transaction. Withdrawals carry a negative amount."""

    id: str
    transaction_type: TransactionType
    category: str
    amount: Decimal
    description: str
    transaction_date: date
    transaction_time: time
    status: TransactionStatus
    reference: str | None
    balance: Decimal  # Running balance after the transaction


@dataclass
class SavingsGoal:
    """Savings goal with progress towards a target."""

    name: str
    current: Decimal
    target: Decimal
    color: str  # Display colour, hex
    target_date: date | None = None


@dataclass
class MemberDataset:
    """One member's complete set of record groups."""

    profile: MemberProfile
    savings_accounts: list[SavingsAccount] = field(default_factory=list)
    loans: list[Loan] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    savings_goals: list[SavingsGoal] = field(default_factory=list)

    def summary(self) -> dict[str, int]:
        """Return record counts per group."""
        return {
            "profile": 1,
            "savings_accounts": len(self.savings_accounts),
            "loans": len(self.loans),
            "transactions": len(self.transactions),
            "savings_goals": len(self.savings_goals),
        }
