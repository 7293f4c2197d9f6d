"""Synthetic member datasets for migration demos and tests."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Iterator

from sacco_portal.generators.base import BaseGenerator
from sacco_portal.models.enums import (
    LoanStatus,
    Occupation,
    SavingsAccountType,
    TransactionStatus,
    TransactionType,
)
from sacco_portal.models.records import (
    Loan,
    MemberDataset,
    MemberProfile,
    SavingsAccount,
    SavingsGoal,
    Transaction,
)


class MemberDatasetGenerator(BaseGenerator):
    """Generate complete member datasets with plausible SACCO figures (UGX)."""

    ACCOUNT_RATES = {
        SavingsAccountType.REGULAR: Decimal("7"),
        SavingsAccountType.EMERGENCY: Decimal("5"),
        SavingsAccountType.BUSINESS: Decimal("8"),
    }

    LOAN_PRODUCTS = [
        ("Emergency Loan", Decimal("12")),
        ("Business Development", Decimal("15")),
        ("School Fees Loan", Decimal("10")),
        ("Asset Financing", Decimal("14")),
    ]

    GOAL_NAMES = [
        "Emergency Fund",
        "Business Capital",
        "Home Purchase",
        "House Extension",
        "Education Fund",
        "Vacation",
        "Wedding",
    ]

    GOAL_COLORS = ["#22c55e", "#3b82f6", "#f59e0b", "#ef4444", "#8b5cf6"]

    TRANSACTION_CATEGORIES = {
        TransactionType.DEPOSIT: "savings",
        TransactionType.WITHDRAWAL: "loan",
        TransactionType.PAYMENT: "loan_repayment",
        TransactionType.FEE: "charges",
    }

    def generate(
        self,
        savings_accounts: int = 3,
        loans: int = 2,
        transactions: int = 2,
        savings_goals: int = 3,
    ) -> MemberDataset:
        """Generate one member dataset with the given group sizes."""
        return MemberDataset(
            profile=self._profile(),
            savings_accounts=[self._savings_account(i + 1) for i in range(savings_accounts)],
            loans=[self._loan(i + 1) for i in range(loans)],
            transactions=self._transactions(transactions),
            savings_goals=[self._goal(i) for i in range(savings_goals)],
        )

    def generate_batch(self, count: int, **sizes: int) -> Iterator[MemberDataset]:
        """Generate multiple member datasets.

        Yields
        ------
        MemberDataset
            Generated datasets.
        """
        for _ in range(count):
            yield self.generate(**sizes)

    def _profile(self) -> MemberProfile:
        return MemberProfile(
            id=f"user-{self.random.randint(1, 999):03d}",
            first_name=self.fake.first_name(),
            last_name=self.fake.last_name(),
            email=self.fake.unique.email(),
            phone=f"+256 7{self.random.randint(0, 9)}{self.random.randint(0, 9)} "
            f"{self.random.randint(100, 999)} {self.random.randint(100, 999)}",
            national_id="CM" + "".join(str(self.random.randint(0, 9)) for _ in range(14)),
            occupation=self.random.choice(list(Occupation)).value,
        )

    def _savings_account(self, account_id: int) -> SavingsAccount:
        account_type = self.random.choice(list(SavingsAccountType))
        return SavingsAccount(
            id=account_id,
            name=f"{account_type.value.title()} Savings",
            balance=self._money(100_000, 5_000_000),
            interest_rate=self.ACCOUNT_RATES[account_type],
            account_type=account_type,
            monthly_contribution=self._money(10_000, 200_000, step=5_000),
            last_contribution=self._recent_date(60),
        )

    def _loan(self, loan_id: int) -> Loan:
        product, rate = self.random.choice(self.LOAN_PRODUCTS)
        amount = self._money(200_000, 5_000_000, step=50_000)
        outstanding = (amount * Decimal(self.random.randint(0, 100)) / 100).quantize(Decimal("1"))
        disbursed = self._recent_date(365)
        status = LoanStatus.COMPLETED if outstanding == 0 else self.random.choice(
            [LoanStatus.ACTIVE, LoanStatus.ACTIVE, LoanStatus.PENDING]
        )
        return Loan(
            id=loan_id,
            loan_type=product,
            amount=amount,
            outstanding=outstanding,
            interest_rate=rate,
            monthly_payment=(amount / 12 * (1 + rate / 100)).quantize(Decimal("1")),
            next_payment=date.today() + timedelta(days=self.random.randint(1, 30)),
            status=status,
            disbursed=disbursed,
            maturity=disbursed + timedelta(days=365),
        )

    def _transactions(self, count: int) -> list[Transaction]:
        balance = self._money(500_000, 3_000_000)
        transactions = []
        for i in range(count):
            tx_type = self.random.choice(list(TransactionType))
            amount = self._money(5_000, 300_000, step=5_000)
            if tx_type is not TransactionType.DEPOSIT:
                amount = -amount
            balance += amount
            posted = self.fake.date_time_between(start_date="-90d", end_date="now")
            transactions.append(
                Transaction(
                    id=f"TXN{i + 1:03d}",
                    transaction_type=tx_type,
                    category=self.TRANSACTION_CATEGORIES[tx_type],
                    amount=amount,
                    description=self.fake.sentence(nb_words=5).rstrip("."),
                    transaction_date=posted.date(),
                    transaction_time=time(posted.hour, posted.minute),
                    status=self.random.choice(list(TransactionStatus)),
                    # Roughly a third rely on the generated reference
                    reference=None if self.random.random() < 0.33 else self._reference(tx_type, posted, i),
                    balance=balance,
                )
            )
        return transactions

    def _goal(self, index: int) -> SavingsGoal:
        target = self._money(500_000, 5_000_000, step=100_000)
        return SavingsGoal(
            name=self.random.choice(self.GOAL_NAMES),
            current=(target * Decimal(self.random.randint(0, 90)) / 100).quantize(Decimal("1")),
            target=target,
            color=self.GOAL_COLORS[index % len(self.GOAL_COLORS)],
        )

    def _money(self, low: int, high: int, step: int = 1_000) -> Decimal:
        return Decimal(self.random.randrange(low, high + 1, step))

    def _recent_date(self, days: int) -> date:
        return date.today() - timedelta(days=self.random.randint(0, days))

    @staticmethod
    def _reference(tx_type: TransactionType, posted: datetime, index: int) -> str:
        prefix = {TransactionType.DEPOSIT: "SAV", TransactionType.FEE: "FEE"}.get(tx_type, "LOAN")
        return f"{prefix}-{posted:%Y%m%d}-{index + 1:03d}"
