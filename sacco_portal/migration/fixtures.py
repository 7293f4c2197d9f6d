"""Reference dataset held by the legacy portal."""

from datetime import date, time
from decimal import Decimal

from sacco_portal.models.enums import (
    LoanStatus,
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


def get_mock_data() -> MemberDataset:
    """Return a fresh copy of the reference member dataset.

    One profile, three savings accounts, two loans, two transactions and
    three savings goals. Every call builds new objects.
    """
    return MemberDataset(
        profile=MemberProfile(
            id="user-001",
            first_name="John",
            last_name="Doe",
            email="john.doe@example.com",
            phone="+256 700 123 456",
            national_id="CM12345678901234",
            occupation="trader",
        ),
        savings_accounts=[
            SavingsAccount(
                id=1,
                name="Regular Savings",
                balance=Decimal("1200000"),
                interest_rate=Decimal("7"),
                account_type=SavingsAccountType.REGULAR,
                monthly_contribution=Decimal("50000"),
                last_contribution=date(2024, 1, 25),
            ),
            SavingsAccount(
                id=2,
                name="Emergency Fund",
                balance=Decimal("600000"),
                interest_rate=Decimal("5"),
                account_type=SavingsAccountType.EMERGENCY,
                monthly_contribution=Decimal("25000"),
                last_contribution=date(2024, 1, 20),
            ),
            SavingsAccount(
                id=3,
                name="Business Development",
                balance=Decimal("800000"),
                interest_rate=Decimal("8"),
                account_type=SavingsAccountType.BUSINESS,
                monthly_contribution=Decimal("75000"),
                last_contribution=date(2024, 1, 28),
            ),
        ],
        loans=[
            Loan(
                id=1,
                loan_type="Emergency Loan",
                amount=Decimal("500000"),
                outstanding=Decimal("350000"),
                interest_rate=Decimal("12"),
                monthly_payment=Decimal("45000"),
                next_payment=date(2024, 2, 5),
                status=LoanStatus.ACTIVE,
                disbursed=date(2023, 8, 15),
                maturity=date(2024, 8, 15),
            ),
            Loan(
                id=2,
                loan_type="Business Development",
                amount=Decimal("1000000"),
                outstanding=Decimal("750000"),
                interest_rate=Decimal("15"),
                monthly_payment=Decimal("85000"),
                next_payment=date(2024, 2, 8),
                status=LoanStatus.ACTIVE,
                disbursed=date(2023, 10, 1),
                maturity=date(2024, 10, 1),
            ),
        ],
        transactions=[
            Transaction(
                id="TXN001",
                transaction_type=TransactionType.DEPOSIT,
                category="savings",
                amount=Decimal("75000"),
                description="Monthly Savings Contribution - Regular Account",
                transaction_date=date(2024, 1, 28),
                transaction_time=time(14, 30),
                status=TransactionStatus.COMPLETED,
                reference="SAV-20240128-001",
                balance=Decimal("1875000"),
            ),
            Transaction(
                id="TXN002",
                transaction_type=TransactionType.WITHDRAWAL,
                category="loan",
                amount=Decimal("-200000"),
                description="Emergency Loan Disbursement",
                transaction_date=date(2024, 1, 25),
                transaction_time=time(10, 15),
                status=TransactionStatus.COMPLETED,
                reference="LOAN-20240125-002",
                balance=Decimal("1800000"),
            ),
        ],
        savings_goals=[
            SavingsGoal(name="Emergency Fund", current=Decimal("600000"), target=Decimal("1000000"), color="#22c55e"),
            SavingsGoal(name="Business Capital", current=Decimal("800000"), target=Decimal("1500000"), color="#3b82f6"),
            SavingsGoal(name="Home Purchase", current=Decimal("400000"), target=Decimal("2000000"), color="#f59e0b"),
        ],
    )
