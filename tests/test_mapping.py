"""Tests for source-to-row field mapping."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from sacco_portal.migration.mapping import (
    default_reference,
    goal_category,
    loan_row,
    savings_account_row,
    savings_goal_row,
    transaction_row,
)
from sacco_portal.models import GoalCategory, MemberDataset, SavingsGoal, TransactionType


class TestGoalCategory:
    """Keyword-driven goal categories."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Emergency Fund", GoalCategory.EMERGENCY),
            ("Business Capital", GoalCategory.BUSINESS),
            ("Home Purchase", GoalCategory.HOUSING),
            ("House Extension", GoalCategory.HOUSING),
            ("Education Fund", GoalCategory.EDUCATION),
            ("Vacation", GoalCategory.OTHER),
            ("", GoalCategory.OTHER),
        ],
    )
    def test_keywords(self, name: str, expected: GoalCategory) -> None:
        assert goal_category(name) == expected

    def test_case_insensitive(self) -> None:
        assert goal_category("EMERGENCY savings") == GoalCategory.EMERGENCY

    def test_first_rule_wins(self) -> None:
        assert goal_category("Emergency Business Reserve") == GoalCategory.EMERGENCY
        assert goal_category("Business Home Office") == GoalCategory.BUSINESS


class TestSavingsAccountRow:
    def test_maps_fields(self, mock_data: MemberDataset) -> None:
        row = savings_account_row(mock_data.savings_accounts[1], "owner-1")

        assert row == {
            "user_id": "owner-1",
            "name": "Emergency Fund",
            "balance": Decimal("600000"),
            "interest_rate": Decimal("5"),
            "type": "emergency",
            "monthly_contribution": Decimal("25000"),
        }

    def test_drops_source_only_fields(self, mock_data: MemberDataset) -> None:
        row = savings_account_row(mock_data.savings_accounts[0], "owner-1")

        assert "id" not in row
        assert "last_contribution" not in row


class TestLoanRow:
    def test_maps_fields(self, mock_data: MemberDataset) -> None:
        row = loan_row(mock_data.loans[0], "owner-1")

        assert row["user_id"] == "owner-1"
        assert row["type"] == "Emergency Loan"
        assert row["amount"] == Decimal("500000")
        assert row["outstanding"] == Decimal("350000")
        assert row["status"] == "active"
        assert row["disbursed_date"] == "2023-08-15"
        assert row["maturity_date"] == "2024-08-15"
        assert "next_payment" not in row


class TestTransactionRow:
    def test_created_at_joins_date_and_time(self, mock_data: MemberDataset, fixed_now: datetime) -> None:
        row = transaction_row(mock_data.transactions[0], "owner-1", fixed_now)

        assert row["created_at"] == "2024-01-28T14:30:00+00:00"
        assert row["balance_after"] == Decimal("1875000")
        assert row["type"] == "deposit"
        assert row["status"] == "completed"

    def test_created_at_takes_clock_timezone(self, mock_data: MemberDataset) -> None:
        kampala = timezone(timedelta(hours=3))
        row = transaction_row(mock_data.transactions[0], "owner-1", datetime(2024, 3, 1, 12, 0, tzinfo=kampala))

        assert row["created_at"] == "2024-01-28T14:30:00+03:00"

    def test_existing_reference_kept(self, mock_data: MemberDataset, fixed_now: datetime) -> None:
        row = transaction_row(mock_data.transactions[1], "owner-1", fixed_now)

        assert row["reference"] == "LOAN-20240125-002"
        assert row["amount"] == Decimal("-200000")

    def test_missing_reference_generated(self, mock_data: MemberDataset, fixed_now: datetime) -> None:
        tx = mock_data.transactions[1]
        tx.reference = None

        row = transaction_row(tx, "owner-1", fixed_now)

        assert row["reference"] == f"WITHDRAWAL-{int(fixed_now.timestamp() * 1000)}"

    def test_default_reference_format(self) -> None:
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)

        assert default_reference(TransactionType.DEPOSIT, now) == "DEPOSIT-1704067200000"
        assert default_reference("fee", now) == "FEE-1704067200000"


class TestSavingsGoalRow:
    def test_default_target_date_one_year_out(self, mock_data: MemberDataset, fixed_now: datetime) -> None:
        row = savings_goal_row(mock_data.savings_goals[2], "owner-1", fixed_now)

        assert row == {
            "user_id": "owner-1",
            "name": "Home Purchase",
            "target_amount": Decimal("2000000"),
            "current_amount": Decimal("400000"),
            "target_date": "2025-03-01",
            "category": "housing",
        }

    def test_custom_horizon(self, fixed_now: datetime) -> None:
        goal = SavingsGoal(name="Vacation", current=Decimal("0"), target=Decimal("100"), color="#000")

        row = savings_goal_row(goal, "owner-1", fixed_now, horizon_days=30)

        assert row["target_date"] == "2024-03-31"
        assert row["category"] == "other"

    def test_explicit_target_date_kept(self, fixed_now: datetime) -> None:
        goal = SavingsGoal(
            name="Education Fund",
            current=Decimal("10"),
            target=Decimal("100"),
            color="#000",
            target_date=date(2026, 1, 15),
        )

        assert savings_goal_row(goal, "owner-1", fixed_now)["target_date"] == "2026-01-15"

    def test_time_of_day_ignored(self) -> None:
        late = datetime(2024, 3, 1, 23, 59, tzinfo=timezone.utc)
        goal = SavingsGoal(name="Wedding", current=Decimal("0"), target=Decimal("1"), color="#fff")

        assert savings_goal_row(goal, "o", late)["target_date"] == "2025-03-01"
