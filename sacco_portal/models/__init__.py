"""Domain models for the member portal."""

from sacco_portal.models.enums import (
    GoalCategory,
    LoanStatus,
    Occupation,
    SavingsAccountType,
    TransactionStatus,
    TransactionType,
)
from sacco_portal.models.identity import (
    CredentialEntry,
    Identity,
    ProfileFields,
    generate_member_id,
)
from sacco_portal.models.records import (
    Loan,
    MemberDataset,
    MemberProfile,
    SavingsAccount,
    SavingsGoal,
    Transaction,
)

__all__ = [
    "CredentialEntry",
    "GoalCategory",
    "Identity",
    "Loan",
    "LoanStatus",
    "MemberDataset",
    "MemberProfile",
    "Occupation",
    "ProfileFields",
    "SavingsAccount",
    "SavingsAccountType",
    "SavingsGoal",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "generate_member_id",
]
