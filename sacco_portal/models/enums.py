"""Enumeration types for member portal records."""

from enum import Enum


class SavingsAccountType(str, Enum):
    REGULAR = "regular"
    EMERGENCY = "emergency"
    BUSINESS = "business"


class LoanStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    PENDING = "pending"


class TransactionType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    PAYMENT = "payment"
    FEE = "fee"


class TransactionStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class GoalCategory(str, Enum):
    EMERGENCY = "emergency"
    BUSINESS = "business"
    HOUSING = "housing"
    EDUCATION = "education"
    OTHER = "other"


class Occupation(str, Enum):
    TRADER = "trader"
    FARMER = "farmer"
    TEACHER = "teacher"
    CIVIL_SERVANT = "civil_servant"
    BODA_RIDER = "boda_rider"
    ARTISAN = "artisan"
    OTHER = "other"
