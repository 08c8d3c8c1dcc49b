"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.transaction import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    Transaction,
    TransactionDraft,
    TransactionFormDraft,
    TransactionKind,
    TransactionSummary,
    ValidationIssue,
    ValidationResult,
    categories_for,
)
from finance_tracker.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Transaction models
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORIES",
    "Transaction",
    "TransactionDraft",
    "TransactionFormDraft",
    "TransactionKind",
    "TransactionSummary",
    "ValidationIssue",
    "ValidationResult",
    "categories_for",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
