"""
Core Data Models for Finance Tracker

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and logging

DESIGN DECISION: Stored transactions are frozen.
There is no update operation - a record lives until it is deleted.
"""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS AND VOCABULARIES
# =============================================================================

class TransactionKind(str, Enum):
    """Direction of money flow. Fixed at creation."""
    INCOME = "income"
    EXPENSE = "expense"


# Category choices offered by the form. The store accepts any non-empty
# label; these lists only drive the UI dropdown.
INCOME_CATEGORIES: tuple[str, ...] = (
    "Salary",
    "Freelance",
    "Business",
    "Investment",
    "Other Income",
)

EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Food",
    "Transportation",
    "Shopping",
    "Bills",
    "Entertainment",
    "Healthcare",
    "Education",
    "Other",
)


def categories_for(kind: TransactionKind) -> tuple[str, ...]:
    """Return the suggested category labels for a kind."""
    if kind == TransactionKind.INCOME:
        return INCOME_CATEGORIES
    return EXPENSE_CATEGORIES


# =============================================================================
# TRANSACTION MODELS
# =============================================================================

class TransactionDraft(BaseModel):
    """
    The fields a caller supplies when adding a transaction.

    Ownership is NOT part of the draft. Any owner field sent by a
    client is dropped here and the accessor stamps the caller's identity.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    kind: TransactionKind = Field(
        ...,
        description="income or expense"
    )
    amount: float = Field(
        ...,
        strict=True,
        gt=0,
        allow_inf_nan=False,
        description="Amount in currency units, strictly positive"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category label"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="What the transaction was for"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction (ISO 8601)"
    )

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v):
        """Only calendar dates or ISO 8601 strings; no timestamps."""
        if isinstance(v, dt.datetime):
            raise ValueError("expected a calendar date, not a datetime")
        if isinstance(v, dt.date):
            return v
        if isinstance(v, str):
            try:
                return dt.date.fromisoformat(v.strip())
            except ValueError:
                raise ValueError(f"invalid ISO date: {v!r}")
        raise ValueError("date must be an ISO 8601 string")


class Transaction(BaseModel):
    """
    A persisted transaction.

    `id`, `created_at` and `sequence` are assigned by the store on insert.
    `sequence` defines insertion order; listing sorts by it, not by `date`.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Store-assigned identifier"
    )
    owner_id: str = Field(
        ...,
        min_length=1,
        description="Identity of the user who created the record"
    )
    kind: TransactionKind
    amount: float = Field(..., gt=0)
    category: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    date: dt.date
    created_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc),
        description="When the record was inserted (UTC)"
    )
    sequence: int = Field(
        default=0,
        ge=0,
        description="Insertion counter, higher is newer"
    )

    @property
    def signed_amount(self) -> float:
        """Amount with expenses negated, for display."""
        if self.kind == TransactionKind.EXPENSE:
            return -self.amount
        return self.amount

    def to_dict(self) -> dict:
        """Plain dict for logging and rendering."""
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "kind": self.kind.value,
            "amount": self.amount,
            "category": self.category,
            "description": self.description,
            "date": self.date.isoformat(),
        }


class TransactionSummary(BaseModel):
    """
    Income/expense totals for one owner.

    Derived on demand, never stored.
    """

    total_income: float = 0.0
    total_expenses: float = 0.0
    balance: float = 0.0

    @classmethod
    def empty(cls) -> "TransactionSummary":
        return cls()

    @classmethod
    def from_totals(cls, total_income: float, total_expenses: float) -> "TransactionSummary":
        return cls(
            total_income=total_income,
            total_expenses=total_expenses,
            balance=total_income - total_expenses,
        )

    @property
    def is_negative(self) -> bool:
        return self.balance < 0


# =============================================================================
# FORM MODELS (presentation layer)
# =============================================================================

class TransactionFormDraft(BaseModel):
    """
    Raw, unvalidated form state.

    Amount stays as text until the form validator parses it.
    """

    kind: TransactionKind = TransactionKind.EXPENSE
    amount: str = ""
    category: str = ""
    description: str = ""
    date: dt.date = Field(default_factory=dt.date.today)

    @classmethod
    def blank(cls) -> "TransactionFormDraft":
        """Fresh draft: expense, empty fields, today's date."""
        return cls()


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating a form draft.

    When valid, `draft` holds the parsed TransactionDraft ready
    to be sent to the accessor.
    """

    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )
    draft: Optional[TransactionDraft] = None

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def first_error(self) -> Optional[ValidationIssue]:
        for issue in self.issues:
            if issue.severity == "error":
                return issue
        return None
