"""
Form Validation

DESIGN DECISION: The form validates locally before anything reaches
the accessor. A draft that fails here never causes a storage call.

Blocking checks (errors):
- amount, category and description must be filled in
- amount must parse to a finite number greater than zero

Non-blocking checks (warnings):
- unusually large amount
- date in the future

IMPORTANT: Validation NEVER silently fixes issues beyond trimming
whitespace and digit-group separators in the amount.
"""

import math
from datetime import date
from typing import Optional

from pydantic import ValidationError

from finance_tracker.config import get_settings
from finance_tracker.models.transaction import (
    TransactionDraft,
    TransactionFormDraft,
    ValidationIssue,
    ValidationResult,
)


MISSING_FIELDS_MESSAGE = "Please fill in all fields"
INVALID_AMOUNT_MESSAGE = "Please enter a valid amount"


def parse_amount(text: str) -> Optional[float]:
    """
    Parse user-typed amount text.

    Returns None unless the text is a finite number > 0.
    """
    cleaned = text.strip().replace(",", "")
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


class TransactionFormValidator:
    """Validates a raw form draft and produces a TransactionDraft."""

    def __init__(self, max_amount: Optional[float] = None):
        """
        Args:
            max_amount: Amounts above this produce a warning.
                        Defaults to the configured ceiling.
        """
        if max_amount is None:
            max_amount = get_settings().app.max_transaction_amount
        self._max_amount = max_amount

    def _check_required(self, form: TransactionFormDraft) -> list[ValidationIssue]:
        issues = []
        for field in ("amount", "category", "description"):
            if not getattr(form, field).strip():
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="missing",
                    message=MISSING_FIELDS_MESSAGE,
                    severity="error",
                ))
        return issues

    def _check_warnings(self, amount: float, form: TransactionFormDraft) -> list[ValidationIssue]:
        issues = []

        if amount > self._max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        if form.date > date.today():
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date ({form.date.isoformat()}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        return issues

    def validate(self, form: TransactionFormDraft) -> ValidationResult:
        """
        Validate the form draft.

        Missing fields are reported first; the amount is only parsed
        once every required field is present.
        """
        missing = self._check_required(form)
        if missing:
            return ValidationResult(is_valid=False, issues=missing)

        amount = parse_amount(form.amount)
        if amount is None:
            return ValidationResult(
                is_valid=False,
                issues=[ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message=INVALID_AMOUNT_MESSAGE,
                    severity="error",
                    suggested_fix="Enter a number greater than zero",
                )],
            )

        try:
            draft = TransactionDraft(
                kind=form.kind,
                amount=amount,
                category=form.category,
                description=form.description,
                date=form.date,
            )
        except ValidationError as e:
            return ValidationResult(
                is_valid=False,
                issues=[
                    ValidationIssue(
                        field=".".join(str(loc) for loc in error["loc"]),
                        issue_type="invalid_value",
                        message=error["msg"],
                        severity="error",
                    )
                    for error in e.errors()
                ],
            )

        warnings = self._check_warnings(amount, form)
        return ValidationResult(
            is_valid=True,
            issues=warnings,
            warnings=[issue.message for issue in warnings],
            draft=draft,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        One-line message for the UI.

        Errors show the first error only, warnings are joined.
        """
        if not result.is_valid:
            first = result.first_error
            return first.message if first else INVALID_AMOUNT_MESSAGE

        if result.warnings:
            return "Please double-check: " + "; ".join(result.warnings)

        return ""
