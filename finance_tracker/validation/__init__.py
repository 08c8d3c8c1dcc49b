"""Form validation package."""

from finance_tracker.validation.validator import (
    INVALID_AMOUNT_MESSAGE,
    MISSING_FIELDS_MESSAGE,
    TransactionFormValidator,
    parse_amount,
)

__all__ = [
    "INVALID_AMOUNT_MESSAGE",
    "MISSING_FIELDS_MESSAGE",
    "TransactionFormValidator",
    "parse_amount",
]
