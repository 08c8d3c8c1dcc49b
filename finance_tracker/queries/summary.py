"""
Summary Aggregation

Totals are computed from the full set of an owner's transactions
on every call. Nothing is cached or maintained incrementally.
"""

from typing import Iterable

from finance_tracker.models.transaction import (
    Transaction,
    TransactionKind,
    TransactionSummary,
)


def compute_summary(transactions: Iterable[Transaction]) -> TransactionSummary:
    """
    Partition by kind and sum amounts.

    Plain float addition; no rounding is applied.
    An empty input gives an all-zero summary.
    """
    total_income = 0.0
    total_expenses = 0.0

    for transaction in transactions:
        if transaction.kind == TransactionKind.INCOME:
            total_income += transaction.amount
        elif transaction.kind == TransactionKind.EXPENSE:
            total_expenses += transaction.amount

    return TransactionSummary.from_totals(total_income, total_expenses)


def totals_by_category(transactions: Iterable[Transaction]) -> dict[str, dict[str, float]]:
    """
    Sum amounts per category, separately for income and expense.

    Returns {"income": {category: total}, "expense": {category: total}}.
    """
    groups: dict[str, dict[str, float]] = {
        TransactionKind.INCOME.value: {},
        TransactionKind.EXPENSE.value: {},
    }

    for transaction in transactions:
        bucket = groups[transaction.kind.value]
        bucket[transaction.category] = bucket.get(transaction.category, 0.0) + transaction.amount

    return groups
