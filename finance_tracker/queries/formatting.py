"""Display helpers for amounts and dates."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from finance_tracker.models.transaction import Transaction, TransactionKind


def format_rupees(amount: float) -> str:
    """
    Whole rupees with Indian digit grouping.

    format_rupees(123456) -> "₹1,23,456"
    format_rupees(-1500.5) -> "-₹1,501"
    """
    rounded = Decimal(str(abs(amount))).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    digits = str(int(rounded))

    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])

    sign = "-" if amount < 0 and rounded != 0 else ""
    return f"{sign}₹{digits}"


def format_signed_amount(transaction: Transaction) -> str:
    """'+₹500' for income, '-₹500' for expense."""
    prefix = "+" if transaction.kind == TransactionKind.INCOME else "-"
    return f"{prefix}{format_rupees(transaction.amount)}"


def format_display_date(value: date) -> str:
    """Indian locale short date, e.g. 1/3/2024 for 1 March 2024."""
    return f"{value.day}/{value.month}/{value.year}"
