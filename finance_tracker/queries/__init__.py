"""Aggregation and display helpers."""

from finance_tracker.queries.formatting import (
    format_display_date,
    format_rupees,
    format_signed_amount,
)
from finance_tracker.queries.summary import compute_summary, totals_by_category

__all__ = [
    "compute_summary",
    "format_display_date",
    "format_rupees",
    "format_signed_amount",
    "totals_by_category",
]
