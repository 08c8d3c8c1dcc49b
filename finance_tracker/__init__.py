"""
Finance Tracker - Source Package

Record income and expense transactions and see totals and balance.

DESIGN PRINCIPLES:
1. Every record has exactly one owner, stamped from the caller identity
2. Reads without a caller return nothing; writes without a caller fail
3. Validate on the form AND on the server
4. Summaries are always recomputed, never stored
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
