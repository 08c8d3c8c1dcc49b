"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap Google Sheets for a real database later
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface mirrors an indexed document store: insert, get by id,
delete by id, and range queries over the owner index and the
owner+date index. Ownership checks belong to the accessor, not here.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from finance_tracker.models.transaction import Transaction, TransactionDraft


class TransactionStorageInterface(ABC):
    """
    Abstract interface for transaction storage operations.

    Any storage implementation (Google Sheets, in-memory, etc.)
    must implement these methods. Each call is atomic on its own.
    """

    @abstractmethod
    async def insert(self, owner_id: str, draft: TransactionDraft) -> str:
        """
        Insert a new transaction.

        The store assigns id, created_at and sequence.

        Returns:
            The generated transaction id

        Raises:
            StorageError: If the insert fails
        """
        pass

    @abstractmethod
    async def get_by_id(self, transaction_id: str) -> Optional[Transaction]:
        """
        Retrieve a transaction by its ID.

        Returns:
            The transaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def delete_by_id(self, transaction_id: str) -> bool:
        """
        Delete a transaction by ID.

        Returns:
            True if a record was removed, False if it did not exist
        """
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: str) -> list[Transaction]:
        """
        All transactions for an owner, newest insertion first.
        """
        pass

    @abstractmethod
    async def list_by_owner_and_date(
        self,
        owner_id: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Transaction]:
        """
        Transactions for an owner whose date falls in [date_from, date_to].

        Either bound may be None (open range). Ordered by date,
        newest first; ties broken by insertion order, newest first.
        """
        pass


def sort_by_insertion(transactions: list[Transaction]) -> list[Transaction]:
    """Newest insertion first."""
    return sorted(transactions, key=lambda t: t.sequence, reverse=True)


def filter_by_date(
    transactions: list[Transaction],
    date_from: Optional[date],
    date_to: Optional[date],
) -> list[Transaction]:
    """Apply an inclusive date range and order by date, newest first."""
    matching = [
        t for t in transactions
        if (date_from is None or t.date >= date_from)
        and (date_to is None or t.date <= date_to)
    ]
    return sorted(matching, key=lambda t: (t.date, t.sequence), reverse=True)


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
