"""
Storage Services Package

Provides the abstract interface and concrete implementations for
transaction storage. In-memory is the default; Google Sheets is the
persistent backend. Both are swappable behind the interface.
"""

from finance_tracker.services.storage.interface import (
    ConnectionError,
    StorageError,
    TransactionStorageInterface,
)
from finance_tracker.services.storage.memory import InMemoryTransactionStorage
from finance_tracker.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsTransactionStorage,
)

__all__ = [
    # Interface
    "TransactionStorageInterface",
    # Exceptions
    "ConnectionError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsTransactionStorage",
    "InMemoryTransactionStorage",
]
