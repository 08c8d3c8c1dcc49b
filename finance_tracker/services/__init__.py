"""Services package."""

from finance_tracker.services.storage import (
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsTransactionStorage,
    InMemoryTransactionStorage,
    StorageError,
    TransactionStorageInterface,
)

__all__ = [
    "ConnectionError",
    "GoogleSheetsClient",
    "GoogleSheetsTransactionStorage",
    "InMemoryTransactionStorage",
    "StorageError",
    "TransactionStorageInterface",
]
