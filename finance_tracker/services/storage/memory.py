"""
In-Memory Storage Implementation

Keeps transactions in a dict for the lifetime of the process.
Used by the test suite and as the default backend when Google
Sheets is not configured. Nothing survives a restart.
"""

import asyncio
from datetime import date, datetime, timezone
from itertools import count
from typing import Optional
from uuid import uuid4

from finance_tracker.models.transaction import Transaction, TransactionDraft
from finance_tracker.services.storage.interface import (
    TransactionStorageInterface,
    filter_by_date,
    sort_by_insertion,
)


class InMemoryTransactionStorage(TransactionStorageInterface):
    """
    Dict-backed transaction store.

    A lock serializes writes so insert sequences stay unique and
    a record can only be removed once.
    """

    def __init__(self):
        self._records: dict[str, Transaction] = {}
        self._sequence = count(1)
        self._lock = asyncio.Lock()

    async def insert(self, owner_id: str, draft: TransactionDraft) -> str:
        async with self._lock:
            transaction_id = uuid4().hex
            self._records[transaction_id] = Transaction(
                id=transaction_id,
                owner_id=owner_id,
                kind=draft.kind,
                amount=draft.amount,
                category=draft.category,
                description=draft.description,
                date=draft.date,
                created_at=datetime.now(timezone.utc),
                sequence=next(self._sequence),
            )
            return transaction_id

    async def get_by_id(self, transaction_id: str) -> Optional[Transaction]:
        return self._records.get(transaction_id)

    async def delete_by_id(self, transaction_id: str) -> bool:
        async with self._lock:
            return self._records.pop(transaction_id, None) is not None

    async def list_by_owner(self, owner_id: str) -> list[Transaction]:
        owned = [t for t in self._records.values() if t.owner_id == owner_id]
        return sort_by_insertion(owned)

    async def list_by_owner_and_date(
        self,
        owner_id: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Transaction]:
        owned = [t for t in self._records.values() if t.owner_id == owner_id]
        return filter_by_date(owned, date_from, date_to)

    def __len__(self) -> int:
        return len(self._records)
