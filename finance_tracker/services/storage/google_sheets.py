"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is available as a persistent backend because:
1. Users can view their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (we're fine for personal use)
- No transactions (each call touches one row or reads the sheet)
- No real indexes (owner and owner+date queries filter in Python)

The implementation follows the abstract interface, so we can swap
to PostgreSQL/SQLite later without changing business logic.
"""

from datetime import date, datetime, timezone
from typing import Optional
from uuid import uuid4

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from finance_tracker.config import GoogleSheetsSettings, get_settings
from finance_tracker.models.transaction import (
    Transaction,
    TransactionDraft,
    TransactionKind,
)
from finance_tracker.services.storage.interface import (
    ConnectionError,
    StorageError,
    TransactionStorageInterface,
    filter_by_date,
    sort_by_insertion,
)


# Column mappings for Transactions sheet
TRANSACTION_COLUMNS = [
    "id",
    "sequence",
    "created_at",
    "owner_id",
    "kind",
    "amount",
    "category",
    "description",
    "date",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_transactions_sheet(self) -> gspread.Worksheet:
        """Get or create the Transactions worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.transactions_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.transactions_sheet_name,
                rows=1000,
                cols=len(TRANSACTION_COLUMNS),
            )
            sheet.append_row(TRANSACTION_COLUMNS)
        return sheet


class GoogleSheetsTransactionStorage(TransactionStorageInterface):
    """
    Google Sheets implementation of transaction storage.

    Transactions are stored as rows in a worksheet, one per row.
    The sequence column records insertion order.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _transaction_to_row(self, transaction: Transaction) -> list:
        """Convert a Transaction to a spreadsheet row."""
        return [
            transaction.id,
            str(transaction.sequence),
            transaction.created_at.isoformat(),
            transaction.owner_id,
            transaction.kind.value,
            repr(transaction.amount),
            transaction.category,
            transaction.description,
            transaction.date.isoformat(),
        ]

    def _row_to_transaction(self, row: list) -> Transaction:
        """Convert a spreadsheet row to a Transaction."""
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return Transaction(
            id=safe_get(0),
            sequence=int(safe_get(1, "0")),
            created_at=datetime.fromisoformat(safe_get(2)),
            owner_id=safe_get(3),
            kind=TransactionKind(safe_get(4)),
            amount=float(safe_get(5)),
            category=safe_get(6),
            description=safe_get(7),
            date=date.fromisoformat(safe_get(8)),
        )

    def _read_all(self) -> list[Transaction]:
        """Read every well-formed transaction row (header skipped)."""
        sheet = self._client.get_transactions_sheet()
        all_rows = sheet.get_all_values()[1:]

        transactions = []
        for row in all_rows:
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                transactions.append(self._row_to_transaction(row))
            except (ValueError, TypeError):
                continue  # Skip malformed rows
        return transactions

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _append_once(self, sheet, transaction: Transaction) -> None:
        """
        Append the row unless an earlier attempt already wrote it.

        append_row is not idempotent: the row can land even when the
        response fails, so each retry checks for the id first.
        """
        if any(row and row[0] == transaction.id for row in sheet.get_all_values()):
            return
        sheet.append_row(
            self._transaction_to_row(transaction),
            value_input_option="RAW",
        )

    async def insert(self, owner_id: str, draft: TransactionDraft) -> str:
        """Append a new transaction row."""
        try:
            sheet = self._client.get_transactions_sheet()
            existing = sheet.get_all_values()[1:]
            last_sequence = max(
                (int(row[1]) for row in existing if len(row) > 1 and row[1].isdigit()),
                default=0,
            )

            # id and sequence are fixed before any retry
            transaction = Transaction(
                id=uuid4().hex,
                owner_id=owner_id,
                kind=draft.kind,
                amount=draft.amount,
                category=draft.category,
                description=draft.description,
                date=draft.date,
                created_at=datetime.now(timezone.utc),
                sequence=last_sequence + 1,
            )
            self._append_once(sheet, transaction)
            return transaction.id
        except Exception as e:
            raise StorageError(f"Failed to save transaction: {e}")

    async def get_by_id(self, transaction_id: str) -> Optional[Transaction]:
        """Retrieve a transaction by its ID."""
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()[1:]

            for row in all_rows:
                if row and row[0] == transaction_id:
                    return self._row_to_transaction(row)

            return None
        except Exception as e:
            raise StorageError(f"Failed to get transaction: {e}")

    async def delete_by_id(self, transaction_id: str) -> bool:
        """Delete a transaction row by ID."""
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()

            for idx, row in enumerate(all_rows[1:], start=2):  # Row 1 is header
                if row and row[0] == transaction_id:
                    sheet.delete_rows(idx)
                    return True

            return False
        except Exception as e:
            raise StorageError(f"Failed to delete transaction: {e}")

    async def list_by_owner(self, owner_id: str) -> list[Transaction]:
        """List an owner's transactions, newest insertion first."""
        try:
            owned = [t for t in self._read_all() if t.owner_id == owner_id]
        except Exception as e:
            raise StorageError(f"Failed to list transactions: {e}")
        return sort_by_insertion(owned)

    async def list_by_owner_and_date(
        self,
        owner_id: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Transaction]:
        """List an owner's transactions within a date range."""
        try:
            owned = [t for t in self._read_all() if t.owner_id == owner_id]
        except Exception as e:
            raise StorageError(f"Failed to list transactions: {e}")
        return filter_by_date(owned, date_from, date_to)
