"""
Main Orchestrator for Finance Tracker

This module ties together all the components and defines:
1. TransactionAccessor - the four data operations plus the summary
2. TransactionFormFlow - the form/list contract the UI drives

DESIGN DECISION: The accessor enforces the boundaries:
- Caller identity is passed in explicitly, never looked up here
- Every record is stamped with the caller as owner
- Reads without a caller degrade to empty results
- Writes without a caller are refused
- Deleting someone else's record looks exactly like deleting nothing

Every outcome is logged through the ActivityLogger.
"""

from collections.abc import Mapping
from datetime import date
from typing import Optional, Union
from uuid import UUID

import structlog
from pydantic import BaseModel, ValidationError

from finance_tracker.activity import (
    ActivityLogger,
    configure_logging,
    create_correlation_id,
)
from finance_tracker.auth import IdentityProvider, normalize_identity
from finance_tracker.config import Settings, get_settings
from finance_tracker.models.transaction import (
    Transaction,
    TransactionDraft,
    TransactionFormDraft,
    TransactionSummary,
    categories_for,
)
from finance_tracker.queries import compute_summary, totals_by_category
from finance_tracker.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsTransactionStorage,
    InMemoryTransactionStorage,
    StorageError,
    TransactionStorageInterface,
)
from finance_tracker.validation import TransactionFormValidator


logger = structlog.get_logger(__name__)


# =============================================================================
# ERRORS
# =============================================================================

class TransactionAccessError(Exception):
    """Base class for errors raised by the accessor."""
    pass


class UnauthenticatedError(TransactionAccessError):
    """A write was attempted without a caller identity."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class NotFoundOrUnauthorizedError(TransactionAccessError):
    """
    Delete target does not exist or belongs to someone else.

    Both causes share one error so callers cannot probe for
    other users' record ids.
    """

    def __init__(self, message: str = "Transaction not found or unauthorized"):
        super().__init__(message)


class InvalidTransactionError(TransactionAccessError):
    """A draft failed server-side validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid transaction: " + "; ".join(errors))


# =============================================================================
# ACCESSOR
# =============================================================================

class TransactionAccessor:
    """
    Validated, owner-scoped access to the transaction store.

    Each method is one independent unit of work against storage.
    No retries here; storage failures propagate to the caller.
    """

    def __init__(
        self,
        storage: TransactionStorageInterface,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._storage = storage
        self._activity = activity_logger or ActivityLogger()

    def _validate_draft(
        self,
        caller: str,
        draft: Union[TransactionDraft, Mapping],
        correlation_id: Optional[UUID],
    ) -> TransactionDraft:
        """Re-validate on the server side, whatever the client did."""
        raw = draft.model_dump() if isinstance(draft, TransactionDraft) else dict(draft)
        try:
            return TransactionDraft.model_validate(raw)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
                for error in e.errors()
            ]
            self._activity.log_invalid_transaction(
                caller_id=caller,
                errors=errors,
                correlation_id=correlation_id,
            )
            raise InvalidTransactionError(errors) from e

    async def add_transaction(
        self,
        caller: Optional[str],
        draft: Union[TransactionDraft, Mapping],
        correlation_id: Optional[UUID] = None,
    ) -> str:
        """
        Persist a new transaction owned by the caller.

        Args:
            caller: Caller identity, None when unauthenticated
            draft: The transaction fields. Owner fields are ignored.

        Returns:
            The store-assigned transaction id

        Raises:
            UnauthenticatedError: No caller
            InvalidTransactionError: Draft failed validation
            StorageError: The store failed
        """
        caller = normalize_identity(caller)
        if caller is None:
            self._activity.log_unauthenticated_write(
                operation="add_transaction",
                correlation_id=correlation_id,
            )
            raise UnauthenticatedError()

        validated = self._validate_draft(caller, draft, correlation_id)

        try:
            transaction_id = await self._storage.insert(caller, validated)
        except StorageError as e:
            self._activity.log_storage_error(
                operation="add_transaction",
                error_message=str(e),
                caller_id=caller,
                correlation_id=correlation_id,
            )
            raise

        self._activity.log_transaction_added(
            caller_id=caller,
            transaction_id=transaction_id,
            kind=validated.kind.value,
            amount=validated.amount,
            correlation_id=correlation_id,
        )
        return transaction_id

    async def list_transactions(
        self,
        caller: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> list[Transaction]:
        """
        The caller's transactions, most recently inserted first.

        Ordering follows insertion, not the transaction date: a
        back-dated entry added today comes first.
        Returns [] when there is no caller.
        """
        caller = normalize_identity(caller)
        if caller is None:
            return []

        transactions = await self._read_owned(caller, "list_transactions", correlation_id)
        self._activity.log_transactions_listed(
            caller_id=caller,
            count=len(transactions),
            correlation_id=correlation_id,
        )
        return transactions

    async def list_between(
        self,
        caller: Optional[str],
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> list[Transaction]:
        """
        The caller's transactions dated within [date_from, date_to].

        Ordered by transaction date, newest first.
        Returns [] when there is no caller.
        """
        caller = normalize_identity(caller)
        if caller is None:
            return []

        try:
            return await self._storage.list_by_owner_and_date(caller, date_from, date_to)
        except StorageError as e:
            self._activity.log_storage_error(
                operation="list_between",
                error_message=str(e),
                caller_id=caller,
                correlation_id=correlation_id,
            )
            raise

    async def get_summary(
        self,
        caller: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> TransactionSummary:
        """
        Income, expenses and balance over all of the caller's records.

        Recomputed from a full scan on every call.
        Returns an all-zero summary when there is no caller.
        """
        caller = normalize_identity(caller)
        if caller is None:
            return TransactionSummary.empty()

        transactions = await self._read_owned(caller, "get_summary", correlation_id)
        self._activity.log_summary_computed(
            caller_id=caller,
            count=len(transactions),
            correlation_id=correlation_id,
        )
        return compute_summary(transactions)

    async def category_breakdown(
        self,
        caller: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> dict[str, dict[str, float]]:
        """Per-kind, per-category totals for the caller."""
        caller = normalize_identity(caller)
        if caller is None:
            return totals_by_category([])

        transactions = await self._read_owned(caller, "category_breakdown", correlation_id)
        return totals_by_category(transactions)

    async def delete_transaction(
        self,
        caller: Optional[str],
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Permanently remove one of the caller's transactions.

        Raises:
            UnauthenticatedError: No caller
            NotFoundOrUnauthorizedError: Missing, or owned by someone else
            StorageError: The store failed
        """
        caller = normalize_identity(caller)
        if caller is None:
            self._activity.log_unauthenticated_write(
                operation="delete_transaction",
                correlation_id=correlation_id,
            )
            raise UnauthenticatedError()

        try:
            transaction = await self._storage.get_by_id(transaction_id)
            owned = transaction is not None and transaction.owner_id == caller
            # A concurrent delete may remove the record between the two calls
            removed = owned and await self._storage.delete_by_id(transaction_id)
        except StorageError as e:
            self._activity.log_storage_error(
                operation="delete_transaction",
                error_message=str(e),
                caller_id=caller,
                correlation_id=correlation_id,
            )
            raise

        if not removed:
            self._activity.log_delete_refused(
                caller_id=caller,
                transaction_id=transaction_id,
                correlation_id=correlation_id,
            )
            raise NotFoundOrUnauthorizedError()

        self._activity.log_transaction_deleted(
            caller_id=caller,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        )

    async def _read_owned(
        self,
        caller: str,
        operation: str,
        correlation_id: Optional[UUID],
    ) -> list[Transaction]:
        try:
            return await self._storage.list_by_owner(caller)
        except StorageError as e:
            self._activity.log_storage_error(
                operation=operation,
                error_message=str(e),
                caller_id=caller,
                correlation_id=correlation_id,
            )
            raise


# =============================================================================
# FORM / LIST FLOW
# =============================================================================

ADD_SUCCESS_MESSAGE = "Transaction added successfully!"
ADD_FAILURE_MESSAGE = "Failed to add transaction"
DELETE_SUCCESS_MESSAGE = "Transaction deleted"
DELETE_FAILURE_MESSAGE = "Failed to delete transaction"


class Notification(BaseModel):
    """A toast-style message for the UI."""

    level: str  # success | error | warning
    message: str

    @property
    def is_error(self) -> bool:
        return self.level == "error"


class TransactionFormFlow:
    """
    Drives the add form and the transaction list.

    Flow:
    1. Edit → update the local draft
    2. Submit → validate locally; on failure show the message, stop
    3. Add → resolve caller, call the accessor
    4. Result → reset the draft and notify, or show a generic failure

    The specific server error is never shown to the user.
    """

    def __init__(
        self,
        accessor: TransactionAccessor,
        identity_provider: IdentityProvider,
        validator: Optional[TransactionFormValidator] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._accessor = accessor
        self._identity = identity_provider
        self._validator = validator or TransactionFormValidator()
        self._activity = activity_logger or ActivityLogger()
        self.draft = TransactionFormDraft.blank()

    def update_draft(self, **fields) -> TransactionFormDraft:
        """Replace some draft fields, keeping the rest."""
        self.draft = self.draft.model_copy(update=fields)
        return self.draft

    def category_choices(self) -> tuple[str, ...]:
        """Categories offered for the currently selected kind."""
        return categories_for(self.draft.kind)

    async def submit(self, correlation_id: Optional[UUID] = None) -> Notification:
        """Validate and add the current draft."""
        correlation_id = correlation_id or create_correlation_id()

        result = self._validator.validate(self.draft)
        if not result.is_valid:
            self._activity.log_form_validation_failed(
                issues=[
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in result.issues
                ],
                correlation_id=correlation_id,
            )
            return Notification(
                level="error",
                message=self._validator.get_user_friendly_summary(result),
            )

        caller = self._identity.resolve_caller_identity()
        try:
            await self._accessor.add_transaction(
                caller,
                result.draft,
                correlation_id=correlation_id,
            )
        except (TransactionAccessError, StorageError):
            return Notification(level="error", message=ADD_FAILURE_MESSAGE)

        self.draft = TransactionFormDraft.blank()
        return Notification(level="success", message=ADD_SUCCESS_MESSAGE)

    async def delete(
        self,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> Notification:
        """Delete one transaction from the list."""
        correlation_id = correlation_id or create_correlation_id()
        caller = self._identity.resolve_caller_identity()
        try:
            await self._accessor.delete_transaction(
                caller,
                transaction_id,
                correlation_id=correlation_id,
            )
        except (TransactionAccessError, StorageError):
            return Notification(level="error", message=DELETE_FAILURE_MESSAGE)
        return Notification(level="success", message=DELETE_SUCCESS_MESSAGE)

    async def load(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[list[Transaction], TransactionSummary]:
        """Fetch the list and the summary for rendering."""
        correlation_id = correlation_id or create_correlation_id()
        caller = self._identity.resolve_caller_identity()
        transactions = await self._accessor.list_transactions(caller, correlation_id)
        summary = await self._accessor.get_summary(caller, correlation_id)
        return transactions, summary

    async def breakdown(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> dict[str, dict[str, float]]:
        """Per-category totals for the spending breakdown panel."""
        correlation_id = correlation_id or create_correlation_id()
        caller = self._identity.resolve_caller_identity()
        return await self._accessor.category_breakdown(caller, correlation_id)


# =============================================================================
# FACTORY
# =============================================================================

def create_storage(settings: Optional[Settings] = None) -> TransactionStorageInterface:
    """
    Build the configured storage backend.

    Falls back to in-memory storage if Google Sheets is selected
    but not configured.
    """
    settings = settings or get_settings()

    if settings.app.uses_google_sheets:
        try:
            client = GoogleSheetsClient(settings.google_sheets)
            return GoogleSheetsTransactionStorage(client)
        except ValidationError as e:
            logger.warning(
                "storage_not_configured",
                backend="google_sheets",
                error=str(e),
            )

    return InMemoryTransactionStorage()


def create_app_components(
    storage: Optional[TransactionStorageInterface] = None,
    settings: Optional[Settings] = None,
) -> tuple[TransactionAccessor, ActivityLogger]:
    """
    Factory function to create the application components.

    Args:
        storage: Storage to use. Built from settings when None.

    Returns:
        (accessor, activity_logger)
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)

    activity_logger = ActivityLogger()
    accessor = TransactionAccessor(
        storage=storage if storage is not None else create_storage(settings),
        activity_logger=activity_logger,
    )
    return accessor, activity_logger
