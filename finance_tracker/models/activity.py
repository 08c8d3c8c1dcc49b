"""
Activity Event Models for Finance Tracker

Every accessor outcome produces one structured event.
Events are written to the local structured log only; they are
not persisted and there is no history view.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ActivityEventType(str, Enum):
    """Types of events we log."""
    # Writes
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"

    # Refusals
    UNAUTHENTICATED_WRITE = "unauthenticated_write"
    DELETE_REFUSED = "delete_refused"
    INVALID_TRANSACTION = "invalid_transaction"
    FORM_VALIDATION_FAILED = "form_validation_failed"

    # Reads
    TRANSACTIONS_LISTED = "transactions_listed"
    SUMMARY_COMPUTED = "summary_computed"

    # System events
    STORAGE_ERROR = "storage_error"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """A single activity event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    # Who and what
    caller_id: Optional[str] = Field(
        default=None,
        description="Caller identity, None when unauthenticated"
    )
    transaction_id: Optional[str] = None

    # For tracing one UI action through the accessor
    correlation_id: Optional[UUID] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "caller_id": self.caller_id,
            "transaction_id": self.transaction_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.transaction_added(caller_id, tx_id, ...)
        event = ActivityEventBuilder.delete_refused(caller_id, tx_id, ...)
    """

    @staticmethod
    def transaction_added(
        caller_id: str,
        transaction_id: str,
        kind: str,
        amount: float,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_ADDED,
            caller_id=caller_id,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction added: {kind} {amount}",
            details={"kind": kind, "amount": amount},
        )

    @staticmethod
    def transaction_deleted(
        caller_id: str,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_DELETED,
            caller_id=caller_id,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
            description="Transaction deleted",
        )

    @staticmethod
    def unauthenticated_write(
        operation: str,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.UNAUTHENTICATED_WRITE,
            severity=ActivitySeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Refused {operation}: no caller identity",
            details={"operation": operation},
        )

    @staticmethod
    def delete_refused(
        caller_id: str,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        # Same event whether the record is missing or foreign
        return ActivityEvent(
            event_type=ActivityEventType.DELETE_REFUSED,
            severity=ActivitySeverity.WARNING,
            caller_id=caller_id,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
            description="Delete refused: not found or not owned by caller",
        )

    @staticmethod
    def invalid_transaction(
        caller_id: str,
        errors: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.INVALID_TRANSACTION,
            severity=ActivitySeverity.WARNING,
            caller_id=caller_id,
            correlation_id=correlation_id,
            description=f"Transaction rejected with {len(errors)} errors",
            details={"errors": errors},
        )

    @staticmethod
    def form_validation_failed(
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.FORM_VALIDATION_FAILED,
            severity=ActivitySeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Form validation failed with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def transactions_listed(
        caller_id: Optional[str],
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTIONS_LISTED,
            severity=ActivitySeverity.DEBUG,
            caller_id=caller_id,
            correlation_id=correlation_id,
            description=f"Listed {count} transactions",
            details={"count": count},
        )

    @staticmethod
    def summary_computed(
        caller_id: Optional[str],
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SUMMARY_COMPUTED,
            severity=ActivitySeverity.DEBUG,
            caller_id=caller_id,
            correlation_id=correlation_id,
            description=f"Summary computed over {count} transactions",
            details={"count": count},
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        caller_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STORAGE_ERROR,
            severity=ActivitySeverity.ERROR,
            caller_id=caller_id,
            correlation_id=correlation_id,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )
