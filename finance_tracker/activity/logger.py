"""
Activity Logger

DESIGN DECISION: Every accessor outcome is logged as one structured event.
This provides:
1. Traceability of writes and refusals in the local log
2. Debugging capability when the UI only shows a generic message

The logger:
- Writes structured JSON lines through structlog
- Never persists events (there is no history feature)
- Supports correlation IDs to trace one UI action
"""

import logging
import sys
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from finance_tracker.models.activity import ActivityEvent, ActivityEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(log_level: str = "INFO") -> None:
    """Route stdlib logging (and so structlog) to stdout at the given level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )


class ActivityLogger:
    """
    Central activity logging service.

    Severity of the event decides the log method used.
    """

    def __init__(self, logger: Optional[Any] = None):
        """
        Initialize activity logger.

        Args:
            logger: Bound structlog logger. Defaults to the
                    module logger; tests pass a recorder.
        """
        self._logger = logger or structlog.get_logger("finance_tracker.activity")

    def log(self, event: ActivityEvent) -> None:
        """Log an activity event."""
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("activity_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("activity_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

    def log_transaction_added(
        self,
        caller_id: str,
        transaction_id: str,
        kind: str,
        amount: float,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.transaction_added(
            caller_id=caller_id,
            transaction_id=transaction_id,
            kind=kind,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_transaction_deleted(
        self,
        caller_id: str,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.transaction_deleted(
            caller_id=caller_id,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        ))

    def log_unauthenticated_write(
        self,
        operation: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.unauthenticated_write(
            operation=operation,
            correlation_id=correlation_id,
        ))

    def log_delete_refused(
        self,
        caller_id: str,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.delete_refused(
            caller_id=caller_id,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        ))

    def log_invalid_transaction(
        self,
        caller_id: str,
        errors: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.invalid_transaction(
            caller_id=caller_id,
            errors=errors,
            correlation_id=correlation_id,
        ))

    def log_form_validation_failed(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.form_validation_failed(
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_transactions_listed(
        self,
        caller_id: Optional[str],
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.transactions_listed(
            caller_id=caller_id,
            count=count,
            correlation_id=correlation_id,
        ))

    def log_summary_computed(
        self,
        caller_id: Optional[str],
        count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.summary_computed(
            caller_id=caller_id,
            count=count,
            correlation_id=correlation_id,
        ))

    def log_storage_error(
        self,
        operation: str,
        error_message: str,
        caller_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(ActivityEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            caller_id=caller_id,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., form submit).
    Pass it through all subsequent operations.
    """
    return uuid4()
