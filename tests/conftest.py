"""
Shared fixtures.

No test touches the network: accessors run on in-memory storage
and the Google Sheets backend runs against a fake worksheet.
"""

from datetime import date

import pytest

from finance_tracker.activity import ActivityLogger
from finance_tracker.auth import StaticIdentityProvider
from finance_tracker.config import get_settings
from finance_tracker.models import TransactionDraft, TransactionKind
from finance_tracker.orchestrator import TransactionAccessor, TransactionFormFlow
from finance_tracker.services.storage import InMemoryTransactionStorage
from finance_tracker.validation import TransactionFormValidator


class RecordingLogger:
    """Stands in for a structlog logger and keeps every call."""

    def __init__(self):
        self.records = []

    def _record(self, level, event, **kwargs):
        self.records.append({"level": level, "event": event, **kwargs})

    def debug(self, event, **kwargs):
        self._record("debug", event, **kwargs)

    def info(self, event, **kwargs):
        self._record("info", event, **kwargs)

    def warning(self, event, **kwargs):
        self._record("warning", event, **kwargs)

    def error(self, event, **kwargs):
        self._record("error", event, **kwargs)

    def event_types(self) -> list[str]:
        return [r["event_type"] for r in self.records]


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Settings are cached process-wide; reload them per test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def recorder() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def activity_logger(recorder) -> ActivityLogger:
    return ActivityLogger(logger=recorder)


@pytest.fixture
def storage() -> InMemoryTransactionStorage:
    return InMemoryTransactionStorage()


@pytest.fixture
def accessor(storage, activity_logger) -> TransactionAccessor:
    return TransactionAccessor(storage=storage, activity_logger=activity_logger)


@pytest.fixture
def form_flow(accessor, activity_logger) -> TransactionFormFlow:
    return TransactionFormFlow(
        accessor=accessor,
        identity_provider=StaticIdentityProvider("alice"),
        validator=TransactionFormValidator(max_amount=1000000.0),
        activity_logger=activity_logger,
    )


def build_draft(
    kind: TransactionKind = TransactionKind.EXPENSE,
    amount: float = 100.0,
    category: str = "Food",
    description: str = "Lunch",
    on: date = date(2024, 3, 2),
) -> TransactionDraft:
    return TransactionDraft(
        kind=kind,
        amount=amount,
        category=category,
        description=description,
        date=on,
    )


@pytest.fixture
def make_draft():
    return build_draft
