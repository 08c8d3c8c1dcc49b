"""Tests for TransactionFormFlow and the app factory."""

import pytest
from datetime import date

from finance_tracker.auth import StaticIdentityProvider
from finance_tracker.config import get_settings
from finance_tracker.models import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    TransactionKind,
)
from finance_tracker.orchestrator import (
    ADD_FAILURE_MESSAGE,
    ADD_SUCCESS_MESSAGE,
    DELETE_FAILURE_MESSAGE,
    DELETE_SUCCESS_MESSAGE,
    TransactionAccessor,
    TransactionFormFlow,
    create_app_components,
    create_storage,
)
from finance_tracker.services.storage import (
    GoogleSheetsTransactionStorage,
    InMemoryTransactionStorage,
    StorageError,
)
from finance_tracker.validation import (
    INVALID_AMOUNT_MESSAGE,
    MISSING_FIELDS_MESSAGE,
    TransactionFormValidator,
)


class CountingStorage(InMemoryTransactionStorage):
    """Counts inserts so tests can assert nothing was sent."""

    def __init__(self):
        super().__init__()
        self.insert_calls = 0

    async def insert(self, owner_id, draft):
        self.insert_calls += 1
        return await super().insert(owner_id, draft)


class BrokenStorage(InMemoryTransactionStorage):
    async def insert(self, owner_id, draft):
        raise StorageError("backend down")


def _flow(storage, identity="alice", activity_logger=None) -> TransactionFormFlow:
    return TransactionFormFlow(
        accessor=TransactionAccessor(storage, activity_logger),
        identity_provider=StaticIdentityProvider(identity),
        validator=TransactionFormValidator(max_amount=1000000.0),
        activity_logger=activity_logger,
    )


def _fill(flow: TransactionFormFlow, **overrides):
    fields = {
        "kind": TransactionKind.INCOME,
        "amount": "50000",
        "category": "Salary",
        "description": "March pay",
        "date": date(2024, 3, 1),
    }
    fields.update(overrides)
    flow.update_draft(**fields)


class TestSubmit:
    """Tests for submitting the add form."""

    @pytest.mark.asyncio
    async def test_successful_submit_resets_draft(self, activity_logger):
        """Test success notifies and restores the blank draft."""
        storage = CountingStorage()
        flow = _flow(storage, activity_logger=activity_logger)
        _fill(flow)

        notification = await flow.submit()

        assert notification.level == "success"
        assert notification.message == ADD_SUCCESS_MESSAGE
        assert storage.insert_calls == 1
        assert flow.draft.kind == TransactionKind.EXPENSE
        assert flow.draft.amount == ""
        assert flow.draft.category == ""
        assert flow.draft.description == ""
        assert flow.draft.date == date.today()

    @pytest.mark.asyncio
    async def test_missing_fields_never_reach_storage(self, activity_logger, recorder):
        """Test local validation failures make no storage call."""
        storage = CountingStorage()
        flow = _flow(storage, activity_logger=activity_logger)
        _fill(flow, description="")

        notification = await flow.submit()

        assert notification.is_error
        assert notification.message == MISSING_FIELDS_MESSAGE
        assert storage.insert_calls == 0
        assert flow.draft.category == "Salary"
        assert recorder.event_types() == ["form_validation_failed"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["abc", "0", "-1", "nan"])
    async def test_bad_amount_never_reaches_storage(self, amount):
        """Test invalid amounts are caught before the accessor."""
        storage = CountingStorage()
        flow = _flow(storage)
        _fill(flow, amount=amount)

        notification = await flow.submit()

        assert notification.message == INVALID_AMOUNT_MESSAGE
        assert storage.insert_calls == 0

    @pytest.mark.asyncio
    async def test_server_failure_is_generic(self):
        """Test storage errors surface as the generic message."""
        flow = _flow(BrokenStorage())
        _fill(flow)

        notification = await flow.submit()

        assert notification.is_error
        assert notification.message == ADD_FAILURE_MESSAGE
        assert flow.draft.description == "March pay"

    @pytest.mark.asyncio
    async def test_unauthenticated_submit_is_generic(self):
        """Test a missing identity surfaces as the generic message."""
        storage = CountingStorage()
        flow = _flow(storage, identity=None)
        _fill(flow)

        notification = await flow.submit()

        assert notification.message == ADD_FAILURE_MESSAGE
        assert storage.insert_calls == 0


class TestDeleteAndLoad:
    """Tests for list rendering data and delete."""

    @pytest.mark.asyncio
    async def test_load_returns_list_and_summary(self, form_flow):
        """Test load reflects what was added."""
        _fill(form_flow)
        await form_flow.submit()
        _fill(form_flow, kind=TransactionKind.EXPENSE, amount="12000",
              category="Food", description="Groceries", date=date(2024, 3, 2))
        await form_flow.submit()

        transactions, summary = await form_flow.load()

        assert [t.description for t in transactions] == ["Groceries", "March pay"]
        assert summary.balance == 38000

    @pytest.mark.asyncio
    async def test_delete_success_and_failure(self, form_flow):
        """Test delete notifications, including the generic failure."""
        _fill(form_flow)
        await form_flow.submit()
        transactions, _ = await form_flow.load()

        ok = await form_flow.delete(transactions[0].id)
        again = await form_flow.delete(transactions[0].id)

        assert ok.message == DELETE_SUCCESS_MESSAGE
        assert again.is_error
        assert again.message == DELETE_FAILURE_MESSAGE

    @pytest.mark.asyncio
    async def test_breakdown_groups_by_category(self, form_flow):
        """Test the breakdown panel data follows what was added."""
        _fill(form_flow)
        await form_flow.submit()
        _fill(form_flow, kind=TransactionKind.EXPENSE, amount="12000",
              category="Food", description="Groceries")
        await form_flow.submit()

        breakdown = await form_flow.breakdown()

        assert breakdown == {"income": {"Salary": 50000}, "expense": {"Food": 12000}}

    @pytest.mark.asyncio
    async def test_unauthenticated_breakdown_is_empty(self):
        """Test an anonymous visitor gets empty groups."""
        flow = _flow(InMemoryTransactionStorage(), identity=None)
        assert await flow.breakdown() == {"income": {}, "expense": {}}

    @pytest.mark.asyncio
    async def test_unauthenticated_load_is_empty(self):
        """Test an anonymous visitor sees nothing and zeros."""
        flow = _flow(InMemoryTransactionStorage(), identity=None)
        transactions, summary = await flow.load()
        assert transactions == []
        assert summary.balance == 0


class TestCategoryChoices:
    """Tests for the kind-dependent category list."""

    def test_choices_follow_kind(self, form_flow):
        """Test the offered categories switch with the kind."""
        assert form_flow.category_choices() == EXPENSE_CATEGORIES
        form_flow.update_draft(kind=TransactionKind.INCOME)
        assert form_flow.category_choices() == INCOME_CATEGORIES


class TestFactory:
    """Tests for building components from settings."""

    def test_memory_backend_by_default(self, monkeypatch, tmp_path):
        """Test the default backend is in-memory."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("STORAGE_BACKEND", raising=False)
        assert isinstance(create_storage(), InMemoryTransactionStorage)

    def test_google_sheets_backend(self, monkeypatch, tmp_path):
        """Test the Sheets backend is built when fully configured."""
        credentials = tmp_path / "creds.json"
        credentials.write_text("{}")
        monkeypatch.setenv("STORAGE_BACKEND", "google_sheets")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(credentials))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-123")

        assert isinstance(create_storage(), GoogleSheetsTransactionStorage)

    def test_google_sheets_backend_from_env_file(self, monkeypatch, tmp_path):
        """Test every backend setting is read from .env, not just the selector."""
        credentials = tmp_path / "creds.json"
        credentials.write_text("{}")
        (tmp_path / ".env").write_text(
            "STORAGE_BACKEND=google_sheets\n"
            f"GOOGLE_SHEETS_CREDENTIALS_PATH={credentials}\n"
            "GOOGLE_SHEETS_SPREADSHEET_ID=sheet-123\n"
        )
        for name in (
            "STORAGE_BACKEND",
            "GOOGLE_SHEETS_CREDENTIALS_PATH",
            "GOOGLE_SHEETS_SPREADSHEET_ID",
        ):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.chdir(tmp_path)

        assert isinstance(create_storage(), GoogleSheetsTransactionStorage)

    def test_unconfigured_google_sheets_falls_back(self, monkeypatch, tmp_path):
        """Test missing Sheets settings fall back to memory."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("STORAGE_BACKEND", "google_sheets")
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)

        assert isinstance(create_storage(), InMemoryTransactionStorage)

    def test_create_app_components_uses_given_storage(self):
        """Test an injected storage is used as-is."""
        storage = InMemoryTransactionStorage()
        accessor, activity_logger = create_app_components(storage=storage)
        assert accessor._storage is storage
        assert activity_logger is not None
        assert get_settings().app.local_user_id == "local-user"
