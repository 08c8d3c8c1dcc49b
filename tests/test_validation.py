"""Tests for the form validator."""

import pytest
from datetime import date, timedelta

from finance_tracker.models import TransactionFormDraft, TransactionKind
from finance_tracker.validation import (
    INVALID_AMOUNT_MESSAGE,
    MISSING_FIELDS_MESSAGE,
    TransactionFormValidator,
    parse_amount,
)


def _form(**overrides) -> TransactionFormDraft:
    fields = {
        "kind": TransactionKind.EXPENSE,
        "amount": "120",
        "category": "Food",
        "description": "Groceries",
        "date": date(2024, 3, 2),
    }
    fields.update(overrides)
    return TransactionFormDraft(**fields)


class TestParseAmount:
    """Tests for amount parsing."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("120", 120.0),
            (" 99.5 ", 99.5),
            ("1,23,456", 123456.0),
        ],
    )
    def test_valid_amounts(self, text, expected):
        """Test numbers above zero parse."""
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "0", "-5", "nan", "inf", "1e400"])
    def test_invalid_amounts(self, text):
        """Test blank, non-numeric, non-positive and non-finite input."""
        assert parse_amount(text) is None


class TestTransactionFormValidator:
    """Tests for TransactionFormValidator."""

    def setup_method(self):
        self.validator = TransactionFormValidator(max_amount=100000.0)

    def test_valid_form_produces_draft(self):
        """Test a complete form yields a TransactionDraft."""
        result = self.validator.validate(_form())
        assert result.is_valid
        assert result.draft is not None
        assert result.draft.amount == 120.0
        assert result.draft.category == "Food"
        assert self.validator.get_user_friendly_summary(result) == ""

    @pytest.mark.parametrize("field", ["amount", "category", "description"])
    def test_missing_field(self, field):
        """Test each required field is enforced."""
        result = self.validator.validate(_form(**{field: "  "}))
        assert not result.is_valid
        assert result.draft is None
        assert result.first_error.field == field
        assert self.validator.get_user_friendly_summary(result) == MISSING_FIELDS_MESSAGE

    def test_missing_fields_reported_before_amount_parsing(self):
        """Test a bad amount is not reported while fields are missing."""
        result = self.validator.validate(_form(amount="abc", description=""))
        assert [i.issue_type for i in result.issues] == ["missing"]

    @pytest.mark.parametrize("amount", ["abc", "0", "-10"])
    def test_invalid_amount(self, amount):
        """Test unparseable or non-positive amounts."""
        result = self.validator.validate(_form(amount=amount))
        assert not result.is_valid
        assert self.validator.get_user_friendly_summary(result) == INVALID_AMOUNT_MESSAGE

    def test_large_amount_is_warning_only(self):
        """Test very large amounts still validate but warn."""
        result = self.validator.validate(_form(amount="500000"))
        assert result.is_valid
        assert len(result.warnings) == 1
        assert "unusually high" in result.warnings[0]
        assert self.validator.get_user_friendly_summary(result).startswith("Please double-check")

    def test_future_date_is_warning_only(self):
        """Test a future date validates but warns."""
        result = self.validator.validate(_form(date=date.today() + timedelta(days=3)))
        assert result.is_valid
        assert any(i.issue_type == "future_date" for i in result.issues)

    def test_default_ceiling_comes_from_settings(self, monkeypatch):
        """Test the warning threshold is read from configuration."""
        monkeypatch.setenv("MAX_TRANSACTION_AMOUNT", "50")
        validator = TransactionFormValidator()
        result = validator.validate(_form(amount="60"))
        assert result.is_valid
        assert result.warnings
