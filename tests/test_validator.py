"""Tests for add-expense input validation."""

import pytest
from decimal import Decimal

from expense_tracker.models import Category
from expense_tracker.validation import (
    MAX_AMOUNT,
    ExpenseValidator,
    IssueCode,
    ValidationError,
    parse_amount,
)


@pytest.fixture
def validator():
    return ExpenseValidator()


class TestParseAmount:
    """Tests for raw amount parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("150", Decimal("150")),
        ("  40.50 ", Decimal("40.50")),
        (Decimal("1.005"), Decimal("1.005")),
        (12, Decimal("12")),
        (0.1, Decimal("0.1")),
        ("-5", Decimal("-5")),
    ])
    def test_parses_numbers(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [
        "", "   ", "abc", "12abc", "NaN", "Infinity", "-inf",
        None, True, float("nan"), float("inf"), [], object(),
    ])
    def test_rejects_non_numbers(self, raw):
        """Nothing is guessed: '12abc' is not 12."""
        assert parse_amount(raw) is None


class TestExpenseValidator:
    """Tests for ExpenseValidator."""

    def test_valid_input(self, validator):
        result = validator.validate("  Coffee ", "150", Category.FOOD)
        assert result.is_valid is True
        assert result.issues == []
        assert result.draft.title == "Coffee"
        assert result.draft.amount == Decimal("150")
        assert result.draft.category == "Food"

    @pytest.mark.parametrize("title", ["", "   ", None, 42])
    def test_missing_title(self, validator, title):
        result = validator.validate(title, "10", "Food")
        assert result.is_valid is False
        assert result.draft is None
        assert [i.issue_type for i in result.issues] == [IssueCode.TITLE_MISSING.value]
        assert result.issues[0].field == "title"

    @pytest.mark.parametrize("amount", ["0", "-5", "abc", "", None, "0.00"])
    def test_invalid_amount(self, validator, amount):
        result = validator.validate("Tea", amount, "Food")
        assert result.is_valid is False
        assert [i.issue_type for i in result.issues] == [IssueCode.AMOUNT_INVALID.value]

    @pytest.mark.parametrize("amount", ["1e30", "1000000000000.01", "99999999999999999999"])
    def test_amount_too_large(self, validator, amount):
        result = validator.validate("Car", amount, "Transport")
        assert result.is_valid is False
        assert [i.issue_type for i in result.issues] == [IssueCode.AMOUNT_INVALID.value]
        assert "more than" in result.issues[0].message

    def test_largest_amount_accepted(self, validator):
        result = validator.validate("Flat", str(MAX_AMOUNT), "Bills")
        assert result.is_valid is True

    @pytest.mark.parametrize("category", ["", "  ", None])
    def test_missing_category(self, validator, category):
        result = validator.validate("Tea", "10", category)
        assert result.is_valid is False
        assert [i.issue_type for i in result.issues] == [IssueCode.CATEGORY_MISSING.value]

    def test_unknown_category_is_only_a_warning(self, validator):
        result = validator.validate("Gift", "500", "Gifts")
        assert result.is_valid is True
        assert result.draft.category == "Gifts"
        assert result.issues[0].issue_type == IssueCode.UNKNOWN_CATEGORY.value
        assert result.issues[0].severity == "warning"
        assert result.issues[0].suggested_fix

    def test_all_problems_reported_in_field_order(self, validator):
        result = validator.validate("", "abc", "")
        assert [i.field for i in result.issues] == ["title", "category", "amount"]
        assert result.error_count == 3


class TestValidateOrRaise:
    """Tests for the raising variant used by the ledger."""

    def test_returns_draft(self, validator):
        draft = validator.validate_or_raise("Bus", "40.5", "Transport")
        assert draft.amount == Decimal("40.5")

    def test_error_names_first_failing_field(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate_or_raise("", "-1", "Food")

        error = exc_info.value
        assert error.field == "title"
        assert error.code == IssueCode.TITLE_MISSING.value
        assert error.codes == [IssueCode.TITLE_MISSING.value, IssueCode.AMOUNT_INVALID.value]
        assert str(error) == error.message

    def test_error_requires_an_error_issue(self, validator):
        warnings_only = validator.validate("Gift", "1", "Gifts").issues
        with pytest.raises(ValueError):
            ValidationError(warnings_only)


class TestUserFriendlySummary:

    def test_clean_input(self, validator):
        result = validator.validate("Tea", "10", "Food")
        assert validator.get_user_friendly_summary(result) == "✅ Looks good."

    def test_errors_and_fixes_listed(self, validator):
        result = validator.validate("Tea", "abc", "Food")
        summary = validator.get_user_friendly_summary(result)
        assert "Please fix the following" in summary
        assert "valid, positive amount" in summary
        assert "💡" in summary

    def test_warning_listed(self, validator):
        result = validator.validate("Gift", "10", "Gifts")
        summary = validator.get_user_friendly_summary(result)
        assert "Please fix" not in summary
        assert "'Gifts'" in summary
