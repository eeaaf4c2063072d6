"""Input validation package."""

from expense_tracker.validation.validator import (
    MAX_AMOUNT,
    ExpenseValidator,
    IssueCode,
    ValidationError,
    parse_amount,
)

__all__ = ["MAX_AMOUNT", "ExpenseValidator", "IssueCode", "ValidationError", "parse_amount"]
