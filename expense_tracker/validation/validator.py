"""
Expense Input Validation

Checks the three raw fields of an add-expense request before a record
is ever created:

- title: non-empty after trimming surrounding whitespace
- category: a non-empty selection (unknown names are allowed, with a warning)
- amount: parses to a finite number greater than zero

IMPORTANT: Validation NEVER silently fixes issues.
"12abc" is not read as 12, "-5" is not read as 5. Every problem is
reported back to the caller for correction.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from expense_tracker.models.expense import (
    Category,
    ExpenseDraft,
    ValidationIssue,
    ValidationResult,
)


# Largest single expense accepted from input
MAX_AMOUNT = Decimal("1000000000000")


class IssueCode(str, Enum):
    """Issue codes reported by the validator."""
    TITLE_MISSING = "title_missing"
    CATEGORY_MISSING = "category_missing"
    AMOUNT_INVALID = "amount_invalid"
    UNKNOWN_CATEGORY = "unknown_category"


class ValidationError(Exception):
    """
    Raised when add-expense input is rejected.

    `field` and `code` identify the first failing field
    (checked in the order title, category, amount). All issues found
    are available on `issues`.
    """

    def __init__(self, issues: list[ValidationIssue]):
        errors = [issue for issue in issues if issue.severity == "error"]
        if not errors:
            raise ValueError("ValidationError needs at least one error-level issue")
        first = errors[0]
        super().__init__(first.message)
        self.field = first.field
        self.code = first.issue_type
        self.message = first.message
        self.issues = issues

    @property
    def codes(self) -> list[str]:
        return [issue.issue_type for issue in self.issues if issue.severity == "error"]


def parse_amount(raw: Any) -> Optional[Decimal]:
    """
    Parse a raw amount into a Decimal.

    Accepts Decimal, int, float or text. Returns None when the value is
    not a finite number. Sign is not checked here.
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int):
        value = Decimal(raw)
    elif isinstance(raw, float):
        value = Decimal(str(raw))
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            value = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if not value.is_finite():
        return None
    return value


class ExpenseValidator:
    """Validates raw add-expense input."""

    def validate(
        self,
        title: Any,
        amount: Any,
        category: Any,
    ) -> ValidationResult:
        """
        Validate the three input fields.

        Returns:
            ValidationResult; `draft` holds the normalized values when valid
        """
        issues = []

        clean_title = title.strip() if isinstance(title, str) else ""
        if not clean_title:
            issues.append(ValidationIssue(
                field="title",
                issue_type=IssueCode.TITLE_MISSING.value,
                message="Please enter a title for the expense",
                severity="error",
            ))

        if isinstance(category, Category):
            clean_category = category.value
        elif isinstance(category, str):
            clean_category = category.strip()
        else:
            clean_category = ""

        if not clean_category:
            issues.append(ValidationIssue(
                field="category",
                issue_type=IssueCode.CATEGORY_MISSING.value,
                message="Please select a category",
                severity="error",
            ))
        elif Category.parse(clean_category) is None:
            issues.append(ValidationIssue(
                field="category",
                issue_type=IssueCode.UNKNOWN_CATEGORY.value,
                message=f"'{clean_category}' is not one of the standard categories",
                severity="warning",
                suggested_fix="Pick one of: " + ", ".join(c.value for c in Category),
            ))

        parsed_amount = parse_amount(amount)
        if parsed_amount is None or parsed_amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type=IssueCode.AMOUNT_INVALID.value,
                message="Please enter a valid, positive amount",
                severity="error",
                suggested_fix="Use digits only, e.g. 150 or 40.50",
            ))
        elif parsed_amount > MAX_AMOUNT:
            issues.append(ValidationIssue(
                field="amount",
                issue_type=IssueCode.AMOUNT_INVALID.value,
                message=f"Amount cannot be more than {MAX_AMOUNT:,}",
                severity="error",
                suggested_fix="Check the number of digits",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        draft = None
        if is_valid:
            draft = ExpenseDraft(
                title=clean_title,
                amount=parsed_amount,
                category=clean_category,
            )

        return ValidationResult(
            is_valid=is_valid,
            issues=issues,
            draft=draft,
        )

    def validate_or_raise(
        self,
        title: Any,
        amount: Any,
        category: Any,
    ) -> ExpenseDraft:
        """Validate and return the draft, raising ValidationError on any error."""
        result = self.validate(title, amount, category)
        if not result.is_valid:
            raise ValidationError(result.issues)
        return result.draft

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """Summarize a result in plain language for display next to the form."""
        if result.is_valid and not result.warnings:
            return "✅ Looks good."

        lines = []

        if result.has_errors:
            lines.append("❌ Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Note:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
