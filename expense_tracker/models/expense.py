"""
Core Data Models for Expense Tracker

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for storage and logging
4. Support the audit trail

DESIGN DECISION: Records are frozen Pydantic v2 models.
The ledger only ever inserts and removes whole records, it never edits one.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def utc_now() -> datetime:
    """Current instant, timezone-aware in UTC."""
    return datetime.now(timezone.utc)


def new_expense_id() -> str:
    """Generate a fresh opaque expense identifier."""
    return str(uuid4())


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Category(str, Enum):
    """
    Supported expense categories.

    The values double as display names. Records loaded from older data
    may still carry a category outside this set; those are kept verbatim
    and rendered with a fallback marker.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Any) -> Optional["Category"]:
        """Return the matching category, or None for unrecognized values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


# Sentinel selector meaning "no category filter"
ALL_CATEGORIES = "All"


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class ExpenseRecord(BaseModel):
    """
    One logged expense.

    CRITICAL: amount is always > 0. Records are created only through
    LedgerStore.add (which validates the raw input first) or loaded
    back from storage.
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    id: str = Field(
        default_factory=new_expense_id,
        min_length=1,
        description="Opaque unique identifier, used only for lookup/deletion"
    )
    title: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Amount spent, full precision"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category name (normally one of Category)"
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        alias="date",
        description="When the expense was recorded (UTC)"
    )

    @field_validator('id', mode='before')
    @classmethod
    def numeric_id_as_text(cls, v: Any) -> Any:
        """Older data may hold millisecond timestamps as ids."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('category', mode='before')
    @classmethod
    def unwrap_category(cls, v: Any) -> Any:
        if isinstance(v, Category):
            return v.value
        return v

    @field_validator('amount', mode='before')
    @classmethod
    def float_amount_via_str(cls, v: Any) -> Any:
        """Convert floats through their shortest repr (150.1 stays 150.1)."""
        if isinstance(v, float):
            return str(v)
        return v

    @field_validator('created_at')
    @classmethod
    def normalize_to_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @property
    def known_category(self) -> Optional[Category]:
        """The Category enum member, or None if the category is unrecognized."""
        return Category.parse(self.category)

    def to_storage_dict(self) -> dict:
        """
        Convert to the persisted shape: {id, title, amount, category, date}.

        Amount is written as a decimal string so no precision is lost.
        """
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ExpenseDraft(BaseModel):
    """Normalized user input that passed validation, ready to become a record."""

    title: str
    amount: Decimal
    category: str


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'title_missing', 'amount_invalid')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Result of validating the raw add-expense input."""

    validated_at: datetime = Field(
        default_factory=utc_now
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    draft: Optional[ExpenseDraft] = Field(
        default=None,
        description="Normalized input, present only when valid"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [i.message for i in self.issues if i.severity == "warning"]


# =============================================================================
# QUERY MODELS
# =============================================================================

class LedgerSummary(BaseModel):
    """
    Everything a view needs for one render, derived from a snapshot.

    Never stored. Totals cover the whole ledger; `visible` is the
    snapshot narrowed by the active category filter.
    """
    model_config = ConfigDict(frozen=True)

    total: Decimal = Field(
        ...,
        description="Sum of all amounts in the ledger"
    )
    count: int = Field(
        ...,
        ge=0,
        description="Number of records in the ledger"
    )
    by_category: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Subtotal per category, ordered by category name"
    )
    active_filter: str = Field(
        default=ALL_CATEGORIES,
        description="Category selector the visible list was filtered with"
    )
    visible: tuple[ExpenseRecord, ...] = Field(
        default=(),
        description="Records matching the active filter, newest first"
    )
