"""
Ledger Aggregation

DESIGN DECISION: Nothing derived is ever stored.
Totals, category breakdowns and the filtered list are recomputed from a
ledger snapshot on every render. This is O(n) per render, which is
fine for a personal ledger, and means the views can never drift from
the ledger.

All functions here are pure: no I/O, no mutation of their input.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Sequence, Union

from expense_tracker.models.expense import (
    ALL_CATEGORIES,
    Category,
    ExpenseRecord,
    LedgerSummary,
)


def total(records: Sequence[ExpenseRecord]) -> Decimal:
    """Sum of all amounts; Decimal 0 for an empty sequence."""
    return sum((record.amount for record in records), Decimal("0"))


def count(records: Sequence[ExpenseRecord]) -> int:
    """Number of records."""
    return len(records)


def by_category(records: Sequence[ExpenseRecord]) -> dict[str, Decimal]:
    """
    Subtotal per category.

    Only categories that have records appear. Keys are in lexicographic
    order of the category name, whatever the ledger order.
    """
    groups: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    for record in records:
        groups[record.category] += record.amount

    return {name: groups[name] for name in sorted(groups)}


def filter_by_category(
    records: Sequence[ExpenseRecord],
    selector: Union[str, Category],
) -> tuple[ExpenseRecord, ...]:
    """
    Records in the given category, in ledger order.

    The sentinel "All" returns every record unchanged.
    """
    if isinstance(selector, Category):
        selector = selector.value

    if selector == ALL_CATEGORIES:
        return tuple(records)

    return tuple(record for record in records if record.category == selector)


def summarize(
    records: Sequence[ExpenseRecord],
    selector: Union[str, Category] = ALL_CATEGORIES,
) -> LedgerSummary:
    """
    Everything one render needs.

    Total, count and breakdown cover the whole snapshot; only the
    visible list honours the category filter.
    """
    if isinstance(selector, Category):
        selector = selector.value

    return LedgerSummary(
        total=total(records),
        count=count(records),
        by_category=by_category(records),
        active_filter=selector,
        visible=filter_by_category(records, selector),
    )
