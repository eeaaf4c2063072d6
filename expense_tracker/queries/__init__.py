"""Ledger queries package."""

from expense_tracker.queries.aggregator import (
    by_category,
    count,
    filter_by_category,
    summarize,
    total,
)

__all__ = ["by_category", "count", "filter_by_category", "summarize", "total"]
