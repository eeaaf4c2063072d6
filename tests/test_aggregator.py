"""Tests for ledger aggregation."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from expense_tracker.models import ALL_CATEGORIES, Category, ExpenseRecord
from expense_tracker.queries import (
    by_category,
    count,
    filter_by_category,
    summarize,
    total,
)


def make(title, amount, category, expense_id=None):
    return ExpenseRecord(
        id=expense_id or title.lower(),
        title=title,
        amount=Decimal(amount),
        category=category,
        created_at=datetime(2024, 3, 5, tzinfo=timezone.utc),
    )


@pytest.fixture
def records():
    # Newest first, as the ledger hands them out
    return (
        make("Bus", "40.5", "Transport"),
        make("Pizza", "450", "Food"),
        make("Gift", "999.99", "Gifts"),
        make("Coffee", "150", "Food"),
    )


class TestTotals:

    def test_total(self, records):
        assert total(records) == Decimal("1640.49")

    def test_empty(self):
        assert total(()) == Decimal("0")
        assert count(()) == 0
        assert by_category(()) == {}

    def test_count(self, records):
        assert count(records) == 4

    def test_decimal_sums_are_exact(self):
        records = [make(f"r{i}", "0.1", "Food") for i in range(10)]
        assert total(records) == Decimal("1.0")


class TestByCategory:

    def test_subtotals(self, records):
        assert by_category(records) == {
            "Food": Decimal("600"),
            "Gifts": Decimal("999.99"),
            "Transport": Decimal("40.5"),
        }

    def test_keys_sorted_by_name(self, records):
        assert list(by_category(records)) == ["Food", "Gifts", "Transport"]

    def test_subtotals_add_up_to_total(self, records):
        assert sum(by_category(records).values()) == total(records)

    def test_categories_without_records_are_absent(self, records):
        assert "Bills" not in by_category(records)

    def test_input_untouched(self, records):
        before = tuple(records)
        by_category(records)
        assert records == before


class TestFilter:

    def test_all_returns_everything_in_order(self, records):
        assert filter_by_category(records, ALL_CATEGORIES) == records

    def test_food_keeps_ledger_order(self, records):
        result = filter_by_category(records, "Food")
        assert [r.title for r in result] == ["Pizza", "Coffee"]

    def test_accepts_enum(self, records):
        assert filter_by_category(records, Category.TRANSPORT) == (records[0],)

    def test_unknown_category(self, records):
        assert [r.title for r in filter_by_category(records, "Gifts")] == ["Gift"]

    def test_no_matches(self, records):
        assert filter_by_category(records, "Bills") == ()


class TestSummarize:

    def test_filter_only_narrows_visible_list(self, records):
        summary = summarize(records, Category.FOOD)

        assert summary.active_filter == "Food"
        assert [r.title for r in summary.visible] == ["Pizza", "Coffee"]
        assert summary.total == Decimal("1640.49")
        assert summary.count == 4
        assert set(summary.by_category) == {"Food", "Gifts", "Transport"}

    def test_default_is_all(self, records):
        summary = summarize(records)
        assert summary.active_filter == ALL_CATEGORIES
        assert summary.visible == records

    def test_empty_ledger(self):
        summary = summarize(())
        assert summary.total == Decimal("0")
        assert summary.count == 0
        assert summary.visible == ()
