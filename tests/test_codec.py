"""Tests for the persisted ledger format."""

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from expense_tracker.ledger import (
    LEDGER_FORMAT_VERSION,
    LedgerDecodeError,
    decode_ledger,
    encode_ledger,
)
from expense_tracker.models import ExpenseRecord


def make(expense_id, title="Coffee", amount="150", category="Food"):
    return ExpenseRecord(
        id=expense_id,
        title=title,
        amount=Decimal(amount),
        category=category,
        created_at=datetime(2024, 3, 5, 8, 37, tzinfo=timezone.utc),
    )


class TestEncode:

    def test_payload_shape(self):
        payload = json.loads(encode_ledger([make("b", "Bus", "40.5", "Transport"), make("a")]))

        assert payload["version"] == LEDGER_FORMAT_VERSION
        assert [e["id"] for e in payload["expenses"]] == ["b", "a"]
        assert payload["expenses"][0] == {
            "id": "b",
            "title": "Bus",
            "amount": "40.5",
            "category": "Transport",
            "date": payload["expenses"][0]["date"],
        }

    def test_empty_ledger(self):
        assert json.loads(encode_ledger([])) == {"version": 1, "expenses": []}

    def test_non_ascii_kept_readable(self):
        assert "Chai ☕" in encode_ledger([make("a", title="Chai ☕")])


class TestDecode:

    def test_decodes_what_encode_wrote(self):
        records = (make("b", "Bus", "40.5", "Transport"), make("a", amount="1234567.891"))

        decoded = decode_ledger(encode_ledger(records))

        assert decoded.version == 1
        assert decoded.records == records
        assert decoded.skipped == ()

    def test_legacy_bare_array(self):
        raw = json.dumps([
            {"id": 1709627820000, "title": "Coffee", "amount": 150,
             "category": "Food", "date": "2024-03-05T08:37:00.000Z"},
        ])

        decoded = decode_ledger(raw)

        assert decoded.version == 0
        assert decoded.records[0].id == "1709627820000"
        assert decoded.records[0].amount == Decimal("150")

    def test_invalid_entries_skipped_with_position(self):
        raw = json.dumps({
            "version": 1,
            "expenses": [
                make("a").to_storage_dict(),
                {"id": "b", "title": "Broken"},
                "not an object",
                make("c").to_storage_dict(),
            ],
        })

        decoded = decode_ledger(raw)

        assert [r.id for r in decoded.records] == ["a", "c"]
        assert [s.index for s in decoded.skipped] == [1, 2]

    def test_duplicate_ids_keep_first(self):
        raw = encode_ledger([make("a", title="First"), make("a", title="Second")])

        decoded = decode_ledger(raw)

        assert [r.title for r in decoded.records] == ["First"]
        assert decoded.skipped[0].index == 1
        assert "Duplicate" in decoded.skipped[0].reason

    @pytest.mark.parametrize("raw", [
        "",
        "{oops",
        "null",
        "42",
        '"text"',
        '{"version": 2, "expenses": []}',
        '{"version": true, "expenses": []}',
        '{"version": "1", "expenses": []}',
        '{"version": 1}',
        '{"version": 1, "expenses": {}}',
    ])
    def test_not_a_ledger(self, raw):
        with pytest.raises(LedgerDecodeError):
            decode_ledger(raw)

    def test_decode_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            decode_ledger("{oops")
