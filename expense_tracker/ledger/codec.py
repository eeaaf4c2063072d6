"""
Ledger persistence format.

The whole ledger is stored as one JSON value under a single key:

    {"version": 1, "expenses": [{"id", "title", "amount", "category", "date"}, ...]}

`amount` is a decimal string and `date` an ISO-8601 instant. Expenses
are listed newest first, exactly in ledger order.

Older data written as a bare JSON array (amounts as numbers, dates like
"2024-03-05T08:37:00.000Z") is still accepted on read.
"""

import json
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaError

from expense_tracker.models.expense import ExpenseRecord


LEDGER_FORMAT_VERSION = 1


class LedgerDecodeError(ValueError):
    """The persisted value cannot be read as a ledger at all."""
    pass


class SkippedRecord(BaseModel):
    """A persisted entry that was dropped while decoding."""

    index: int = Field(..., ge=0)
    reason: str


class DecodedLedger(BaseModel):
    """Result of decoding a persisted ledger."""
    model_config = ConfigDict(frozen=True)

    version: int
    records: tuple[ExpenseRecord, ...] = ()
    skipped: tuple[SkippedRecord, ...] = ()


def encode_ledger(records: Iterable[ExpenseRecord]) -> str:
    """Serialize records (in ledger order) to the persisted JSON text."""
    payload = {
        "version": LEDGER_FORMAT_VERSION,
        "expenses": [record.to_storage_dict() for record in records],
    }
    return json.dumps(payload, ensure_ascii=False)


def decode_ledger(raw: str) -> DecodedLedger:
    """
    Parse persisted JSON text back into records.

    Entries that fail validation, or repeat an id already seen, are
    skipped and reported rather than failing the whole load.

    Raises:
        LedgerDecodeError: If the text is not a ledger payload at all
    """
    try:
        data = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        raise LedgerDecodeError(f"Ledger is not valid JSON: {e}")

    if isinstance(data, list):
        version = 0
        items = data
    elif isinstance(data, dict):
        version = data.get("version")
        if isinstance(version, bool) or version != LEDGER_FORMAT_VERSION:
            raise LedgerDecodeError(f"Unsupported ledger format version: {version!r}")
        items = data.get("expenses")
        if not isinstance(items, list):
            raise LedgerDecodeError("Ledger payload has no 'expenses' list")
    else:
        raise LedgerDecodeError(f"Unexpected ledger payload type: {type(data).__name__}")

    records = []
    skipped = []
    seen_ids = set()

    for index, item in enumerate(items):
        try:
            record = ExpenseRecord.model_validate(item)
        except SchemaError as e:
            skipped.append(SkippedRecord(index=index, reason=str(e)))
            continue

        if record.id in seen_ids:
            skipped.append(SkippedRecord(index=index, reason=f"Duplicate id {record.id}"))
            continue

        seen_ids.add(record.id)
        records.append(record)

    return DecodedLedger(
        version=version,
        records=tuple(records),
        skipped=tuple(skipped),
    )
