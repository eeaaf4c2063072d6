"""Expense ledger package: the store, its persisted format and delayed deletion."""

from expense_tracker.ledger.codec import (
    LEDGER_FORMAT_VERSION,
    DecodedLedger,
    LedgerDecodeError,
    SkippedRecord,
    decode_ledger,
    encode_ledger,
)
from expense_tracker.ledger.store import LedgerStore, Listener, Snapshot
from expense_tracker.ledger.deletion import DeletionScheduler, PendingDeletion

__all__ = [
    "LEDGER_FORMAT_VERSION",
    "DecodedLedger",
    "DeletionScheduler",
    "LedgerDecodeError",
    "LedgerStore",
    "Listener",
    "PendingDeletion",
    "SkippedRecord",
    "Snapshot",
    "decode_ledger",
    "encode_ledger",
]
