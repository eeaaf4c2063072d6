"""
Ledger Store

Owns the authoritative, persisted, ordered collection of expenses.

GUARANTEES:
- Newest expense first; order is insertion order reversed, never re-sorted
- Ids are unique across the ledger
- Records are only ever inserted or removed whole
- Every successful add/remove writes the entire collection back to the
  key-value store before it becomes visible (write-then-commit), so a
  failed write leaves the ledger exactly as it was
- Unreadable persisted state loads as an empty ledger, it never crashes

All mutations are serialized by one re-entrant lock because the delayed
delete fires on a timer thread.
"""

import threading
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Optional, Union
from uuid import UUID

from expense_tracker.audit import AuditLogger
from expense_tracker.config import get_settings
from expense_tracker.ledger.codec import LedgerDecodeError, decode_ledger, encode_ledger
from expense_tracker.models.expense import (
    Category,
    ExpenseRecord,
    new_expense_id,
    utc_now,
)
from expense_tracker.services.storage import KeyValueStoreInterface, StorageError
from expense_tracker.validation import ExpenseValidator, ValidationError


Snapshot = tuple[ExpenseRecord, ...]
Listener = Callable[[Snapshot], None]

MAX_ID_ATTEMPTS = 10


class LedgerStore:
    """
    The expense ledger.

    Consumers get a handle to one store and use add/remove/list.
    They never touch the collection directly: list() hands out an
    immutable snapshot.
    """

    def __init__(
        self,
        storage: KeyValueStoreInterface,
        key: Optional[str] = None,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_expense_id,
    ):
        """
        Initialize the store. Call load() before use.

        Args:
            storage: Key-value backend holding the persisted ledger
            key: Storage key (defaults to the configured ledger key)
            validator: Input validator for add()
            audit_logger: Where mutations are audited
            clock: Source of creation timestamps
            id_factory: Source of fresh ids
        """
        self._storage = storage
        self._key = key or get_settings().storage.ledger_key
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self._clock = clock
        self._id_factory = id_factory

        self._records: Snapshot = ()
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

    @property
    def key(self) -> str:
        return self._key

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> Snapshot:
        """
        Replace the in-memory ledger with the persisted one.

        Missing, unreadable or unparsable state gives an empty ledger.
        Individually invalid entries are skipped.
        """
        with self._lock:
            records: Snapshot = ()
            try:
                raw = self._storage.get(self._key)
            except StorageError as e:
                self._audit_logger.log_ledger_load_failed(self._key, str(e))
                raw = None

            if raw is not None:
                try:
                    decoded = decode_ledger(raw)
                except LedgerDecodeError as e:
                    self._audit_logger.log_ledger_load_failed(self._key, str(e))
                else:
                    for skipped in decoded.skipped:
                        self._audit_logger.log_record_skipped(
                            self._key, skipped.index, skipped.reason
                        )
                    records = decoded.records

            self._records = records
            self._audit_logger.log_ledger_loaded(self._key, len(records))

        self._notify(records)
        return records

    def _persist(self, records: Snapshot) -> None:
        """Write the entire collection. Raises StorageError on failure."""
        try:
            self._storage.set(self._key, encode_ledger(records))
        except StorageError as e:
            self._audit_logger.log_save_failed(self._key, str(e))
            raise

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(
        self,
        title: Any,
        amount: Union[str, Decimal, int, float],
        category: Union[str, Category],
        correlation_id: Optional[UUID] = None,
    ) -> ExpenseRecord:
        """
        Record a new expense at the front of the ledger.

        Raises:
            ValidationError: If title, category or amount is invalid
            StorageError: If the ledger could not be persisted
        """
        try:
            draft = self._validator.validate_or_raise(title, amount, category)
        except ValidationError as e:
            self._audit_logger.log_validation_failed(
                [
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in e.issues
                ],
                correlation_id=correlation_id,
            )
            raise

        with self._lock:
            record = ExpenseRecord(
                id=self._new_unique_id(),
                title=draft.title,
                amount=draft.amount,
                category=draft.category,
                created_at=self._clock(),
            )
            records = (record,) + self._records
            self._persist(records)
            self._records = records

        self._audit_logger.log_expense_added(
            expense_id=record.id,
            title=record.title,
            amount=str(record.amount),
            category=record.category,
            correlation_id=correlation_id,
        )
        self._notify(records)
        return record

    def remove(self, expense_id: str, correlation_id: Optional[UUID] = None) -> bool:
        """
        Remove the expense with this id.

        Unknown ids are a silent no-op: nothing is written and listeners
        are not notified.

        Returns:
            True if a record was removed
        """
        with self._lock:
            remaining = tuple(r for r in self._records if r.id != expense_id)
            if len(remaining) == len(self._records):
                return False
            self._persist(remaining)
            self._records = remaining

        self._audit_logger.log_expense_removed(
            expense_id=expense_id,
            remaining=len(remaining),
            correlation_id=correlation_id,
        )
        self._notify(remaining)
        return True

    def _new_unique_id(self) -> str:
        existing = {r.id for r in self._records}
        for _ in range(MAX_ID_ATTEMPTS):
            candidate = self._id_factory()
            if candidate not in existing:
                return candidate
        raise RuntimeError(f"Could not generate a unique expense id in {MAX_ID_ATTEMPTS} attempts")

    # -------------------------------------------------------------------------
    # Change notification
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call `listener(snapshot)` after every load and successful mutation.

        Returns:
            A function that unsubscribes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, snapshot: Snapshot) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(snapshot)
            except Exception as e:
                # The mutation is already committed; a broken view must not undo it
                self._audit_logger.log_error(
                    error_type="listener_failed",
                    error_message=str(e),
                    details={"listener": repr(listener)},
                )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, expense_id: str) -> Optional[ExpenseRecord]:
        """Look up one record by id."""
        for record in self._records:
            if record.id == expense_id:
                return record
        return None

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, expense_id: object) -> bool:
        return any(r.id == expense_id for r in self._records)

    def list(self) -> Snapshot:
        """
        Current snapshot, newest first.

        The tuple and its records are immutable, so callers cannot
        change the ledger through it.
        """
        return self._records
