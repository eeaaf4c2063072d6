"""
Delayed Deletion

A delete request does not remove the expense straight away: the view
gets a fixed delay to play its removal transition first. Until the
delay elapses the expense stays in LedgerStore.list() and in every
total. Then it disappears in one step (remove + persist + notify).

A second request for an id that is already waiting gets the same
handle back; nothing is rescheduled and nothing is removed twice.
"""

import threading
from typing import Any, Callable, Optional
from uuid import UUID

from expense_tracker.audit import AuditLogger, create_correlation_id
from expense_tracker.config import get_settings
from expense_tracker.ledger.store import LedgerStore
from expense_tracker.services.storage import StorageError


# Same call shape as threading.Timer(interval, function, args=...)
TimerFactory = Callable[..., Any]


class PendingDeletion:
    """Handle for one scheduled removal."""

    def __init__(
        self,
        scheduler: "DeletionScheduler",
        expense_id: str,
        correlation_id: UUID,
    ):
        self.expense_id = expense_id
        self.correlation_id = correlation_id
        self.error: Optional[Exception] = None
        # False when the expense was already gone at fire time
        self.removed: Optional[bool] = None
        self._scheduler = scheduler
        self._timer: Any = None
        self._done = threading.Event()
        self._fired = False
        self._cancelled = False

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def cancel(self) -> bool:
        """Cancel the removal. Returns False if it already fired."""
        return self._scheduler._cancel(self)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the removal fired or was cancelled."""
        return self._done.wait(timeout)

    def __repr__(self) -> str:
        state = "fired" if self._fired else "cancelled" if self._cancelled else "pending"
        return f"PendingDeletion(expense_id={self.expense_id!r}, state={state})"


class DeletionScheduler:
    """
    Schedules expense removals after a fixed delay.

    The timer is injectable so tests can fire removals by hand.
    """

    def __init__(
        self,
        store: LedgerStore,
        delay_seconds: Optional[float] = None,
        timer_factory: Optional[TimerFactory] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        if delay_seconds is None:
            delay_seconds = get_settings().app.delete_delay_seconds
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")

        self._store = store
        self._delay = delay_seconds
        self._timer_factory = timer_factory or threading.Timer
        self._audit_logger = audit_logger or AuditLogger()
        self._pending: dict[str, PendingDeletion] = {}
        self._lock = threading.Lock()

    @property
    def delay_seconds(self) -> float:
        return self._delay

    def request_delete(
        self,
        expense_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> PendingDeletion:
        """
        Schedule removal of an expense.

        Returns the existing handle if this id is already scheduled.
        """
        with self._lock:
            existing = self._pending.get(expense_id)
            if existing is not None:
                return existing

            handle = PendingDeletion(
                self,
                expense_id,
                correlation_id or create_correlation_id(),
            )
            timer = self._timer_factory(self._delay, self._fire, args=(handle,))
            timer.daemon = True
            handle._timer = timer
            self._pending[expense_id] = handle

        self._audit_logger.log_removal_scheduled(
            expense_id=expense_id,
            delay_seconds=self._delay,
            correlation_id=handle.correlation_id,
        )
        timer.start()
        return handle

    def is_pending(self, expense_id: str) -> bool:
        with self._lock:
            return expense_id in self._pending

    def pending_ids(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._pending)

    def flush(self) -> int:
        """
        Carry out every pending removal now (e.g. on shutdown).

        Returns:
            Number of removals carried out
        """
        with self._lock:
            handles = list(self._pending.values())
            self._pending.clear()

        for handle in handles:
            handle._timer.cancel()
            self._execute(handle)
        return len(handles)

    def cancel_all(self) -> int:
        """Cancel every pending removal. Returns how many were cancelled."""
        with self._lock:
            handles = list(self._pending.values())
        return sum(1 for handle in handles if self._cancel(handle))

    def _cancel(self, handle: PendingDeletion) -> bool:
        with self._lock:
            if self._pending.get(handle.expense_id) is not handle:
                return False
            del self._pending[handle.expense_id]

        handle._timer.cancel()
        handle._cancelled = True
        handle._done.set()
        self._audit_logger.log_removal_cancelled(
            expense_id=handle.expense_id,
            correlation_id=handle.correlation_id,
        )
        return True

    def _fire(self, handle: PendingDeletion) -> None:
        """Timer callback."""
        with self._lock:
            if self._pending.get(handle.expense_id) is not handle:
                # Cancelled or flushed in the meantime
                return
            del self._pending[handle.expense_id]

        self._execute(handle)

    def _execute(self, handle: PendingDeletion) -> None:
        try:
            handle.removed = self._store.remove(
                handle.expense_id, correlation_id=handle.correlation_id
            )
        except StorageError as e:
            # Runs on the timer thread, so there is no caller to raise to
            handle.error = e
            self._audit_logger.log_error(
                error_type="scheduled_removal_failed",
                error_message=str(e),
                details={"expense_id": handle.expense_id},
                correlation_id=handle.correlation_id,
            )
        else:
            handle._fired = True
        finally:
            handle._done.set()
