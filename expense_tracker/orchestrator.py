"""
Application Wiring for Expense Tracker

Builds the storage backend, ledger store and deletion scheduler from
settings, so a view only has to ask for the components and use them.

Flow per user action:
1. View calls a ledger mutator (add / request_delete)
2. Ledger updates its collection and persists it
3. Ledger notifies listeners; the view re-derives everything with
   expense_tracker.queries and expense_tracker.formatting
"""

from typing import Optional

import structlog

from expense_tracker.audit import AuditLogger, setup_logging
from expense_tracker.config import get_settings
from expense_tracker.ledger import DeletionScheduler, LedgerStore
from expense_tracker.services.storage import (
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
)


logger = structlog.get_logger(__name__)


def create_storage(backend: Optional[str] = None) -> KeyValueStoreInterface:
    """
    Create the configured key-value backend.

    If Google Sheets is selected but cannot be set up, falls back to the
    local JSON file so the tracker still works.
    """
    settings = get_settings()
    backend = backend or settings.storage.backend

    if backend == "memory":
        return InMemoryKeyValueStore()

    if backend == "google_sheets":
        try:
            return GoogleSheetsKeyValueStore()
        except Exception as e:
            logger.warning(
                "storage_fallback",
                requested="google_sheets",
                using="file",
                error=str(e),
            )

    return JsonFileKeyValueStore(settings.storage.file_path)


def create_app_components(
    storage: Optional[KeyValueStoreInterface] = None,
    backend: Optional[str] = None,
) -> tuple[LedgerStore, DeletionScheduler]:
    """
    Factory function to create all application components.

    Args:
        storage: Use this backend instead of the configured one
        backend: Override the configured backend name

    Returns:
        (ledger_store, deletion_scheduler), with the ledger already loaded
    """
    settings = get_settings()
    setup_logging(settings.app.log_level)

    audit_logger = AuditLogger()
    store = LedgerStore(
        storage=storage or create_storage(backend),
        key=settings.storage.ledger_key,
        audit_logger=audit_logger,
    )
    store.load()

    scheduler = DeletionScheduler(
        store,
        delay_seconds=settings.app.delete_delay_seconds,
        audit_logger=audit_logger,
    )

    return store, scheduler
