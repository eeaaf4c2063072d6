"""
Storage Services Package

Provides the abstract key-value interface and concrete implementations.
The JSON file backend is the default; Google Sheets and in-memory
stores are interchangeable with it.
"""

from expense_tracker.services.storage.interface import (
    ConnectionError,
    KeyValueStoreInterface,
    NotFoundError,
    StorageError,
)
from expense_tracker.services.storage.memory import InMemoryKeyValueStore
from expense_tracker.services.storage.json_file import JsonFileKeyValueStore
from expense_tracker.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
)

__all__ = [
    # Interface
    "KeyValueStoreInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]
