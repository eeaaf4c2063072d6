"""
Abstract Storage Interface

DESIGN DECISION: The ledger talks to a plain key-value store.
This allows us to:
1. Swap the JSON file for Google Sheets (or anything else) without
   touching the ledger
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally tiny. The ledger writes its whole
collection under one key, so get/set/delete of string values is all
it needs.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for a durable key-value store.

    Values are opaque strings. Any storage implementation (in-memory,
    JSON file, Google Sheets, ...) must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: The key to read

        Returns:
            The stored value, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key.

        Args:
            key: The key to write
            value: The complete new value

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Args:
            key: The key to remove

        Returns:
            True if the key existed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
