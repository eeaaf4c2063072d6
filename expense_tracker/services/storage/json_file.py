"""
JSON File Storage Implementation

The default backend: one JSON object on local disk mapping keys to
string values, the local equivalent of a browser's key-value storage.

TRADEOFFS:
- Every write rewrites the whole file (fine for a personal ledger)
- Writes go to a temp file first and are swapped in with os.replace,
  so a crash mid-write never leaves a half-written store behind
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from expense_tracker.config import get_settings
from expense_tracker.services.storage.interface import KeyValueStoreInterface, StorageError


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStoreInterface):
    """
    Key-value store persisted as a single JSON object on disk.

    The file is created on first write. A missing file reads as an
    empty store.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self._path = Path(path or get_settings().storage.file_path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        """Read the whole store. Raises StorageError if unreadable."""
        if not self._path.exists():
            return {}

        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read store file {self._path}: {e}")

        if not text.strip():
            return {}

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageError(f"Store file {self._path} is not valid JSON: {e}")

        if not isinstance(data, dict):
            raise StorageError(f"Store file {self._path} does not hold a JSON object")

        return data

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _write_all(self, data: dict[str, str]) -> None:
        """Atomically replace the store file."""
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            "w",
            dir=directory,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            encoding="utf-8",
            delete=False,
        ) as tmp_file:
            json.dump(data, tmp_file, ensure_ascii=False, indent=2)
            tmp_name = tmp_file.name

        try:
            os.replace(tmp_name, self._path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise StorageError(f"Value under '{key}' is not a string")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except StorageError as e:
            # Same as overwriting a corrupt browser storage entry
            logger.warning("store_file_reset", path=str(self._path), error=str(e))
            data = {}

        data[key] = value

        try:
            self._write_all(data)
        except OSError as e:
            raise StorageError(f"Failed to write store file {self._path}: {e}")

    def delete(self, key: str) -> bool:
        data = self._read_all()
        if key not in data:
            return False

        del data[key]
        try:
            self._write_all(data)
        except OSError as e:
            raise StorageError(f"Failed to write store file {self._path}: {e}")
        return True
