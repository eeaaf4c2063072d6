"""Tests for settings and application wiring."""

import pytest
from pydantic import ValidationError as SchemaError

from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.config.settings import AppSettings
from expense_tracker.ledger import encode_ledger
from expense_tracker.models import ExpenseRecord
from expense_tracker.orchestrator import create_app_components, create_storage
from expense_tracker.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
)


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("DELETE_DELAY_SECONDS", "CURRENCY_SYMBOL", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        app = get_settings().app

        assert app.delete_delay_seconds == 0.5
        assert app.currency_symbol == "₹"

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", " debug ")
        assert get_settings().app.log_level == "DEBUG"

    def test_delay_out_of_range(self, monkeypatch):
        monkeypatch.setenv("DELETE_DELAY_SECONDS", "60")
        with pytest.raises(SchemaError):
            AppSettings()

    def test_unknown_display_timezone_rejected(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        monkeypatch.setenv("DISPLAY_TIMEZONE", "Not/AZone")

        with pytest.raises(SchemaError):
            AppSettings()

        status = validate_all_settings()
        assert status["app"] is False
        assert "Not/AZone" in status["app_error"]

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_display_timezone_means_local_time(self, monkeypatch, value):
        monkeypatch.setenv("DISPLAY_TIMEZONE", value)
        assert AppSettings().display_timezone is None

    def test_validate_all_skips_sheets_for_other_backends(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        status = validate_all_settings()

        assert status["storage"] is True
        assert status["app"] is True
        assert "google_sheets" not in status

    def test_validate_all_reports_missing_sheets_config(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "google_sheets")
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        monkeypatch.chdir(tmp_path)

        status = validate_all_settings()

        assert status["google_sheets"] is False
        assert "google_sheets_error" in status

    def test_unknown_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "postgres")
        status = validate_all_settings()
        assert status["storage"] is False


class TestCreateStorage:

    def test_memory_backend(self):
        assert isinstance(create_storage("memory"), InMemoryKeyValueStore)

    def test_file_backend(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STORAGE_FILE_PATH", str(tmp_path / "store.json"))

        storage = create_storage("file")

        assert isinstance(storage, JsonFileKeyValueStore)
        assert storage.path == tmp_path / "store.json"

    def test_sheets_failure_falls_back_to_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)

        storage = create_storage("google_sheets")

        assert isinstance(storage, JsonFileKeyValueStore)


class TestCreateAppComponents:

    def test_loads_existing_ledger(self, monkeypatch):
        monkeypatch.setenv("DELETE_DELAY_SECONDS", "0.25")
        record = ExpenseRecord(title="Coffee", amount="150", category="Food")
        storage = InMemoryKeyValueStore({"expenses": encode_ledger([record])})

        store, scheduler = create_app_components(storage=storage)

        assert store.list() == (record,)
        assert scheduler.delay_seconds == 0.25

    def test_components_share_the_ledger(self):
        store, scheduler = create_app_components(backend="memory")
        record = store.add("Coffee", "150", "Food")

        handle = scheduler.request_delete(record.id)
        scheduler.flush()

        assert handle.fired is True
        assert len(store) == 0
