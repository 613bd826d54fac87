"""Tests for configuration and component wiring."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from budgetbook.config import (
    AppSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)
from budgetbook.ledger import BudgetLedger, create_app_components
from budgetbook.services.storage import XmlTransactionStorage


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestStorageSettings:
    """Tests for StorageSettings."""

    def test_defaults(self, monkeypatch):
        """Test default file names."""
        monkeypatch.delenv("BUDGETBOOK_STORAGE_DATA_DIR", raising=False)
        settings = StorageSettings()
        assert settings.transactions_path == Path(".") / "transaction.xml"
        assert settings.tags_path == Path(".") / "tags.xml"
        assert settings.write_attempts == 3

    def test_from_environment(self, monkeypatch, tmp_path):
        """Settings are read from prefixed environment variables."""
        monkeypatch.setenv("BUDGETBOOK_STORAGE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("BUDGETBOOK_STORAGE_WRITE_ATTEMPTS", "5")
        settings = StorageSettings()
        assert settings.transactions_path == tmp_path / "transaction.xml"
        assert settings.write_attempts == 5

    def test_rejects_nested_file_name(self):
        """Store files must be bare names."""
        with pytest.raises(ValidationError):
            StorageSettings(transactions_file="sub/transaction.xml")

    def test_rejects_out_of_range_attempts(self):
        """Write attempts are bounded."""
        with pytest.raises(ValidationError):
            StorageSettings(write_attempts=0)


class TestAppSettings:
    """Tests for AppSettings."""

    def test_log_level_is_normalized(self):
        """Log levels are upper-cased."""
        assert AppSettings(log_level=" debug ").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        """Test unknown levels are rejected."""
        with pytest.raises(ValidationError):
            AppSettings(log_level="loud")

    def test_threshold_from_environment(self, monkeypatch):
        """Thresholds are read from the environment."""
        monkeypatch.setenv("BUDGETBOOK_MAX_TRANSACTION_AMOUNT", "250")
        assert AppSettings().max_transaction_amount == 250.0


class TestValidateAllSettings:
    """Tests for the startup check."""

    def test_all_valid(self, monkeypatch, tmp_path):
        """A directory data_dir is valid."""
        monkeypatch.setenv("BUDGETBOOK_STORAGE_DATA_DIR", str(tmp_path))
        assert validate_all_settings() == {"storage": True, "app": True}

    def test_data_dir_is_a_file(self, monkeypatch, tmp_path):
        """A regular file as data_dir is reported."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        monkeypatch.setenv("BUDGETBOOK_STORAGE_DATA_DIR", str(blocker))
        results = validate_all_settings()
        assert results["storage"] is False
        assert "storage_error" in results

    def test_bad_app_setting_reported(self, monkeypatch):
        """Invalid app settings are reported, not raised."""
        monkeypatch.setenv("BUDGETBOOK_LOG_LEVEL", "loud")
        results = validate_all_settings()
        assert results["app"] is False
        assert "app_error" in results


class TestCreateAppComponents:
    """Tests for the component factory."""

    def test_wires_xml_store(self, monkeypatch, tmp_path):
        """The ledger is wired to files under data_dir."""
        monkeypatch.setenv("BUDGETBOOK_STORAGE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("BUDGETBOOK_AUDIT_HISTORY_SIZE", "10")
        ledger, storage, audit_logger = create_app_components()

        assert isinstance(ledger, BudgetLedger)
        assert isinstance(storage, XmlTransactionStorage)
        assert storage.transactions_path == tmp_path / "transaction.xml"
        assert ledger.audit_logger is audit_logger
        assert ledger.transactions() == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
