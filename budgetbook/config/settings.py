"""
Configuration Management for budgetbook

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see where data lives and ensures all configuration
is validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local record store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BUDGETBOOK_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("."),
        description="Directory holding the store files"
    )
    transactions_file: str = Field(
        default="transaction.xml",
        description="File name of the transaction store"
    )
    tags_file: str = Field(
        default="tags.xml",
        description="File name of the tag store"
    )
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a store write before giving up"
    )

    @field_validator('transactions_file', 'tags_file')
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        """Store files live directly inside data_dir."""
        if not v or Path(v).name != v:
            raise ValueError(f"Expected a bare file name, got: {v!r}")
        return v

    @property
    def transactions_path(self) -> Path:
        return self.data_dir / self.transactions_file

    @property
    def tags_path(self) -> Path:
        return self.data_dir / self.tags_file


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGETBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for the structured log"
    )

    # Validation thresholds
    max_transaction_amount: float = Field(
        default=1000000.0,
        gt=0,
        description="Amount above which a transaction is flagged (sanity check)"
    )
    future_date_horizon_days: int = Field(
        default=3650,
        ge=0,
        description="How far in the future a scheduled transaction may be before it is flagged"
    )

    # Audit
    audit_history_size: int = Field(
        default=500,
        ge=0,
        description="Number of audit events kept in memory"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Note: These are loaded lazily to allow partial configuration

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus an "<name>_error"
    entry for every section that failed. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        storage = settings.storage
        if storage.data_dir.exists() and not storage.data_dir.is_dir():
            raise ValueError(f"Data directory is not a directory: {storage.data_dir}")
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
