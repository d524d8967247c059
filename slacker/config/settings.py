"""
Configuration Management for Slacker Meter

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The accrual formula constants, the storage location and the
default goal all live in one place and are validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TrackerSettings(BaseSettings):
    """Accrual and goal configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SLACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # The monthly salary is spread over this many paid seconds:
    # days_per_month * hours_per_day * 3600
    days_per_month: int = Field(
        default=30,
        ge=1,
        le=31,
        description="Working days a monthly salary is divided by"
    )
    hours_per_day: int = Field(
        default=8,
        ge=1,
        le=24,
        description="Working hours per day"
    )
    tick_interval_seconds: float = Field(
        default=1.0,
        gt=0.0,
        le=60.0,
        description="Cadence of the accrual tick in seconds"
    )
    default_goal_hours: float = Field(
        default=2.0,
        ge=0.0,
        le=24.0,
        description="Daily slacking goal shown on startup"
    )


class StorageSettings(BaseSettings):
    """History storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SLACKER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="json",
        pattern="^(json|memory)$",
        description="Key-value backend used for the history"
    )
    history_path: str = Field(
        default="slacker_history.json",
        description="Path of the JSON file backing the key-value store"
    )
    history_key: str = Field(
        default="slacker-history",
        min_length=1,
        description="Key the history payload is stored under"
    )

    @field_validator('history_path')
    @classmethod
    def validate_history_path(cls, v: str) -> str:
        """Reject paths that point at an existing directory."""
        if Path(v).is_dir():
            raise ValueError(f"History path {v} is a directory, expected a file")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
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

    # Display
    currency_label: str = Field(
        default="NTD",
        max_length=10,
        description="Currency shown next to amounts"
    )


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

    @property
    def tracker(self) -> TrackerSettings:
        return TrackerSettings()

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

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for every section that failed.
    """
    results = {}

    settings = get_settings()

    for name in ("tracker", "storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
