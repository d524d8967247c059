"""Configuration package."""

from slacker.config.settings import (
    AppSettings,
    Settings,
    StorageSettings,
    TrackerSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "Settings",
    "StorageSettings",
    "TrackerSettings",
    "get_settings",
    "validate_all_settings",
]
