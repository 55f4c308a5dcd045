"""Configuration package."""

from finance_tracker.config.settings import (
    AppSettings,
    AuthSettings,
    ReportSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "AuthSettings",
    "ReportSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
