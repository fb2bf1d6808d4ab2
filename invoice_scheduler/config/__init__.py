"""Configuration package."""

from invoice_scheduler.config.settings import (
    AppSettings,
    PersistenceSettings,
    SchedulingSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "PersistenceSettings",
    "SchedulingSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
