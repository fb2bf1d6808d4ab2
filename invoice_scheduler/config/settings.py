"""
Configuration Management for the Invoice Scheduler

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The scheduling formula itself (urgency, amount and month bonuses) is not
configurable; only operational knobs are.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchedulingSettings(BaseSettings):
    """Payday assignment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SCHEDULER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    soft_capacity: int = Field(
        default=5,
        ge=1,
        description="Invoices per payday before load balancing kicks in"
    )


class PersistenceSettings(BaseSettings):
    """Retry behaviour for priority writes."""

    model_config = SettingsConfigDict(
        env_prefix="PERSIST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts per invoice before the write is reported as failed"
    )
    backoff_multiplier: float = Field(
        default=1.0,
        ge=0.0,
        description="Exponential backoff multiplier in seconds"
    )
    backoff_min_seconds: float = Field(
        default=2.0,
        ge=0.0
    )
    backoff_max_seconds: float = Field(
        default=10.0,
        ge=0.0
    )

    @field_validator('backoff_max_seconds')
    @classmethod
    def validate_backoff_window(cls, v: float, info) -> float:
        """Max backoff must not be below min backoff."""
        minimum = info.data.get("backoff_min_seconds")
        if minimum is not None and v < minimum:
            raise ValueError("backoff_max_seconds cannot be below backoff_min_seconds")
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
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for local structured logs"
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
    def scheduling(self) -> SchedulingSettings:
        return SchedulingSettings()

    @property
    def persistence(self) -> PersistenceSettings:
        return PersistenceSettings()

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

    Returns a dict of {setting_name: is_valid}, plus a "<name>_error"
    entry for every section that failed. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("scheduling", "persistence", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
