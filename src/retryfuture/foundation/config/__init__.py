"""Configuration management using pydantic-settings."""

from .settings import (
    LoggingSettings,
    RetryFutureSettings,
    RetrySettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "LoggingSettings",
    "RetryFutureSettings",
    "RetrySettings",
    "clear_settings_cache",
    "get_settings",
]
