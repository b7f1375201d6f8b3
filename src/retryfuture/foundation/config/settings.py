"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated defaults for retry strategies and logging.
Supports .env files and nested configuration.

Example:
    >>> from retryfuture.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.retry.strategy
    'exponential'

    # Or with environment variables:
    # RETRYFUTURE_RETRY_STRATEGY=linear
    # RETRYFUTURE_RETRY_MAX_ATTEMPTS=10
    # RETRYFUTURE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeFloat, NonNegativeInt, PositiveFloat, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrySettings(BaseSettings):
    """Default retry strategy configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYFUTURE_RETRY_",
        extra="ignore",
    )

    strategy: Literal["linear", "exponential", "infinite"] = "exponential"
    max_attempts: NonNegativeInt | None = Field(default=None, description="Retries before exhaustion; None keeps the strategy default")
    delay: NonNegativeFloat = Field(default=0.5, description="Fixed delay for linear/infinite, seconds")
    initial_delay: NonNegativeFloat = Field(default=0.5, description="First exponential delay, seconds")
    base: PositiveFloat = Field(default=2.0, description="Exponential growth factor")
    max_delay: PositiveFloat | None = Field(default=None, description="Cap on exponential delay, seconds")
    retry_early_returned_errors: bool = True

    @field_validator("strategy", mode="before")
    @classmethod
    def _normalize_strategy(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v

    @computed_field
    @property
    def bounded(self) -> bool:
        """Whether the configured strategy can run out of attempts."""
        return self.strategy != "infinite"


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRYFUTURE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @field_validator("format", mode="before")
    @classmethod
    def _normalize_format(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v


class RetryFutureSettings(BaseSettings):
    """Root settings, loaded from RETRYFUTURE_* environment variables.

    Example environment variables:
        RETRYFUTURE_RETRY__STRATEGY=linear
        RETRYFUTURE_RETRY_DELAY=1.5
        RETRYFUTURE_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="RETRYFUTURE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    retry: RetrySettings = Field(default_factory=RetrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> RetryFutureSettings:
    """Get the global settings instance (cached)."""
    return RetryFutureSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
