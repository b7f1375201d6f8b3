"""Tests for environment configuration and preconfigured strategies."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from retryfuture import (
    ExponentialRetryStrategy,
    InfiniteRetryStrategy,
    LinearRetryStrategy,
    RetrySettings,
    get_settings,
    strategy_from_settings,
)
from retryfuture.foundation.config import LoggingSettings, clear_settings_cache


def test_defaults() -> None:
    settings = get_settings()
    assert settings.retry.strategy == "exponential"
    assert settings.retry.retry_early_returned_errors
    assert settings.logging.level == "INFO"
    assert settings.logging.format == "console"


def test_default_strategy_is_exponential() -> None:
    assert strategy_from_settings() == ExponentialRetryStrategy()


def test_environment_selects_linear(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RETRYFUTURE_RETRY_STRATEGY", "Linear")
    monkeypatch.setenv("RETRYFUTURE_RETRY_MAX_ATTEMPTS", "10")
    monkeypatch.setenv("RETRYFUTURE_RETRY_DELAY", "0.25")
    monkeypatch.setenv("RETRYFUTURE_RETRY_RETRY_EARLY_RETURNED_ERRORS", "false")
    clear_settings_cache()

    assert strategy_from_settings() == LinearRetryStrategy(10, 0.25, False)


def test_settings_are_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("RETRYFUTURE_RETRY_STRATEGY", "infinite")
    assert get_settings() is first
    clear_settings_cache()
    assert get_settings().retry.strategy == "infinite"


def test_explicit_settings() -> None:
    exp = strategy_from_settings(RetrySettings(max_attempts=5, initial_delay=1.0, base=3, max_delay=20.0))
    assert exp == ExponentialRetryStrategy(base=3, max_attempts=5, initial_delay=1.0, max_delay=20.0)

    inf = strategy_from_settings(RetrySettings(strategy="infinite", delay=2.0))
    assert inf == InfiniteRetryStrategy(delay=2.0)
    assert not RetrySettings(strategy="infinite").bounded


def test_invalid_values_rejected() -> None:
    with pytest.raises(ValidationError):
        RetrySettings(max_attempts=-1)
    with pytest.raises(ValidationError):
        RetrySettings(strategy="fibonacci")


def test_logging_settings_normalized(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RETRYFUTURE_LOG_LEVEL", "debug")
    monkeypatch.setenv("RETRYFUTURE_LOG_FORMAT", "JSON")
    settings = LoggingSettings()
    assert (settings.level, settings.format) == ("DEBUG", "json")


@pytest.mark.parametrize(("name", "expected"), [
    ("linear", LinearRetryStrategy()),
    ("exponential", ExponentialRetryStrategy()),
    ("infinite", InfiniteRetryStrategy()),
])
def test_unset_budget_keeps_strategy_default(
    monkeypatch: pytest.MonkeyPatch, name: str, expected: object,
) -> None:
    monkeypatch.setenv("RETRYFUTURE_RETRY_STRATEGY", name)
    assert get_settings().retry.max_attempts is None
    assert strategy_from_settings() == expected


@pytest.mark.parametrize("field", ["base", "max_delay"])
def test_growth_parameters_must_be_positive(field: str) -> None:
    with pytest.raises(ValidationError):
        RetrySettings(**{field: 0})
    with pytest.raises(ValueError, match="must be positive"):
        ExponentialRetryStrategy(**{field: 0})
