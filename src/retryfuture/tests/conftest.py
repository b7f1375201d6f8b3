"""Shared fixtures for retryfuture tests."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from retryfuture.foundation.config import clear_settings_cache
from retryfuture.runtime.observability import logging as log_module


class FakeSleep:
    """Timer double recording requested delays without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from RETRYFUTURE_* environment and cached settings."""
    for key in [k for k in os.environ if k.startswith("RETRYFUTURE_")]:
        monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop any renderer or level configured by a test."""
    renderer, level = log_module._renderer.set(None), log_module._default_level.set(None)
    yield
    log_module._default_level.reset(level)
    log_module._renderer.reset(renderer)


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()
