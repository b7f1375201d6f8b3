"""Structured logging: retry-aware events rendered to console or JSON lines."""

from .logging import (
    BoundLogger,
    ConsoleRenderer,
    JsonRenderer,
    LogEvent,
    LogRenderer,
    NoOpRenderer,
    configure_logging,
    get_logger,
)

__all__ = [
    "BoundLogger",
    "ConsoleRenderer",
    "JsonRenderer",
    "LogEvent",
    "LogRenderer",
    "NoOpRenderer",
    "configure_logging",
    "get_logger",
]
