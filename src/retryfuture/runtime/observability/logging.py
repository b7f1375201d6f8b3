"""Structured logging for retry cycles.

A cycle logs through a ``BoundLogger`` carrying its identity (``strategy``,
``cycle``). Event fields may hold retry values directly; renderers know how
to show them:

- ``RetryError``: reason and attempt count; the console also prints the full
  attempt history below the event line, JSON lists each outcome
- ``ContextError``: its note chain (JSON: the model dump, without the source)
- ``Retryable`` / ``Terminal`` / ``Exhausted``: their short string form
- ``delay``: seconds

Quick Start:
    >>> from retryfuture.runtime.observability import configure_logging, get_logger
    >>> configure_logging(format="json", level="DEBUG")
    >>> log = get_logger("retryfuture.retry", cycle="charge")
    >>> log.info("retrying", attempt=1, delay=0.5)
    {"timestamp": "...", "level": "info", "logger": "retryfuture.retry", "event": "retrying", "cycle": "charge", ...}
"""

from __future__ import annotations

import logging
import sys
import textwrap
import time
from contextvars import ContextVar
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol, TextIO, runtime_checkable

import orjson

from retryfuture.foundation.config import get_settings
from retryfuture.foundation.errors import ContextError, Exhausted, Retryable, RetryError, Terminal

_SHORT_FORM = (ContextError, Retryable, Terminal, Exhausted)


@dataclass(slots=True, frozen=True)
class LogEvent:
    """One event of a retry cycle, ready to render."""

    level: int
    event: str
    logger: str | None
    fields: dict[str, object]
    timestamp: float = field(default_factory=time.time)

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.level).lower()


@dataclass(slots=True, frozen=True)
class BoundLogger:
    """Immutable logger; ``bind()`` returns a copy with extra fields.

    Example:
        >>> log = BoundLogger("retryfuture.retry", {"cycle": "fetch"})
        >>> log.info("attempt failed", attempt=0, outcome=Retryable())
        # => 10:30:45.123 info    retryfuture.retry attempt failed attempt=0 cycle=fetch outcome=retry
    """

    name: str | None = None
    context: dict[str, object] = field(default_factory=dict)
    level: int = logging.INFO
    renderer: LogRenderer | None = None

    def bind(self, **fields: object) -> BoundLogger:
        return replace(self, context={**self.context, **fields})

    def log(self, level: int, event: str, **fields: object) -> None:
        if level >= self.level:
            (self.renderer or _current_renderer()).render(LogEvent(level, event, self.name, {**self.context, **fields}))

    def debug(self, event: str, **fields: object) -> None: self.log(logging.DEBUG, event, **fields)
    def info(self, event: str, **fields: object) -> None: self.log(logging.INFO, event, **fields)
    def warning(self, event: str, **fields: object) -> None: self.log(logging.WARNING, event, **fields)
    def error(self, event: str, **fields: object) -> None: self.log(logging.ERROR, event, **fields)


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class LogRenderer(Protocol):
    def render(self, event: LogEvent) -> None: ...


@dataclass(slots=True)
class ConsoleRenderer:
    """``HH:MM:SS.mmm level logger event key=value ...``, then any RetryError history indented."""

    output: TextIO = field(default_factory=lambda: sys.stderr)

    def render(self, event: LogEvent) -> None:
        ts = datetime.fromtimestamp(event.timestamp, tz=UTC).strftime("%H:%M:%S.%f")[:-3]
        head = [ts, f"{event.level_name:<7}", *([event.logger] if event.logger else []), event.event]
        pairs = [f"{k}={_console_value(k, v)}" for k, v in sorted(event.fields.items())]
        print(" ".join(head + pairs), file=self.output)
        for value in event.fields.values():
            if isinstance(value, RetryError):
                print(textwrap.indent(value.render(), "    "), file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """JSON Lines via orjson; retry values become plain JSON."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, event: LogEvent) -> None:
        record: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(event.timestamp, tz=UTC).isoformat(),
            "level": event.level_name,
            **({"logger": event.logger} if event.logger else {}),
            "event": event.event,
        }
        record.update((k, _json_value(v)) for k, v in event.fields.items())
        print(orjson.dumps(record, default=str).decode(), file=self.output)


@dataclass(slots=True)
class NoOpRenderer:
    def render(self, event: LogEvent) -> None:
        pass


def _console_value(key: str, value: object) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int | float):
        return f"{value:g}s" if key == "delay" else str(value)
    if isinstance(value, RetryError):
        text = f"{value.reason.value} after {value.attempts} attempt(s)"
    elif isinstance(value, (str, *_SHORT_FORM)):
        text = str(value)
    else:
        return repr(value)
    return f'"{text}"' if not text or " " in text else text


def _json_value(value: object) -> object:
    if isinstance(value, RetryError):
        return {
            "reason": value.reason.value,
            "attempts": value.attempts,
            "outcomes": [str(o) for o in value],
            "exhausted": str(value.exhausted) if value.exhausted is not None else None,
        }
    if isinstance(value, ContextError):
        return value.model_dump(mode="json")
    if isinstance(value, _SHORT_FORM):
        return str(value)
    return value


# ─────────────────────────────────────────────────────────────────────────────
# Configuration
# ─────────────────────────────────────────────────────────────────────────────


_renderer: ContextVar[LogRenderer | None] = ContextVar("retryfuture_log_renderer", default=None)
_default_level: ContextVar[int | None] = ContextVar("retryfuture_log_level", default=None)


def configure_logging(
    format: str | None = None,  # noqa: A002 - matches LoggingSettings.format
    level: str | None = None,
    *,
    output: TextIO | None = None,
) -> LogRenderer:
    """Select the renderer and minimum level for retry loggers created afterwards.

    Each unset argument is taken from ``LoggingSettings``, not from a previous call.

    Raises:
        ValueError: If format is not "console", "json" or "none"
    """
    settings = get_settings().logging
    fmt, lvl = (format or settings.format).lower(), (level or settings.level).upper()
    match fmt:
        case "console": renderer: LogRenderer = ConsoleRenderer(output or sys.stderr)
        case "json": renderer = JsonRenderer(output or sys.stdout)
        case "none": renderer = NoOpRenderer()
        case _: raise ValueError(f"Unknown format: {fmt}. Use 'console', 'json', or 'none'")
    _default_level.set(logging.getLevelNamesMapping().get(lvl, logging.INFO))
    _renderer.set(renderer)
    return renderer


def get_logger(name: str | None = None, **fields: object) -> BoundLogger:
    """Logger at the configured level (or the settings level), with ``fields`` bound."""
    if (level := _default_level.get()) is None:
        level = logging.getLevelNamesMapping().get(get_settings().logging.level, logging.INFO)
    return BoundLogger(name, dict(fields), level)


def _current_renderer() -> LogRenderer:
    if (renderer := _renderer.get()) is None:
        renderer = configure_logging()
    return renderer
