"""Tests for retry-aware structured logging."""

from __future__ import annotations

import io
import logging

import orjson
import pytest

from retryfuture import ContextError, Exhausted, Retryable, RetryError, StopReason, Terminal
from retryfuture.runtime.observability import (
    BoundLogger,
    ConsoleRenderer,
    JsonRenderer,
    NoOpRenderer,
    configure_logging,
    get_logger,
)


def _lines(buf: io.StringIO) -> list[dict[str, object]]:
    return [orjson.loads(line) for line in buf.getvalue().splitlines()]


def _exhausted() -> RetryError[str]:
    history = [Retryable(), Retryable(ContextError.msg("503"), early_returned=True)]
    return RetryError(history, StopReason.EXHAUSTED, Exhausted(2, 2))


# ─────────────────────────────────────────────────────────────────────────────
# Console
# ─────────────────────────────────────────────────────────────────────────────


def test_console_line_layout() -> None:
    buf = io.StringIO()
    log = BoundLogger("retryfuture.retry", {"cycle": "fetch"}, renderer=ConsoleRenderer(buf))

    log.info("retrying", attempt=2, delay=0.25, early_returned=True)

    _, level, rest = buf.getvalue().rstrip("\n").split(" ", 2)
    assert level == "info"
    assert rest.lstrip() == "retryfuture.retry retrying attempt=2 cycle=fetch delay=0.25s early_returned=true"


def test_console_renders_outcomes_by_string_form() -> None:
    buf = io.StringIO()
    log = BoundLogger(renderer=ConsoleRenderer(buf))

    log.info("attempt failed", outcome=Retryable(ContextError.msg("busy")))
    log.info("attempt failed", outcome=Terminal(400))

    first, second = buf.getvalue().splitlines()
    assert first.endswith('outcome="retry: busy"')
    assert second.endswith('outcome="fail: 400"')


def test_console_prints_retry_error_history() -> None:
    buf = io.StringIO()
    BoundLogger(renderer=ConsoleRenderer(buf)).warning("retry cycle failed", error=_exhausted())

    header, *history = buf.getvalue().splitlines()
    assert header.endswith('error="exhausted after 2 attempt(s)"')
    assert all(line.startswith("    ") for line in history)
    assert "    Early-returned: 503" in history
    assert history[-1] == "    retry budget exhausted after 2 of 2 retries"


# ─────────────────────────────────────────────────────────────────────────────
# JSON
# ─────────────────────────────────────────────────────────────────────────────


def test_json_record_fields() -> None:
    buf = io.StringIO()
    log = BoundLogger("retryfuture.retry", renderer=JsonRenderer(buf)).bind(strategy="LinearRetryStrategy")

    log.info("retrying", attempt=1, delay=0.5)

    (record,) = _lines(buf)
    assert (record["level"], record["logger"], record["event"]) == ("info", "retryfuture.retry", "retrying")
    assert (record["attempt"], record["delay"], record["strategy"]) == (1, 0.5, "LinearRetryStrategy")
    assert "timestamp" in record


def test_json_expands_retry_error() -> None:
    buf = io.StringIO()
    BoundLogger(renderer=JsonRenderer(buf)).warning("retry cycle failed", error=_exhausted())

    (record,) = _lines(buf)
    assert record["error"] == {
        "reason": "exhausted",
        "attempts": 2,
        "outcomes": ["retry", "early-returned: 503"],
        "exhausted": "retry budget exhausted after 2 of 2 retries",
    }


def test_json_dumps_context_without_source() -> None:
    buf = io.StringIO()
    ctx = ContextError.from_exc(KeyError("id")).with_context("parsing")
    BoundLogger(renderer=JsonRenderer(buf)).info("attempt failed", context=ctx, outcome=Retryable(ctx, True))

    (record,) = _lines(buf)
    assert record["context"]["notes"] == ["parsing"]
    assert record["context"]["source_type"] == "KeyError"
    assert "source" not in record["context"]
    assert record["outcome"].startswith("early-returned: parsing")


# ─────────────────────────────────────────────────────────────────────────────
# Logger & configuration
# ─────────────────────────────────────────────────────────────────────────────


def test_level_filtering() -> None:
    buf = io.StringIO()
    log = BoundLogger(level=logging.WARNING, renderer=JsonRenderer(buf))

    log.debug("hidden")
    log.info("hidden")
    log.error("shown")

    assert [e["event"] for e in _lines(buf)] == ["shown"]


def test_bind_does_not_mutate() -> None:
    base = BoundLogger(context={"cycle": "a"})
    child = base.bind(strategy="InfiniteRetryStrategy")
    assert base.context == {"cycle": "a"}
    assert child.context == {"cycle": "a", "strategy": "InfiniteRetryStrategy"}


def test_configure_logging_selects_renderer() -> None:
    assert isinstance(configure_logging("json", "debug", output=io.StringIO()), JsonRenderer)
    assert get_logger().level == logging.DEBUG
    assert isinstance(configure_logging("none", "debug"), NoOpRenderer)
    assert get_logger().level == logging.DEBUG


def test_unset_level_falls_back_to_settings_not_previous_call() -> None:
    configure_logging("json", "debug", output=io.StringIO())
    configure_logging("none")
    assert get_logger().level == logging.INFO


def test_configure_logging_reads_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RETRYFUTURE_LOG_FORMAT", "none")
    monkeypatch.setenv("RETRYFUTURE_LOG_LEVEL", "error")
    assert isinstance(configure_logging(), NoOpRenderer)
    assert get_logger().level == logging.ERROR


def test_configure_logging_rejects_unknown_format() -> None:
    with pytest.raises(ValueError, match="Unknown format"):
        configure_logging("xml")


def test_get_logger_binds_fields() -> None:
    log = get_logger("retryfuture.retry", cycle="sync")
    assert log.name == "retryfuture.retry"
    assert log.context == {"cycle": "sync"}
