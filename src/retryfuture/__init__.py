"""retryfuture - retry asynchronous operations until they resolve.

Give it a factory producing a fresh awaitable per attempt and a backoff
strategy; awaiting the RetryFuture yields the first successful value or a
RetryError recording every failed attempt in order.

Quick Start:
    >>> from retryfuture import ExponentialRetryStrategy, RetryFuture, fail, repeat
    >>>
    >>> async def fetch() -> httpx.Response:
    ...     resp = await client.get("https://example.com")  # errors here retry as "early-returned"
    ...     if resp.status_code in (400, 403):
    ...         fail("cannot recover from this")
    ...     if resp.status_code == 401:
    ...         repeat(resp.text)                          # explicit retry with context
    ...     return resp
    >>>
    >>> result = await RetryFuture(fetch, ExponentialRetryStrategy().with_max_attempts(5).with_initial_delay(0.1))
    >>> if result.is_err():
    ...     print(result.unwrap_err())                       # every attempt, in order

Treat connection-level failures as fatal:
    >>> strategy = LinearRetryStrategy().with_retry_early_returned_errors(False)

Configuration via environment (see retryfuture.foundation.config):
    RETRYFUTURE_RETRY_STRATEGY=linear RETRYFUTURE_RETRY_MAX_ATTEMPTS=10
    >>> strategy = strategy_from_settings()
"""

__version__ = "0.1.0"

from .foundation.config import LoggingSettings, RetryFutureSettings, RetrySettings, get_settings
from .foundation.errors import (
    ContextError,
    Err,
    Exhausted,
    Ok,
    Outcome,
    Result,
    Retryable,
    RetryError,
    RetrySignal,
    StopReason,
    Terminal,
    classify,
    fail,
    into_retryable,
    repeat,
)
from .runtime.observability import configure_logging, get_logger
from .runtime.retry import (
    ExponentialRetryStrategy,
    InfiniteRetryStrategy,
    LinearRetryStrategy,
    OperationFactory,
    RetryFuture,
    RetryState,
    RetryStrategy,
    factory_of,
    strategy_from_settings,
)

__all__ = [
    "__version__",
    # Driver
    "RetryFuture",
    "RetryState",
    "OperationFactory",
    "factory_of",
    # Strategies
    "RetryStrategy",
    "LinearRetryStrategy",
    "ExponentialRetryStrategy",
    "InfiniteRetryStrategy",
    "strategy_from_settings",
    # Outcomes
    "Result",
    "Ok",
    "Err",
    "Outcome",
    "Retryable",
    "Terminal",
    "RetrySignal",
    "ContextError",
    "classify",
    "fail",
    "repeat",
    "into_retryable",
    # Cycle failure
    "RetryError",
    "StopReason",
    "Exhausted",
    # Configuration & logging
    "RetryFutureSettings",
    "RetrySettings",
    "LoggingSettings",
    "get_settings",
    "configure_logging",
    "get_logger",
]
