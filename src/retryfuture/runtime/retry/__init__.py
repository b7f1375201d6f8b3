"""Retry cycles over asynchronous operations.

Provides the retry driver, the backoff strategy protocol with its built-in
strategies, and operation factory helpers.

Example:
    >>> from retryfuture.runtime.retry import RetryFuture, LinearRetryStrategy
    >>> from retryfuture.foundation.errors import fail, repeat
    >>>
    >>> async def charge() -> Receipt:
    ...     resp = await gateway.post("/charge", json=payload)
    ...     if resp.status_code == 402:
    ...         fail("card declined")
    ...     if resp.status_code == 503:
    ...         repeat()
    ...     return Receipt.model_validate_json(resp.content)
    >>>
    >>> result = await RetryFuture(charge, LinearRetryStrategy().with_delay(2.0), name="charge")
"""

from .factory import OperationFactory, factory_of, produce
from .future import RetryFuture, RetryState, Sleep
from .strategy import (
    ExponentialRetryStrategy,
    InfiniteRetryStrategy,
    LinearRetryStrategy,
    RetryStrategy,
    retries_early_returned,
    strategy_from_settings,
)

__all__ = [
    # Driver
    "RetryFuture",
    "RetryState",
    "Sleep",
    # Strategies
    "RetryStrategy",
    "LinearRetryStrategy",
    "ExponentialRetryStrategy",
    "InfiniteRetryStrategy",
    "retries_early_returned",
    "strategy_from_settings",
    # Factories
    "OperationFactory",
    "factory_of",
    "produce",
]
