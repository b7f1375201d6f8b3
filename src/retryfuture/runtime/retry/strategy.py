"""Backoff strategies deciding whether, and how long, to wait before a retry.

A strategy maps the number of failed attempts so far to either a delay in
seconds or ``Exhausted``:
- LinearRetryStrategy: constant delay, bounded attempts
- ExponentialRetryStrategy: delay grows as initial_delay * base^attempt
- InfiniteRetryStrategy: constant delay, never exhausted

Strategies are mutable and may keep private counters across calls; the driver
holds the instance exclusively for one cycle and hands it back untouched
otherwise, so callers can inspect it afterwards.

Example:
    >>> strategy = ExponentialRetryStrategy().with_max_attempts(5).with_initial_delay(0.1)
    >>> [strategy.check_attempt(k).unwrap() for k in range(3)]
    [0.1, 0.2, 0.4]
    >>> strategy.check_attempt(5).is_err()
    True
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Protocol, Self, runtime_checkable

from retryfuture.foundation.config import get_settings
from retryfuture.foundation.errors import Err, Exhausted, Ok, Result

if TYPE_CHECKING:
    from retryfuture.foundation.config import RetrySettings


@runtime_checkable
class RetryStrategy(Protocol):
    """Protocol for backoff decisions.

    ``check_attempt`` is called with 0, 1, 2, ... (the count of prior failed
    attempts in the cycle) and must treat that value as authoritative.
    Implementations may also define ``retry_early_returned_errors()``; when
    absent, early-returned failures are retried.
    """

    def check_attempt(self, attempt: int) -> Result[float, Exhausted]:
        """Delay in seconds before the next attempt, or Err(Exhausted)."""
        ...


def retries_early_returned(strategy: RetryStrategy) -> bool:
    """Ask a strategy whether early-returned failures may be retried (default: yes)."""
    check = getattr(strategy, "retry_early_returned_errors", None)
    return True if check is None else bool(check())


def _require_non_negative(**values: float | None) -> None:
    for name, value in values.items():
        if value is not None and value < 0:
            raise ValueError(f"{name} must be non-negative, got {value!r}")


def _require_positive(**values: float | None) -> None:
    for name, value in values.items():
        if value is not None and value <= 0:
            raise ValueError(f"{name} must be positive, got {value!r}")


class _EarlyReturnToggle:
    """Shared early-return policy accessors for the built-in strategies."""

    __slots__ = ()

    retry_early_returned: bool

    def retry_early_returned_errors(self) -> bool:
        return self.retry_early_returned

    def with_retry_early_returned_errors(self, enabled: bool) -> Self:
        """Return a copy that does (or does not) retry early-returned failures."""
        return replace(self, retry_early_returned=enabled)  # type: ignore[type-var]


@dataclass(slots=True)
class LinearRetryStrategy(_EarlyReturnToggle):
    """Constant delay between attempts, bounded number of retries.

    Attributes:
        max_attempts: Retries allowed; exhausted when attempt reaches it (default: 5)
        delay: Seconds between attempts (default: 0.5)
        retry_early_returned: Retry failures converted from exceptions (default: True)
    """

    max_attempts: int = 5
    delay: float = 0.5
    retry_early_returned: bool = True

    def __post_init__(self) -> None:
        _require_non_negative(max_attempts=self.max_attempts, delay=self.delay)

    def check_attempt(self, attempt: int) -> Result[float, Exhausted]:
        if attempt >= self.max_attempts:
            return Err(Exhausted(attempt, self.max_attempts))
        return Ok(self.delay)

    def with_max_attempts(self, max_attempts: int) -> LinearRetryStrategy:
        return replace(self, max_attempts=max_attempts)

    def with_delay(self, delay: float) -> LinearRetryStrategy:
        return replace(self, delay=delay)


@dataclass(slots=True)
class ExponentialRetryStrategy(_EarlyReturnToggle):
    """Delay multiplied by ``base`` after every failed attempt.

    Delay = initial_delay * base^attempt, capped at max_delay when set.

    Attributes:
        base: Growth factor (default: 2)
        max_attempts: Retries allowed (default: 3)
        initial_delay: Delay before the first retry, seconds (default: 0.5)
        max_delay: Optional cap on any single delay, seconds
        retry_early_returned: Retry failures converted from exceptions (default: True)
    """

    base: float = 2
    max_attempts: int = 3
    initial_delay: float = 0.5
    max_delay: float | None = None
    retry_early_returned: bool = True

    def __post_init__(self) -> None:
        _require_non_negative(max_attempts=self.max_attempts, initial_delay=self.initial_delay)
        _require_positive(base=self.base, max_delay=self.max_delay)

    def delay_for(self, attempt: int) -> float:
        d = self.initial_delay * self.base ** attempt
        return d if self.max_delay is None else min(d, self.max_delay)

    def check_attempt(self, attempt: int) -> Result[float, Exhausted]:
        if attempt >= self.max_attempts:
            return Err(Exhausted(attempt, self.max_attempts))
        return Ok(self.delay_for(attempt))

    def with_base(self, base: float) -> ExponentialRetryStrategy:
        return replace(self, base=base)

    def with_max_attempts(self, max_attempts: int) -> ExponentialRetryStrategy:
        return replace(self, max_attempts=max_attempts)

    def with_initial_delay(self, initial_delay: float) -> ExponentialRetryStrategy:
        return replace(self, initial_delay=initial_delay)

    def with_max_delay(self, max_delay: float | None) -> ExponentialRetryStrategy:
        return replace(self, max_delay=max_delay)


@dataclass(slots=True)
class InfiniteRetryStrategy(_EarlyReturnToggle):
    """Retry forever with a fixed delay.

    Attributes:
        delay: Seconds between attempts (default: 0.5)
        retry_early_returned: Retry failures converted from exceptions (default: True)
    """

    delay: float = 0.5
    retry_early_returned: bool = True

    def __post_init__(self) -> None:
        _require_non_negative(delay=self.delay)

    def check_attempt(self, attempt: int) -> Result[float, Exhausted]:
        return Ok(self.delay)

    def with_delay(self, delay: float) -> InfiniteRetryStrategy:
        return replace(self, delay=delay)


def strategy_from_settings(settings: RetrySettings | None = None) -> RetryStrategy:
    """Build the strategy described by settings (default: environment config).

    Example:
        >>> # RETRYFUTURE_RETRY_STRATEGY=linear RETRYFUTURE_RETRY_MAX_ATTEMPTS=10
        >>> strategy_from_settings()
        LinearRetryStrategy(max_attempts=10, delay=0.5, retry_early_returned=True)
    """
    s = settings or get_settings().retry
    early = s.retry_early_returned_errors
    budget = {} if s.max_attempts is None else {"max_attempts": s.max_attempts}
    match s.strategy:
        case "linear":
            return LinearRetryStrategy(delay=s.delay, retry_early_returned=early, **budget)
        case "exponential":
            return ExponentialRetryStrategy(
                base=s.base, initial_delay=s.initial_delay, max_delay=s.max_delay, retry_early_returned=early, **budget,
            )
        case "infinite":
            return InfiniteRetryStrategy(s.delay, early)
    raise ValueError(f"Unknown strategy: {s.strategy}")
