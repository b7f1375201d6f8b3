"""Retry driver: runs attempts until one succeeds or the cycle must stop.

States and transitions (one cycle):

    PENDING --await--> AWAITING_OPERATION
    AWAITING_OPERATION --Ok--> RESOLVED (Ok)
    AWAITING_OPERATION --Terminal--> RESOLVED (Err, TERMINAL)
    AWAITING_OPERATION --Retryable(early_returned), strategy refuses--> RESOLVED (Err, EARLY_RETURN_SUPPRESSED)
    AWAITING_OPERATION --Retryable, check_attempt Err--> RESOLVED (Err, EXHAUSTED)
    AWAITING_OPERATION --Retryable, check_attempt Ok(d)--> SLEEPING(d)
    SLEEPING --elapsed--> AWAITING_OPERATION (fresh operation from the factory)

Every failed attempt's outcome is recorded, including the one that stopped
the cycle. The attempt counter passed to the strategy counts prior failed
attempts and is incremented only when a retry is actually scheduled.

Example:
    >>> async def fetch() -> Response:
    ...     resp = await client.get(url)
    ...     if resp.status_code >= 500:
    ...         repeat(resp.text)
    ...     if resp.status_code >= 400:
    ...         fail(resp.status_code)
    ...     return resp
    >>>
    >>> result = await RetryFuture(fetch, ExponentialRetryStrategy().with_max_attempts(5))
    >>> resp = result.unwrap()  # raises RetryError listing every attempt on failure
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Generator
from enum import StrEnum
from typing import Callable, Generic, TypeVar

from retryfuture.foundation.errors import (
    Err,
    Exhausted,
    Ok,
    Result,
    Retryable,
    RetryError,
    RetrySignal,
    StopReason,
    Terminal,
    classify,
    into_retryable,
)
from retryfuture.runtime.concurrency import checkpoint
from retryfuture.runtime.observability import get_logger

from .factory import produce
from .strategy import RetryStrategy, retries_early_returned

T = TypeVar("T")
E = TypeVar("E")

Sleep = Callable[[float], Awaitable[object]]


class RetryState(StrEnum):
    """Where a RetryFuture is in its cycle."""

    PENDING = "pending"
    AWAITING_OPERATION = "awaiting_operation"
    SLEEPING = "sleeping"
    RESOLVED = "resolved"


class RetryFuture(Generic[T, E]):
    """Awaitable retry cycle over operations produced by a factory.

    Nothing runs until the future is awaited. Awaiting returns
    ``Ok(value)`` from the first successful attempt, or ``Err(RetryError)``
    with every failed attempt. Expected failures (exhaustion, terminal
    outcomes, refused early returns) never raise.

    The strategy is used in place, not copied: counters it keeps remain
    inspectable through ``.strategy`` after the cycle. It must not be used by
    anyone else while the cycle runs.

    Args:
        factory: Zero-argument callable returning a fresh awaitable per attempt
        strategy: Backoff strategy consulted after each retryable failure
        sleep: Timer used between attempts (default: asyncio.sleep)
        name: Optional cycle name bound into log events
    """

    __slots__ = ("_factory", "_strategy", "_sleep", "_attempt", "_errors", "_state", "_result", "_log")

    def __init__(
        self,
        factory: Callable[[], Awaitable[T | Result[T, Retryable | Terminal[E]]]],
        strategy: RetryStrategy,
        *,
        sleep: Sleep = asyncio.sleep,
        name: str | None = None,
    ) -> None:
        self._factory, self._strategy, self._sleep = factory, strategy, sleep
        self._attempt = 0
        self._errors: list[Retryable | Terminal[E]] = []
        self._state = RetryState.PENDING
        self._result: Result[T, RetryError[E]] | None = None
        self._log = get_logger("retryfuture.retry", strategy=type(strategy).__name__,
                               **({"cycle": name} if name else {}))

    @property
    def state(self) -> RetryState:
        return self._state

    @property
    def attempt(self) -> int:
        """Failed attempts so far that led to a retry (reset to 0 on success)."""
        return self._attempt

    @property
    def errors(self) -> tuple[Retryable | Terminal[E], ...]:
        """Snapshot of the failed attempts recorded so far."""
        return tuple(self._errors)

    @property
    def strategy(self) -> RetryStrategy:
        return self._strategy

    @property
    def result(self) -> Result[T, RetryError[E]] | None:
        """Final result once resolved, else None."""
        return self._result

    def done(self) -> bool:
        return self._state is RetryState.RESOLVED

    def __await__(self) -> Generator[object, None, Result[T, RetryError[E]]]:
        return self.run().__await__()

    async def run(self) -> Result[T, RetryError[E]]:
        """Drive the cycle to completion.

        Raises:
            RuntimeError: If this future was already driven
        """
        if self._state is not RetryState.PENDING:
            raise RuntimeError(f"RetryFuture already {self._state.value}; it can only be awaited once")
        self._state = RetryState.AWAITING_OPERATION
        try:
            return await self._drive()
        except asyncio.CancelledError:
            self._log.debug("retry cycle cancelled", state=self._state.value, attempt=self._attempt)
            raise

    async def _drive(self) -> Result[T, RetryError[E]]:
        operation = produce(self._factory)
        while True:
            settled = await self._settle(operation)
            if settled.is_ok():
                self._log.debug("retry cycle succeeded", failures=len(self._errors))
                self._attempt = 0
                return self._resolve(Ok(settled.unwrap()))

            failure = settled.unwrap_err()
            self._errors.append(failure)
            self._log.info("attempt failed", attempt=self._attempt, outcome=failure)

            if isinstance(failure, Terminal):
                return self._fail(StopReason.TERMINAL)
            if failure.early_returned and not retries_early_returned(self._strategy):
                return self._fail(StopReason.EARLY_RETURN_SUPPRESSED)
            decision = self._strategy.check_attempt(self._attempt)
            if decision.is_err():
                return self._fail(StopReason.EXHAUSTED, decision.unwrap_err())

            delay = decision.unwrap()
            self._attempt += 1
            self._log.info("retrying", attempt=self._attempt, delay=delay, early_returned=failure.early_returned)
            self._state = RetryState.SLEEPING
            await self._sleep(delay)
            await checkpoint()
            self._state = RetryState.AWAITING_OPERATION
            operation = produce(self._factory)

    async def _settle(self, operation: Awaitable[object]) -> Result[T, Retryable | Terminal[E]]:
        """Await one attempt and classify how it ended."""
        try:
            value = await operation
        except RetrySignal as signal:
            return Err(signal.outcome)  # type: ignore[arg-type]
        except Exception as exc:  # noqa: BLE001 - converted into an early-returned retry
            return Err(self._annotate(into_retryable(exc)))
        if isinstance(value, Result) and value.is_err() and not isinstance(value.unwrap_err(), (Retryable, Terminal)):
            return Err(self._annotate(into_retryable(value.unwrap_err())))
        return classify(value)  # type: ignore[return-value]

    def _annotate(self, converted: Retryable) -> Retryable:
        ctx = converted.context
        note = f"Failed after repeating {self._attempt} times"
        return Retryable(ctx.with_context(note) if ctx is not None else None, early_returned=True)

    def _fail(self, reason: StopReason, exhausted: Exhausted | None = None) -> Result[T, RetryError[E]]:
        error: RetryError[E] = RetryError(self._errors, reason, exhausted)
        self._log.warning("retry cycle failed", error=error)
        return self._resolve(Err(error))

    def _resolve(self, result: Result[T, RetryError[E]]) -> Result[T, RetryError[E]]:
        self._state, self._result = RetryState.RESOLVED, result
        return result

    def __repr__(self) -> str:
        return (f"RetryFuture(state={self._state.value}, attempt={self._attempt}, "
                f"failures={len(self._errors)}, strategy={self._strategy!r})")
