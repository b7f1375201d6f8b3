"""Classification of a single attempt's outcome.

An attempt ends in one of three ways:

- success: the operation returned a value (or ``Ok(value)``)
- retryable: another attempt may follow, subject to the strategy
- terminal: the cycle ends immediately

Retryable outcomes record their provenance. ``early_returned=False`` means the
operation explicitly asked for a retry via ``repeat()``; ``early_returned=True``
means an unrelated failure escaped the operation (an exception, or an ``Err``
holding something that is not an outcome) and was converted generically.
Strategies can refuse to retry the latter.

Example:
    >>> async def fetch():
    ...     resp = await client.get(url)      # exceptions -> early-returned retry
    ...     if resp.status_code == 400:
    ...         fail("bad request")           # Terminal
    ...     if resp.status_code >= 500:
    ...         repeat(resp.text)             # explicit retry with context
    ...     return resp
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeAlias, TypeVar

from .result import Err, Ok, Result
from .types import ContextError

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Retryable:
    """Attempt failed but may be retried.

    Attributes:
        context: Optional description of the failure
        early_returned: True if produced by generic conversion of an
            unrelated failure rather than an explicit ``repeat()``
    """

    context: ContextError | None = None
    early_returned: bool = False

    def __str__(self) -> str:
        kind = "early-returned" if self.early_returned else "retry"
        return f"{kind}: {self.context}" if self.context is not None else kind


@dataclass(frozen=True, slots=True)
class Terminal(Generic[E]):
    """Attempt failed unrecoverably; the cycle stops regardless of strategy."""

    error: E

    def __str__(self) -> str:
        return f"fail: {self.error}"


Outcome: TypeAlias = "Retryable | Terminal[E]"
_OUTCOME_TYPES = (Retryable, Terminal)


class RetrySignal(Exception):
    """Raised inside an operation to resolve the attempt with a given outcome.

    Raised by ``fail()`` and ``repeat()``; the driver intercepts it and never
    lets it escape the cycle.
    """

    __slots__ = ("outcome",)

    def __init__(self, outcome: Retryable | Terminal[object]) -> None:
        self.outcome = outcome
        super().__init__(str(outcome))


def fail(error: E) -> NoReturn:
    """End the current attempt as ``Terminal(error)``."""
    raise RetrySignal(Terminal(error))


def repeat(context: str | ContextError | None = None) -> NoReturn:
    """End the current attempt as an explicit retry, with optional context."""
    ctx = ContextError.msg(context) if isinstance(context, str) else context
    raise RetrySignal(Retryable(ctx, early_returned=False))


def into_retryable(failure: object) -> Retryable:
    """Generic conversion of any underlying failure into an early-returned retry."""
    if isinstance(failure, ContextError):
        ctx = failure
    elif isinstance(failure, BaseException):
        ctx = ContextError.from_exc(failure)
    else:
        ctx = ContextError.msg(str(failure))
    return Retryable(ctx, early_returned=True)


def classify(value: object) -> Result[object, Retryable | Terminal[object]]:
    """Normalise whatever an attempt returned into Ok(value) or Err(outcome).

    - plain value: success
    - ``Ok(v)``: success with ``v``
    - ``Err(Retryable | Terminal)``: that outcome
    - ``Err(other)``: generic conversion via ``into_retryable``
    """
    if not isinstance(value, Result):
        return Ok(value)
    if value.is_ok():
        return value
    error = value.unwrap_err()
    return Err(error if isinstance(error, _OUTCOME_TYPES) else into_retryable(error))
