"""Errors produced when a retry cycle ends without success."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

from .outcome import Retryable, Terminal

E = TypeVar("E")

_RULER = "-" * 100


class StopReason(StrEnum):
    """Why a retry cycle ended in failure."""

    EXHAUSTED = "exhausted"  # Strategy refused another attempt
    TERMINAL = "terminal"  # Operation classified its failure as unrecoverable
    EARLY_RETURN_SUPPRESSED = "early_return_suppressed"  # Converted failure the strategy won't retry


@dataclass(frozen=True, slots=True)
class Exhausted:
    """Returned by a strategy whose attempt budget is spent.

    Attributes:
        attempt: Attempt counter the strategy was consulted with
        max_attempts: Budget of the strategy, if it has one
    """

    attempt: int
    max_attempts: int | None = None

    def __str__(self) -> str:
        budget = f" of {self.max_attempts}" if self.max_attempts is not None else ""
        return f"retry budget exhausted after {self.attempt}{budget} retries"


class RetryError(Exception, Generic[E]):
    """Every failed attempt of a cycle, in the order they happened.

    Returned inside ``Err`` by the driver; it is an exception so callers can
    ``result.unwrap()`` and let it propagate.

    Attributes:
        errors: Classified outcome of each failed attempt (chronological)
        reason: Why the cycle stopped
        exhausted: Strategy's refusal, when ``reason`` is EXHAUSTED
    """

    def __init__(
        self,
        errors: Iterable[Retryable | Terminal[E]],
        reason: StopReason,
        exhausted: Exhausted | None = None,
    ) -> None:
        self.errors: tuple[Retryable | Terminal[E], ...] = tuple(errors)
        self.reason = reason
        self.exhausted = exhausted
        super().__init__(f"retry cycle failed ({reason}) after {len(self.errors)} attempt(s)")

    @property
    def attempts(self) -> int:
        """Number of failed attempts recorded."""
        return len(self.errors)

    @property
    def last(self) -> Retryable | Terminal[E] | None:
        return self.errors[-1] if self.errors else None

    @property
    def terminal(self) -> E | None:
        """Error value of the terminal outcome that stopped the cycle, if any."""
        last = self.last
        return last.error if isinstance(last, Terminal) else None

    @property
    def retryable(self) -> list[Retryable]:
        return [e for e in self.errors if isinstance(e, Retryable)]

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[Retryable | Terminal[E]]:
        return iter(self.errors)

    def render(self) -> str:
        """Format every attempt for display, one block per attempt."""
        lines = [self.args[0]]
        for i, outcome in enumerate(self.errors):
            match outcome:
                case Retryable(context=ctx, early_returned=early):
                    lines += [_RULER, f"Attempt {i}", f"{'Early-returned' if early else 'Retry'}: {ctx or 'no context'}"]
                case Terminal(error=err):
                    lines += [_RULER, f"Attempt {i}", f"Fail: {err}"]
        if self.exhausted is not None:
            lines += [_RULER, str(self.exhausted)]
        return "\n".join(lines)

    __str__ = render

    def __repr__(self) -> str:
        return f"RetryError(reason={self.reason.value!r}, errors={list(self.errors)!r})"
