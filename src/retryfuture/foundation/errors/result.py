"""Result type carrying either a success value or an error.

Awaiting a RetryFuture yields a Result: Ok(value) from the first successful
attempt, or Err(RetryError) holding every failed attempt. Attempts themselves
may also return a Result to classify their own outcome.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generic, NoReturn, TypeVar, cast

if TYPE_CHECKING:
    from collections.abc import Iterator

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")
F = TypeVar("F")


class Result(Generic[T, E]):
    """Discriminated union of success (Ok) and failure (Err).

    Examples:
        >>> Ok(255).map(lambda x: x + 1).unwrap()
        256
        >>> Err("boom").unwrap_or(0)
        0
        >>> Ok(1).match(ok=lambda v: f"got {v}", err=lambda e: f"failed: {e}")
        'got 1'
    """

    __slots__ = ("_value", "_is_ok")
    __match_args__ = ("_value",)

    def __init__(self, value: T | E, is_ok: bool) -> None:
        """Private constructor. Use Ok() or Err() instead."""
        self._value: T | E = value
        self._is_ok: bool = is_ok

    def is_ok(self) -> bool:
        return self._is_ok

    def is_err(self) -> bool:
        return not self._is_ok

    def ok(self) -> T | None:
        """Success value, or None for Err."""
        return cast(T, self._value) if self._is_ok else None

    def err(self) -> E | None:
        """Error value, or None for Ok."""
        return None if self._is_ok else cast(E, self._value)

    # ─────────────────────────────────────────────────────────────────
    # Extraction
    # ─────────────────────────────────────────────────────────────────

    def unwrap(self) -> T:
        """Extract Ok value.

        Raises:
            The error itself if it is an exception (e.g. RetryError),
            RuntimeError otherwise.
        """
        if self._is_ok:
            return cast(T, self._value)
        self._raise_err(f"Called unwrap() on Err value: {self._value!r}")

    def unwrap_err(self) -> E:
        """Extract Err value.

        Raises:
            RuntimeError: If Result is Ok
        """
        if not self._is_ok:
            return cast(E, self._value)
        raise RuntimeError(f"Called unwrap_err() on Ok value: {self._value!r}")

    def unwrap_or(self, default: T) -> T:
        return cast(T, self._value) if self._is_ok else default

    def unwrap_or_else(self, f: Callable[[E], T]) -> T:
        return cast(T, self._value) if self._is_ok else f(cast(E, self._value))

    def expect(self, msg: str) -> T:
        """Extract Ok value, failing with a custom message on Err."""
        if self._is_ok:
            return cast(T, self._value)
        self._raise_err(f"{msg}: {self._value!r}")

    def _raise_err(self, msg: str) -> NoReturn:
        if isinstance(self._value, BaseException):
            raise self._value
        raise RuntimeError(msg)

    # ─────────────────────────────────────────────────────────────────
    # Combinators
    # ─────────────────────────────────────────────────────────────────

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        """Apply f to the Ok value, leaving Err untouched."""
        if self._is_ok:
            return Ok(f(cast(T, self._value)))
        return cast("Result[U, E]", self)

    def map_err(self, f: Callable[[E], F]) -> Result[T, F]:
        """Apply f to the Err value, leaving Ok untouched."""
        if not self._is_ok:
            return Err(f(cast(E, self._value)))
        return cast("Result[T, F]", self)

    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chain a fallible step onto an Ok value."""
        if self._is_ok:
            return f(cast(T, self._value))
        return cast("Result[U, E]", self)

    and_then = flat_map

    def match(self, *, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        """Exhaustive case analysis over both variants."""
        if self._is_ok:
            return ok(cast(T, self._value))
        return err(cast(E, self._value))

    # ─────────────────────────────────────────────────────────────────
    # Dunder Methods
    # ─────────────────────────────────────────────────────────────────

    def __bool__(self) -> bool:
        return self._is_ok

    def __repr__(self) -> str:
        return f"{'Ok' if self._is_ok else 'Err'}({self._value!r})"

    __str__ = __repr__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return self._is_ok == other._is_ok and self._value == other._value

    def __hash__(self) -> int:
        return hash((self._is_ok, self._value))

    def __iter__(self) -> Iterator[T]:
        """Yield the Ok value, if any."""
        if self._is_ok:
            yield cast(T, self._value)


def Ok(value: T) -> Result[T, E]:  # noqa: N802
    """Construct the success variant."""
    return Result(value, is_ok=True)


def Err(error: E) -> Result[T, E]:  # noqa: N802
    """Construct the failure variant."""
    return Result(error, is_ok=False)
