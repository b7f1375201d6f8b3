"""Operation factories: one fresh awaitable per attempt.

An awaitable is discarded after any failure, since its state after a failed
attempt is undefined, so the driver asks the factory for a new one before
every attempt. Any zero-argument callable returning an awaitable qualifies;
``lambda: client.get(url)`` and plain ``async def`` functions are the usual forms.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Awaitable
from typing import Callable, ParamSpec, Protocol, TypeVar, runtime_checkable

P = ParamSpec("P")
T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class OperationFactory(Protocol[T_co]):
    """Produces an independent operation for each attempt."""

    def __call__(self) -> Awaitable[T_co]: ...


def produce(factory: OperationFactory[T_co]) -> Awaitable[T_co]:
    """Ask the factory for the next operation.

    Raises:
        TypeError: If the factory returned something that cannot be awaited
    """
    operation = factory()
    if not inspect.isawaitable(operation):
        raise TypeError(
            f"Operation factory {factory!r} must return an awaitable, got {type(operation).__name__}"
        )
    return operation


def factory_of(fn: Callable[P, Awaitable[T_co]], *args: P.args, **kwargs: P.kwargs) -> OperationFactory[T_co]:
    """Bind arguments into a factory calling ``fn(*args, **kwargs)`` per attempt.

    Example:
        >>> fut = RetryFuture(factory_of(fetch, "https://example.com", timeout=5.0), LinearRetryStrategy())
    """
    return functools.partial(fn, *args, **kwargs)
