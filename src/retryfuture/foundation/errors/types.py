"""Context attached to retryable failures.

Uses Pydantic models for validation/serialization. Built with model_construct
on the retry path, which runs once per failed attempt.
"""

from __future__ import annotations

import traceback
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

# JSON type aliases, shared with the structured logger
JsonPrimitive = str | int | float | bool | None
JsonValue = JsonPrimitive | list[Any] | dict[str, Any]
JsonDict = dict[str, Any]

_EMPTY_NOTES: tuple[str, ...] = ()


class ContextError(BaseModel):
    """Human-readable description of why an attempt asked to be retried.

    Either built from a message (explicit ``repeat("...")``) or converted from
    an exception the operation let escape. Notes stack outermost-last, like a
    chain of ``context()`` calls around the original failure.

    Example:
        >>> err = ContextError.msg("HTTP 401").with_context("Failed after repeating 2 times")
        >>> str(err)
        'Failed after repeating 2 times: HTTP 401'
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,  # For the source exception
        revalidate_instances="never",
        json_schema_extra={"title": "Context Error", "examples": [{"message": "HTTP 500", "notes": []}]},
    )

    message: Annotated[str, Field(description="Description of the underlying failure")]
    notes: tuple[str, ...] = _EMPTY_NOTES
    source_type: str | None = Field(default=None, description="Class name of the source exception")
    details: str | None = Field(default=None, repr=False, description="Formatted traceback of the source")
    source: BaseException | None = Field(default=None, exclude=True, repr=False)

    @classmethod
    def msg(cls, message: str) -> ContextError:
        """Create from a plain message (bypasses validation)."""
        return cls.model_construct(message=message, notes=_EMPTY_NOTES, source_type=None, details=None, source=None)

    @classmethod
    def from_exc(cls, exc: BaseException) -> ContextError:
        """Create from an exception, keeping it as ``source``."""
        details = "".join(traceback.format_exception(exc)) if exc.__traceback__ is not None else None
        return cls.model_construct(
            message=str(exc) or type(exc).__name__,
            notes=_EMPTY_NOTES,
            source_type=type(exc).__name__,
            details=details,
            source=exc,
        )

    @computed_field
    @property
    def depth(self) -> int:
        """Number of context notes stacked on the message."""
        return len(self.notes)

    def with_context(self, note: str) -> ContextError:
        """Return a copy with another note stacked on top."""
        return self.model_copy(update={"notes": (*self.notes, note)})

    def __str__(self) -> str:
        return ": ".join((*reversed(self.notes), self.message))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContextError):
            return NotImplemented
        return (self.message, self.notes, self.source_type) == (other.message, other.notes, other.source_type)

    def __hash__(self) -> int:
        return hash((self.message, self.notes, self.source_type))
