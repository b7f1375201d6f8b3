"""Error handling for retry cycles.

- Result/Ok/Err: success-or-failure value returned by a cycle
- Retryable/Terminal: classification of a failed attempt
- fail/repeat: in-operation signals; into_retryable: generic conversion
- ContextError: description attached to retryable failures
- RetryError/StopReason/Exhausted: the accumulated failure of a cycle
"""

from .errors import Exhausted, RetryError, StopReason
from .outcome import Outcome, Retryable, RetrySignal, Terminal, classify, fail, into_retryable, repeat
from .result import Err, Ok, Result
from .types import ContextError, JsonDict, JsonPrimitive, JsonValue

__all__ = [
    # Result
    "Result", "Ok", "Err",
    # Outcome classification
    "Outcome", "Retryable", "Terminal", "RetrySignal", "classify", "fail", "repeat", "into_retryable",
    # Context
    "ContextError", "JsonDict", "JsonPrimitive", "JsonValue",
    # Cycle failure
    "RetryError", "StopReason", "Exhausted",
]
