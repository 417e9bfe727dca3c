"""Structured error records for scheduled tasks.

The sequence engines never catch user errors: they propagate to whoever
pulled the failing step. The scheduler is the one place where failures are
collected instead of raised (``map_settled``, ``return_exceptions=True``),
and it describes each one with a `TaskError`.
"""

from __future__ import annotations

import asyncio
import traceback
from enum import StrEnum
from functools import lru_cache
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ErrorCode(StrEnum):
    """Failure categories for scheduled work."""
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    TIMEOUT = "TIMEOUT"
    CANCELLED = "CANCELLED"
    EXHAUSTED = "EXHAUSTED"
    LOOKUP = "LOOKUP"
    USER_FUNCTION = "USER_FUNCTION"
    UNKNOWN = "UNKNOWN"


# Checked in order; first isinstance match wins
_TYPE_CODES: tuple[tuple[type[BaseException], ErrorCode], ...] = (
    (asyncio.CancelledError, ErrorCode.CANCELLED),
    (TimeoutError, ErrorCode.TIMEOUT),
    (StopIteration, ErrorCode.EXHAUSTED),
    (StopAsyncIteration, ErrorCode.EXHAUSTED),
    (ValueError, ErrorCode.INVALID_ARGUMENT),
    (TypeError, ErrorCode.INVALID_ARGUMENT),
    (LookupError, ErrorCode.LOOKUP),
    (Exception, ErrorCode.USER_FUNCTION),
)


@lru_cache(maxsize=256)
def _classify_type(exc_type: type[BaseException]) -> ErrorCode:
    for base, code in _TYPE_CODES:
        if issubclass(exc_type, base):
            return code
    return ErrorCode.UNKNOWN


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map an exception to an error code by its type."""
    return _classify_type(type(exc))


class TaskError(BaseModel):
    """Structured record of one failed task.

    Attributes:
        index: Position of the failing item in the scheduled collection
        message: Human-readable error message
        code: Machine-readable classification
        exc_type: Exception class name
        details: Optional formatted traceback
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "title": "Task Error",
            "examples": [{"index": 3, "message": "boom", "code": "USER_FUNCTION", "exc_type": "RuntimeError"}],
        },
    )

    index: Annotated[int, Field(ge=0, description="Position of the item in the input")]
    message: str = Field(default="", description="Error message")
    code: ErrorCode = ErrorCode.UNKNOWN
    exc_type: str = Field(default="Exception", description="Exception class name")
    details: str | None = Field(default=None, repr=False)

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | BaseException) -> str:
        """Accept exception objects and extract their message."""
        return str(v) if isinstance(v, BaseException) else v

    @computed_field
    @property
    def is_cancellation(self) -> bool:
        """Whether the task was cancelled rather than failing on its own."""
        return self.code == ErrorCode.CANCELLED

    @classmethod
    def from_exception(cls, index: int, exc: BaseException, *, include_trace: bool = False) -> Self:
        """Create from an exception with automatic classification."""
        details = "".join(traceback.format_exception(exc)) if include_trace else None
        return cls(
            index=index,
            message=str(exc),
            code=classify_exception(exc),
            exc_type=type(exc).__name__,
            details=details,
        )

    def render(self) -> str:
        """One-line summary for logs."""
        return f"task[{self.index}] {self.code}: {self.exc_type}({self.message})"

    __str__ = render
