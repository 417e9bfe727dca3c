"""Error classification for scheduled work.

- ErrorCode: machine-readable failure categories
- TaskError: structured, serialisable record of one failed task
- classify_exception: map an exception onto an ErrorCode
"""

from .errors import ErrorCode, TaskError, classify_exception
from .types import JsonDict, JsonPrimitive, JsonValue

__all__ = [
    "ErrorCode", "TaskError", "classify_exception",
    "JsonDict", "JsonPrimitive", "JsonValue",
]
