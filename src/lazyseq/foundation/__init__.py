"""Foundation - building blocks shared by the engines and the scheduler.

Contains: partial application, error records, configuration.
"""

from __future__ import annotations

from .config import LazyseqSettings, LoggingSettings, SchedulerSettings, clear_settings_cache, get_settings
from .core import Curried, arity_of, curry, pipe
from .errors import ErrorCode, JsonDict, JsonValue, TaskError, classify_exception

__all__ = [
    # Core
    "Curried", "arity_of", "curry", "pipe",
    # Errors
    "ErrorCode", "TaskError", "classify_exception", "JsonDict", "JsonValue",
    # Config
    "LazyseqSettings", "LoggingSettings", "SchedulerSettings", "get_settings", "clear_settings_cache",
]
