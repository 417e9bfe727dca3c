"""lazyseq - Lazy sequence combinators for iterables and async iterables.

Two engines share one vocabulary: `sync` over plain iterables and `aio`
over async iterables. Every combinator takes its configuration first and
its data last, and is curried, so stages compose into pipelines.

Quick Start:
    >>> from lazyseq import sync as it
    >>>
    >>> it.to_list(it.take(3, it.filter(lambda x: x % 2, it.range(100))))
    [1, 3, 5]
    >>> it.to_list(it.frame(3, [1, 2, 3, 4, 5]))
    [[1, 2, 3], [2, 3, 4], [3, 4, 5], [4, 5]]

Pipelines:
    >>> first_evens = it.filter(lambda x: x % 2 == 0) >> it.take(3) >> it.to_list
    >>> first_evens(it.range(100))
    [0, 2, 4]

Async:
    >>> from lazyseq import aio
    >>> await aio.to_list(aio.map(fetch, urls))          # one call at a time
    >>> await map_limit(8, fetch, urls)                  # up to 8 in flight

Fan-out:
    >>> evens, odds = it.partition(lambda x: x % 2 == 0, it.range(10))
    >>> it.to_list(odds), it.to_list(evens)
    ([1, 3, 5, 7, 9], [0, 2, 4, 6, 8])
"""

from __future__ import annotations

__version__ = "0.1.0"

# Foundation
from .foundation import (
    Curried,
    ErrorCode,
    LazyseqSettings,
    TaskError,
    classify_exception,
    clear_settings_cache,
    curry,
    get_settings,
    pipe,
)

# Runtime
from .runtime.observability import configure_logging, get_logger, log_context
from .runtime.concurrency import (
    Settled,
    SettledStatus,
    delay,
    filter_limit,
    flat_map_limit,
    for_each_limit,
    map_async,
    map_limit,
    map_settled,
    reduce_series,
    to_async,
)

# Engines
from .iterable import aio, sync

__all__ = [
    "__version__",
    # Engines
    "sync", "aio",
    # Partial application
    "Curried", "curry", "pipe",
    # Errors
    "ErrorCode", "TaskError", "classify_exception",
    # Config
    "LazyseqSettings", "get_settings", "clear_settings_cache",
    # Logging
    "configure_logging", "get_logger", "log_context",
    # Scheduler
    "Settled", "SettledStatus", "map_async", "map_limit", "for_each_limit", "filter_limit",
    "flat_map_limit", "map_settled", "reduce_series", "delay", "to_async",
]
