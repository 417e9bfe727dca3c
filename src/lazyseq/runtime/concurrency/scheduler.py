"""Bounded-concurrency scheduling over materialized collections.

The sequence engines never run two steps of one sequence at once. When work
per item should overlap, materialize the items (``to_list``) and hand them
to the scheduler, which runs ``func`` over them with at most ``limit`` calls
in flight and returns results in input order.

    - map_async: parallel map with an optional concurrency cap
    - map_limit / for_each_limit / filter_limit / flat_map_limit: curried forms
    - map_settled: results and failures side by side, never raises
    - reduce_series: sequential async fold

Example:
    >>> results = await map_limit(10, fetch, urls)   # at most 10 in flight
    >>> settled = await map_settled(4, fetch, urls)
    >>> [s.report() for s in settled if s.is_rejected]
"""

from __future__ import annotations

import asyncio
import math
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from functools import wraps
from typing import Any, Generic, ParamSpec, TypeVar

from lazyseq.foundation.config import get_settings
from lazyseq.foundation.core import curry
from lazyseq.foundation.errors import TaskError
from lazyseq.iterable.aio.base import resolve
from lazyseq.runtime.observability import get_logger

T = TypeVar("T")
U = TypeVar("U")
A = TypeVar("A")
P = ParamSpec("P")

__all__ = [
    "SettledStatus", "Settled", "map_async",
    "map_limit", "for_each_limit", "filter_limit", "flat_map_limit", "map_settled",
    "reduce_series", "delay", "to_async",
]

log = get_logger("lazyseq.scheduler")


class SettledStatus(StrEnum):
    """Status of a settled task."""
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


@dataclass(slots=True, frozen=True)
class Settled(Generic[T]):
    """Outcome of one scheduled call, fulfilled or rejected.

    Attributes:
        status: 'fulfilled' or 'rejected'
        index: Position of the item in the scheduled collection
        value: Result value if fulfilled
        error: Exception if rejected
    """

    status: SettledStatus
    index: int = 0
    value: T | None = None
    error: BaseException | None = None

    @property
    def is_fulfilled(self) -> bool:
        return self.status == SettledStatus.FULFILLED

    @property
    def is_rejected(self) -> bool:
        return self.status == SettledStatus.REJECTED

    def unwrap(self) -> T:
        """Get value or raise stored error."""
        if self.is_rejected:
            raise self.error or RuntimeError("Rejected with no error")
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        return self.value if self.is_fulfilled else default  # type: ignore[return-value]

    def report(self, *, include_trace: bool = False) -> TaskError | None:
        """Structured description of the failure, or None if fulfilled."""
        if not self.is_rejected or self.error is None:
            return None
        return TaskError.from_exception(self.index, self.error, include_trace=include_trace)


def _fulfilled(index: int, value: T) -> Settled[T]:
    return Settled(SettledStatus.FULFILLED, index=index, value=value)


def _rejected(index: int, error: BaseException) -> Settled[Any]:
    return Settled(SettledStatus.REJECTED, index=index, error=error)


def _check_limit(limit: float | None) -> None:
    if limit is not None and limit < 1:
        raise ValueError(f"concurrency limit must be >= 1 (or math.inf), got {limit}")


# ─────────────────────────────────────────────────────────────────────────────
# Map Async: Parallel map with concurrency control
# ─────────────────────────────────────────────────────────────────────────────


async def map_async(
    func: Callable[[T], U | Awaitable[U]],
    items: Iterable[T],
    *,
    limit: float | None = None,
    return_exceptions: bool | None = None,
) -> list[U] | list[U | BaseException]:
    """Apply ``func`` to every item with at most ``limit`` calls in flight.

    Args:
        func: Sync or async function to apply
        items: Finite collection; materialized before scheduling
        limit: Maximum concurrent calls. None falls back to
            ``settings.scheduler.default_limit`` (unset = unlimited);
            ``math.inf`` is unlimited.
        return_exceptions: Put exceptions in the result list instead of
            raising the first one. None falls back to
            ``settings.scheduler.return_exceptions``.

    Returns:
        Results in the same order as ``items``

    Raises:
        ValueError: If ``limit < 1``
        Exception: The first task failure, when not returning exceptions.
            Remaining tasks are cancelled.
    """
    scheduler = get_settings().scheduler
    limit = scheduler.default_limit if limit is None else limit
    return_exceptions = scheduler.return_exceptions if return_exceptions is None else return_exceptions
    _check_limit(limit)

    items = list(items)
    if not items:
        return []

    # Semaphore only when the cap can actually bind
    semaphore = asyncio.Semaphore(int(limit)) if limit is not None and limit < len(items) else None
    log.debug("batch started", items=len(items), limit=None if limit is None or math.isinf(limit) else int(limit))
    started = time.perf_counter()

    async def call(index: int, item: T) -> U:
        try:
            if semaphore is None:
                return await resolve(func(item))
            async with semaphore:
                return await resolve(func(item))
        except Exception as exc:
            log.warning("task rejected", **TaskError.from_exception(index, exc).model_dump(mode="json", exclude_none=True))
            raise

    tasks = [asyncio.ensure_future(call(i, item)) for i, item in enumerate(items)]
    try:
        results = await asyncio.gather(*tasks, return_exceptions=return_exceptions)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    log.debug(
        "batch finished",
        items=len(items),
        failed=sum(1 for r in results if isinstance(r, BaseException)),
        elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    return results  # type: ignore[return-value]


# ─────────────────────────────────────────────────────────────────────────────
# Curried forms (limit, func, items)
# ─────────────────────────────────────────────────────────────────────────────


@curry
async def map_limit(limit: float | None, func: Callable[[T], Any], items: Iterable[T]) -> list[Any]:
    """`map_async` with the limit first, for partial application."""
    return await map_async(func, items, limit=limit, return_exceptions=False)


@curry
async def for_each_limit(limit: float | None, func: Callable[[T], Any], items: Iterable[T]) -> list[T]:
    """Run ``func`` over every item for its side effects; returns the items."""
    items = list(items)
    await map_async(func, items, limit=limit, return_exceptions=False)
    return items


@curry
async def filter_limit(limit: float | None, pred: Callable[[T], Any], items: Iterable[T]) -> list[T]:
    """Items whose predicate passed, in input order; predicates run concurrently."""
    items = list(items)
    keep = await map_async(pred, items, limit=limit, return_exceptions=False)
    return [item for item, passed in zip(items, keep) if passed]


@curry
async def flat_map_limit(limit: float | None, func: Callable[[T], Iterable[U]], items: Iterable[T]) -> list[U]:
    chunks = await map_async(func, items, limit=limit, return_exceptions=False)
    return [value for chunk in chunks for value in chunk]


@curry
async def map_settled(limit: float | None, func: Callable[[T], Any], items: Iterable[T]) -> list[Settled[Any]]:
    """Like `map_limit` but never raises a task error.

    Example:
        >>> settled = await map_settled(2, fetch, ["a", "b"])
        >>> [s.unwrap_or(None) for s in settled]
    """
    results = await map_async(func, items, limit=limit, return_exceptions=True)
    return [
        _rejected(i, result) if isinstance(result, BaseException) else _fulfilled(i, result)
        for i, result in enumerate(results)
    ]


@curry
async def reduce_series(func: Callable[[A, T], Any], init: A, items: Iterable[T]) -> A:
    """Fold one item at a time, awaiting each step before the next."""
    acc = init
    for item in items:
        acc = await resolve(func(acc, item))
    return acc


# ─────────────────────────────────────────────────────────────────────────────
# Utilities
# ─────────────────────────────────────────────────────────────────────────────


async def delay(seconds: float, value: T | None = None) -> T | None:
    """Sleep, then return ``value``."""
    await asyncio.sleep(seconds)
    return value


def to_async(func: Callable[P, T | Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    """Wrap ``func`` so calling it always returns an awaitable."""
    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        return await resolve(func(*args, **kwargs))

    return wrapper
