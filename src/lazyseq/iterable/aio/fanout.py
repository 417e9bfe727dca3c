"""Multi-source composites over async iterables.

Tee branches may be driven concurrently (e.g. with ``asyncio.gather``) from
one event loop: upstream pulls are serialised by a lock held in the shared
buffer.
"""

from __future__ import annotations

import asyncio
import builtins
import math
import operator
import weakref
from collections import deque
from collections.abc import AsyncIterator, Callable
from typing import Any, Generic, TypeVar

from lazyseq.foundation.core import Curried, curry
from lazyseq.iterable.common import DONE, as_tuple
from lazyseq.runtime.observability import get_logger

from .base import AnyIterable, filter, from_, map, nth, range_step, reject, resolve, to_list
from .compose import drop, take

T = TypeVar("T")
U = TypeVar("U")

__all__ = [
    "zip_all_with", "zip_all", "zip_with_n", "zip_with", "zip",
    "enumerate", "indices", "tee", "split_at", "partition", "unzip_n", "unzip",
    "corresponds_with", "corresponds",
]

log = get_logger("lazyseq.aio.fanout")


# ─────────────────────────────────────────────────────────────────────────────
# Lock-step readers
# ─────────────────────────────────────────────────────────────────────────────


@curry
async def zip_all_with(func: Callable[..., Any], seqs: AnyIterable[AnyIterable[Any]]) -> AsyncIterator[Any]:
    """``func(*heads)`` per lock-step; stops as soon as any input is exhausted.

    Inputs are advanced one after another within a step, never concurrently.
    """
    iterators = [from_(seq) for seq in await to_list(seqs)]
    if not iterators:
        return
    while True:
        values = []
        for it in iterators:
            value = await anext(it, DONE)
            if value is DONE:
                return
            values.append(value)
        yield await resolve(func(*values))


def zip_all(seqs: AnyIterable[AnyIterable[Any]]) -> AsyncIterator[tuple[Any, ...]]:
    return zip_all_with(as_tuple, seqs)


def zip_with_n(n: int) -> Curried[AsyncIterator[Any]]:
    """Curried ``zip_with`` over exactly ``n`` sequences: ``f, s1, ..., sn``."""
    def zip_n(func: Callable[..., Any], *seqs: AnyIterable[Any]) -> AsyncIterator[Any]:
        return zip_all_with(func, seqs)

    zip_n.__name__ = zip_n.__qualname__ = f"zip_with_{n}"
    return curry(zip_n, arity=n + 1)


zip_with = zip_with_n(2)
zip = zip_with(as_tuple)


def enumerate(seq: AnyIterable[T]) -> AsyncIterator[tuple[int, T]]:
    return zip(range_step(1, 0, math.inf), seq)


def indices(seq: AnyIterable[Any]) -> AsyncIterator[int]:
    return map(operator.itemgetter(0), enumerate(seq))


@curry
async def corresponds_with(pred: Callable[[T, U], Any], first: AnyIterable[T], second: AnyIterable[U]) -> bool:
    """Same length and ``pred`` holds pairwise. Stops at the first mismatch."""
    a, b = from_(first), from_(second)
    while True:
        x = await anext(a, DONE)
        y = await anext(b, DONE)
        if (x is DONE) != (y is DONE):
            return False
        if x is DONE:
            return True
        if not await resolve(pred(x, y)):
            return False


corresponds = corresponds_with(operator.eq)


# ─────────────────────────────────────────────────────────────────────────────
# Fan-out
# ─────────────────────────────────────────────────────────────────────────────


class TeeBuffer(Generic[T]):
    """Shared upstream cursor plus a FIFO cache per branch.

    A branch with an empty cache takes the lock and pulls one item into every
    live cache. Waiters re-check their cache after acquiring the lock, since
    the branch ahead of them may already have pulled what they need.
    """

    __slots__ = ("_upstream", "_caches", "_exhausted", "_lock")

    def __init__(self, seq: AnyIterable[T], n: int) -> None:
        self._upstream = from_(seq)
        self._caches: list[deque[T] | None] = [deque() for _ in builtins.range(n)]
        self._exhausted = False
        self._lock = asyncio.Lock()

    async def _fill(self, index: int) -> bool:
        if self._caches[index]:
            return True
        async with self._lock:
            if self._caches[index]:
                return True
            if self._exhausted:
                return False
            value = await anext(self._upstream, DONE)
            if value is DONE:
                self._exhausted = True
                return False
            for cache in self._caches:
                if cache is not None:
                    cache.append(value)
            return True

    def branch(self, index: int) -> AsyncIterator[T]:
        cursor = self._drain(index)
        weakref.finalize(cursor, self._release, index)
        return cursor

    async def _drain(self, index: int) -> AsyncIterator[T]:
        try:
            while await self._fill(index):
                yield self._caches[index].popleft()  # type: ignore[union-attr]
        finally:
            self._release(index)

    def _release(self, index: int) -> None:
        self._caches[index] = None

    @property
    def pending(self) -> list[int]:
        """Cached item count per branch (0 for closed branches)."""
        return [len(cache) if cache is not None else 0 for cache in self._caches]


@curry
def tee(n: int, seq: AnyIterable[T]) -> list[AsyncIterator[T]]:
    """``n`` independent async sequences over the same upstream.

    Raises:
        ValueError: If ``n < 1``.
    """
    if n < 1:
        raise ValueError(f"tee() requires at least one branch, got {n}")
    buffer = TeeBuffer(seq, n)
    log.debug("tee created", branches=n, engine="aio")
    return [buffer.branch(i) for i in builtins.range(n)]


@curry
def split_at(n: int, seq: AnyIterable[T]) -> tuple[AsyncIterator[T], AsyncIterator[T]]:
    head, rest = tee(2, seq)
    return take(n, head), drop(n, rest)


@curry
def partition(pred: Callable[[T], Any], seq: AnyIterable[T]) -> tuple[AsyncIterator[T], AsyncIterator[T]]:
    """``(items passing pred, items failing pred)``; ``pred`` runs once per item per branch."""
    passing, failing = tee(2, seq)
    return filter(pred, passing), reject(pred, failing)


@curry
def unzip_n(n: int, seq: AnyIterable[Any]) -> list[AsyncIterator[Any]]:
    return [map(nth(i), branch) for i, branch in builtins.enumerate(tee(n, seq))]


def unzip(seq: AnyIterable[Any]) -> list[AsyncIterator[Any]]:
    return unzip_n(2, seq)
