"""Multi-source composites over synchronous iterables.

Lock-step readers (zip family, corresponds) advance several sequences one
item at a time. Fan-out (tee) reads one upstream from several independent
cursors; partition, split_at and unzip are compositions over tee.

Example:
    >>> from lazyseq import sync as it
    >>> it.to_list(it.zip([1, 2, 3], [1, 2]))
    [(1, 1), (2, 2)]
    >>> small, large = it.partition(lambda x: x < 3, [1, 4, 2, 5])
    >>> it.to_list(small), it.to_list(large)
    ([1, 2], [4, 5])
"""

from __future__ import annotations

import builtins
import math
import operator
import weakref
from collections import deque
from collections.abc import Callable, Iterable, Iterator
from typing import Any, Generic, TypeVar

from lazyseq.foundation.core import Curried, curry
from lazyseq.iterable.common import DONE, as_tuple
from lazyseq.runtime.observability import get_logger

from .base import filter, from_, map, nth, range_step, reject
from .compose import drop, take

T = TypeVar("T")
U = TypeVar("U")

__all__ = [
    "zip_all_with", "zip_all", "zip_with_n", "zip_with", "zip",
    "enumerate", "indices", "tee", "split_at", "partition", "unzip_n", "unzip",
    "corresponds_with", "corresponds",
]

log = get_logger("lazyseq.sync.fanout")


# ─────────────────────────────────────────────────────────────────────────────
# Lock-step readers
# ─────────────────────────────────────────────────────────────────────────────


@curry
def zip_all_with(func: Callable[..., U], seqs: Iterable[Iterable[Any]]) -> Iterator[U]:
    """``func(*heads)`` for each step of all sequences in lock-step.

    Stops as soon as any input is exhausted; inputs after the exhausted one
    are not advanced for that step.
    """
    iterators = [from_(seq) for seq in seqs]
    if not iterators:
        return
    while True:
        values = []
        for it in iterators:
            value = builtins.next(it, DONE)
            if value is DONE:
                return
            values.append(value)
        yield func(*values)


def zip_all(seqs: Iterable[Iterable[Any]]) -> Iterator[tuple[Any, ...]]:
    """Tuples of corresponding items, truncated to the shortest input."""
    return zip_all_with(as_tuple, seqs)


def zip_with_n(n: int) -> Curried[Iterator[Any]]:
    """Curried ``zip_with`` over exactly ``n`` sequences: ``f, s1, ..., sn``."""
    def zip_n(func: Callable[..., U], *seqs: Iterable[Any]) -> Iterator[U]:
        return zip_all_with(func, seqs)

    zip_n.__name__ = zip_n.__qualname__ = f"zip_with_{n}"
    return curry(zip_n, arity=n + 1)


zip_with = zip_with_n(2)
zip = zip_with(as_tuple)


def enumerate(seq: Iterable[T]) -> Iterator[tuple[int, T]]:
    """``(index, item)`` pairs counting from 0."""
    return zip(range_step(1, 0, math.inf), seq)


def indices(seq: Iterable[Any]) -> Iterator[int]:
    """``0 .. length - 1``."""
    return map(operator.itemgetter(0), enumerate(seq))


@curry
def corresponds_with(pred: Callable[[T, U], Any], first: Iterable[T], second: Iterable[U]) -> bool:
    """Same length and ``pred`` holds pairwise. Stops at the first mismatch."""
    a, b = from_(first), from_(second)
    while True:
        x, y = builtins.next(a, DONE), builtins.next(b, DONE)
        if (x is DONE) != (y is DONE):
            return False
        if x is DONE:
            return True
        if not pred(x, y):
            return False


corresponds = corresponds_with(operator.eq)


# ─────────────────────────────────────────────────────────────────────────────
# Fan-out
# ─────────────────────────────────────────────────────────────────────────────


class TeeBuffer(Generic[T]):
    """One shared upstream cursor plus a FIFO cache per branch.

    Upstream is pulled only when the requesting branch's cache is empty, and
    each pulled item goes into every live branch's cache, so every item is
    pulled once and dropped as soon as the slowest branch has read it.
    """

    __slots__ = ("_upstream", "_caches", "_exhausted")

    def __init__(self, seq: Iterable[T], n: int) -> None:
        self._upstream = from_(seq)
        self._caches: list[deque[T] | None] = [deque() for _ in builtins.range(n)]
        self._exhausted = False

    def _fill(self, index: int) -> bool:
        """Make sure branch ``index`` has a cached item. False once upstream is done."""
        if self._caches[index]:
            return True
        if self._exhausted:
            return False
        value = builtins.next(self._upstream, DONE)
        if value is DONE:
            self._exhausted = True
            return False
        for cache in self._caches:
            if cache is not None:
                cache.append(value)
        return True

    def branch(self, index: int) -> Iterator[T]:
        """Cursor over cache ``index``. Closing or dropping it releases the cache."""
        cursor = self._drain(index)
        # unstarted generators never run their finally block
        weakref.finalize(cursor, self._release, index)
        return cursor

    def _drain(self, index: int) -> Iterator[T]:
        try:
            while self._fill(index):
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
def tee(n: int, seq: Iterable[T]) -> list[Iterator[T]]:
    """``n`` independent sequences over the same upstream.

    Upstream side effects run once per item regardless of ``n``.

    Raises:
        ValueError: If ``n < 1``.
    """
    if n < 1:
        raise ValueError(f"tee() requires at least one branch, got {n}")
    buffer = TeeBuffer(seq, n)
    log.debug("tee created", branches=n, engine="sync")
    return [buffer.branch(i) for i in builtins.range(n)]


@curry
def split_at(n: int, seq: Iterable[T]) -> tuple[Iterator[T], Iterator[T]]:
    """``(first n items, the rest)`` over one upstream."""
    head, rest = tee(2, seq)
    return take(n, head), drop(n, rest)


@curry
def partition(pred: Callable[[T], Any], seq: Iterable[T]) -> tuple[Iterator[T], Iterator[T]]:
    """``(items passing pred, items failing pred)`` over one upstream."""
    passing, failing = tee(2, seq)
    return filter(pred, passing), reject(pred, failing)


@curry
def unzip_n(n: int, seq: Iterable[Iterable[Any]]) -> list[Iterator[Any]]:
    """Turn a sequence of ``n``-tuples into ``n`` sequences."""
    return [map(nth(i), branch) for i, branch in builtins.enumerate(tee(n, seq))]


def unzip(seq: Iterable[Iterable[Any]]) -> list[Iterator[Any]]:
    """Turn a sequence of pairs into a pair of sequences."""
    return unzip_n(2, seq)
