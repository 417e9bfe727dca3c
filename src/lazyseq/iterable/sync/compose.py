"""Single-source composites over synchronous iterables.

Each combinator here reads one upstream sequence and is built from the
primitives in `base`: slicing (take/drop/slice), windows (frame, split_every,
group_with), de-duplication, flattening, cycling and padding.

Example:
    >>> from lazyseq import sync as it
    >>> it.to_list(it.frame(3, [1, 2, 3, 4, 5]))
    [[1, 2, 3], [2, 3, 4], [3, 4, 5], [4, 5]]
    >>> it.to_list(it.drop_while(lambda x: x < 3, [1, 2, 3, 1, 2]))
    [3, 1, 2]
"""

from __future__ import annotations

import math
import operator
from collections.abc import Callable, Iterable, Iterator
from typing import Any, TypeVar

from lazyseq.foundation.core import curry
from lazyseq.iterable.common import DONE, is_nested

from .base import flat_map, for_each, from_, of, reduce, repeat, to_list

T = TypeVar("T")

__all__ = [
    "slice", "take", "drop", "tail", "take_while", "drop_while",
    "concat", "prepend", "append", "times",
    "frame", "drop_last", "init", "group_with", "group", "split_every",
    "unique", "unique_with", "flatten_n", "flatten", "unnest",
    "cycle_n", "cycle", "pad_to", "pad", "intersperse", "join_with", "join",
    "reverse", "sort",
]


# ─────────────────────────────────────────────────────────────────────────────
# Slicing
# ─────────────────────────────────────────────────────────────────────────────


@curry
def slice(start: int, stop: float, seq: Iterable[T]) -> Iterator[T]:
    """Items at positions ``start <= i < stop``.

    Stops pulling as soon as position ``stop - 1`` is reached, so it never
    consumes past what it yields.
    """
    if stop <= start:
        return
    for i, item in enumerate(seq):
        if i >= start:
            yield item
        if i >= stop - 1:
            return


@curry
def take(n: float, seq: Iterable[T]) -> Iterator[T]:
    """At most the first ``n`` items. ``n <= 0`` never touches upstream."""
    if n <= 0:
        return
    yield from slice(0, n, seq)


@curry
def drop(n: int, seq: Iterable[T]) -> Iterator[T]:
    """Everything after the first ``n`` items."""
    return slice(n, math.inf, seq)


def tail(seq: Iterable[T]) -> Iterator[T]:
    """All but the first item."""
    return drop(1, seq)


@curry
def take_while(pred: Callable[[T], Any], seq: Iterable[T]) -> Iterator[T]:
    """Items up to (not including) the first one that fails ``pred``."""
    for item in seq:
        if not pred(item):
            return
        yield item


@curry
def drop_while(pred: Callable[[T], Any], seq: Iterable[T]) -> Iterator[T]:
    """Skip the leading run that passes ``pred``; yield the rest unchanged.

    The first failing item is pushed back in front of the residual cursor,
    so later items that pass ``pred`` are still yielded.
    """
    it = from_(seq)
    for item in it:
        if not pred(item):
            yield from prepend(item, it)
            return


@curry
def concat(first: Iterable[T], second: Iterable[T]) -> Iterator[T]:
    yield from first
    yield from second


@curry
def prepend(item: T, seq: Iterable[T]) -> Iterator[T]:
    return concat(of(item), seq)


@curry
def append(item: T, seq: Iterable[T]) -> Iterator[T]:
    return concat(seq, of(item))


@curry
def times(n: float, item: T) -> Iterator[T]:
    """``item`` repeated ``n`` times."""
    return take(n, repeat(item))


# ─────────────────────────────────────────────────────────────────────────────
# Windows & groups
# ─────────────────────────────────────────────────────────────────────────────


@curry
def frame(size: int, seq: Iterable[T]) -> Iterator[list[T]]:
    """Sliding window of the last ``size`` items.

    Yields each full window as it forms, then the trailing partial window
    (fewer than ``size`` items) once upstream is exhausted. Holds at most
    ``size`` items.

    Example:
        >>> list(frame(2, [1, 2, 3]))
        [[1, 2], [2, 3], [3]]
    """
    if size < 1:
        raise ValueError(f"frame size must be >= 1, got {size}")
    cache: list[T] = []
    for item in seq:
        cache.append(item)
        if len(cache) == size:
            yield list(cache)
            del cache[0]
    if cache:
        yield cache


@curry
def drop_last(n: int, seq: Iterable[T]) -> Iterator[T]:
    """All but the last ``n`` items. Holds ``n + 1`` items."""
    for window in frame(n + 1, append(DONE, seq)):
        if window[-1] is DONE:
            return
        yield window[0]


def init(seq: Iterable[T]) -> Iterator[T]:
    """All but the last item."""
    return drop_last(1, seq)


@curry
def group_with(pred: Callable[[T, T], Any], seq: Iterable[T]) -> Iterator[list[T]]:
    """Maximal runs of adjacent items where ``pred(previous, item)`` holds.

    Example:
        >>> list(group_with(operator.eq, [1, 1, 2, 2, 1]))
        [[1, 1], [2, 2], [1]]
    """
    run: list[T] = []
    for item in seq:
        if run and not pred(run[-1], item):
            yield run
            run = []
        run.append(item)
    if run:
        yield run


def group(seq: Iterable[T]) -> Iterator[list[T]]:
    """Runs of adjacent equal items."""
    return group_with(operator.eq, seq)


@curry
def split_every(n: int, seq: Iterable[T]) -> Iterator[list[T]]:
    """Consecutive chunks of ``n`` items; the last may be shorter."""
    chunk: list[T] = []
    for item in seq:
        chunk.append(item)
        if len(chunk) >= n:
            yield chunk
            chunk = []
    if chunk:
        yield chunk


# ─────────────────────────────────────────────────────────────────────────────
# De-duplication
# ─────────────────────────────────────────────────────────────────────────────


def unique(seq: Iterable[T]) -> Iterator[T]:
    """First occurrence of each distinct item.

    Hashable items are tracked in a set; unhashable ones fall back to an
    equality scan over the unhashable items seen so far.
    """
    seen: set[Any] = set()
    seen_unhashable: list[T] = []
    for item in seq:
        try:
            if item in seen:
                continue
            seen.add(item)
        except TypeError:
            if item in seen_unhashable:
                continue
            seen_unhashable.append(item)
        yield item


@curry
def unique_with(pred: Callable[[T, T], Any], seq: Iterable[T]) -> Iterator[T]:
    """First occurrence of each item, comparing against all earlier ones with ``pred``.

    O(n) per item; meant for small inputs or non-hashable notions of equality.
    """
    seen: list[T] = []
    for item in seq:
        if any(pred(item, saw) for saw in seen):
            continue
        seen.append(item)
        yield item


# ─────────────────────────────────────────────────────────────────────────────
# Flattening
# ─────────────────────────────────────────────────────────────────────────────


@curry
def flatten_n(depth: float, seq: Iterable[Any]) -> Iterator[Any]:
    """Inline nested iterables up to ``depth`` levels.

    Strings, bytes and mappings are never inlined.

    Example:
        >>> list(flatten_n(1, [[1, 2], [3, [4]]]))
        [1, 2, 3, [4]]
    """
    if depth < 1:
        return from_(seq)

    def inline(item: Any) -> Iterator[Any]:
        return flatten_n(depth - 1, item) if is_nested(item) else of(item)

    return flat_map(inline, seq)


def flatten(seq: Iterable[Any]) -> Iterator[Any]:
    """Inline nested iterables at every depth."""
    return flatten_n(math.inf, seq)


def unnest(seq: Iterable[Any]) -> Iterator[Any]:
    """Inline one level of nesting."""
    return flatten_n(1, seq)


# ─────────────────────────────────────────────────────────────────────────────
# Repetition & padding
# ─────────────────────────────────────────────────────────────────────────────


@curry
def cycle_n(n: float, seq: Iterable[T]) -> Iterator[T]:
    """Yield the items ``n`` times in total. Buffers the first pass."""
    if n < 1:
        return
    buffer: list[T] = []
    yield from for_each(buffer.append, seq)
    if not buffer:
        return
    while n > 1:
        yield from buffer
        n -= 1


def cycle(seq: Iterable[T]) -> Iterator[T]:
    """Repeat the items forever. Upstream must be finite."""
    return cycle_n(math.inf, seq)


@curry
def pad_to(length: float, filler: T, seq: Iterable[T]) -> Iterator[T]:
    """Append ``filler`` until at least ``length`` items have been yielded."""
    n = 0
    for item in seq:
        n += 1
        yield item
    yield from times(length - n, filler)


@curry
def pad(filler: T, seq: Iterable[T]) -> Iterator[T]:
    """Append ``filler`` forever once upstream is exhausted."""
    return pad_to(math.inf, filler, seq)


# ─────────────────────────────────────────────────────────────────────────────
# Joining & ordering
# ─────────────────────────────────────────────────────────────────────────────


@curry
def intersperse(spacer: T, seq: Iterable[T]) -> Iterator[T]:
    """Insert ``spacer`` between adjacent items."""
    return flat_map(lambda pair: (spacer, pair[1]) if pair[0] else (pair[1],), enumerate(seq))


@curry
def join_with(separator: str, seq: Iterable[Any]) -> str:
    """Concatenate ``str(item)`` with ``separator`` between items. Drains ``seq``."""
    return reduce(lambda acc, item: acc + str(item), "", intersperse(separator, seq))


def join(seq: Iterable[Any]) -> str:
    return join_with("", seq)


def reverse(seq: Iterable[T]) -> Iterator[T]:
    """Items in reverse order. Materializes upstream on the first pull."""
    yield from reversed(to_list(seq))


@curry
def sort(key: Callable[[T], Any] | None, seq: Iterable[T]) -> Iterator[T]:
    """Items in ascending ``key`` order (natural order when ``key`` is None). Stable."""
    yield from sorted(seq, key=key)

