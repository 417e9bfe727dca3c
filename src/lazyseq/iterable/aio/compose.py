"""Single-source composites over async iterables.

Same contracts as `lazyseq.iterable.sync.compose`; predicates may return
awaitables. ``sort`` keys must be synchronous.
"""

from __future__ import annotations

import math
import operator
from collections.abc import AsyncIterator, Callable
from typing import Any, TypeVar

from lazyseq.foundation.core import curry
from lazyseq.iterable.common import DONE, is_nested_async

from .base import AnyIterable, flat_map, for_each, from_, of, reduce, repeat, resolve, to_list

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
async def slice(start: int, stop: float, seq: AnyIterable[T]) -> AsyncIterator[T]:
    """Items at positions ``start <= i < stop``. Never pulls past ``stop - 1``."""
    if stop <= start:
        return
    i = 0
    async for item in from_(seq):
        if i >= start:
            yield item
        if i >= stop - 1:
            return
        i += 1


@curry
async def take(n: float, seq: AnyIterable[T]) -> AsyncIterator[T]:
    if n <= 0:
        return
    async for item in slice(0, n, seq):
        yield item


@curry
def drop(n: int, seq: AnyIterable[T]) -> AsyncIterator[T]:
    return slice(n, math.inf, seq)


def tail(seq: AnyIterable[T]) -> AsyncIterator[T]:
    return drop(1, seq)


@curry
async def take_while(pred: Callable[[T], Any], seq: AnyIterable[T]) -> AsyncIterator[T]:
    async for item in from_(seq):
        if not await resolve(pred(item)):
            return
        yield item


@curry
async def drop_while(pred: Callable[[T], Any], seq: AnyIterable[T]) -> AsyncIterator[T]:
    """Skip the leading run that passes ``pred``; the first failing item is kept."""
    it = from_(seq)
    async for item in it:
        if not await resolve(pred(item)):
            async for rest in prepend(item, it):
                yield rest
            return


@curry
async def concat(first: AnyIterable[T], second: AnyIterable[T]) -> AsyncIterator[T]:
    async for item in from_(first):
        yield item
    async for item in from_(second):
        yield item


@curry
def prepend(item: T, seq: AnyIterable[T]) -> AsyncIterator[T]:
    return concat(of(item), seq)


@curry
def append(item: T, seq: AnyIterable[T]) -> AsyncIterator[T]:
    return concat(seq, of(item))


@curry
def times(n: float, item: T) -> AsyncIterator[T]:
    return take(n, repeat(item))


# ─────────────────────────────────────────────────────────────────────────────
# Windows & groups
# ─────────────────────────────────────────────────────────────────────────────


@curry
async def frame(size: int, seq: AnyIterable[T]) -> AsyncIterator[list[T]]:
    """Sliding window of the last ``size`` items, then the trailing partial window."""
    if size < 1:
        raise ValueError(f"frame size must be >= 1, got {size}")
    cache: list[T] = []
    async for item in from_(seq):
        cache.append(item)
        if len(cache) == size:
            yield list(cache)
            del cache[0]
    if cache:
        yield cache


@curry
async def drop_last(n: int, seq: AnyIterable[T]) -> AsyncIterator[T]:
    async for window in frame(n + 1, append(DONE, seq)):
        if window[-1] is DONE:
            return
        yield window[0]


def init(seq: AnyIterable[T]) -> AsyncIterator[T]:
    return drop_last(1, seq)


@curry
async def group_with(pred: Callable[[T, T], Any], seq: AnyIterable[T]) -> AsyncIterator[list[T]]:
    """Maximal runs of adjacent items where ``pred(previous, item)`` holds."""
    run: list[T] = []
    async for item in from_(seq):
        if run and not await resolve(pred(run[-1], item)):
            yield run
            run = []
        run.append(item)
    if run:
        yield run


def group(seq: AnyIterable[T]) -> AsyncIterator[list[T]]:
    return group_with(operator.eq, seq)


@curry
async def split_every(n: int, seq: AnyIterable[T]) -> AsyncIterator[list[T]]:
    chunk: list[T] = []
    async for item in from_(seq):
        chunk.append(item)
        if len(chunk) >= n:
            yield chunk
            chunk = []
    if chunk:
        yield chunk


# ─────────────────────────────────────────────────────────────────────────────
# De-duplication
# ─────────────────────────────────────────────────────────────────────────────


async def unique(seq: AnyIterable[T]) -> AsyncIterator[T]:
    seen: set[Any] = set()
    seen_unhashable: list[T] = []
    async for item in from_(seq):
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
async def unique_with(pred: Callable[[T, T], Any], seq: AnyIterable[T]) -> AsyncIterator[T]:
    seen: list[T] = []
    async for item in from_(seq):
        for saw in seen:
            if await resolve(pred(item, saw)):
                break
        else:
            seen.append(item)
            yield item


# ─────────────────────────────────────────────────────────────────────────────
# Flattening
# ─────────────────────────────────────────────────────────────────────────────


@curry
def flatten_n(depth: float, seq: AnyIterable[Any]) -> AsyncIterator[Any]:
    """Inline nested sync or async iterables up to ``depth`` levels."""
    if depth < 1:
        return from_(seq)

    def inline(item: Any) -> AsyncIterator[Any]:
        return flatten_n(depth - 1, item) if is_nested_async(item) else of(item)

    return flat_map(inline, seq)


def flatten(seq: AnyIterable[Any]) -> AsyncIterator[Any]:
    return flatten_n(math.inf, seq)


def unnest(seq: AnyIterable[Any]) -> AsyncIterator[Any]:
    return flatten_n(1, seq)


# ─────────────────────────────────────────────────────────────────────────────
# Repetition & padding
# ─────────────────────────────────────────────────────────────────────────────


@curry
async def cycle_n(n: float, seq: AnyIterable[T]) -> AsyncIterator[T]:
    """Yield the items ``n`` times in total. Buffers the first pass."""
    if n < 1:
        return
    buffer: list[T] = []
    async for item in for_each(buffer.append, seq):
        yield item
    if not buffer:
        return
    while n > 1:
        for item in buffer:
            yield item
        n -= 1


def cycle(seq: AnyIterable[T]) -> AsyncIterator[T]:
    return cycle_n(math.inf, seq)


@curry
async def pad_to(length: float, filler: T, seq: AnyIterable[T]) -> AsyncIterator[T]:
    n = 0
    async for item in from_(seq):
        n += 1
        yield item
    async for item in times(length - n, filler):
        yield item


@curry
def pad(filler: T, seq: AnyIterable[T]) -> AsyncIterator[T]:
    return pad_to(math.inf, filler, seq)


# ─────────────────────────────────────────────────────────────────────────────
# Joining & ordering
# ─────────────────────────────────────────────────────────────────────────────


@curry
async def intersperse(spacer: T, seq: AnyIterable[T]) -> AsyncIterator[T]:
    first = True
    async for item in from_(seq):
        if not first:
            yield spacer
        first = False
        yield item


@curry
async def join_with(separator: str, seq: AnyIterable[Any]) -> str:
    return await reduce(lambda acc, item: acc + str(item), "", intersperse(separator, seq))


async def join(seq: AnyIterable[Any]) -> str:
    return await join_with("", seq)


async def reverse(seq: AnyIterable[T]) -> AsyncIterator[T]:
    """Items in reverse order. Materializes upstream on the first pull."""
    for item in reversed(await to_list(seq)):
        yield item


@curry
async def sort(key: Callable[[T], Any] | None, seq: AnyIterable[T]) -> AsyncIterator[T]:
    for item in sorted(await to_list(seq), key=key):
        yield item
