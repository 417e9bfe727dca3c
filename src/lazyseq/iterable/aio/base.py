"""Primitive producers, transformers and consumers over async iterables.

Mirrors `lazyseq.iterable.sync.base` operation for operation. Lazy operations
are async generator functions; consumers are coroutines. Inputs may be sync
iterables, async iterables or mappings, and user functions may return
awaitables.

Progress is strictly sequential: each step awaits its upstream step and the
user function for that item before the next step starts. Nothing here
prefetches or gathers.

Example:
    >>> from lazyseq import aio
    >>> async def double(x):
    ...     await asyncio.sleep(0)
    ...     return x * 2
    >>> await aio.to_list(aio.map(double, [1, 2, 3]))
    [2, 4, 6]
"""

from __future__ import annotations

import builtins
import inspect
import math
import operator
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable, Iterable, Mapping
from typing import Any, TypeVar

from lazyseq.foundation.core import curry
from lazyseq.iterable.common import identity

T = TypeVar("T")
U = TypeVar("U")
A = TypeVar("A")

AnyIterable = AsyncIterable[T] | Iterable[T]

__all__ = [
    "resolve", "AnyIterable",
    # Producers
    "from_", "of", "range_step", "range", "unfold", "iterate", "repeat",
    # Transformers
    "map", "flat_map", "filter", "reject", "scan", "accumulate", "for_each",
    # Consumers
    "next", "next_or", "last", "reduce", "length", "to_list", "exhaust",
    "some", "every", "none", "find", "find_index", "nth", "count",
    "sum_by", "min_by", "max_by", "sum", "min", "max", "includes", "index_of", "is_empty",
]


async def resolve(value: T | Awaitable[T]) -> T:
    """Await ``value`` if it is awaitable, else return it as is."""
    if inspect.isawaitable(value):
        return await value
    return value


# ─────────────────────────────────────────────────────────────────────────────
# Producers
# ─────────────────────────────────────────────────────────────────────────────


@curry
async def from_(source: AnyIterable[T] | Mapping[Any, Any]) -> AsyncIterator[T]:
    """New async cursor over ``source``. Awaitable items are awaited in order.

    Mappings yield ``(key, value)`` pairs. Wrapping an iterator does not copy
    it: both handles share one stream of items.
    """
    if isinstance(source, Mapping):
        source = source.items()
    if isinstance(source, AsyncIterable):
        async for item in source:
            yield await resolve(item)
    else:
        for item in source:
            yield await resolve(item)


def of(*items: T | Awaitable[T]) -> AsyncIterator[T]:
    return from_(items)


@curry
async def range_step(step: float, start: float, stop: float) -> AsyncIterator[float]:
    """``start, start+step, ...`` while short of ``stop``; empty when ``step == 0``."""
    if step == 0:
        return
    i = start
    while i < stop if step > 0 else i > stop:
        yield i
        i += step


def range(start: float, stop: float | None = None) -> AsyncIterator[float]:
    if stop is None:
        start, stop = 0, start
    return range_step(1, start, stop)


@curry
async def unfold(step: Callable[[A], Any], seed: A) -> AsyncIterator[T]:
    """Generate from a seed; ``step(state)`` returns ``(value, next_state)`` or a falsy value."""
    pair = await resolve(step(seed))
    while pair:
        value, seed = pair
        yield value
        pair = await resolve(step(seed))


@curry
def iterate(step: Callable[[T], T | Awaitable[T]], seed: T) -> AsyncIterator[T]:
    """``seed, step(seed), step(step(seed)), ...`` forever."""
    async def advance(item: T) -> tuple[T, T]:
        return item, await resolve(step(item))

    return unfold(advance, seed)


def repeat(item: T) -> AsyncIterator[T]:
    return iterate(identity, item)


# ─────────────────────────────────────────────────────────────────────────────
# Primitive transformers
# ─────────────────────────────────────────────────────────────────────────────


@curry
async def map(func: Callable[[T], U | Awaitable[U]], seq: AnyIterable[T]) -> AsyncIterator[U]:
    """Yield ``func(item)``; step N waits for ``func`` on item N to finish."""
    async for item in from_(seq):
        yield await resolve(func(item))


@curry
async def flat_map(func: Callable[[T], Any], seq: AnyIterable[T]) -> AsyncIterator[U]:
    """Drain ``func(item)`` (sync or async iterable) before advancing upstream."""
    async for item in from_(seq):
        async for sub in from_(await resolve(func(item))):
            yield sub


@curry
async def filter(pred: Callable[[T], Any], seq: AnyIterable[T]) -> AsyncIterator[T]:
    async for item in from_(seq):
        if await resolve(pred(item)):
            yield item


@curry
def reject(pred: Callable[[T], Any], seq: AnyIterable[T]) -> AsyncIterator[T]:
    async def fails(item: T) -> bool:
        return not await resolve(pred(item))

    return filter(fails, seq)


@curry
async def scan(func: Callable[[A, T], Any], acc: A, seq: AnyIterable[T]) -> AsyncIterator[A]:
    """Running fold: yields ``acc`` first, then each intermediate accumulator."""
    yield acc
    async for item in from_(seq):
        acc = await resolve(func(acc, item))
        yield acc


@curry
async def accumulate(func: Callable[[T, T], Any], seq: AnyIterable[T]) -> AsyncIterator[T]:
    """`scan` seeded with the first item."""
    it = from_(seq)
    async for acc in it:
        async for value in scan(func, acc, it):
            yield value


@curry
async def for_each(func: Callable[[T], Any], seq: AnyIterable[T]) -> AsyncIterator[T]:
    """Await ``func(item)`` for its side effect, then pass the item through."""
    async for item in from_(seq):
        await resolve(func(item))
        yield item


# ─────────────────────────────────────────────────────────────────────────────
# Consumers
# ─────────────────────────────────────────────────────────────────────────────


@curry
async def next_or(default: U, seq: AnyIterable[T]) -> T | U:
    """Pull exactly one item, or return ``default`` if exhausted."""
    async for item in from_(seq):
        return item
    return default


async def next(seq: AnyIterable[T]) -> T:
    """Pull exactly one item.

    Raises:
        StopAsyncIteration: If the sequence is already exhausted. Awaited
            inside an async generator, Python turns this into
            ``RuntimeError``; use `next_or` there.
    """
    async for item in from_(seq):
        return item
    raise StopAsyncIteration


async def last(seq: AnyIterable[T]) -> T | None:
    item = None
    async for item in from_(seq):
        pass
    return item


@curry
async def reduce(func: Callable[[A, T], Any], acc: A, seq: AnyIterable[T]) -> A:
    """Last value produced by `scan`. Drains ``seq``."""
    return await last(scan(func, acc, seq))


async def length(seq: AnyIterable[Any]) -> int:
    return await reduce(lambda n, _: n + 1, 0, seq)


async def to_list(seq: AnyIterable[T]) -> list[T]:
    """Materialize into a list. Drains ``seq``."""
    return [item async for item in from_(seq)]


async def exhaust(seq: AnyIterable[Any]) -> None:
    async for _ in from_(seq):
        pass


@curry
async def some(pred: Callable[[T], Any], seq: AnyIterable[T]) -> bool:
    async for item in from_(seq):
        if await resolve(pred(item)):
            return True
    return False


@curry
async def every(pred: Callable[[T], Any], seq: AnyIterable[T]) -> bool:
    async for item in from_(seq):
        if not await resolve(pred(item)):
            return False
    return True


@curry
async def none(pred: Callable[[T], Any], seq: AnyIterable[T]) -> bool:
    return not await some(pred, seq)


@curry
async def find(pred: Callable[[T], Any], seq: AnyIterable[T]) -> T | None:
    async for item in from_(seq):
        if await resolve(pred(item)):
            return item
    return None


@curry
async def find_index(pred: Callable[[T], Any], seq: AnyIterable[T]) -> int:
    """Zero-based position of the first item that passes, or -1."""
    i = 0
    async for item in from_(seq):
        if await resolve(pred(item)):
            return i
        i += 1
    return -1


@curry
async def nth(n: int, seq: AnyIterable[T]) -> T | None:
    i = 0
    async for item in from_(seq):
        if i == n:
            return item
        i += 1
    return None


@curry
async def count(pred: Callable[[T], Any], seq: AnyIterable[T]) -> int:
    return await length(filter(pred, seq))


@curry
async def sum_by(func: Callable[[T], Any], seq: AnyIterable[T]) -> float:
    return await reduce(operator.add, 0, map(func, seq))


@curry
async def min_by(func: Callable[[T], Any], seq: AnyIterable[T]) -> float:
    """Smallest ``func(item)``; ``inf`` for an empty sequence."""
    return await reduce(builtins.min, math.inf, map(func, seq))


@curry
async def max_by(func: Callable[[T], Any], seq: AnyIterable[T]) -> float:
    """Largest ``func(item)``; ``-inf`` for an empty sequence."""
    return await reduce(builtins.max, -math.inf, map(func, seq))


async def sum(seq: AnyIterable[float]) -> float:
    return await sum_by(identity, seq)


async def min(seq: AnyIterable[float]) -> float:
    return await min_by(identity, seq)


async def max(seq: AnyIterable[float]) -> float:
    return await max_by(identity, seq)


@curry
async def includes(value: Any, seq: AnyIterable[Any]) -> bool:
    return await some(lambda item: item == value, seq)


@curry
async def index_of(value: Any, seq: AnyIterable[Any]) -> int:
    return await find_index(lambda item: item == value, seq)


async def is_empty(seq: AnyIterable[Any]) -> bool:
    """Whether ``seq`` has no items. Consumes at most one item."""
    return await none(lambda _: True, seq)
