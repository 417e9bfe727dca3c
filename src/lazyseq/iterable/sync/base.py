"""Primitive producers, transformers and consumers over synchronous iterables.

Every lazy operation here is a generator function: calling it builds the
sequence, nothing is pulled from upstream until the first ``next``. All
multi-argument operations are curried, configuration first, data last.

Key Operations:
    - Producers: from_, of, range_step, range, unfold, iterate, repeat
    - Transformers: map, flat_map, filter, reject, scan, accumulate, for_each
    - Consumers: next, next_or, reduce, to_list, some/every/none, find, length

Example:
    >>> from lazyseq import sync as it
    >>> it.to_list(it.map(lambda x: x * 2, it.range(4)))
    [0, 2, 4, 6]
    >>> it.reduce(lambda acc, x: acc + x, 10, [1, 2, 3, 4, 5])
    25

Eager consumers (to_list, length, reduce, exhaust, ...) never return on an
infinite sequence.
"""

from __future__ import annotations

import builtins
import math
import operator
from collections import deque
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any, TypeVar

from lazyseq.foundation.core import curry
from lazyseq.iterable.common import identity

T = TypeVar("T")
U = TypeVar("U")
A = TypeVar("A")

__all__ = [
    # Producers
    "from_", "of", "range_step", "range", "unfold", "iterate", "repeat",
    # Transformers
    "map", "flat_map", "filter", "reject", "scan", "accumulate", "for_each",
    # Consumers
    "next", "next_or", "last", "reduce", "length", "to_list", "exhaust",
    "some", "every", "none", "find", "find_index", "nth", "count",
    "sum_by", "min_by", "max_by", "sum", "min", "max", "includes", "index_of", "is_empty",
]


# ─────────────────────────────────────────────────────────────────────────────
# Producers
# ─────────────────────────────────────────────────────────────────────────────


@curry
def from_(source: Iterable[T] | Mapping[Any, Any]) -> Iterator[T]:
    """New cursor over ``source``. Mappings yield ``(key, value)`` pairs.

    Wrapping an iterator does not copy it: both handles share one stream of
    items. Use `tee` to read the same items twice.
    """
    if isinstance(source, Mapping):
        source = source.items()
    for item in source:
        yield item


def of(*items: T) -> Iterator[T]:
    """Finite sequence over the arguments, in order."""
    return from_(items)


@curry
def range_step(step: float, start: float, stop: float) -> Iterator[float]:
    """``start, start+step, ...`` while short of ``stop``; empty when ``step == 0``.

    ``stop`` may be ``math.inf`` (or ``-math.inf``) for an unbounded sequence.
    """
    if step == 0:
        return
    i = start
    while i < stop if step > 0 else i > stop:
        yield i
        i += step


def range(start: float, stop: float | None = None) -> Iterator[float]:
    """``range(stop)`` counts from 0; ``range(start, stop)`` from ``start``. Step is 1."""
    if stop is None:
        start, stop = 0, start
    return range_step(1, start, stop)


@curry
def unfold(step: Callable[[A], tuple[T, A] | None], seed: A) -> Iterator[T]:
    """Generate from a seed.

    ``step(state)`` returns ``(value, next_state)`` to continue or a falsy
    value (``None``, ``()``) to stop.

    Example:
        >>> list(unfold(lambda n: (n, n - 1) if n else None, 3))
        [3, 2, 1]
    """
    pair = step(seed)
    while pair:
        value, seed = pair
        yield value
        pair = step(seed)


@curry
def iterate(step: Callable[[T], T], seed: T) -> Iterator[T]:
    """``seed, step(seed), step(step(seed)), ...`` forever."""
    return unfold(lambda item: (item, step(item)), seed)


def repeat(item: T) -> Iterator[T]:
    """Yield ``item`` forever."""
    return iterate(identity, item)


# ─────────────────────────────────────────────────────────────────────────────
# Primitive transformers
# ─────────────────────────────────────────────────────────────────────────────


@curry
def map(func: Callable[[T], U], seq: Iterable[T]) -> Iterator[U]:
    """Lazily yield ``func(item)`` for each item."""
    for item in seq:
        yield func(item)


@curry
def flat_map(func: Callable[[T], Iterable[U]], seq: Iterable[T]) -> Iterator[U]:
    """Drain ``func(item)`` into the output before advancing upstream."""
    for item in seq:
        yield from func(item)


@curry
def filter(pred: Callable[[T], Any], seq: Iterable[T]) -> Iterator[T]:
    """Yield items where ``pred(item)`` is truthy. ``pred`` runs once per item."""
    for item in seq:
        if pred(item):
            yield item


@curry
def reject(pred: Callable[[T], Any], seq: Iterable[T]) -> Iterator[T]:
    """Yield items where ``pred(item)`` is falsy."""
    return filter(lambda item: not pred(item), seq)


@curry
def scan(func: Callable[[A, T], A], acc: A, seq: Iterable[T]) -> Iterator[A]:
    """Running fold: yields ``acc`` first, then each intermediate accumulator.

    Example:
        >>> list(scan(operator.add, 10, [1, 2, 3, 4, 5]))
        [10, 11, 13, 16, 20, 25]
    """
    yield acc
    for item in seq:
        acc = func(acc, item)
        yield acc


@curry
def accumulate(func: Callable[[T, T], T], seq: Iterable[T]) -> Iterator[T]:
    """`scan` seeded with the first item instead of an initial value."""
    it = iter(seq)
    for acc in it:
        yield from scan(func, acc, it)


@curry
def for_each(func: Callable[[T], Any], seq: Iterable[T]) -> Iterator[T]:
    """Call ``func`` for its side effect on each item, passing the item through."""
    for item in seq:
        func(item)
        yield item


# ─────────────────────────────────────────────────────────────────────────────
# Consumers
# ─────────────────────────────────────────────────────────────────────────────


@curry
def next_or(default: U, seq: Iterable[T]) -> T | U:
    """Pull exactly one item, or return ``default`` if exhausted."""
    return builtins.next(iter(seq), default)


def next(seq: Iterable[T]) -> T:
    """Pull exactly one item.

    Raises:
        StopIteration: If the sequence is already exhausted.
    """
    return builtins.next(iter(seq))


def last(seq: Iterable[T]) -> T | None:
    """Final item, or None for an empty sequence. Drains ``seq``."""
    item = None
    for item in seq:
        pass
    return item


@curry
def reduce(func: Callable[[A, T], A], acc: A, seq: Iterable[T]) -> A:
    """Last value produced by `scan`. Drains ``seq``."""
    return last(scan(func, acc, seq))


def length(seq: Iterable[Any]) -> int:
    """Number of items. Drains ``seq``."""
    return reduce(lambda n, _: n + 1, 0, seq)


def to_list(seq: Iterable[T]) -> list[T]:
    """Materialize into a list. Drains ``seq``."""
    return list(seq)


def exhaust(seq: Iterable[Any]) -> None:
    """Drain ``seq`` for its side effects."""
    deque(seq, maxlen=0)


@curry
def some(pred: Callable[[T], Any], seq: Iterable[T]) -> bool:
    """Whether any item passes. Stops at the first that does."""
    return any(pred(item) for item in seq)


@curry
def every(pred: Callable[[T], Any], seq: Iterable[T]) -> bool:
    """Whether all items pass. Stops at the first that fails."""
    return all(pred(item) for item in seq)


@curry
def none(pred: Callable[[T], Any], seq: Iterable[T]) -> bool:
    """Whether no item passes. Stops at the first that does."""
    return not some(pred, seq)


@curry
def find(pred: Callable[[T], Any], seq: Iterable[T]) -> T | None:
    """First item that passes, or None."""
    for item in seq:
        if pred(item):
            return item
    return None


@curry
def find_index(pred: Callable[[T], Any], seq: Iterable[T]) -> int:
    """Zero-based position of the first item that passes, or -1."""
    for i, item in enumerate(seq):
        if pred(item):
            return i
    return -1


@curry
def nth(n: int, seq: Iterable[T]) -> T | None:
    """Item at index ``n``, or None if the sequence is shorter."""
    for i, item in enumerate(seq):
        if i == n:
            return item
    return None


@curry
def count(pred: Callable[[T], Any], seq: Iterable[T]) -> int:
    """Number of items that pass. Drains ``seq``."""
    return length(filter(pred, seq))


@curry
def sum_by(func: Callable[[T], float], seq: Iterable[T]) -> float:
    return reduce(operator.add, 0, map(func, seq))


@curry
def min_by(func: Callable[[T], float], seq: Iterable[T]) -> float:
    """Smallest ``func(item)``; ``inf`` for an empty sequence."""
    return reduce(builtins.min, math.inf, map(func, seq))


@curry
def max_by(func: Callable[[T], float], seq: Iterable[T]) -> float:
    """Largest ``func(item)``; ``-inf`` for an empty sequence."""
    return reduce(builtins.max, -math.inf, map(func, seq))


def sum(seq: Iterable[float]) -> float:
    return sum_by(identity, seq)


def min(seq: Iterable[float]) -> float:
    return min_by(identity, seq)


def max(seq: Iterable[float]) -> float:
    return max_by(identity, seq)


@curry
def includes(value: Any, seq: Iterable[Any]) -> bool:
    """Whether some item equals ``value``."""
    return some(lambda item: item == value, seq)


@curry
def index_of(value: Any, seq: Iterable[Any]) -> int:
    """Position of the first item equal to ``value``, or -1."""
    return find_index(lambda item: item == value, seq)


def is_empty(seq: Iterable[Any]) -> bool:
    """Whether ``seq`` has no items. Consumes at most one item."""
    return none(lambda _: True, seq)
