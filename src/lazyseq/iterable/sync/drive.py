"""Drive a generator as a coroutine, answering each yield with a callback."""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any, TypeVar

from lazyseq.foundation.core import curry

Y = TypeVar("Y")
R = TypeVar("R")

__all__ = ["yield_with"]


@curry
def yield_with(on_yield: Callable[[Y], Any], gen: Generator[Y, Any, R]) -> R:
    """Run ``gen`` to completion, sending ``on_yield(value)`` back for every yield.

    An exception raised by ``on_yield`` is thrown into the generator at the
    yield point, so the generator can handle it like a failed call. Returns
    the generator's return value.

    Example:
        >>> def task():
        ...     a = yield 1
        ...     b = yield 2
        ...     return a + b
        >>> yield_with(lambda x: x * 10, task())
        30
    """
    try:
        yielded = gen.send(None)
        while True:
            try:
                reply = on_yield(yielded)
            except Exception as exc:
                yielded = gen.throw(exc)
            else:
                yielded = gen.send(reply)
    except StopIteration as stop:
        return stop.value
