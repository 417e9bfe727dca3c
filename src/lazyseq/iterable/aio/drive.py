"""Drive a sync or async generator, answering each yield with an awaited callback."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from typing import Any, TypeVar

from lazyseq.foundation.core import curry

from .base import resolve

Y = TypeVar("Y")
R = TypeVar("R")

__all__ = ["yield_with"]


@curry
async def yield_with(
    on_yield: Callable[[Y], Any | Awaitable[Any]],
    gen: Generator[Y, Any, R] | AsyncGenerator[Y, Any],
) -> R | None:
    """Run ``gen`` to completion, sending the awaited ``on_yield(value)`` back for every yield.

    Errors raised by ``on_yield`` are thrown into the generator at the yield
    point. Returns the return value of a sync generator; async generators
    cannot return a value, so driving one resolves to None.

    Example:
        >>> async def fetch(url):
        ...     return f"<{url}>"
        >>> def task():
        ...     page = yield "a"
        ...     return page.upper()
        >>> await yield_with(fetch, task())
        '<A>'
    """
    if isinstance(gen, AsyncGenerator):
        return await _drive_async(on_yield, gen)
    try:
        yielded = gen.send(None)
        while True:
            try:
                reply = await resolve(on_yield(yielded))
            except Exception as exc:
                yielded = gen.throw(exc)
            else:
                yielded = gen.send(reply)
    except StopIteration as stop:
        return stop.value


async def _drive_async(on_yield: Callable[[Y], Any], gen: AsyncGenerator[Y, Any]) -> None:
    try:
        yielded = await gen.asend(None)
        while True:
            try:
                reply = await resolve(on_yield(yielded))
            except Exception as exc:
                yielded = await gen.athrow(exc)
            else:
                yielded = await gen.asend(reply)
    except StopAsyncIteration:
        return None
