"""Partial application for data-last combinators.

Every combinator takes its configuration first and its data last. Wrapping
it with `curry` lets callers pre-bind the leading arguments and hand the
result around as a one-argument stage:

    >>> from lazyseq import sync as it
    >>> first_three = it.take(3)
    >>> it.to_list(first_three(range(10)))
    [0, 1, 2]

Curried stages compose left-to-right with `>>` or `pipe`:

    >>> evens = it.filter(lambda x: x % 2 == 0) >> it.take(2) >> it.to_list
    >>> evens(range(10))
    [0, 2]
"""

from __future__ import annotations

import inspect
from functools import lru_cache, reduce, update_wrapper
from typing import Any, Callable, Generic, TypeVar, overload

R = TypeVar("R")

__all__ = ["Curried", "curry", "pipe", "arity_of"]

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def arity_of(func: Callable[..., Any]) -> int:
    """Number of required positional parameters of ``func``."""
    return sum(
        1 for p in inspect.signature(func).parameters.values()
        if p.kind in _POSITIONAL and p.default is p.empty
    )


@lru_cache(maxsize=512)
def _positional_names(func: Callable[..., Any]) -> tuple[tuple[str, ...], frozenset[str]]:
    """Names of positional parameters in order, plus the required subset."""
    params = [p for p in inspect.signature(func).parameters.values() if p.kind in _POSITIONAL]
    return tuple(p.name for p in params), frozenset(p.name for p in params if p.default is p.empty)


def _route(func: Callable[..., Any], args: tuple[Any, ...], keywords: dict[str, Any]) -> tuple[tuple[Any, ...], dict[str, Any]]:
    """Fill positional parameters left to right, skipping those bound by keyword.

    A keyword-bound parameter that sits before a later positional argument is
    moved into the positional tuple so the argument lands on the next free name.
    """
    names, _ = _positional_names(func)
    if not keywords or not keywords.keys() & set(names):
        return args, keywords
    keywords = dict(keywords)
    routed: list[Any] = []
    remaining = list(args)
    for name in names:
        if not remaining:
            break
        routed.append(keywords.pop(name) if name in keywords else remaining.pop(0))
    return (*routed, *remaining), keywords


class Curried(Generic[R]):
    """Callable holding a function plus the leading arguments bound so far.

    Immutable: each partial call returns a new `Curried`, so a stage can be
    reused across pipelines without leaking state between them.
    """

    def __init__(
        self,
        func: Callable[..., R],
        arity: int,
        args: tuple[Any, ...] = (),
        keywords: dict[str, Any] | None = None,
    ) -> None:
        self.func = func
        self.arity = arity
        self.args = args
        self.keywords = keywords or {}
        update_wrapper(self, func)

    @property
    def pending(self) -> int:
        """Arguments still needed before ``func`` runs."""
        satisfied = len(self.args)
        if self.keywords:
            _, required = _positional_names(self.func)
            satisfied += len(required & self.keywords.keys())
        return max(self.arity - satisfied, 0)

    def __call__(self, *args: Any, **kwargs: Any) -> R | Curried[R]:
        if not args and not kwargs:
            return self if self.pending else self._invoke()
        bound = Curried(self.func, self.arity, (*self.args, *args), {**self.keywords, **kwargs})
        if bound.pending:
            return bound
        return bound._invoke()

    def _invoke(self) -> R:
        args, keywords = _route(self.func, self.args, self.keywords)
        return self.func(*args, **keywords)

    def __rshift__(self, other: Callable[..., Any]) -> Curried[Any]:
        return pipe(self, other)

    def __rrshift__(self, other: Callable[..., Any]) -> Curried[Any]:
        return pipe(other, self)

    def __repr__(self) -> str:
        bound = ", ".join([*map(repr, self.args), *(f"{k}={v!r}" for k, v in self.keywords.items())])
        return f"<curried {self.func.__qualname__}({bound}) pending={self.pending}>"


@overload
def curry(func: Callable[..., R], *, arity: int | None = None) -> Curried[R]: ...


@overload
def curry(func: None = None, *, arity: int | None = None) -> Callable[[Callable[..., R]], Curried[R]]: ...


def curry(
    func: Callable[..., R] | None = None,
    *,
    arity: int | None = None,
) -> Curried[R] | Callable[[Callable[..., R]], Curried[R]]:
    """Make ``func`` accept its leading arguments one call at a time.

    Args:
        func: Function to wrap. Omit to use as ``@curry(arity=n)``.
        arity: Argument count that triggers the call. Defaults to the number
            of required positional parameters; pass it explicitly for
            variadic functions.

    Example:
        >>> @curry
        ... def add(a, b):
        ...     return a + b
        >>> add(1)(2)
        3
    """
    def decorator(fn: Callable[..., R]) -> Curried[R]:
        return Curried(fn, arity_of(fn) if arity is None else arity)

    return decorator(func) if func is not None else decorator


def pipe(*funcs: Callable[..., Any]) -> Curried[Any]:
    """Compose left-to-right: ``pipe(f, g)(x) == g(f(x))``.

    The first stage may take several arguments; later stages take one. The
    result is itself a stage, so it keeps composing with ``>>``.
    """
    if not funcs:
        raise ValueError("pipe() requires at least one function")
    first, rest = funcs[0], funcs[1:]

    def piped(*args: Any, **kwargs: Any) -> Any:
        return reduce(lambda acc, fn: fn(acc), rest, first(*args, **kwargs))

    piped.__name__ = piped.__qualname__ = " >> ".join(getattr(f, "__name__", repr(f)) for f in funcs)
    return Curried(piped, 0)
