"""Helpers shared by the sync and async engines."""

from __future__ import annotations

from collections.abc import AsyncIterable, Iterable, Mapping
from typing import Final

__all__ = ["Marker", "DONE", "identity", "as_tuple", "is_nested", "is_nested_async"]

# Never recursed into by flatten
_ATOMS: Final = (str, bytes, bytearray, memoryview, Mapping)


class Marker:
    """Private sentinel compared by identity. No user value can equal it."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<{self.name}>"


DONE: Final = Marker("done")


def identity(value):
    return value


def as_tuple(*values):
    return values


def is_nested(item: object) -> bool:
    """Whether flatten should inline ``item``."""
    return isinstance(item, Iterable) and not isinstance(item, _ATOMS)


def is_nested_async(item: object) -> bool:
    """Like `is_nested`, also accepting async iterables."""
    return isinstance(item, AsyncIterable) or is_nested(item)
