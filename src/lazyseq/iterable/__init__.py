"""Lazy sequence engines.

`sync` works over iterables with generator functions; `aio` is the same
vocabulary over async iterables with async generator functions.
"""

from . import aio, sync
from .common import is_nested, is_nested_async

__all__ = ["sync", "aio", "is_nested", "is_nested_async"]
