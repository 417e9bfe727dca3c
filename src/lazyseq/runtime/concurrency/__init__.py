"""Bounded-concurrency scheduling for async work over finite collections."""

from __future__ import annotations

from .scheduler import (
    Settled,
    SettledStatus,
    delay,
    filter_limit,
    flat_map_limit,
    for_each_limit,
    map_async,
    map_limit,
    map_settled,
    reduce_series,
    to_async,
)

__all__ = [
    "Settled",
    "SettledStatus",
    "delay",
    "filter_limit",
    "flat_map_limit",
    "for_each_limit",
    "map_async",
    "map_limit",
    "map_settled",
    "reduce_series",
    "to_async",
]
