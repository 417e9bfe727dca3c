"""Runtime services: structured logging and the bounded-concurrency scheduler."""

from __future__ import annotations

# observability first: the engines log through it
from .observability import configure_logging, get_logger, log_context
from .concurrency import Settled, SettledStatus, map_async, map_limit, map_settled

__all__ = [
    "configure_logging", "get_logger", "log_context",
    "Settled", "SettledStatus", "map_async", "map_limit", "map_settled",
]
