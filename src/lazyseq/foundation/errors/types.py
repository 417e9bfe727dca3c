"""JSON-shaped type aliases shared by error records and structured logs."""

from __future__ import annotations

from typing import Any, Union

# Any for recursive slots to keep pydantic schema generation flat
JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list[Any], dict[str, Any]]
JsonDict = dict[str, Any]

__all__ = ["JsonPrimitive", "JsonValue", "JsonDict"]
