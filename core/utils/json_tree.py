"""Helpers for JSON document trees held as plain Python values."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

PRIMITIVE_TYPES = frozenset(
    {"array", "boolean", "integer", "null", "number", "object", "string"}
)


def node_type(value: Any) -> str:
    """Return the JSON primitive type name of ``value``.

    ``bool`` is checked before ``int`` since it is a subclass of it; floats
    report ``number`` even when integral.
    """

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def canonicalize(value: Any) -> Any:
    """Return a canonical copy of a JSON value.

    Object members are sorted by name and integral floats collapse to ints,
    so ``{"b": 1.0, "a": 2}`` and ``{"a": 2, "b": 1}`` canonicalize equally.
    """

    if isinstance(value, Mapping):
        return {str(key): canonicalize(value[key]) for key in sorted(value, key=str)}
    if isinstance(value, (list, tuple)):
        return [canonicalize(item) for item in value]
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return value
    if value is None or isinstance(value, (bool, int, str)):
        return value
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def canonical_json(value: Any) -> str:
    """Serialize a canonical copy of ``value`` compactly with sorted keys."""

    return json.dumps(
        canonicalize(value), ensure_ascii=False, sort_keys=True, separators=(",", ":")
    )


def json_equals(left: Any, right: Any) -> bool:
    """JSON value equality: ``1 == 1.0`` but ``true != 1``."""

    return canonical_json(left) == canonical_json(right)


def escape_token(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def append_pointer(pointer: str, *tokens: str | int) -> str:
    """Append reference tokens to a JSON Pointer."""

    suffix = "".join("/" + escape_token(str(token)) for token in tokens)
    return pointer + suffix


def pretty_print(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, indent=2, sort_keys=False)
