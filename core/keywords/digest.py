"""Digesters turning keyword values into canonical cache keys.

A digest is itself a canonical JSON value: validators are built from it, so
two schema fragments with equal digests always get equivalent validators.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from core.utils.json_tree import canonical_json, canonicalize, node_type


class SimpleDigester:
    """Digest of the keyword's own value in canonical form.

    When ``types`` are given, values of any other JSON type fail to digest.
    """

    def __init__(self, keyword: str, *types: str) -> None:
        self.keyword = keyword
        self.types = frozenset(types)

    def digest(self, schema: Mapping[str, Any]) -> Any:
        value = schema[self.keyword]
        self._require_type(value)
        return {self.keyword: canonicalize(value)}

    def _require_type(self, value: Any) -> None:
        if not self.types:
            return
        found = node_type(value)
        if found in self.types or (found == "integer" and "number" in self.types):
            return
        raise TypeError(f"{self.keyword} requires one of {sorted(self.types)}, got {found}")


class NumericDigester(SimpleDigester):
    """Digest of a numeric keyword; ``10`` and ``10.0`` digest equally."""

    def __init__(self, keyword: str) -> None:
        super().__init__(keyword, "number")


class DivisorDigester(NumericDigester):
    """Digest of ``multipleOf``; the divisor must be strictly positive."""

    def digest(self, schema: Mapping[str, Any]) -> Any:
        payload = super().digest(schema)
        value = payload[self.keyword]
        if value <= 0:
            raise ValueError(f"{self.keyword} requires a positive number, got {value!r}")
        return payload


class SizeDigester(SimpleDigester):
    """Digest of a non-negative integer keyword (``minLength`` and friends)."""

    def __init__(self, keyword: str) -> None:
        super().__init__(keyword, "number")

    def digest(self, schema: Mapping[str, Any]) -> Any:
        payload = super().digest(schema)
        value = payload[self.keyword]
        if not isinstance(value, int) or value < 0:
            raise ValueError(f"{self.keyword} requires a non-negative integer, got {value!r}")
        return payload


class SetDigester(SimpleDigester):
    """Digest of a value whose element order is irrelevant.

    A lone string counts as a one-element set, so ``"string"`` and
    ``["string"]`` digest equally for ``type``.
    """

    def __init__(self, keyword: str) -> None:
        super().__init__(keyword, "array", "string")

    def digest(self, schema: Mapping[str, Any]) -> Any:
        value = schema[self.keyword]
        self._require_type(value)
        elements = [value] if isinstance(value, str) else value
        unique = {canonical_json(element): canonicalize(element) for element in elements}
        return {self.keyword: [unique[key] for key in sorted(unique)]}


class RegexDigester(SimpleDigester):
    """Digest of a regular expression keyword; uncompilable patterns fail."""

    def __init__(self, keyword: str) -> None:
        super().__init__(keyword, "string")

    def digest(self, schema: Mapping[str, Any]) -> Any:
        payload = super().digest(schema)
        try:
            re.compile(payload[self.keyword])
        except re.error as exc:
            raise ValueError(f"invalid regular expression {payload[self.keyword]!r}: {exc}") from exc
        return payload


class AdditionalPropertiesDigester(SimpleDigester):
    """Digest of ``additionalProperties`` with the sibling property names it depends on."""

    def __init__(self, keyword: str = "additionalProperties") -> None:
        super().__init__(keyword, "boolean", "object")

    def digest(self, schema: Mapping[str, Any]) -> Any:
        payload = super().digest(schema)
        properties = schema.get("properties", {})
        payload["properties"] = sorted(properties, key=str) if isinstance(properties, Mapping) else []
        return payload


class ItemsDigester(SimpleDigester):
    """Digest of ``items`` together with ``additionalItems`` for the tuple form."""

    def __init__(self, keyword: str = "items") -> None:
        super().__init__(keyword, "array", "object")

    def digest(self, schema: Mapping[str, Any]) -> Any:
        payload = super().digest(schema)
        if isinstance(payload[self.keyword], list) and "additionalItems" in schema:
            additional = schema["additionalItems"]
            if node_type(additional) not in {"boolean", "object"}:
                raise TypeError(f"additionalItems requires a boolean or object, got {node_type(additional)}")
            payload["additionalItems"] = canonicalize(additional)
        return payload
