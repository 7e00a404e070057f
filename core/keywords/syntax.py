"""Reusable syntax checkers for schema keywords."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from core.keywords.base import SchemaPath
from core.utils.json_tree import PRIMITIVE_TYPES, canonical_json, node_type
from core.validation.context import SyntaxContext


def _matches_types(value: Any, allowed: frozenset[str]) -> bool:
    found = node_type(value)
    return found in allowed or (found == "integer" and "number" in allowed)


class TypeOnlySyntaxChecker:
    """Accepts any value whose JSON type is in ``allowed``."""

    def __init__(self, keyword: str, *allowed: str) -> None:
        self.keyword = keyword
        self.allowed = frozenset(allowed)

    def check_syntax(self, context: SyntaxContext, schema: Mapping[str, Any]) -> Sequence[SchemaPath]:
        value = schema[self.keyword]
        if not _matches_types(value, self.allowed):
            context.error(
                self.keyword,
                "INCORRECT_TYPE",
                found=node_type(value),
                expected=sorted(self.allowed),
                value=value,
            )
            return ()
        return self.check_value(context, value)

    def check_value(self, context: SyntaxContext, value: Any) -> Sequence[SchemaPath]:
        return ()


class AnyValueSyntaxChecker:
    """Accepts any JSON value (``default``, ``const`` and friends)."""

    def check_syntax(self, context: SyntaxContext, schema: Mapping[str, Any]) -> Sequence[SchemaPath]:
        return ()


class NonNegativeIntegerSyntaxChecker(TypeOnlySyntaxChecker):
    def __init__(self, keyword: str) -> None:
        super().__init__(keyword, "integer")

    def check_value(self, context: SyntaxContext, value: Any) -> Sequence[SchemaPath]:
        if value < 0:
            context.error(self.keyword, "NEGATIVE_VALUE", value=value)
        return ()


class DivisorSyntaxChecker(TypeOnlySyntaxChecker):
    def __init__(self, keyword: str) -> None:
        super().__init__(keyword, "number")

    def check_value(self, context: SyntaxContext, value: Any) -> Sequence[SchemaPath]:
        if value <= 0:
            context.error(self.keyword, "NOT_POSITIVE", value=value)
        return ()


class PatternSyntaxChecker(TypeOnlySyntaxChecker):
    def __init__(self, keyword: str) -> None:
        super().__init__(keyword, "string")

    def check_value(self, context: SyntaxContext, value: Any) -> Sequence[SchemaPath]:
        try:
            re.compile(value)
        except re.error:
            context.error(self.keyword, "INVALID_REGEX", value=value)
        return ()


class UniqueArraySyntaxChecker(TypeOnlySyntaxChecker):
    """Array with unique elements, optionally typed and non-empty."""

    def __init__(
        self,
        keyword: str,
        *,
        element_type: str | None = None,
        allow_empty: bool = True,
    ) -> None:
        super().__init__(keyword, "array")
        self.element_type = element_type
        self.allow_empty = allow_empty

    def check_value(self, context: SyntaxContext, value: Any) -> Sequence[SchemaPath]:
        if not value and not self.allow_empty:
            context.error(self.keyword, "EMPTY_ARRAY", value=value)
            return ()

        if self.element_type is not None:
            for index, element in enumerate(value):
                if node_type(element) != self.element_type:
                    context.error(
                        self.keyword,
                        "ILLEGAL_ELEMENT_TYPE",
                        index=index,
                        found=node_type(element),
                        expected=self.element_type,
                    )
                    return ()

        serialized = [canonical_json(element) for element in value]
        if len(set(serialized)) != len(serialized):
            context.error(self.keyword, "ELEMENTS_NOT_UNIQUE", value=value)
        return ()


class TypeKeywordSyntaxChecker(TypeOnlySyntaxChecker):
    """``type``: a primitive type name or a non-empty array of unique names."""

    def __init__(self, keyword: str = "type") -> None:
        super().__init__(keyword, "string", "array")

    def check_value(self, context: SyntaxContext, value: Any) -> Sequence[SchemaPath]:
        names = [value] if isinstance(value, str) else value
        if not names:
            context.error(self.keyword, "EMPTY_ARRAY", value=value)
            return ()

        for index, name in enumerate(names):
            if not isinstance(name, str):
                context.error(
                    self.keyword,
                    "ILLEGAL_ELEMENT_TYPE",
                    index=index,
                    found=node_type(name),
                    expected="string",
                )
                return ()
            if name not in PRIMITIVE_TYPES:
                context.error(self.keyword, "ILLEGAL_TYPE_NAME", value=name)

        if len(set(names)) != len(names):
            context.error(self.keyword, "ELEMENTS_NOT_UNIQUE", value=value)
        return ()


class SchemaSyntaxChecker(TypeOnlySyntaxChecker):
    """Value is a single sub-schema (``not``)."""

    def __init__(self, keyword: str) -> None:
        super().__init__(keyword, "object")

    def check_value(self, context: SyntaxContext, value: Any) -> Sequence[SchemaPath]:
        return [(self.keyword,)]


class SchemaOrBooleanSyntaxChecker(TypeOnlySyntaxChecker):
    """Value is a boolean or a sub-schema (``additionalProperties``)."""

    def __init__(self, keyword: str) -> None:
        super().__init__(keyword, "boolean", "object")

    def check_value(self, context: SyntaxContext, value: Any) -> Sequence[SchemaPath]:
        if isinstance(value, bool):
            return ()
        return [(self.keyword,)]


class SchemaMapSyntaxChecker(TypeOnlySyntaxChecker):
    """Value is an object whose members are sub-schemas (``properties``)."""

    def __init__(self, keyword: str) -> None:
        super().__init__(keyword, "object")

    def check_value(self, context: SyntaxContext, value: Any) -> Sequence[SchemaPath]:
        paths: list[SchemaPath] = []
        for name in sorted(value, key=str):
            if not isinstance(name, str):
                context.error(self.keyword, "NON_STRING_MEMBER_NAME", name=name)
                continue
            member = value[name]
            if node_type(member) != "object":
                context.error(
                    self.keyword,
                    "ILLEGAL_ELEMENT_TYPE",
                    index=name,
                    found=node_type(member),
                    expected="object",
                )
                continue
            paths.append((self.keyword, name))
        return paths


class SchemaArraySyntaxChecker(TypeOnlySyntaxChecker):
    """Value is a non-empty array of sub-schemas (``allOf`` and friends)."""

    def __init__(self, keyword: str) -> None:
        super().__init__(keyword, "array")

    def check_value(self, context: SyntaxContext, value: Any) -> Sequence[SchemaPath]:
        if not value:
            context.error(self.keyword, "EMPTY_ARRAY", value=value)
            return ()
        return _schema_array_paths(context, self.keyword, value)


class SchemaOrSchemaArraySyntaxChecker(TypeOnlySyntaxChecker):
    """Value is a sub-schema or an array of sub-schemas (``items``)."""

    def __init__(self, keyword: str) -> None:
        super().__init__(keyword, "object", "array")

    def check_value(self, context: SyntaxContext, value: Any) -> Sequence[SchemaPath]:
        if isinstance(value, Mapping):
            return [(self.keyword,)]
        return _schema_array_paths(context, self.keyword, value)


def _schema_array_paths(context: SyntaxContext, keyword: str, value: list[Any]) -> list[SchemaPath]:
    paths: list[SchemaPath] = []
    for index, element in enumerate(value):
        if node_type(element) != "object":
            context.error(
                keyword,
                "ILLEGAL_ELEMENT_TYPE",
                index=index,
                found=node_type(element),
                expected="object",
            )
            continue
        paths.append((keyword, str(index)))
    return paths
