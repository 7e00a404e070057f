"""Keyword validators built from constraint digests."""

from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal
from fractions import Fraction
from typing import Any

from core.report.models import ProcessingReport
from core.utils.json_tree import canonical_json, is_number, json_equals, node_type
from core.validation.context import InstanceContext


class TypeValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.allowed: list[str] = list(digest["type"])

    def validate(self, context: InstanceContext, instance: Any) -> None:
        found = node_type(instance)
        if found in self.allowed or (found == "integer" and "number" in self.allowed):
            return
        context.error("type", "TYPE_MISMATCH", found=found, expected=self.allowed)


class EnumValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.values: list[Any] = list(digest["enum"])
        self._serialized = {canonical_json(value) for value in self.values}

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if canonical_json(instance) not in self._serialized:
            context.error("enum", "ENUM_MISMATCH", value=instance, expected=self.values)


class ConstValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.expected = digest["const"]

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if not json_equals(instance, self.expected):
            context.error("const", "CONST_MISMATCH", value=instance, expected=self.expected)


class _NumericLimitValidator:
    keyword = ""
    failure_key = ""

    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.limit = digest[self.keyword]
        self._limit = Decimal(str(self.limit))

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if not is_number(instance):
            return
        if not self.accepts(Decimal(str(instance))):
            context.error(self.keyword, self.failure_key, limit=self.limit, value=instance)

    def accepts(self, value: Decimal) -> bool:
        raise NotImplementedError


class MinimumValidator(_NumericLimitValidator):
    keyword = "minimum"
    failure_key = "NUMBER_TOO_SMALL"

    def accepts(self, value: Decimal) -> bool:
        return value >= self._limit


class ExclusiveMinimumValidator(_NumericLimitValidator):
    keyword = "exclusiveMinimum"
    failure_key = "NUMBER_NOT_GREATER"

    def accepts(self, value: Decimal) -> bool:
        return value > self._limit


class MaximumValidator(_NumericLimitValidator):
    keyword = "maximum"
    failure_key = "NUMBER_TOO_LARGE"

    def accepts(self, value: Decimal) -> bool:
        return value <= self._limit


class ExclusiveMaximumValidator(_NumericLimitValidator):
    keyword = "exclusiveMaximum"
    failure_key = "NUMBER_NOT_LOWER"

    def accepts(self, value: Decimal) -> bool:
        return value < self._limit


class MultipleOfValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.divisor = digest["multipleOf"]
        self._divisor = Fraction(str(self.divisor))

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if not is_number(instance):
            return
        if Fraction(str(instance)) % self._divisor != 0:
            context.error("multipleOf", "NOT_MULTIPLE_OF", value=instance, divisor=self.divisor)


class MinLengthValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.limit: int = digest["minLength"]

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if isinstance(instance, str) and len(instance) < self.limit:
            context.error(
                "minLength", "STRING_TOO_SHORT", value=instance, length=len(instance), limit=self.limit
            )


class MaxLengthValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.limit: int = digest["maxLength"]

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if isinstance(instance, str) and len(instance) > self.limit:
            context.error(
                "maxLength", "STRING_TOO_LONG", value=instance, length=len(instance), limit=self.limit
            )


class PatternValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.pattern: str = digest["pattern"]
        self._regex = re.compile(self.pattern)

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if isinstance(instance, str) and self._regex.search(instance) is None:
            context.error("pattern", "PATTERN_MISMATCH", pattern=self.pattern, value=instance)


class MinItemsValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.limit: int = digest["minItems"]

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if isinstance(instance, list) and len(instance) < self.limit:
            context.error("minItems", "ARRAY_TOO_SHORT", limit=self.limit, length=len(instance))


class MaxItemsValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.limit: int = digest["maxItems"]

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if isinstance(instance, list) and len(instance) > self.limit:
            context.error("maxItems", "ARRAY_TOO_LONG", limit=self.limit, length=len(instance))


class UniqueItemsValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.enabled = digest["uniqueItems"] is True

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if not self.enabled or not isinstance(instance, list):
            return
        serialized = [canonical_json(element) for element in instance]
        if len(set(serialized)) != len(serialized):
            context.error("uniqueItems", "ITEMS_NOT_UNIQUE")


class RequiredValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.names: list[str] = list(digest["required"])

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if not isinstance(instance, Mapping):
            return
        missing = [name for name in self.names if name not in instance]
        if missing:
            context.error("required", "MISSING_REQUIRED", missing=missing, required=self.names)


class MinPropertiesValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.limit: int = digest["minProperties"]

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if isinstance(instance, Mapping) and len(instance) < self.limit:
            context.error(
                "minProperties", "TOO_FEW_PROPERTIES", count=len(instance), limit=self.limit
            )


class MaxPropertiesValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.limit: int = digest["maxProperties"]

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if isinstance(instance, Mapping) and len(instance) > self.limit:
            context.error(
                "maxProperties", "TOO_MANY_PROPERTIES", count=len(instance), limit=self.limit
            )


class PropertiesValidator:
    """Validates each present member against its declared sub-schema."""

    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.schemas: Mapping[str, Any] = digest["properties"]

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if not isinstance(instance, Mapping):
            return
        for name in sorted(self.schemas):
            if name in instance:
                context.descend(self.schemas[name], instance[name], ("properties", name), (name,))


class AdditionalPropertiesValidator:
    """Rejects or validates members not declared in sibling ``properties``."""

    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.additional = digest["additionalProperties"]
        self.declared = frozenset(digest["properties"])

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if not isinstance(instance, Mapping) or self.additional is True:
            return
        extra = sorted((name for name in instance if name not in self.declared), key=str)
        if not extra:
            return
        if self.additional is False:
            context.error("additionalProperties", "ADDITIONAL_PROPERTIES", unwanted=extra)
            return
        for name in extra:
            context.descend(self.additional, instance[name], ("additionalProperties",), (name,))


class ItemsValidator:
    """Single-schema or tuple form; ``additionalItems`` applies to the tuple form."""

    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.items = digest["items"]
        self.additional = digest.get("additionalItems", True)

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if not isinstance(instance, list):
            return
        if isinstance(self.items, Mapping):
            for index, element in enumerate(instance):
                context.descend(self.items, element, ("items",), (index,))
            return

        for index, element in enumerate(instance[: len(self.items)]):
            context.descend(self.items[index], element, ("items", index), (index,))

        rest = instance[len(self.items) :]
        if not rest or self.additional is True:
            return
        if self.additional is False:
            context.error(
                "additionalItems", "ADDITIONAL_ITEMS", limit=len(self.items), length=len(instance)
            )
            return
        for offset, element in enumerate(rest, start=len(self.items)):
            context.descend(self.additional, element, ("additionalItems",), (offset,))


class AllOfValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.schemas: list[Any] = list(digest["allOf"])

    def validate(self, context: InstanceContext, instance: Any) -> None:
        reports = [
            context.probe(schema, instance, ("allOf", index))
            for index, schema in enumerate(self.schemas)
        ]
        matched = sum(1 for report in reports if report.success)
        if matched == len(self.schemas):
            return
        context.error(
            "allOf",
            "ALL_OF_FAILED",
            matched=matched,
            total=len(self.schemas),
            reports=_nested_reports(reports),
        )


class AnyOfValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.schemas: list[Any] = list(digest["anyOf"])

    def validate(self, context: InstanceContext, instance: Any) -> None:
        reports = []
        for index, schema in enumerate(self.schemas):
            report = context.probe(schema, instance, ("anyOf", index))
            if report.success:
                return
            reports.append(report)
        context.error(
            "anyOf", "ANY_OF_FAILED", total=len(self.schemas), reports=_nested_reports(reports)
        )


class OneOfValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.schemas: list[Any] = list(digest["oneOf"])

    def validate(self, context: InstanceContext, instance: Any) -> None:
        reports = [
            context.probe(schema, instance, ("oneOf", index))
            for index, schema in enumerate(self.schemas)
        ]
        matched = sum(1 for report in reports if report.success)
        if matched == 1:
            return
        context.error(
            "oneOf",
            "ONE_OF_FAILED",
            matched=matched,
            total=len(self.schemas),
            reports=_nested_reports(reports),
        )


class NotValidator:
    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.schema = digest["not"]

    def validate(self, context: InstanceContext, instance: Any) -> None:
        if context.probe(self.schema, instance, ("not",)).success:
            context.error("not", "NOT_FAILED")


class FormatValidator:
    """Delegates to the library's format attribute registered under the name."""

    def __init__(self, digest: Mapping[str, Any]) -> None:
        self.name: str = digest["format"]

    def validate(self, context: InstanceContext, instance: Any) -> None:
        attribute = context.library.format_attributes.get(self.name)
        if attribute is None:
            if context.policy.unknown_formats == "warning":
                context.warn("format", "FORMAT_UNSUPPORTED", format=self.name)
            return
        if node_type(instance) not in attribute.supported_types:
            return
        if not attribute.is_valid(instance):
            context.error("format", "FORMAT_INVALID", format=self.name, value=instance)


def _nested_reports(reports: list[ProcessingReport]) -> dict[str, list[dict[str, Any]]]:
    nested: dict[str, list[dict[str, Any]]] = {}
    for report in reports:
        for message in report.messages:
            pointer = message.schema_pointer or ""
            nested.setdefault(pointer, []).append(message.to_structured())
    return nested
