from __future__ import annotations

import pytest

from core.keywords.defaults import build_default_library
from core.report.models import LogLevel
from core.validation.engine import ValidationEngine, validate_instance
from core.validation.policy import ValidationPolicy

LIBRARY = build_default_library()


def _pointers(report) -> list[tuple[str | None, str | None, str | None]]:
    return [(m.keyword, m.schema_pointer, m.instance_pointer) for m in report.messages]


@pytest.mark.parametrize(
    ("schema", "instance", "success"),
    [
        ({"type": "string"}, "x", True),
        ({"type": "string"}, 1, False),
        ({"type": "number"}, 3, True),
        ({"type": "integer"}, 3.5, False),
        ({"type": ["null", "boolean"]}, None, True),
        ({"type": "integer"}, True, False),
        ({"enum": [1, "a"]}, 1.0, True),
        ({"enum": [1, "a"]}, True, False),
        ({"const": {"a": [1, 2]}}, {"a": [1, 2.0]}, True),
        ({"const": {"a": [1, 2]}}, {"a": [2, 1]}, False),
        ({"minimum": 2}, 2, True),
        ({"exclusiveMinimum": 2}, 2, False),
        ({"maximum": 1.5}, 1.6, False),
        ({"exclusiveMaximum": 10}, 9.99, True),
        ({"multipleOf": 0.1}, 0.3, True),
        ({"multipleOf": 3}, 10, False),
        ({"minLength": 2, "maxLength": 3}, "abcd", False),
        ({"pattern": "^[a-z]+$"}, "abc", True),
        ({"pattern": "^[a-z]+$"}, "aBc", False),
        ({"minItems": 1}, [], False),
        ({"maxItems": 1}, [1, 2], False),
        ({"uniqueItems": True}, [1, 1.0], False),
        ({"uniqueItems": False}, [1, 1], True),
        ({"minProperties": 1}, {}, False),
        ({"maxProperties": 1}, {"a": 1, "b": 2}, False),
        ({"minimum": 5, "minLength": 5}, "short-but-not-number", True),
    ],
)
def test_single_keyword_constraints(schema: dict, instance, success: bool) -> None:
    report = validate_instance(LIBRARY, schema, instance)

    assert report.success is success, report.to_structured()


def test_type_mismatch_message_fields() -> None:
    report = validate_instance(LIBRARY, {"type": "string"}, 1)

    assert len(report) == 1
    message = report.messages[0]
    assert message.level is LogLevel.ERROR
    assert message.domain == "validation"
    assert message.context == {"found": "integer", "expected": ["string"]}
    assert message.to_structured()["instance"] == {"pointer": ""}


def test_object_keywords_report_in_sorted_order_with_pointers() -> None:
    schema = {
        "required": ["a", "b"],
        "properties": {"a": {"type": "string"}},
    }

    report = validate_instance(LIBRARY, schema, {"a": 1})

    assert _pointers(report) == [
        ("type", "/properties/a", "/a"),
        ("required", "", ""),
    ]
    assert report.messages[1].context["missing"] == ["b"]


def test_additional_properties_false_lists_unwanted_members() -> None:
    schema = {"properties": {"a": {}}, "additionalProperties": False}

    report = validate_instance(LIBRARY, schema, {"a": 1, "c": 2, "b": 3})

    assert len(report) == 1
    assert report.messages[0].context == {"unwanted": ["b", "c"]}


def test_additional_properties_schema_validates_extra_members() -> None:
    schema = {"properties": {"a": {}}, "additionalProperties": {"type": "integer"}}

    report = validate_instance(LIBRARY, schema, {"a": "x", "b": 1, "c": "no"})

    assert _pointers(report) == [("type", "/additionalProperties", "/c")]


def test_items_single_schema_descends_into_every_element() -> None:
    report = validate_instance(LIBRARY, {"items": {"type": "integer"}}, [1, "x", 3, None])

    assert _pointers(report) == [
        ("type", "/items", "/1"),
        ("type", "/items", "/3"),
    ]


def test_tuple_items_with_additional_items_false() -> None:
    schema = {"items": [{"type": "integer"}, {"type": "string"}], "additionalItems": False}

    report = validate_instance(LIBRARY, schema, [1, 2, 3])

    assert _pointers(report) == [
        ("type", "/items/1", "/1"),
        ("additionalItems", "", ""),
    ]
    assert report.messages[1].context == {"limit": 2, "length": 3}


def test_tuple_items_with_additional_items_schema() -> None:
    schema = {"items": [{}], "additionalItems": {"type": "string"}}

    report = validate_instance(LIBRARY, schema, [0, "a", 5])

    assert _pointers(report) == [("type", "/additionalItems", "/2")]


def test_any_of_collects_nested_reports_by_schema_pointer() -> None:
    schema = {"anyOf": [{"type": "string"}, {"type": "integer"}]}

    assert validate_instance(LIBRARY, schema, "x").success is True
    report = validate_instance(LIBRARY, schema, 1.5)

    assert len(report) == 1
    message = report.messages[0]
    assert message.keyword == "anyOf"
    assert sorted(message.context["reports"]) == ["/anyOf/0", "/anyOf/1"]


@pytest.mark.parametrize(("instance", "success"), [(-1, True), (2.5, True), (5, False), (-1.5, False)])
def test_one_of_requires_exactly_one_match(instance, success: bool) -> None:
    schema = {"oneOf": [{"type": "integer"}, {"minimum": 0}]}

    report = validate_instance(LIBRARY, schema, instance)

    assert report.success is success


def test_all_of_reports_match_count() -> None:
    schema = {"allOf": [{"type": "integer"}, {"minimum": 10}, {"maximum": 20}]}

    report = validate_instance(LIBRARY, schema, 5)

    assert report.messages[0].context["matched"] == 2
    assert report.messages[0].context["total"] == 3
    assert "/allOf/1" in report.messages[0].context["reports"]


def test_not_fails_when_sub_schema_matches() -> None:
    report = validate_instance(LIBRARY, {"not": {"type": "null"}}, None)

    assert report.success is False
    assert report.messages[0].keyword == "not"


def test_nested_combinator_messages_do_not_leak_into_parent_report() -> None:
    schema = {"anyOf": [{"type": "string"}, {"type": "null"}]}

    report = validate_instance(LIBRARY, schema, None)

    assert len(report) == 0


def test_format_invalid_email_is_an_error() -> None:
    report = validate_instance(LIBRARY, {"format": "email"}, "not-an-email")

    assert report.success is False
    assert report.messages[0].context == {"format": "email", "value": "not-an-email"}


def test_format_ignores_instances_of_other_types() -> None:
    report = validate_instance(LIBRARY, {"format": "email"}, 12)

    assert len(report) == 0


def test_unknown_format_warns_by_default_and_can_be_ignored() -> None:
    report = validate_instance(LIBRARY, {"format": "color"}, "red")
    assert report.success is True
    assert [(m.level, m.keyword) for m in report.messages] == [(LogLevel.WARNING, "format")]

    quiet = validate_instance(
        LIBRARY, {"format": "color"}, "red", policy=ValidationPolicy(unknown_formats="ignore")
    )
    assert len(quiet) == 0


def test_digest_failure_is_reported_and_validation_continues() -> None:
    report = validate_instance(LIBRARY, {"minLength": "3", "type": "integer"}, "ab")

    assert [(m.keyword, m.level) for m in report.messages] == [
        ("minLength", LogLevel.ERROR),
        ("type", LogLevel.ERROR),
    ]
    assert "could not digest" in report.messages[0].message


@pytest.mark.parametrize(
    ("divisor", "instance", "success"),
    [
        (10, 10**40, True),
        (10, 10**40 + 1, False),
        (0.3, 1e30, False),
        (0.01, 12.34, True),
    ],
)
def test_multiple_of_is_exact_for_large_and_fractional_numbers(
    divisor: float, instance: float, success: bool
) -> None:
    assert validate_instance(LIBRARY, {"multipleOf": divisor}, instance).success is success


def test_zero_divisor_is_a_digest_failure_and_validation_continues() -> None:
    report = validate_instance(LIBRARY, {"multipleOf": 0, "type": "string"}, 5)

    assert [(m.keyword, m.level) for m in report.messages] == [
        ("multipleOf", LogLevel.ERROR),
        ("type", LogLevel.ERROR),
    ]
    assert "positive number" in report.messages[0].message


def test_non_string_schema_member_names_are_skipped() -> None:
    report = validate_instance(LIBRARY, {1: "x", "type": "string"}, 5)

    assert [m.keyword for m in report.messages] == ["type"]


def test_non_string_instance_member_names_are_additional_properties() -> None:
    schema = {"properties": {"a": {}}, "additionalProperties": False}

    report = validate_instance(LIBRARY, schema, {"a": 1, 2: "x", "b": 0})

    assert [m.keyword for m in report.messages] == ["additionalProperties"]
    assert report.messages[0].context["unwanted"] == [2, "b"]


def test_invalid_pattern_is_a_digest_failure() -> None:
    report = validate_instance(LIBRARY, {"pattern": "("}, "abc")

    assert report.success is False
    assert report.messages[0].keyword == "pattern"
    assert "invalid regular expression" in report.messages[0].context["error"]


def test_non_object_sub_schema_is_reported_during_instance_validation() -> None:
    report = validate_instance(LIBRARY, {"properties": {"a": 5}}, {"a": 1})

    assert len(report) == 1
    message = report.messages[0]
    assert message.schema_pointer == "/properties/a"
    assert message.instance_pointer == "/a"
    assert message.context == {"found": "integer"}


def test_keywords_without_validators_are_skipped() -> None:
    schema = {"title": "t", "description": "d", "default": 3, "x-unknown": 1}

    report = validate_instance(LIBRARY, schema, "anything")

    assert len(report) == 0


def test_shared_engine_returns_independent_reports() -> None:
    engine = ValidationEngine(LIBRARY)
    schema = {"type": "object", "required": ["id"]}

    first = engine.validate_instance(schema, {})
    second = engine.validate_instance(schema, {"id": 1})

    assert first.success is False
    assert second.success is True
    assert first.closed and second.closed
