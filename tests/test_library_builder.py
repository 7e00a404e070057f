from __future__ import annotations

import pytest

from core.keywords.defaults import build_default_library
from core.keywords.digest import SimpleDigester
from core.keywords.formats import EmailAttribute
from core.keywords.syntax import AnyValueSyntaxChecker, TypeOnlySyntaxChecker
from core.keywords.validators import TypeValidator
from core.library.keyword import Keyword
from core.library.library import Library, LibraryBuilder
from core.utils.errors import ValidationConfigurationError
from core.validation.engine import validate_instance


def _keyword(name: str, *, with_validator: bool = False) -> Keyword:
    return Keyword(
        name,
        AnyValueSyntaxChecker(),
        SimpleDigester(name),
        TypeValidator if with_validator else None,
    )


def test_add_keyword_replaces_every_behavior_of_the_same_name() -> None:
    first = _keyword("type", with_validator=True)
    second = Keyword("type", TypeOnlySyntaxChecker("type", "string"), SimpleDigester("type"))

    library = LibraryBuilder().add_keyword(first).add_keyword(second).freeze()

    assert library.keywords() == ["type"]
    assert library.syntax_checkers["type"] is second.syntax_checker
    assert library.digesters["type"] is second.digester
    assert "type" not in library.validator_factories


def test_last_operation_per_keyword_name_wins() -> None:
    builder = Library.new_builder()
    builder.add_keyword(_keyword("a"))
    builder.add_keyword(_keyword("b"))
    builder.remove_keyword("a")
    builder.add_keyword(_keyword("c"))
    builder.remove_keyword("c")
    final_a = _keyword("a", with_validator=True)
    builder.add_keyword(final_a)

    library = builder.freeze()

    assert library.keywords() == ["a", "b"]
    assert library.validator_factories["a"] is TypeValidator
    assert library.syntax_checkers["a"] is final_a.syntax_checker


def test_remove_of_unknown_keyword_is_noop() -> None:
    library = LibraryBuilder().add_keyword(_keyword("a")).remove_keyword("zzz").freeze()

    assert library.keywords() == ["a"]


@pytest.mark.parametrize(
    ("call", "expected_key"),
    [
        (lambda builder: builder.remove_keyword(None), "NULL_NAME"),
        (lambda builder: builder.remove_format_attribute(None), "NULL_FORMAT"),
        (lambda builder: builder.add_format_attribute(None, EmailAttribute()), "NULL_FORMAT"),
        (lambda builder: builder.add_format_attribute("email", None), "NULL_ATTRIBUTE"),
    ],
)
def test_null_arguments_raise_configuration_error_without_mutation(call, expected_key: str) -> None:
    email = EmailAttribute()
    builder = LibraryBuilder().add_keyword(_keyword("a")).add_format_attribute("email", email)

    with pytest.raises(ValidationConfigurationError) as exc_info:
        call(builder)

    assert exc_info.value.key == expected_key
    library = builder.freeze()
    assert library.keywords() == ["a"]
    assert library.formats() == ["email"]
    assert library.format_attributes["email"] is email


def test_null_email_attribute_leaves_empty_format_set_empty() -> None:
    builder = LibraryBuilder()

    with pytest.raises(ValidationConfigurationError) as exc_info:
        builder.add_format_attribute("email", None)

    assert exc_info.value.processing_message.domain == "configuration"
    assert builder.freeze().formats() == []


def test_mutating_thawed_builder_does_not_affect_source_library() -> None:
    library = build_default_library()
    keywords_before = library.keywords()
    formats_before = library.formats()

    builder = library.thaw()
    builder.remove_keyword("type")
    builder.add_keyword(_keyword("x-custom"))
    builder.remove_format_attribute("email")

    assert library.keywords() == keywords_before
    assert library.formats() == formats_before
    assert "type" in library.validator_factories
    assert "x-custom" in builder.freeze().keywords()


def test_thaw_then_freeze_round_trip_keeps_keywords_formats_and_behavior() -> None:
    library = build_default_library()

    copy = library.thaw().freeze()

    assert copy is not library
    assert copy.keywords() == library.keywords()
    assert copy.formats() == library.formats()
    for name in library.keywords():
        assert copy.syntax_checkers[name] is library.syntax_checkers[name]
        assert copy.digesters[name] is library.digesters[name]
        assert copy.validator_factories.get(name) is library.validator_factories.get(name)

    schema = {"type": "object", "required": ["id"], "properties": {"id": {"type": "integer"}}}
    for instance in ({"id": 1}, {"id": "1"}, {}):
        original = validate_instance(library, schema, instance).to_structured()
        assert validate_instance(copy, schema, instance).to_structured() == original
