"""Default keyword set and library assembly."""

from __future__ import annotations

from core.keywords import validators as v
from core.keywords.base import ValidatorFactory
from core.keywords.digest import (
    AdditionalPropertiesDigester,
    DivisorDigester,
    ItemsDigester,
    NumericDigester,
    RegexDigester,
    SetDigester,
    SimpleDigester,
    SizeDigester,
)
from core.keywords.formats import DEFAULT_FORMAT_ATTRIBUTES
from core.keywords.syntax import (
    AnyValueSyntaxChecker,
    DivisorSyntaxChecker,
    NonNegativeIntegerSyntaxChecker,
    PatternSyntaxChecker,
    SchemaArraySyntaxChecker,
    SchemaMapSyntaxChecker,
    SchemaOrBooleanSyntaxChecker,
    SchemaOrSchemaArraySyntaxChecker,
    SchemaSyntaxChecker,
    TypeKeywordSyntaxChecker,
    TypeOnlySyntaxChecker,
    UniqueArraySyntaxChecker,
)
from core.library.keyword import Keyword
from core.library.library import Library, LibraryBuilder


def _numeric(name: str, factory: ValidatorFactory) -> Keyword:
    return Keyword(name, TypeOnlySyntaxChecker(name, "number"), NumericDigester(name), factory)


def _size(name: str, factory: ValidatorFactory) -> Keyword:
    return Keyword(name, NonNegativeIntegerSyntaxChecker(name), SizeDigester(name), factory)


def _annotation(name: str, *types: str) -> Keyword:
    checker = TypeOnlySyntaxChecker(name, *types) if types else AnyValueSyntaxChecker()
    return Keyword(name, checker, SimpleDigester(name))


def default_keywords() -> list[Keyword]:
    """Return the shipped keywords in registration order."""

    return [
        Keyword("type", TypeKeywordSyntaxChecker(), SetDigester("type"), v.TypeValidator),
        Keyword(
            "enum",
            UniqueArraySyntaxChecker("enum", allow_empty=False),
            SimpleDigester("enum", "array"),
            v.EnumValidator,
        ),
        Keyword("const", AnyValueSyntaxChecker(), SimpleDigester("const"), v.ConstValidator),
        _numeric("minimum", v.MinimumValidator),
        _numeric("maximum", v.MaximumValidator),
        _numeric("exclusiveMinimum", v.ExclusiveMinimumValidator),
        _numeric("exclusiveMaximum", v.ExclusiveMaximumValidator),
        Keyword(
            "multipleOf",
            DivisorSyntaxChecker("multipleOf"),
            DivisorDigester("multipleOf"),
            v.MultipleOfValidator,
        ),
        _size("minLength", v.MinLengthValidator),
        _size("maxLength", v.MaxLengthValidator),
        Keyword("pattern", PatternSyntaxChecker("pattern"), RegexDigester("pattern"), v.PatternValidator),
        _size("minItems", v.MinItemsValidator),
        _size("maxItems", v.MaxItemsValidator),
        Keyword(
            "uniqueItems",
            TypeOnlySyntaxChecker("uniqueItems", "boolean"),
            SimpleDigester("uniqueItems", "boolean"),
            v.UniqueItemsValidator,
        ),
        Keyword(
            "required",
            UniqueArraySyntaxChecker("required", element_type="string"),
            SetDigester("required"),
            v.RequiredValidator,
        ),
        _size("minProperties", v.MinPropertiesValidator),
        _size("maxProperties", v.MaxPropertiesValidator),
        Keyword(
            "properties",
            SchemaMapSyntaxChecker("properties"),
            SimpleDigester("properties", "object"),
            v.PropertiesValidator,
        ),
        Keyword(
            "additionalProperties",
            SchemaOrBooleanSyntaxChecker("additionalProperties"),
            AdditionalPropertiesDigester(),
            v.AdditionalPropertiesValidator,
        ),
        Keyword("items", SchemaOrSchemaArraySyntaxChecker("items"), ItemsDigester(), v.ItemsValidator),
        Keyword(
            "additionalItems",
            SchemaOrBooleanSyntaxChecker("additionalItems"),
            SimpleDigester("additionalItems", "boolean", "object"),
        ),
        Keyword("allOf", SchemaArraySyntaxChecker("allOf"), SimpleDigester("allOf", "array"), v.AllOfValidator),
        Keyword("anyOf", SchemaArraySyntaxChecker("anyOf"), SimpleDigester("anyOf", "array"), v.AnyOfValidator),
        Keyword("oneOf", SchemaArraySyntaxChecker("oneOf"), SimpleDigester("oneOf", "array"), v.OneOfValidator),
        Keyword("not", SchemaSyntaxChecker("not"), SimpleDigester("not", "object"), v.NotValidator),
        Keyword(
            "format",
            TypeOnlySyntaxChecker("format", "string"),
            SimpleDigester("format", "string"),
            v.FormatValidator,
        ),
        Keyword("definitions", SchemaMapSyntaxChecker("definitions"), SimpleDigester("definitions")),
        _annotation("title", "string"),
        _annotation("description", "string"),
        _annotation("$schema", "string"),
        _annotation("$id", "string"),
        _annotation("default"),
    ]


def build_default_library() -> Library:
    """Freeze a library holding the default keywords and format attributes."""

    builder = LibraryBuilder()
    for keyword in default_keywords():
        builder.add_keyword(keyword)
    for name, attribute in DEFAULT_FORMAT_ATTRIBUTES.items():
        builder.add_format_attribute(name, attribute)
    return builder.freeze()
