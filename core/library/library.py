"""Keyword library and its builder."""

from __future__ import annotations

from core.keywords.base import Digester, FormatAttribute, SyntaxChecker, ValidatorFactory
from core.library.dictionary import Dictionary, DictionaryBuilder
from core.library.keyword import Keyword
from core.utils.errors import ValidationConfigurationError


class Library:
    """Immutable set of keywords and format attributes.

    Only ``LibraryBuilder.freeze()`` creates libraries. A library is never
    mutated afterwards and is shared across threads without locking.
    """

    __slots__ = ("syntax_checkers", "digesters", "validator_factories", "format_attributes")

    def __init__(self, builder: LibraryBuilder) -> None:
        self.syntax_checkers: Dictionary[SyntaxChecker] = builder._syntax_checkers.freeze()
        self.digesters: Dictionary[Digester] = builder._digesters.freeze()
        self.validator_factories: Dictionary[ValidatorFactory] = builder._validator_factories.freeze()
        self.format_attributes: Dictionary[FormatAttribute] = builder._format_attributes.freeze()

    @staticmethod
    def new_builder() -> LibraryBuilder:
        return LibraryBuilder()

    def thaw(self) -> LibraryBuilder:
        """Return a builder copy; mutating it never affects this library."""

        return LibraryBuilder(self)

    def keywords(self) -> list[str]:
        return sorted(self.syntax_checkers)

    def formats(self) -> list[str]:
        return sorted(self.format_attributes)

    def __repr__(self) -> str:
        return f"Library(keywords={self.keywords()!r}, formats={self.formats()!r})"


class LibraryBuilder:
    """Mutable counterpart of ``Library``; single writer, not thread safe."""

    def __init__(self, library: Library | None = None) -> None:
        self._syntax_checkers: DictionaryBuilder[SyntaxChecker]
        self._digesters: DictionaryBuilder[Digester]
        self._validator_factories: DictionaryBuilder[ValidatorFactory]
        self._format_attributes: DictionaryBuilder[FormatAttribute]
        if library is None:
            self._syntax_checkers = Dictionary.new_builder()
            self._digesters = Dictionary.new_builder()
            self._validator_factories = Dictionary.new_builder()
            self._format_attributes = Dictionary.new_builder()
        else:
            self._syntax_checkers = library.syntax_checkers.thaw()
            self._digesters = library.digesters.thaw()
            self._validator_factories = library.validator_factories.thaw()
            self._format_attributes = library.format_attributes.thaw()

    def add_keyword(self, keyword: Keyword) -> LibraryBuilder:
        """Register ``keyword``, fully replacing any keyword of the same name."""

        name = keyword.name
        self.remove_keyword(name)

        self._syntax_checkers.add_entry(name, keyword.syntax_checker)
        self._digesters.add_entry(name, keyword.digester)
        if keyword.validator_factory is not None:
            self._validator_factories.add_entry(name, keyword.validator_factory)
        return self

    def remove_keyword(self, name: str) -> LibraryBuilder:
        if name is None:
            raise ValidationConfigurationError.from_key("NULL_NAME")
        self._syntax_checkers.remove_entry(name)
        self._digesters.remove_entry(name)
        self._validator_factories.remove_entry(name)
        return self

    def add_format_attribute(self, name: str, attribute: FormatAttribute) -> LibraryBuilder:
        # A rejected call leaves any previous registration of ``name`` in place.
        if name is None:
            raise ValidationConfigurationError.from_key("NULL_FORMAT")
        if attribute is None:
            raise ValidationConfigurationError.from_key("NULL_ATTRIBUTE")
        self.remove_format_attribute(name)
        self._format_attributes.add_entry(name, attribute)
        return self

    def remove_format_attribute(self, name: str) -> LibraryBuilder:
        if name is None:
            raise ValidationConfigurationError.from_key("NULL_FORMAT")
        self._format_attributes.remove_entry(name)
        return self

    def freeze(self) -> Library:
        return Library(self)
