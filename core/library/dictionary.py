"""Immutable name-to-value mappings and their mutable builders."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Generic, TypeVar

V = TypeVar("V")


class Dictionary(Mapping[str, V], Generic[V]):
    """Frozen mapping of names to values.

    Instances are only produced by ``DictionaryBuilder.freeze()`` (or
    ``Dictionary.empty()``) and never change afterwards, so they can be read
    from any number of threads without locking.
    """

    __slots__ = ("_entries",)

    def __init__(self, builder: DictionaryBuilder[V]) -> None:
        self._entries: Mapping[str, V] = MappingProxyType(dict(builder._entries))

    @staticmethod
    def new_builder() -> DictionaryBuilder[V]:
        return DictionaryBuilder()

    @staticmethod
    def empty() -> Dictionary[V]:
        return _EMPTY  # type: ignore[return-value]

    def thaw(self) -> DictionaryBuilder[V]:
        """Return a new builder pre-loaded with this dictionary's entries."""

        return DictionaryBuilder(self)

    def __getitem__(self, name: str) -> V:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Dictionary({sorted(self._entries)!r})"


class DictionaryBuilder(Generic[V]):
    """Mutable staging area for a ``Dictionary``; not thread safe."""

    __slots__ = ("_entries",)

    def __init__(self, source: Dictionary[V] | None = None) -> None:
        self._entries: dict[str, V] = {}
        if source is not None:
            self._entries.update(source._entries)

    def add_entry(self, name: str, value: V) -> DictionaryBuilder[V]:
        self._entries[name] = value
        return self

    def add_all(self, dictionary: Dictionary[V]) -> DictionaryBuilder[V]:
        self._entries.update(dictionary._entries)
        return self

    def remove_entry(self, name: str) -> DictionaryBuilder[V]:
        self._entries.pop(name, None)
        return self

    def freeze(self) -> Dictionary[V]:
        return Dictionary(self)


_EMPTY: Dictionary[object] = Dictionary(DictionaryBuilder())
