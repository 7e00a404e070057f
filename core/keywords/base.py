"""Keyword behavior interfaces."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from core.validation.context import InstanceContext, SyntaxContext

SchemaPath = tuple[str, ...]


class SyntaxChecker(Protocol):
    """Checks the value of one keyword inside a schema object."""

    def check_syntax(self, context: SyntaxContext, schema: Mapping[str, Any]) -> Sequence[SchemaPath]:
        """Report syntax errors and return the relative paths of sub-schemas."""


class Digester(Protocol):
    """Builds the canonical digest of one keyword inside a schema object.

    Two schema objects that impose the same constraint must digest equally.
    """

    def digest(self, schema: Mapping[str, Any]) -> Any:
        """Return a canonical JSON value describing the constraint."""


class KeywordValidator(Protocol):
    """Validates instances against one keyword's constraint."""

    def validate(self, context: InstanceContext, instance: Any) -> None:
        """Append findings to the context's report."""


ValidatorFactory = Callable[[Any], KeywordValidator]


class FormatAttribute(Protocol):
    """Validates string (or other) instances against a named format."""

    supported_types: frozenset[str]

    def is_valid(self, value: Any) -> bool:
        """Return whether ``value`` conforms to the format."""
