"""Keyword descriptor bundling a keyword's behaviors."""

from __future__ import annotations

from dataclasses import dataclass

from core.keywords.base import Digester, SyntaxChecker, ValidatorFactory
from core.utils.errors import ValidationConfigurationError


@dataclass(frozen=True)
class Keyword:
    """One schema keyword: name, syntax checker, digester, optional validator.

    A keyword without ``validator_factory`` is syntax-checked but never
    validated against instances (e.g. ``title``).
    """

    name: str
    syntax_checker: SyntaxChecker
    digester: Digester
    validator_factory: ValidatorFactory | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValidationConfigurationError.from_key("NULL_KEYWORD_NAME")
        if self.syntax_checker is None:
            raise ValidationConfigurationError.from_key("NULL_SYNTAX_CHECKER", keyword=self.name)
        if self.digester is None:
            raise ValidationConfigurationError.from_key("NULL_DIGESTER", keyword=self.name)
