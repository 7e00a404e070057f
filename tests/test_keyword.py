from __future__ import annotations

import pytest

from core.keywords.digest import SimpleDigester
from core.keywords.syntax import AnyValueSyntaxChecker
from core.library.keyword import Keyword
from core.report.models import LogLevel
from core.utils.errors import ValidationConfigurationError


@pytest.mark.parametrize("name", [None, ""])
def test_keyword_requires_a_name(name) -> None:
    with pytest.raises(ValidationConfigurationError) as exc_info:
        Keyword(name, AnyValueSyntaxChecker(), SimpleDigester("x"))

    error = exc_info.value
    assert error.key == "NULL_KEYWORD_NAME"
    assert error.processing_message.level is LogLevel.FATAL
    assert str(error) == "keyword name must be a non-empty string"


def test_keyword_requires_syntax_checker_and_digester() -> None:
    with pytest.raises(ValidationConfigurationError) as checker_error:
        Keyword("minimum", None, SimpleDigester("minimum"))  # type: ignore[arg-type]
    with pytest.raises(ValidationConfigurationError) as digester_error:
        Keyword("minimum", AnyValueSyntaxChecker(), None)  # type: ignore[arg-type]

    assert checker_error.value.key == "NULL_SYNTAX_CHECKER"
    assert str(checker_error.value) == "keyword minimum has no syntax checker"
    assert digester_error.value.key == "NULL_DIGESTER"
    assert digester_error.value.processing_message.context["keyword"] == "minimum"


def test_keyword_without_validator_factory_is_allowed() -> None:
    keyword = Keyword("title", AnyValueSyntaxChecker(), SimpleDigester("title"))

    assert keyword.validator_factory is None
