"""Outcome rendering and exit codes for CLI output."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Literal

from core.report.models import ProcessingReport
from core.utils.json_tree import pretty_print

ReportStyle = Literal["default", "brief", "quiet"]


class RetCode(IntEnum):
    ALL_OK = 0
    CMD_ERROR = 2
    SCHEMA_SYNTAX_ERROR = 100
    VALIDATION_FAILURE = 101


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating one file, tagged with what was validated."""

    kind: Literal["schema", "instance"]
    file_name: str
    report: ProcessingReport

    @property
    def ret_code(self) -> RetCode:
        if self.report.success:
            return RetCode.ALL_OK
        if self.kind == "schema":
            return RetCode.SCHEMA_SYNTAX_ERROR
        return RetCode.VALIDATION_FAILURE


def render_outcome(outcome: ValidationOutcome, style: ReportStyle = "default") -> str | None:
    """Render one outcome; ``None`` means nothing should be printed."""

    success = outcome.report.success
    if style == "quiet":
        return None

    if style == "brief":
        what = "schema syntax" if outcome.kind == "schema" else "validation"
        verdict = "SUCCESS" if success else "FAILURE"
        errors = outcome.report.error_count()
        return f"{outcome.file_name}: {what} {verdict} (errors={errors})"

    lines: list[str] = []
    lines.append(f"--- BEGIN {outcome.file_name}---")
    lines.append(f"validation: {'SUCCESS' if success else 'FAILURE'}")
    if not success:
        lines.append(pretty_print(outcome.report.to_structured()))
    lines.append(f"--- END {outcome.file_name}---")
    return "\n".join(lines)


def combine_ret_codes(codes: list[RetCode]) -> RetCode:
    """Pick the run's exit code: the first failure wins."""

    for code in codes:
        if code is not RetCode.ALL_OK:
            return code
    return RetCode.ALL_OK
