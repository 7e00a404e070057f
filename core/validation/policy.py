"""Validation policy model and YAML loading."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, ValidationError

from core.report.models import LogLevel

_DEFAULT_POLICY_PATH = Path(__file__).with_name("policy.yaml")


class ValidationPolicy(BaseModel):
    """Tunable behavior of the validation drivers.

    - unknown_keywords: how keywords missing from the library are reported
      during schema validation; they never fail validation
    - unknown_formats: whether ``format`` values without a registered
      attribute emit a warning
    - report_log_level: messages below this level are dropped from reports
    - cache_validators: reuse validators across identical constraint digests
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    unknown_keywords: Literal["ignore", "info", "warning"] = "ignore"
    unknown_formats: Literal["ignore", "warning"] = "warning"
    report_log_level: Literal["debug", "info", "warning", "error"] = "info"
    cache_validators: bool = True

    def log_level(self) -> LogLevel:
        return LogLevel(self.report_log_level)


def load_policy(path: Path | None = None) -> ValidationPolicy:
    """Load and validate a validation policy from YAML."""

    policy_path = path or _DEFAULT_POLICY_PATH

    try:
        raw = yaml.safe_load(policy_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"Policy file not found: {policy_path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in policy file: {policy_path}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Policy file must contain a mapping: {policy_path}")

    try:
        return ValidationPolicy.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid policy schema: {policy_path}") from exc
