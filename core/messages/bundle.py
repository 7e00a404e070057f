"""Message bundle loading and template rendering."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml  # type: ignore[import-untyped]

_DEFAULT_BUNDLE_PATH = Path(__file__).with_name("validation.yaml")


class _MissingAsPlaceholder(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


class MessageBundle:
    """Read-only mapping of message keys to ``str.format`` templates."""

    def __init__(self, templates: Mapping[str, str]) -> None:
        self._templates: Mapping[str, str] = MappingProxyType(dict(templates))

    @classmethod
    def from_path(cls, path: Path) -> MessageBundle:
        """Load and validate a bundle from YAML."""

        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ValueError(f"Message bundle not found: {path}") from exc
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in message bundle: {path}") from exc

        if not isinstance(raw, dict):
            raise ValueError(f"Message bundle must contain a mapping: {path}")

        templates: dict[str, str] = {}
        for key, template in raw.items():
            if not isinstance(key, str) or not isinstance(template, str):
                raise ValueError(f"Message bundle entries must map strings to strings: {path}")
            templates[key] = template
        return cls(templates)

    def keys(self) -> list[str]:
        return sorted(self._templates)

    def render(self, key: str, context: Mapping[str, Any] | None = None) -> str:
        """Render ``key`` with named context fields.

        Unknown keys render as the key itself and unknown fields are left as
        literal placeholders, so rendering never fails.
        """

        template = self._templates.get(key)
        if template is None:
            return key
        return template.format_map(_MissingAsPlaceholder(context or {}))


_default_lock = threading.Lock()
_default_bundle: MessageBundle | None = None


def default_bundle() -> MessageBundle:
    """Return the process-wide bundle shipped with the package."""

    global _default_bundle

    with _default_lock:
        if _default_bundle is None:
            _default_bundle = MessageBundle.from_path(_DEFAULT_BUNDLE_PATH)
        return _default_bundle
