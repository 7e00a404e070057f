"""CLI I/O helpers for document loading and atomic report writing."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

_YAML_SUFFIXES = {".yaml", ".yml"}


class _JsonCompatibleLoader(yaml.SafeLoader):
    """Safe loader keeping timestamps as plain strings."""


_JsonCompatibleLoader.add_constructor(
    "tag:yaml.org,2002:timestamp",
    lambda loader, node: loader.construct_scalar(node),
)


def load_document(path: Path) -> Any:
    """Load a JSON or YAML document; the suffix picks the parser."""

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ValueError(f"Document not found: {path}") from exc

    if path.suffix.lower() in _YAML_SUFFIXES:
        try:
            document = yaml.load(text, Loader=_JsonCompatibleLoader)  # noqa: S506
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML document: {path}") from exc
        _reject_non_string_names(document, path)
        return document

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON document: {path}") from exc


def _reject_non_string_names(node: Any, path: Path) -> None:
    if isinstance(node, dict):
        for name, member in node.items():
            if not isinstance(name, str):
                raise ValueError(f"Non-string member name {name!r} in YAML document: {path}")
            _reject_non_string_names(member, path)
    elif isinstance(node, list):
        for item in node:
            _reject_non_string_names(item, path)


def write_reports_atomic(path: Path, payload: dict[str, Any]) -> None:
    """Write the structured reports of one CLI run atomically."""

    path.parent.mkdir(parents=True, exist_ok=True)
    _atomic_write_json(path, payload)


def _atomic_write_json(path: Path, payload: dict[str, Any]) -> None:
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        delete=False,
        prefix=f"{path.name}.",
        suffix=".tmp",
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            json.dump(payload, tmp, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
        except Exception:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise

    tmp_path.replace(path)
