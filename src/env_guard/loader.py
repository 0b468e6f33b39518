"""
env-guard — schema file loader.

File: src/env_guard/loader.py
Last updated: 2026-10-19

Purpose
- Load a declarative schema from a TOML or YAML document.

What should be included in this file
- TOML loading via ``tomllib`` and YAML loading via ``yaml.safe_load``.
- Optional top-level ``vars`` table; otherwise the document root is the schema.
  A ``vars`` key holding a table is always that table and must be the only
  root key; a ``vars`` key holding anything else is a variable named ``vars``.
- Named transform resolution (built-ins plus caller-supplied callables).

Functional requirements
- Reject unreadable files, parse errors, and malformed rules with ``SchemaLoadError``.
- Report every malformed rule field in a single error.

Non-functional requirements
- Deterministic: the same document always yields the same rules in the same order.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Final

import yaml

from env_guard.schema import Rule, SchemaIssue, Transform, build_schema

SCHEMA_TABLE: Final[str] = "vars"
_TOML_SUFFIXES: Final[frozenset[str]] = frozenset({".toml"})
_YAML_SUFFIXES: Final[frozenset[str]] = frozenset({".yaml", ".yml"})


class SchemaLoadError(ValueError):
    """Raised when a schema document cannot be read or contains invalid rules."""

    def __init__(self, message: str, issues: Sequence[SchemaIssue] = ()) -> None:
        self.issues = tuple(issues)
        if self.issues:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
            message = f"{message}:\n{rendered}"
        super().__init__(message)


def load_schema(
    path: str | Path,
    *,
    transforms: Mapping[str, Transform] | None = None,
) -> dict[str, Rule]:
    """Load rules from ``path``; the format is chosen by file suffix."""

    resolved = Path(path).expanduser()
    suffix = resolved.suffix.lower()
    if suffix in _TOML_SUFFIXES:
        document = _load_toml_file(resolved)
    elif suffix in _YAML_SUFFIXES:
        document = _load_yaml_file(resolved)
    else:
        raise SchemaLoadError(f"unsupported schema format {resolved.suffix!r}: {resolved}")
    return schema_from_document(document, transforms=transforms, source=str(resolved))


def schema_from_document(
    document: Mapping[str, object],
    *,
    transforms: Mapping[str, Transform] | None = None,
    source: str = "<document>",
) -> dict[str, Rule]:
    """Build rules from an already parsed document."""

    payload: Mapping[str, object] = document
    table = document.get(SCHEMA_TABLE)
    if isinstance(table, Mapping):
        extra = [key for key in document if key != SCHEMA_TABLE]
        if extra:
            raise SchemaLoadError(
                f"{SCHEMA_TABLE!r} table cannot be mixed with top-level variables in {source}",
                [SchemaIssue(key, "move this variable under the vars table") for key in extra],
            )
        payload = table

    rules, issues = build_schema(payload, transforms=transforms)
    if issues:
        raise SchemaLoadError(f"invalid schema in {source}", issues)
    return rules


def _load_toml_file(path: Path) -> dict[str, object]:
    try:
        with path.open("rb") as handle:
            parsed = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise SchemaLoadError(f"schema file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise SchemaLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise SchemaLoadError(f"unable to read schema file {path}: {exc}") from exc
    return parsed


def _load_yaml_file(path: Path) -> dict[str, object]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            parsed = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise SchemaLoadError(f"schema file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise SchemaLoadError(f"invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise SchemaLoadError(f"unable to read schema file {path}: {exc}") from exc

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise SchemaLoadError(f"schema root must be a mapping: {path}")
    return parsed


__all__ = ["SCHEMA_TABLE", "SchemaLoadError", "load_schema", "schema_from_document"]
