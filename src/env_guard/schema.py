"""
env-guard — schema model and rule normalization.

File: src/env_guard/schema.py
Last updated: 2026-10-19

Purpose
- Define the per-variable ``Rule`` and the ``Schema`` mapping consumed by the evaluator.

What should be included in this file
- Immutable rule value types, with regex patterns compiled once at construction.
- Boolean shorthand normalization (``True`` -> required, ``False`` -> optional).
- Construction of rules from declarative (file-sourced) payloads with structured issues.

Functional requirements
- Rule construction never re-parses pattern text during evaluation.
- Declarative construction reports every malformed field, not just the first.

Non-functional requirements
- No I/O, no logging, no ambient process state.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Final, TypeAlias

Transform: TypeAlias = Callable[[str], str]

BUILTIN_TRANSFORMS: Final[Mapping[str, Transform]] = {
    "lower": str.lower,
    "upper": str.upper,
    "strip": str.strip,
    "casefold": str.casefold,
}

RULE_FIELDS: Final[frozenset[str]] = frozenset(
    {"required", "default", "pattern", "one_of", "oneOf", "transform", "description"}
)


@dataclass(frozen=True, slots=True, init=False)
class RulePattern:
    """Compiled regular expression plus the text it was compiled from."""

    source: str
    compiled: re.Pattern[str]

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        compiled = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
        object.__setattr__(self, "source", compiled.pattern)
        object.__setattr__(self, "compiled", compiled)

    def matches(self, value: str) -> bool:
        return self.compiled.search(value) is not None

    def __str__(self) -> str:
        return f"/{self.source}/"


@dataclass(frozen=True, slots=True)
class Rule:
    """Validation rule for one environment variable."""

    required: bool = True
    default: str | None = None
    pattern: RulePattern | None = None
    one_of: tuple[str, ...] | None = None
    transform: Transform | None = field(default=None, compare=False)
    description: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.pattern, (str, re.Pattern)):
            object.__setattr__(self, "pattern", RulePattern(self.pattern))
        if isinstance(self.one_of, str):
            raise TypeError(f"one_of must be a sequence of strings, not str: {self.one_of!r}")
        if self.one_of is not None and not isinstance(self.one_of, tuple):
            object.__setattr__(self, "one_of", tuple(self.one_of))


Schema: TypeAlias = Mapping[str, "Rule | bool"]


def normalize_rule(rule: Rule | bool) -> Rule:
    """Expand boolean shorthand into a canonical ``Rule``."""

    if isinstance(rule, bool):
        return Rule(required=rule)
    if isinstance(rule, Rule):
        return rule
    raise TypeError(f"schema entry must be Rule or bool, got {type(rule).__name__}")


def normalize_schema(schema: Schema) -> dict[str, Rule]:
    """Return an ordered ``key -> Rule`` mapping with shorthand expanded."""

    if not isinstance(schema, Mapping):
        raise TypeError(f"schema must be a mapping, got {type(schema).__name__}")
    return {key: normalize_rule(rule) for key, rule in schema.items()}


@dataclass(frozen=True, slots=True)
class SchemaIssue:
    """Single structured failure while building a schema from declarative data."""

    path: str
    message: str


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[SchemaIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(SchemaIssue(path=path, message=message))

    def items(self) -> tuple[SchemaIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def build_schema(
    payload: Mapping[str, object],
    *,
    transforms: Mapping[str, Transform] | None = None,
) -> tuple[dict[str, Rule], tuple[SchemaIssue, ...]]:
    """Build rules from a declarative mapping such as a parsed TOML or YAML document.

    Returns the rules built so far together with every issue found; callers
    must treat a non-empty issue tuple as a failed build.
    """

    registry = dict(BUILTIN_TRANSFORMS)
    if transforms:
        registry.update(transforms)

    issues = _IssueCollector()
    rules: dict[str, Rule] = {}
    for key, raw in payload.items():
        if not isinstance(key, str) or not key:
            issues.add("<root>", f"variable name must be a non-empty string, got {key!r}")
            continue
        rule = _build_rule(raw, key, issues, registry)
        if rule is not None:
            rules[key] = rule
    return rules, issues.items()


def _build_rule(
    raw: object,
    path: str,
    issues: _IssueCollector,
    transforms: Mapping[str, Transform],
) -> Rule | None:
    if isinstance(raw, bool):
        return Rule(required=raw)
    if not isinstance(raw, Mapping):
        issues.add(path, f"expected boolean or table, got {type(raw).__name__}")
        return None

    before = len(issues.items())
    for name in sorted(str(item) for item in raw):
        if name not in RULE_FIELDS:
            issues.add(_join(path, name), "unknown rule field")
    if "one_of" in raw and "oneOf" in raw:
        issues.add(_join(path, "one_of"), "one_of and oneOf are mutually exclusive")

    required = _optional_bool(raw.get("required"), _join(path, "required"), issues)
    default = _optional_str(raw.get("default"), _join(path, "default"), issues)
    description = _optional_str(raw.get("description"), _join(path, "description"), issues)
    pattern = _optional_pattern(raw.get("pattern"), _join(path, "pattern"), issues)

    one_of_key = "oneOf" if "oneOf" in raw else "one_of"
    one_of = _optional_str_list(raw.get(one_of_key), _join(path, one_of_key), issues)

    transform: Transform | None = None
    transform_name = _optional_str(raw.get("transform"), _join(path, "transform"), issues)
    if transform_name is not None:
        transform = transforms.get(transform_name)
        if transform is None:
            expected = ", ".join(sorted(transforms))
            issues.add(
                _join(path, "transform"),
                f"unknown transform {transform_name!r}; expected one of: {expected}",
            )

    if len(issues.items()) > before:
        return None
    return Rule(
        required=True if required is None else required,
        default=default,
        pattern=pattern,
        one_of=one_of,
        transform=transform,
        description=description,
    )


def _optional_bool(value: object, path: str, issues: _IssueCollector) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    issues.add(path, f"expected boolean, got {type(value).__name__}")
    return None


def _optional_str(value: object, path: str, issues: _IssueCollector) -> str | None:
    if value is None or isinstance(value, str):
        return value
    issues.add(path, f"expected string, got {type(value).__name__}")
    return None


def _optional_pattern(value: object, path: str, issues: _IssueCollector) -> RulePattern | None:
    text = _optional_str(value, path, issues)
    if text is None:
        return None
    try:
        return RulePattern(text)
    except re.error as exc:
        issues.add(path, f"invalid regular expression: {exc}")
        return None


def _optional_str_list(
    value: object, path: str, issues: _IssueCollector
) -> tuple[str, ...] | None:
    if value is None:
        return None
    if not isinstance(value, list):
        issues.add(path, f"expected list of strings, got {type(value).__name__}")
        return None
    if not value:
        issues.add(path, "must not be empty")
        return None
    out: list[str] = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            issues.add(f"{path}[{index}]", f"expected string, got {type(item).__name__}")
            continue
        out.append(item)
    return tuple(out)


def _join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


__all__ = [
    "BUILTIN_TRANSFORMS",
    "RULE_FIELDS",
    "Rule",
    "RulePattern",
    "Schema",
    "SchemaIssue",
    "Transform",
    "build_schema",
    "normalize_rule",
    "normalize_schema",
]
