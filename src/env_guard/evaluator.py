"""
env-guard — schema evaluator.

File: src/env_guard/evaluator.py
Last updated: 2026-10-19

Purpose
- Evaluate a schema against an input mapping and return either the resolved
  configuration or every validation issue found.

What should be included in this file
- ``evaluate`` (pure, returns a result value) and ``assert_valid_env`` (raises).
- Issue kinds, the per-key issue record and the aggregate exception type.

Functional requirements
- Every schema key is evaluated; issues are aggregated in declaration order.
- A key contributes at most one issue; evaluation of that key stops at the first failure.
- Defaults bypass pattern/one_of validation and transforms.
- A raising transform is reported as a ``transform-error`` issue.

Non-functional requirements
- No I/O, no logging, no process termination, no ambient environment reads.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from env_guard.report import render_report
from env_guard.schema import Rule, Schema, normalize_schema


class IssueKind(str, enum.Enum):
    """Failure taxonomy for a single variable."""

    MISSING = "missing"
    PATTERN_MISMATCH = "pattern-mismatch"
    ONE_OF_MISMATCH = "one-of-mismatch"
    TRANSFORM_ERROR = "transform-error"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class EnvIssue:
    """Single structured validation failure for one variable."""

    key: str
    kind: IssueKind
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "kind": self.kind.value, "message": self.message}


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Evaluation outcome with resolved values when no issues were found."""

    config: dict[str, str] | None
    issues: tuple[EnvIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.issues


class EnvValidationError(ValueError):
    """Raised when strict environment validation fails."""

    def __init__(self, issues: Sequence[EnvIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "Environment validation failed (unknown validation failure)"
        else:
            rendered = render_report(self.issues)
        super().__init__(rendered)


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[EnvIssue] = []

    def add(self, key: str, kind: IssueKind, message: str) -> None:
        self._items.append(EnvIssue(key=key, kind=kind, message=message))

    def items(self) -> tuple[EnvIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def evaluate(
    schema: Schema,
    inputs: Mapping[str, str | None],
    *,
    empty_is_missing: bool = True,
) -> EvaluationResult:
    """Validate ``inputs`` against ``schema`` and return structured issues in schema order.

    ``inputs`` may be any mapping; a ``None`` value is treated as unset. With
    ``empty_is_missing`` (the default) an empty string is also treated as
    unset, so a default applies to it and a required key reports ``missing``.
    """

    if not isinstance(inputs, Mapping):
        raise TypeError(f"inputs must be a mapping, got {type(inputs).__name__}")
    rules = normalize_schema(schema)

    issues = _IssueCollector()
    resolved: dict[str, str] = {}
    for key, rule in rules.items():
        value = inputs.get(key)
        if value is None or (empty_is_missing and value == ""):
            if rule.default is not None:
                resolved[key] = rule.default
            elif rule.required:
                issues.add(
                    key,
                    IssueKind.MISSING,
                    f"Missing required env var: {key}{_describe(rule)}",
                )
            continue

        checked = _check_value(key, value, rule, issues)
        if checked is not None:
            resolved[key] = checked

    if issues.has_issues:
        return EvaluationResult(config=None, issues=issues.items())
    return EvaluationResult(config=resolved, issues=())


def assert_valid_env(
    schema: Schema,
    inputs: Mapping[str, str | None],
    *,
    empty_is_missing: bool = True,
) -> dict[str, str]:
    """Evaluate and raise ``EnvValidationError`` on failure."""

    result = evaluate(schema, inputs, empty_is_missing=empty_is_missing)
    if result.config is None:
        raise EnvValidationError(result.issues)
    return result.config


def _check_value(key: str, value: str, rule: Rule, issues: _IssueCollector) -> str | None:
    if rule.pattern is not None and not rule.pattern.matches(value):
        issues.add(
            key,
            IssueKind.PATTERN_MISMATCH,
            f"{key} does not match pattern {rule.pattern}{_describe(rule)}",
        )
        return None

    if rule.one_of is not None and value not in rule.one_of:
        allowed = ", ".join(rule.one_of)
        issues.add(
            key,
            IssueKind.ONE_OF_MISMATCH,
            f'{key} must be one of: {allowed} (got "{value}"){_describe(rule)}',
        )
        return None

    if rule.transform is None:
        return value
    try:
        transformed = rule.transform(value)
    except Exception as exc:  # noqa: BLE001 - caller transforms must not abort evaluation.
        issues.add(
            key,
            IssueKind.TRANSFORM_ERROR,
            f"{key} transform failed: {type(exc).__name__}: {exc}{_describe(rule)}",
        )
        return None
    if not isinstance(transformed, str):
        issues.add(
            key,
            IssueKind.TRANSFORM_ERROR,
            f"{key} transform returned {type(transformed).__name__}, expected str"
            f"{_describe(rule)}",
        )
        return None
    return transformed


def _describe(rule: Rule) -> str:
    if not rule.description:
        return ""
    return f" ({rule.description})"


__all__ = [
    "EnvIssue",
    "EnvValidationError",
    "EvaluationResult",
    "IssueKind",
    "assert_valid_env",
    "evaluate",
]
