"""
env-guard — validate environment variables at startup.

File: src/env_guard/__init__.py
Last updated: 2026-10-19

Purpose
- Package root. Exports the schema types, the pure evaluator and the startup guard.

Example
    from env_guard import Rule, guard

    env = guard({
        "DATABASE_URL": True,
        "PORT": Rule(default="3000"),
        "NODE_ENV": Rule(one_of=("development", "production")),
        "API_KEY": Rule(pattern=r"^sk_"),
        "DEBUG": False,
        "HOST": Rule(transform=str.lower),
    })

Functional requirements
- Must not have side effects at import time (no environment reads, no logging init).
"""

from env_guard.evaluator import (
    EnvIssue,
    EnvValidationError,
    EvaluationResult,
    IssueKind,
    assert_valid_env,
    evaluate,
)
from env_guard.guard import guard
from env_guard.loader import SchemaLoadError, load_schema, schema_from_document
from env_guard.report import render_report
from env_guard.schema import Rule, RulePattern, Schema, normalize_rule

__version__ = "1.0.0"

__all__ = [
    "EnvIssue",
    "EnvValidationError",
    "EvaluationResult",
    "IssueKind",
    "Rule",
    "RulePattern",
    "Schema",
    "SchemaLoadError",
    "__version__",
    "assert_valid_env",
    "evaluate",
    "guard",
    "load_schema",
    "normalize_rule",
    "render_report",
    "schema_from_document",
]
