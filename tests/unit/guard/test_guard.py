"""
env-guard — unit tests for the startup guard boundary

File: tests/unit/guard/test_guard.py
Last updated: 2026-10-19

Purpose
- Validate exit-on-failure behavior, the raising alternative, and environment sourcing.

What this test file should cover
- Success returns the resolved mapping.
- Failure prints the aggregated report and exits with status 1.
- ``exit_on_failure=False`` raises ``EnvValidationError``.
- Logs carry key names and issue kinds, never values.
"""

from __future__ import annotations

import io
import logging

import pytest
from rich.console import Console

from env_guard.evaluator import EnvValidationError, IssueKind
from env_guard.guard import GUARD_FAILURE_EXIT_CODE, guard
from env_guard.schema import Rule

SCHEMA = {
    "API_KEY": True,
    "PORT": Rule(default="3000"),
    "NODE_ENV": Rule(one_of=("development", "production")),
    "DEBUG": Rule(required=False),
}


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, no_color=True, width=200), buffer


def test_guard_returns_resolved_values() -> None:
    env = guard(SCHEMA, {"API_KEY": "test123", "NODE_ENV": "production"})

    assert env == {"API_KEY": "test123", "PORT": "3000", "NODE_ENV": "production"}


def test_guard_reads_process_environment_when_environ_omitted(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("ENV_GUARD_TEST_TOKEN", "abc")
    monkeypatch.delenv("ENV_GUARD_TEST_MISSING", raising=False)

    env = guard(
        {
            "ENV_GUARD_TEST_TOKEN": True,
            "ENV_GUARD_TEST_MISSING": Rule(required=False, default="fallback"),
        }
    )

    assert env == {"ENV_GUARD_TEST_TOKEN": "abc", "ENV_GUARD_TEST_MISSING": "fallback"}


def test_guard_exits_with_report_on_failure() -> None:
    console, buffer = _console()

    with pytest.raises(SystemExit) as excinfo:
        guard(SCHEMA, {"NODE_ENV": "staging"}, console=console)

    assert excinfo.value.code == GUARD_FAILURE_EXIT_CODE == 1
    lines = buffer.getvalue().splitlines()
    assert lines[:3] == [
        "Environment validation failed (2 errors):",
        "  - Missing required env var: API_KEY",
        '  - NODE_ENV must be one of: development, production (got "staging")',
    ]


def test_guard_can_raise_instead_of_exiting() -> None:
    console, buffer = _console()

    with pytest.raises(EnvValidationError) as excinfo:
        guard(SCHEMA, {}, exit_on_failure=False, console=console)

    assert [(issue.key, issue.kind) for issue in excinfo.value.issues] == [
        ("API_KEY", IssueKind.MISSING)
    ]
    assert buffer.getvalue() == ""


def test_guard_forwards_empty_string_policy() -> None:
    assert guard({"TOKEN": True}, {"TOKEN": ""}, empty_is_missing=False) == {"TOKEN": ""}
    with pytest.raises(EnvValidationError):
        guard({"TOKEN": True}, {"TOKEN": ""}, exit_on_failure=False)


def test_guard_logs_keys_and_kinds_without_values(caplog: pytest.LogCaptureFixture) -> None:
    schema = {"API_KEY": Rule(pattern=r"^sk_")}

    with caplog.at_level(logging.WARNING, logger="env_guard.guard"):
        with pytest.raises(EnvValidationError):
            guard(schema, {"API_KEY": "leaky-secret-value"}, exit_on_failure=False)

    records = [record for record in caplog.records if record.name == "env_guard.guard"]
    assert len(records) == 1
    record = records[0]
    assert record.levelno == logging.WARNING
    assert record.__dict__["issues"] == [{"key": "API_KEY", "kind": "pattern-mismatch"}]
    assert "leaky-secret-value" not in caplog.text
    assert "leaky-secret-value" not in repr(record.__dict__)
