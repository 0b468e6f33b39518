"""
env-guard — unit tests for failure report rendering

File: tests/unit/guard/test_report.py
Last updated: 2026-10-19

Purpose
- Validate the exact plain-text report layout and the rich-backed console output.
"""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from env_guard.evaluator import EnvIssue, IssueKind
from env_guard.report import (
    REPORT_HINT,
    color_allowed,
    print_report,
    render_report,
    report_header,
)

ISSUES = (
    EnvIssue("DATABASE_URL", IssueKind.MISSING, "Missing required env var: DATABASE_URL"),
    EnvIssue("API_KEY", IssueKind.PATTERN_MISMATCH, "API_KEY does not match pattern /^sk_/"),
)


def test_header_pluralizes_error_count() -> None:
    assert report_header(1) == "Environment validation failed (1 error):"
    assert report_header(3) == "Environment validation failed (3 errors):"


def test_render_report_layout() -> None:
    assert render_report(ISSUES) == (
        "Environment validation failed (2 errors):\n"
        "  - Missing required env var: DATABASE_URL\n"
        "  - API_KEY does not match pattern /^sk_/"
    )


def test_render_report_with_hint() -> None:
    rendered = render_report(ISSUES[:1], hint=True)

    assert rendered.splitlines()[-2:] == ["", REPORT_HINT]


def test_print_report_writes_plain_lines_to_console() -> None:
    buffer = io.StringIO()
    console = Console(file=buffer, no_color=True, width=200)

    print_report(ISSUES, console=console)

    assert buffer.getvalue().splitlines() == [
        "Environment validation failed (2 errors):",
        "  - Missing required env var: DATABASE_URL",
        "  - API_KEY does not match pattern /^sk_/",
        "",
        REPORT_HINT,
    ]


def test_print_report_does_not_interpret_markup_in_messages() -> None:
    buffer = io.StringIO()
    console = Console(file=buffer, no_color=True, width=200)
    issue = EnvIssue("MODE", IssueKind.ONE_OF_MISMATCH, 'MODE must be one of: [a], b (got "[bold]")')

    print_report((issue,), console=console)

    assert 'MODE must be one of: [a], b (got "[bold]")' in buffer.getvalue()


def test_color_allowed_honours_flag_and_no_color(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    assert color_allowed(False) is True
    assert color_allowed(True) is False

    monkeypatch.setenv("NO_COLOR", "1")
    assert color_allowed(False) is False
