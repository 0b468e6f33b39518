"""
env-guard — startup guard boundary.

File: src/env_guard/guard.py
Last updated: 2026-10-19

Purpose
- Wrap the pure evaluator with the process-facing policy: read the environment,
  report failures, and stop the process before it serves traffic.

What should be included in this file
- ``guard()``: evaluate, log, render the failure report, terminate or raise.

Functional requirements
- On failure write the aggregated report to stderr and raise ``SystemExit(1)``
  unless the caller opts into ``EnvValidationError``.
- On success return the resolved mapping unchanged.

Non-functional requirements
- Never log variable values; only key names and issue kinds.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import TYPE_CHECKING, Final

from env_guard.evaluator import EnvValidationError, evaluate
from env_guard.report import print_report

if TYPE_CHECKING:
    from rich.console import Console

    from env_guard.schema import Schema

GUARD_FAILURE_EXIT_CODE: Final[int] = 1

logger = logging.getLogger(__name__)


def guard(
    schema: Schema,
    environ: Mapping[str, str | None] | None = None,
    *,
    exit_on_failure: bool = True,
    empty_is_missing: bool = True,
    console: Console | None = None,
    no_color: bool = False,
) -> dict[str, str]:
    """Validate ``environ`` (``os.environ`` when omitted) and return resolved values.

    On failure the report is printed and the process exits with status 1. Pass
    ``exit_on_failure=False`` to receive an ``EnvValidationError`` instead.
    """

    inputs: Mapping[str, str | None] = os.environ if environ is None else environ
    result = evaluate(schema, inputs, empty_is_missing=empty_is_missing)

    if result.config is not None:
        logger.debug("environment validated", extra={"resolved_keys": len(result.config)})
        return result.config

    logger.warning(
        "environment validation failed",
        extra={
            "issue_count": len(result.issues),
            "issues": [{"key": issue.key, "kind": issue.kind.value} for issue in result.issues],
        },
    )
    if not exit_on_failure:
        raise EnvValidationError(result.issues)

    print_report(result.issues, console=console, no_color=no_color)
    raise SystemExit(GUARD_FAILURE_EXIT_CODE)


__all__ = ["GUARD_FAILURE_EXIT_CODE", "guard"]
