"""Failure report rendering for environment validation issues.

Plain-text rendering is deterministic and colour-free. ``print_report`` writes
the same lines through ``rich`` and colours them when the terminal allows it.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Final, Protocol

from rich.console import Console
from rich.text import Text

if TYPE_CHECKING:
    from collections.abc import Sequence

REPORT_HINT: Final[str] = "Set the missing variables in your .env file or environment."
_BULLET: Final[str] = "  - "


class _HasMessage(Protocol):
    @property
    def message(self) -> str: ...


def report_header(count: int) -> str:
    noun = "error" if count == 1 else "errors"
    return f"Environment validation failed ({count} {noun}):"


def render_report(issues: Sequence[_HasMessage], *, hint: bool = False) -> str:
    """Render issues as the multi-line failure report."""

    lines = [report_header(len(issues))]
    lines.extend(f"{_BULLET}{issue.message}" for issue in issues)
    if hint:
        lines.append("")
        lines.append(REPORT_HINT)
    return "\n".join(lines)


def color_allowed(no_color_flag: bool = False) -> bool:
    if no_color_flag:
        return False
    return not os.environ.get("NO_COLOR", "")


def create_console(*, no_color: bool = False, stderr: bool = True) -> Console:
    """Create a console that honours ``NO_COLOR`` and ``--no-color``."""

    allowed = color_allowed(no_color)
    return Console(stderr=stderr, no_color=not allowed, highlight=False, soft_wrap=True)


def print_report(
    issues: Sequence[_HasMessage],
    *,
    console: Console | None = None,
    no_color: bool = False,
) -> None:
    """Write the failure report, including the hint line, to ``console`` (stderr by default)."""

    target = console if console is not None else create_console(no_color=no_color)
    target.print(Text(report_header(len(issues)), style="bold red"))
    for issue in issues:
        target.print(_bullet_line(issue.message))
    target.print()
    target.print(Text(REPORT_HINT, style="dim"))


def _bullet_line(message: str) -> Text:
    line = Text("  ")
    line.append("-", style="red")
    line.append(f" {message}")
    return line


__all__ = [
    "REPORT_HINT",
    "color_allowed",
    "create_console",
    "print_report",
    "render_report",
    "report_header",
]
