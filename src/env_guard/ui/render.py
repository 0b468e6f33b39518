"""Output rendering abstraction for the env-guard CLI.

File: src/env_guard/ui/render.py
Last updated: 2026-10-19

Purpose
- Provide a thin rendering layer for CLI output backed by ``rich``.
- Respect NO_COLOR environment variable and --no-color CLI flag.

What should be included in this file
- CLIRenderer class with methods for common output patterns.
- Factory function to create a renderer with appropriate settings.

Functional requirements
- Output without colour must be plain, deterministic text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.text import Text

from env_guard.report import color_allowed

if TYPE_CHECKING:
    from collections.abc import Sequence


class CLIRenderer:
    """Thin CLI output renderer.

    Writes to stdout by default. Respects ``NO_COLOR`` env var and ``--no-color`` flag.
    """

    def __init__(
        self,
        *,
        no_color: bool = False,
        console: Console | None = None,
    ) -> None:
        self._color = color_allowed(no_color)
        self.console = console or Console(no_color=not self._color, highlight=False, soft_wrap=True)

    def text(self, line: str) -> None:
        """Print a plain text line."""

        self.console.print(Text(line))

    def json(self, payload: str) -> None:
        """Print a pre-serialized JSON document verbatim."""

        self.console.print(payload, markup=False, highlight=False, emoji=False)

    def table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        *,
        title: str | None = None,
    ) -> None:
        """Print a table; nothing is printed when there are no rows."""

        if not rows:
            return
        table = Table(title=title, show_edge=False, box=None, pad_edge=False)
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*(Text(str(cell)) for cell in row))
        self.console.print(table)

    def ok(self, label: str) -> None:
        """Print a passing check."""

        line = Text("  ")
        line.append("OK", style="green")
        line.append(f"  {label}")
        self.console.print(line)


def create_renderer(*, no_color: bool = False, console: Console | None = None) -> CLIRenderer:
    """Create a CLI renderer with the given settings."""

    return CLIRenderer(no_color=no_color, console=console)


__all__ = ["CLIRenderer", "create_renderer"]
