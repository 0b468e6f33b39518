"""Process entrypoint for ``env-guard`` and ``python -m env_guard``.

Turns the outcome of :func:`env_guard.ui.cli.run_cli` into an :class:`ExitCode`.
A broken schema file or a bad command line is the operator's problem and gets
a one-line message; anything else is a bug and gets a traceback.
"""

from __future__ import annotations

import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING

from env_guard.loader import SchemaLoadError

if TYPE_CHECKING:
    from collections.abc import Sequence


class ExitCode(IntEnum):
    """Exit statuses of the ``env-guard`` command."""

    SUCCESS = 0
    VALIDATION_FAILED = 1
    CONFIG_ERROR = 2  # unreadable or invalid schema, bad command line
    INTERNAL_ERROR = 3


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return its exit status instead of raising."""

    from env_guard.ui.cli import run_cli

    try:
        return int(run_cli(argv))
    except SchemaLoadError as exc:
        print(f"env-guard: {exc}", file=sys.stderr)
        return int(ExitCode.CONFIG_ERROR)
    except SystemExit as exc:
        # argparse exits 0 for --help and 2 for usage errors after printing them.
        return int(ExitCode.SUCCESS if not exc.code else ExitCode.CONFIG_ERROR)
    except Exception:  # noqa: BLE001 - last line before the process exits.
        traceback.print_exc(file=sys.stderr)
        return int(ExitCode.INTERNAL_ERROR)


__all__ = ["ExitCode", "cli_entrypoint"]
