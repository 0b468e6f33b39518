"""Module entrypoint for ``python -m env_guard``."""

from __future__ import annotations

from env_guard.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
