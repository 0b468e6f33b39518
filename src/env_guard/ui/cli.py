"""Command-line interface router for env-guard."""

from __future__ import annotations

import argparse
import json
import logging
import os
from collections.abc import Mapping, Sequence

from env_guard.evaluator import evaluate
from env_guard.loader import load_schema
from env_guard.main import ExitCode
from env_guard.observability.logging import setup_logging, shutdown_logging
from env_guard.report import create_console, print_report
from env_guard.schema import Rule
from env_guard.ui.render import CLIRenderer, create_renderer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="env-guard",
        description=(
            "env-guard — validate environment variables against a declarative schema.\n\n"
            "Common workflows:\n"
            "  env-guard check --schema env.toml     Validate the current environment\n"
            "  env-guard explain --schema env.toml   List the declared rules\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--schema",
        dest="schema_path",
        required=True,
        help="Path to a TOML or YAML schema document.",
    )
    common.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Disable coloured output (NO_COLOR is also honoured).",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Emit debug logs on stderr (default: warnings only).",
    )
    common.add_argument(
        "--log-format",
        choices=("json", "text"),
        default="json",
        help="Log line format (default: json).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        parents=[common],
        help="Validate the current environment against the schema",
        description="Validate the current environment against the schema.",
    )
    check_parser.add_argument("--json", action="store_true", help="Emit deterministic JSON output")
    check_parser.add_argument(
        "--allow-empty",
        action="store_true",
        default=False,
        help="Treat variables set to an empty string as present values.",
    )
    check_parser.set_defaults(handler=_cmd_check)

    explain_parser = subparsers.add_parser(
        "explain",
        parents=[common],
        help="List the rules declared in the schema",
        description="List the rules declared in the schema.",
    )
    explain_parser.set_defaults(handler=_cmd_explain)

    return parser


def run_cli(
    argv: Sequence[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Parse ``argv`` and dispatch to a subcommand; returns the process exit code."""

    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "WARNING", log_format=args.log_format)
    try:
        renderer = create_renderer(no_color=args.no_color)
        env = os.environ if environ is None else environ
        return int(args.handler(args, renderer, env))
    finally:
        shutdown_logging()


def _cmd_check(args: argparse.Namespace, renderer: CLIRenderer, env: Mapping[str, str]) -> int:
    rules = load_schema(args.schema_path)
    logger.debug("schema loaded", extra={"schema_path": args.schema_path, "rules": len(rules)})

    result = evaluate(rules, env, empty_is_missing=not args.allow_empty)

    if args.json:
        payload = {
            "valid": result.is_valid,
            "resolved_keys": list(result.config or {}),
            "issues": [issue.to_dict() for issue in result.issues],
        }
        renderer.json(json.dumps(payload, sort_keys=True, separators=(",", ":")))
    elif result.is_valid:
        renderer.ok(f"{len(rules)} variable(s) validated")
    else:
        print_report(result.issues, console=create_console(no_color=args.no_color))

    if result.is_valid:
        return ExitCode.SUCCESS
    logger.info(
        "environment validation failed",
        extra={"failed_keys": [issue.key for issue in result.issues]},
    )
    return ExitCode.VALIDATION_FAILED


def _cmd_explain(args: argparse.Namespace, renderer: CLIRenderer, env: Mapping[str, str]) -> int:
    rules = load_schema(args.schema_path)
    rows = [_describe_rule(key, rule) for key, rule in rules.items()]
    if not rows:
        renderer.text("schema declares no variables")
        return ExitCode.SUCCESS
    renderer.table(
        ("VARIABLE", "REQUIRED", "DEFAULT", "CONSTRAINT", "DESCRIPTION"),
        rows,
    )
    return ExitCode.SUCCESS


def _describe_rule(key: str, rule: Rule) -> tuple[str, str, str, str, str]:
    constraints: list[str] = []
    if rule.pattern is not None:
        constraints.append(f"pattern {rule.pattern}")
    if rule.one_of is not None:
        constraints.append("one of: " + ", ".join(rule.one_of))
    if rule.transform is not None:
        constraints.append("transformed")
    return (
        key,
        "yes" if rule.required else "no",
        "-" if rule.default is None else rule.default,
        "; ".join(constraints) or "-",
        rule.description or "-",
    )


__all__ = ["build_parser", "run_cli"]
