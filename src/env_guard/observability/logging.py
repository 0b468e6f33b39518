"""Log handler setup for the env-guard CLI.

File: src/env_guard/observability/logging.py
Last updated: 2026-10-19

Purpose
- Route ``env_guard.*`` log records to stderr as JSON lines (or plain text)
  without leaking secrets.

What should be included in this file
- setup_logging / shutdown_logging for a single stderr handler.
- Masking of secret-looking extra fields, inline ``key=value`` secrets and
  URL credentials.

Non-functional requirements
- Log lines never carry environment variable values; callers pass key names
  and counts only, masking is the second line of defence.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import IO, Final

MASK: Final[str] = "***REDACTED***"
ROOT_LOGGER: Final[str] = "env_guard"

_SECRET_FIELD: Final[re.Pattern[str]] = re.compile(
    r"(?i)secret|token|passw(or)?d|passphrase|api_?key|credential|private_key|database_url|dsn"
)
_INLINE_SECRET: Final[re.Pattern[str]] = re.compile(
    r"(?i)\b(api[_-]?key|token|password|secret)(\s*[:=]\s*)[^\s,;]+"
)
_URL_USERINFO: Final[re.Pattern[str]] = re.compile(r"(?i)\b([a-z][a-z0-9+.-]*://[^\s:/@]+):[^\s/@]+@")

# Attributes every LogRecord has; anything else on a record came from ``extra=``.
_RECORD_ATTRS: Final[frozenset[str]] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}

_installed: dict[str, logging.Handler] = {}


def mask_text(text: str) -> str:
    """Mask inline secret assignments and URL passwords in ``text``."""

    text = _INLINE_SECRET.sub(lambda m: f"{m.group(1)}{m.group(2)}{MASK}", text)
    return _URL_USERINFO.sub(lambda m: f"{m.group(1)}:{MASK}@", text)


def mask_fields(fields: Mapping[str, object]) -> dict[str, object]:
    """Return ``fields`` with secret-looking names masked and strings scrubbed."""

    masked: dict[str, object] = {}
    for name, value in fields.items():
        if _SECRET_FIELD.search(name):
            masked[name] = MASK
        elif isinstance(value, str):
            masked[name] = mask_text(value)
        elif isinstance(value, (list, tuple)):
            masked[name] = [mask_text(item) if isinstance(item, str) else item for item in value]
        else:
            masked[name] = value
    return masked


def _extra_fields(record: logging.LogRecord) -> dict[str, object]:
    return {
        name: value
        for name, value in sorted(vars(record).items())
        if name not in _RECORD_ATTRS and not name.startswith("_")
    }


class _JsonLineFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, fields."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, tz=UTC)
        event: dict[str, object] = {
            "timestamp": stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": mask_text(record.getMessage()),
        }
        fields = _extra_fields(record)
        if fields:
            event["fields"] = mask_fields(fields)
        if record.exc_info:
            event["exception"] = mask_text(self.formatException(record.exc_info))
        return json.dumps(event, sort_keys=True, separators=(",", ":"), default=str)


class _TextFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = mask_text(super().format(record))
        fields = _extra_fields(record)
        if fields:
            line += " " + json.dumps(mask_fields(fields), sort_keys=True, default=str)
        return line


def setup_logging(
    level: int | str = "WARNING",
    *,
    log_format: str = "json",
    stream: IO[str] | None = None,
    logger_name: str = ROOT_LOGGER,
) -> logging.Logger:
    """Install one masking stderr handler on ``logger_name`` and return the logger.

    Calling it again replaces the handler installed by the previous call.
    Raises ``ValueError`` for an unknown level name or ``log_format``.
    """

    if log_format == "json":
        formatter: logging.Formatter = _JsonLineFormatter()
    elif log_format == "text":
        formatter = _TextFormatter()
    else:
        raise ValueError(f"log_format must be 'json' or 'text', got {log_format!r}")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level!r}")
        level = resolved

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(formatter)

    shutdown_logging(logger_name)
    logger = logging.getLogger(logger_name)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    _installed[logger_name] = handler
    return logger


def shutdown_logging(logger_name: str = ROOT_LOGGER) -> None:
    """Remove the handler installed by :func:`setup_logging`, if any."""

    handler = _installed.pop(logger_name, None)
    if handler is None:
        return
    logger = logging.getLogger(logger_name)
    logger.removeHandler(handler)
    handler.flush()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


__all__ = ["MASK", "ROOT_LOGGER", "mask_fields", "mask_text", "setup_logging", "shutdown_logging"]
