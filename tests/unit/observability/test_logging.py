"""
env-guard — unit tests for observability logging

File: tests/unit/observability/test_logging.py
Last updated: 2026-10-19

Purpose
- Validate the stderr log handler: JSON and text lines, secret masking, and
  handler lifecycle.

Functional requirements
- Offline operation.

Non-functional requirements
- Deterministic and non-flaky.
"""

from __future__ import annotations

import io
import json
import logging
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from env_guard.observability.logging import (
    MASK,
    mask_fields,
    mask_text,
    setup_logging,
    shutdown_logging,
)

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture()
def logger_name() -> Iterator[str]:
    name = f"env_guard.tests.logging.{uuid4().hex}"
    yield name
    shutdown_logging(name)


def test_json_line_masks_secrets(logger_name: str) -> None:
    stream = io.StringIO()
    logger = setup_logging("DEBUG", stream=stream, logger_name=logger_name)

    logger.info(
        "connecting with password=hunter2 to postgres://app:s3cret@db/main",
        extra={"database_url": "postgres://app:s3cret@db/main", "failed_keys": ["PORT"]},
    )

    event = json.loads(stream.getvalue())
    assert event["level"] == "INFO"
    assert event["logger"] == logger_name
    assert event["message"] == (
        f"connecting with password={MASK} to postgres://app:{MASK}@db/main"
    )
    assert event["fields"] == {"database_url": MASK, "failed_keys": ["PORT"]}
    assert str(event["timestamp"]).endswith("Z")
    assert "hunter2" not in stream.getvalue()
    assert "s3cret" not in stream.getvalue()


def test_records_below_level_are_dropped(logger_name: str) -> None:
    stream = io.StringIO()
    logger = setup_logging("warning", stream=stream, logger_name=logger_name)

    logger.info("dropped")
    logger.warning("kept", extra={"issue_count": 2})

    events = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert [event["message"] for event in events] == ["kept"]
    assert events[0]["fields"] == {"issue_count": 2}


def test_text_format_is_masked(logger_name: str) -> None:
    stream = io.StringIO()
    logger = setup_logging(log_format="text", stream=stream, logger_name=logger_name)

    logger.error("api_key=sk_live_123 rejected", extra={"schema_path": "env.toml"})

    line = stream.getvalue()
    assert "ERROR" in line
    assert "sk_live_123" not in line
    assert f"api_key={MASK}" in line
    assert '{"schema_path": "env.toml"}' in line


def test_setup_replaces_previous_handler_and_shutdown_restores_logger(
    logger_name: str,
) -> None:
    first = io.StringIO()
    second = io.StringIO()

    setup_logging(stream=first, logger_name=logger_name)
    logger = setup_logging(stream=second, logger_name=logger_name)
    logger.warning("only once")
    shutdown_logging(logger_name)

    assert first.getvalue() == ""
    assert len(second.getvalue().splitlines()) == 1
    assert logging.getLogger(logger_name).handlers == []
    assert logging.getLogger(logger_name).propagate is True


def test_invalid_settings_are_rejected(logger_name: str) -> None:
    with pytest.raises(ValueError, match="log_format"):
        setup_logging(log_format="xml", logger_name=logger_name)
    with pytest.raises(ValueError, match="unknown log level"):
        setup_logging("LOUD", logger_name=logger_name)


def test_mask_fields_only_touches_secret_names_and_strings() -> None:
    masked = mask_fields(
        {
            "client_secret": "x",
            "API_KEY": "y",
            "note": "token: abc123",
            "failed_keys": ["DATABASE_URL", "PORT"],
            "issue_count": 3,
        }
    )

    assert masked == {
        "client_secret": MASK,
        "API_KEY": MASK,
        "note": f"token: {MASK}",
        "failed_keys": ["DATABASE_URL", "PORT"],
        "issue_count": 3,
    }


def test_mask_text_leaves_plain_text_alone() -> None:
    assert mask_text("schema loaded from env.toml") == "schema loaded from env.toml"
