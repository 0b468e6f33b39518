"""Public observability primitives: stderr logging with secret masking."""

from env_guard.observability.logging import (
    MASK,
    ROOT_LOGGER,
    mask_fields,
    mask_text,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "MASK",
    "ROOT_LOGGER",
    "mask_fields",
    "mask_text",
    "setup_logging",
    "shutdown_logging",
]
