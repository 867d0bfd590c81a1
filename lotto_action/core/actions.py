"""GitHub Actions workflow commands used to report the run outcome."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

logger = logging.getLogger(__name__)


def escape_data(value: str) -> str:
    """Escape a workflow command payload the way the Actions runner expects."""

    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_failed(message: str, *, stream: TextIO | None = None) -> None:
    """Mark the workflow step as failed without touching the process exit code."""

    out = stream or sys.stdout
    out.write(f"::error::{escape_data(message)}\n")
    out.flush()
    logger.error("Run marked as failed: %s", message)


def add_mask(value: str, *, stream: TextIO | None = None) -> None:
    """Ask the runner to hide ``value`` wherever it appears in the step output."""

    if not value:
        return
    out = stream or sys.stdout
    out.write(f"::add-mask::{escape_data(value)}\n")
    out.flush()
