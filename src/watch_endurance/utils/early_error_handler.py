"""Reporting for failures that happen before logging is configured.

The replay CLI loads its configuration and opens its input before the logging
system exists, so failures at that stage are written to stderr directly.
"""

import sys
from datetime import datetime
from typing import Any

from watch_endurance.exceptions import WatchEnduranceError


def handle_startup_error(
    error_type: str, message: str, details: dict[str, Any] | None = None
) -> None:
    """Write a startup failure to stderr.

    Args:
        error_type: Category shown before the message (e.g. "CONFIG_ERROR", "INPUT_ERROR")
        message: Main error message
        details: Optional context, written as one ``key: value`` line each
    """
    lines = [f"[{datetime.now().isoformat()}] {error_type}: {message}"]
    if details:
        lines.append("Details:")
        lines.extend(f"  {key}: {value}" for key, value in details.items())

    sys.stderr.write("\n" + "\n".join(lines) + "\n")
    sys.stderr.flush()


def handle_predictor_error(error_type: str, error: WatchEnduranceError) -> None:
    """Write a predictor exception raised during startup to stderr."""
    handle_startup_error(error_type, error.message, error.details)


def handle_keyboard_interrupt() -> None:
    """Report that the user interrupted the replay."""
    sys.stderr.write("\n\nReplay interrupted by user (Ctrl+C)\n")
    sys.stderr.flush()
