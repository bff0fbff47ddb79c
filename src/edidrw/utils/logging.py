"""Structured logging setup shared by the CLI and library modules."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # Resolved per call so a swapped sys.stderr is honoured.
    return structlog.PrintLogger(sys.stderr)


def setup_logging(level: str = "WARNING", json_output: bool = False) -> None:
    """Configure structlog for the process.

    Logs always go to stderr; stdout is reserved for command output.

    Args:
        level: Minimum level name to emit.
        json_output: Render events as JSON lines instead of console text.
    """
    log_level = _LEVELS.get(level.upper(), logging.WARNING)

    renderer: structlog.typing.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger bound to *name*."""
    return structlog.get_logger(name)
