"""Structured logging configuration.

This module initializes structlog loggers with a stable JSON format.
Events are snake_case names carrying keyword context fields.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL

_CONFIGURED_LEVEL: str | None = None


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure structlog processors and the minimum level.

    Args:
        level: Level name such as ``INFO`` or ``DEBUG``.
    """
    global _CONFIGURED_LEVEL
    if _CONFIGURED_LEVEL == level:
        return
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )
    _CONFIGURED_LEVEL = level


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog bound logger with structured output.
    """
    if _CONFIGURED_LEVEL is None:
        configure_logging()
    return structlog.get_logger(name)


def _stderr_logger_factory(*_args: Any) -> Any:
    """Bind each logger to the current stderr stream."""
    return structlog.PrintLogger(file=sys.stderr)


def _level_number(level: str) -> int:
    """Map a level name to its stdlib numeric value."""
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO
