"""Structured logging configuration for the transition harness using structlog."""

import logging
import os
import sys
from typing import Any, cast

import structlog

from ..config import get_settings

DISABLE_CONSOLE_ENV = "TRANSITION_HARNESS_DISABLE_CONSOLE_LOGGING"


def setup_logging(
    level: str = "INFO",
    structured: bool = False,
    console: bool = True,
    add_timestamp: bool = True,
    colorize: bool = False,
) -> None:
    """Configure structured logging for the harness.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: Use JSON structured output
        console: Enable console output (overridden by the disable env var)
        add_timestamp: Add timestamps to logs
        colorize: Colorize console output (only for non-structured)
    """
    if os.getenv(DISABLE_CONSOLE_ENV) == "1":
        console = False

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]

    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]
    )

    if structured:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colorize and console))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = []
    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console_handler)
    else:
        handlers.append(logging.NullHandler())
        level = "CRITICAL"

    root_logger = logging.getLogger("transition_harness")
    root_logger.handlers = handlers
    root_logger.setLevel(getattr(logging, level.upper()))


_logging_initialized = False


def _ensure_logging_initialized() -> None:
    """Ensure logging is initialized (called lazily, not at import time)."""
    global _logging_initialized

    if _logging_initialized:
        return

    try:
        settings = get_settings()
        setup_logging(
            level=settings.effective_log_level,
            structured=settings.structured_logging,
            colorize=settings.debug_mode,
        )
    except (AttributeError, ValueError):
        # Invalid environment configuration should not break logging
        setup_logging(level="INFO")

    _logging_initialized = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    _ensure_logging_initialized()
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
