"""structlog setup driven by the application settings."""

import logging
import sys
from typing import Any

import structlog

from summoning.config import Settings


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    # Look up sys.stderr per logger so a replaced stream is never written to stale
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(settings: Settings) -> None:
    """
    Configure structlog for console or JSON output on stderr.

    Args:
        settings: Settings providing ``log_level`` and ``log_format``
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
    )
