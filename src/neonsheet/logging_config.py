"""Structured logging setup for Neonsheet."""

import logging
import sys

import structlog

from neonsheet.config import get_settings


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        level: Logging level name (DEBUG, INFO, ...). Defaults to ``Settings.log_level``.
        fmt: ``console`` for human-readable output or ``json`` for one JSON object
            per line. Defaults to ``Settings.log_format``.
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    log_format = (fmt or settings.log_format).lower()
    numeric_level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
