"""Logging configuration for GeoCatch.

Application code logs through structlog. Records from libraries that use
the standard library (SQLAlchemy, aiogram) go through the same processor
chain, so both end up in one stream and one format.
"""

import logging
import sys
from typing import Any

import structlog

from geocatch.config import settings

NOISY_LOGGERS = {
    "asyncio": logging.WARNING,
    "aiohttp": logging.WARNING,
    "aiogram.event": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
}


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure structlog and route standard library logging through it.

    Args:
        level: Log level name, defaults to ``settings.log_level``
        log_format: ``console`` or ``json``, defaults to ``settings.log_format``
    """
    level_name = (level or settings.log_level).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if (log_format or settings.log_format) == "json":
        renderers: list[Any] = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    for name, noisy_level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(max(noisy_level, log_level))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance for the given name."""
    return structlog.get_logger(name)
