"""Logging setup shared by the session, suggestion proxy and HTTP surface.

structlog renders through the standard library handlers so Flask and
requests output land in the same stream.
"""
from __future__ import annotations
import logging
import sys
from typing import Optional, TextIO

import structlog
from structlog.types import FilteringBoundLogger

from outbound.config.env import get_log_config


def configure_logging(
    level: Optional[str] = None,
    format_json: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure structlog once for the process.

    Args:
        level: DEBUG, INFO, WARNING, ERROR; defaults to LOG_LEVEL.
        format_json: JSON lines instead of the console renderer; defaults to LOG_JSON.
        stream: Where records go; stdout unless given.
    """
    cfg = get_log_config()
    level = level or cfg.level
    if format_json is None:
        format_json = cfg.json

    log_level = getattr(logging, level.upper())
    logging.basicConfig(level=log_level, stream=stream or sys.stdout, format="%(message)s")

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    return structlog.get_logger(name)
