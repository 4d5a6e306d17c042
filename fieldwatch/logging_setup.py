"""
Structured logging setup.

All modules log through structlog with snake_case event names and
key/value context. setup_logging() wires structlog into the standard
library logging module and picks the renderer from LoggingConfig.
"""

import logging
import os
from typing import Optional

import structlog

from fieldwatch.config.models import LogFormat, LoggingConfig, LogLevel


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """
    Configure structured logging for the monitoring core.

    Args:
        config: Logging configuration (defaults to JSON at INFO). The
            LOG_LEVEL environment variable overrides the configured level.
    """
    config = config or LoggingConfig()
    try:
        log_level = LogLevel(os.getenv("LOG_LEVEL", config.level.value).strip().upper()).value
    except ValueError:
        log_level = config.level.value

    if config.format == LogFormat.JSON:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

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
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level),
    )
