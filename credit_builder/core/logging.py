"""Structured logging setup."""

import logging
import sys

import structlog

from credit_builder.core.config import settings


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """
    Configure structlog and route stdlib logging through it.

    Args:
        level: Log level name, defaults to settings.log_level
        log_format: "json" or "console", defaults to settings.log_format
    """
    level_name = (level or settings.log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    use_json = (log_format or settings.log_format).lower() == "json"

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
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
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # Keep access logs from drowning out request logging middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
