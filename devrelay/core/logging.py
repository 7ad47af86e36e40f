"""Structured logging configuration.

The package only emits events through get_logger(); rendering is decided by
the application, optionally via configure_logging().
"""

import sys
import structlog
import logging
from pathlib import Path
from typing import List
from devrelay.core.config import Settings


def _handlers(settings: Settings, level: int) -> List[logging.Handler]:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    handlers: List[logging.Handler] = [console_handler]

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        handlers.append(file_handler)

    return handlers


def _processors(log_format: str) -> list:
    shared = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        return [
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            *shared,
            structlog.processors.JSONRenderer(),
        ]

    return [
        structlog.processors.TimeStamper(fmt="%H:%M:%S"),
        *shared,
        structlog.dev.ConsoleRenderer(
            colors=False,
            exception_formatter=structlog.dev.plain_traceback
        ),
    ]


def configure_logging(settings: Settings) -> None:
    """Route stdlib logging to stdout (and log_file) and configure structlog."""
    level = getattr(logging, settings.log_level.upper())

    logging.basicConfig(
        level=level,
        handlers=_handlers(settings, level),
        format="%(message)s",
        force=True,
    )

    structlog.configure(
        processors=_processors(settings.log_format),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def log_api_call(logger: structlog.BoundLogger, method: str, url: str,
                 status_code: int, **kwargs) -> None:
    """Log control plane calls with standardized format."""
    logger.debug(
        "[API] Call completed",
        method=method,
        url=url,
        status_code=status_code,
        success=200 <= status_code < 300,
        **kwargs
    )
