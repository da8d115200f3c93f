"""
Structured logging configuration using structlog.

Console output for local work, one JSON object per line otherwise.
Remote store credentials never reach the log stream.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from moleculex.config.settings import get_settings

REDACTED = "***"
_SECRET_KEYS = frozenset({"api_key", "apikey", "authorization"})


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Tag events with the app version and remote backend."""
    settings = get_settings()
    event_dict["app"] = settings.app_name
    event_dict["version"] = settings.app_version
    event_dict["backend"] = settings.remote.backend
    return event_dict


def redact_secrets(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Mask credential-like fields, including inside header dicts."""
    for key, value in list(event_dict.items()):
        if key.lower() in _SECRET_KEYS:
            event_dict[key] = REDACTED
        elif isinstance(value, dict):
            event_dict[key] = {
                k: REDACTED if str(k).lower() in _SECRET_KEYS else v for k, v in value.items()
            }
    return event_dict


def configure_logging() -> None:
    """Configure structlog and stdlib logging from settings."""
    settings = get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        redact_secrets,
    ]

    if settings.log_format == "console":
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )

    # Request logging is done by our own middleware
    for name in ("httpx", "httpcore", "aiosqlite", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
