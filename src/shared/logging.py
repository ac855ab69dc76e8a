"""Structured logging for the API, the manage CLI, and the tests.

structlog builds every event. Records from stdlib loggers (uvicorn,
SQLAlchemy) are routed through the same renderer, so one process writes one
format: JSON in production and staging, colored key/value lines elsewhere.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

LEVEL_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

# Chatty third-party loggers held at WARNING regardless of environment
QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "uvicorn.access")

_ROTATE_BYTES = 10 * 1024 * 1024


def get_log_level(environment: str) -> str:
    """``LOG_LEVEL`` wins; otherwise the level follows the environment."""
    return os.getenv("LOG_LEVEL", LEVEL_BY_ENVIRONMENT.get(environment.lower(), "INFO")).upper()


def _is_machine_readable(environment: str) -> bool:
    return environment.lower() in ("production", "staging")


def _event_enrichers() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def _formatter(environment: str) -> structlog.stdlib.ProcessorFormatter:
    if _is_machine_readable(environment):
        renderer = structlog.processors.JSONRenderer()
        exceptions = [structlog.processors.format_exc_info]
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
        exceptions = []

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_event_enrichers(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *exceptions,
            renderer,
        ],
    )


def _rotating_handler(path: Path, level: int | str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_ROTATE_BYTES,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def configure_logging(environment: str = "development", log_dir: str | None = None) -> None:
    """Install handlers on the root logger and point structlog at them.

    Safe to call more than once; earlier handlers are replaced. With
    ``log_dir`` (or ``LOG_DIR``) set, everything is also written to a
    rotating file and errors to a second one.
    """
    level = get_log_level(environment)
    formatter = _formatter(environment)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    log_dir = log_dir or os.getenv("LOG_DIR")
    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating_handler(directory / "product_reviews.log", level))
        handlers.append(_rotating_handler(directory / "product_reviews_error.log", logging.ERROR))

    root = logging.getLogger()
    root.handlers = []
    root.setLevel(level)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_event_enrichers(),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind values to every event logged from the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
