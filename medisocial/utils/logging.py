"""Structured logging for the studio."""
import logging
import sys
from contextlib import AbstractContextManager

import structlog

from medisocial.config import settings


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a configured structlog logger."""
    return structlog.get_logger(name)


def generation_context(tool: str, token: int) -> AbstractContextManager:
    """Bind tool scope and request token to every log line emitted inside the block."""
    return structlog.contextvars.bound_contextvars(tool=tool, token=token)


def setup_logging(level: str | None = None) -> None:
    """Configure structlog and stdlib logging. Call once at startup.

    Lines logged while a generation runs carry its `tool` and `token` (see `generation_context`),
    so concurrent tools can be told apart in the JSON output.
    """
    level_name = (level or settings.log_level).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    renderer = structlog.dev.ConsoleRenderer() if level_name == "DEBUG" else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
    # Library loggers go through stdlib and stay at WARNING or above
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)
    for noisy in ("httpx", "sqlalchemy.engine", "aiosqlite"):
        logging.getLogger(noisy).setLevel(max(numeric_level, logging.WARNING))
