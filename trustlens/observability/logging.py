"""structlog rendering for trustlens processes.

Library modules log through ``logging.getLogger(__name__)`` with %-style
arguments. ``setup_logging`` routes those records through structlog so a
worker authenticating reviews can bind ``review_id`` or ``auth_id`` once
and see it on every line below.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from trustlens.config.settings import get_settings

# Client libraries whose INFO output drowns the scoring logs.
QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "asyncpg", "asyncio", "redis")


def _renderer(json_logs: bool) -> list[Processor]:
    if json_logs:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def setup_logging(level: str | None = None) -> None:
    """Configure structlog over stdlib logging.

    Args:
        level: Override for ``Settings.log_level``.
    """
    settings = get_settings()
    level = level or settings.log_level

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        *_renderer(settings.json_logs),
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
        level=getattr(logging, level),
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**values: Any) -> None:
    """Attach values (review_id, actor_id, ...) to later log lines in this task."""
    structlog.contextvars.bind_contextvars(**values)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
