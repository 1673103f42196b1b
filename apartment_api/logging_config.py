"""
Structured logging for the API and the maintenance scripts.

Every module logs through ``structlog.get_logger(__name__)`` with an event
name plus keyword context; request handlers additionally carry the
``request_id`` bound by RequestIDMiddleware.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog
from structlog.types import Processor

from apartment_api.config import LOG_LEVEL

# Libraries whose INFO output drowns out ours
NOISY_LOGGERS = ("urllib3", "requests", "sqlalchemy.engine", "alembic", "uvicorn.access")


def setup_logging(*, json_output: Optional[bool] = None, level: str = LOG_LEVEL) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        json_output: One JSON object per line when True, colored console
            output when False. Defaults to JSON only at LOG_LEVEL=INFO.
        level: Minimum level name, e.g. "INFO" or "DEBUG"
    """
    if json_output is None:
        json_output = level == "INFO"

    logging.basicConfig(
        format="[%(asctime)s] %(levelname)s in %(name)s:%(lineno)d: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        level=level,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_output:
        processors = [*shared, structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared, structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
