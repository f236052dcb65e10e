"""Structlog-based logging for Ancestree.

Library code logs through structlog; nothing here prints.
"""
from __future__ import annotations

from typing import Literal, Optional

import logging
import structlog

from ancestree.config import settings

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def configure_logging(level: Optional[LogLevel] = None) -> None:
    """Render JSON log lines at `level`, defaulting to ANCESTREE_LOG_LEVEL."""
    level = (level or settings.log.level).upper()
    logging.basicConfig(format="%(message)s", level=getattr(logging, level))
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level)),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "ancestree"):
    return structlog.get_logger(name)
