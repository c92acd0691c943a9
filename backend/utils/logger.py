"""Process-wide logging setup shared by every layer."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from backend.utils.config import get_settings


_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_PROJECT_LOGGERS = ("app", "backend")
_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """Install the stdout handler the first time any module asks for a logger.

    Only the ``app`` and ``backend.*`` loggers follow ``level`` (or the
    configured log level); third-party loggers stay at WARNING. Later calls
    are no-ops.
    """

    global _configured
    if _configured:
        return

    resolved_level = (level or get_settings().log_level).upper()
    logging.basicConfig(level=logging.WARNING, format=_LOG_FORMAT, stream=sys.stdout)
    for name in _PROJECT_LOGGERS:
        logging.getLogger(name).setLevel(resolved_level)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
