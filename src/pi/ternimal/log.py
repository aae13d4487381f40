"""Logging setup for applications built on pi.ternimal.

Library modules only create loggers (``logging.getLogger(__name__)``) and
log at DEBUG. Call :func:`setup_logging` once at the entry point to see them.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from pi.ternimal.console import DEFAULT_DATE_FORMAT, DEFAULT_LOG_FORMAT
from pi.ternimal.settings import load_settings

LOGGER_NAME = "pi.ternimal"


class FlushingStreamHandler(logging.StreamHandler):
    """StreamHandler that flushes after every emit."""

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        self.flush()


def setup_logging(
    level: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Attach a handler to the ``pi.ternimal`` logger.

    *level* defaults to ``PI_TERNIMAL_LOG_LEVEL``. Pass a terminal's
    ``stderr`` as *stream* to keep these messages above the prompt line.
    """
    if level is None:
        level = load_settings().log_level

    handler = FlushingStreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT, DEFAULT_DATE_FORMAT))

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(level)
    logger.addHandler(handler)
    return logger
