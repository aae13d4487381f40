"""Console and logger bound to a terminal's multiplexed write streams."""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any, Optional, TextIO

if TYPE_CHECKING:
    from pi.ternimal.terminal import Terminal

_FORMAT_RE = re.compile(r"%[sdifjoO%]")

DEFAULT_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%H:%M:%S"


def format_args(*args: Any) -> str:
    """Format *args* like ``console.log``: printf-style first argument, rest joined."""
    if not args:
        return ""
    first, rest = args[0], list(args[1:])
    if not isinstance(first, str):
        return " ".join(str(arg) for arg in args)

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "%%":
            return "%"
        if not rest:
            return token
        value = rest.pop(0)
        if token in ("%d", "%i"):
            try:
                return str(int(value))
            except (TypeError, ValueError):
                return "NaN"
        if token == "%f":
            try:
                return str(float(value))
            except (TypeError, ValueError):
                return "NaN"
        if token == "%j":
            try:
                return json.dumps(value)
            except (TypeError, ValueError):
                return repr(value)
        if token in ("%o", "%O"):
            return repr(value)
        return str(value)

    head = _FORMAT_RE.sub(_replace, first)
    return " ".join([head, *(str(arg) for arg in rest)])


class Console:
    """``console.log``-style printing to an output and an error stream."""

    def __init__(self, stdout: TextIO, stderr: TextIO) -> None:
        self.stdout = stdout
        self.stderr = stderr

    def log(self, *args: Any) -> None:
        self.stdout.write(format_args(*args) + "\n")

    info = log
    debug = log

    def error(self, *args: Any) -> None:
        self.stderr.write(format_args(*args) + "\n")

    warn = error


class ChannelFilter(logging.Filter):
    """Pass records at or below *max_level*."""

    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self.max_level


def create_logger(
    terminal: Terminal,
    name: str = "pi.ternimal.console",
    level: int = logging.INFO,
    fmt: Optional[logging.Formatter] = None,
) -> logging.Logger:
    """Return a logger that writes above the prompt line of *terminal*.

    Records up to INFO go to ``terminal.stdout`` and records from WARNING
    up to ``terminal.stderr``. The logger does not propagate, and calling
    this again for the same *name* replaces its handlers.
    """
    formatter = fmt or logging.Formatter(DEFAULT_LOG_FORMAT, DEFAULT_DATE_FORMAT)

    out_handler = logging.StreamHandler(terminal.stdout)
    out_handler.addFilter(ChannelFilter(logging.INFO))
    out_handler.setFormatter(formatter)

    err_handler = logging.StreamHandler(terminal.stderr)
    err_handler.setLevel(logging.WARNING)
    err_handler.setFormatter(formatter)

    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(level)
    logger.propagate = False
    logger.addHandler(out_handler)
    logger.addHandler(err_handler)
    return logger
