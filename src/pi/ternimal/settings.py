"""Environment-driven settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

ENV_WRITE_LOG = "PI_TERNIMAL_WRITE_LOG"
ENV_LOG_LEVEL = "PI_TERNIMAL_LOG_LEVEL"
ENV_COLUMNS = "PI_TERNIMAL_COLUMNS"

DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class TernimalSettings:
    """Settings read from ``PI_TERNIMAL_*`` environment variables."""

    write_log: str = ""
    log_level: str = DEFAULT_LOG_LEVEL
    columns: Optional[int] = None


def _parse_columns(value: str) -> Optional[int]:
    if not value:
        return None
    try:
        columns = int(value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", ENV_COLUMNS, value)
        return None
    if columns <= 0:
        logger.warning("Ignoring %s=%r: must be positive", ENV_COLUMNS, value)
        return None
    return columns


def load_settings(env: Optional[Mapping[str, str]] = None) -> TernimalSettings:
    """Build settings from *env* (defaults to ``os.environ``)."""
    if env is None:
        env = os.environ
    level = env.get(ENV_LOG_LEVEL, "").strip().upper() or DEFAULT_LOG_LEVEL
    if not isinstance(logging.getLevelName(level), int):
        logger.warning("Ignoring %s=%r: unknown level", ENV_LOG_LEVEL, level)
        level = DEFAULT_LOG_LEVEL
    return TernimalSettings(
        write_log=env.get(ENV_WRITE_LOG, ""),
        log_level=level,
        columns=_parse_columns(env.get(ENV_COLUMNS, "").strip()),
    )
