"""Logging configuration."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from sheetbox import constants
from sheetbox.utils.pathing import ensure_runtime_directories

# per-request chatter from the CLI's HTTP client
_NOISY_LOGGERS = ("httpx", "httpcore")


def resolve_level(level: Optional[int] = None) -> int:
    """Explicit level first, then $SHEETBOX_LOG_LEVEL, then INFO."""
    if level is not None:
        return level
    name = os.environ.get(constants.LOG_LEVEL_ENV_VAR, "").strip().upper()
    value = logging.getLevelName(name) if name else logging.INFO
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: Optional[int] = None) -> None:
    """Configure root logging with console + rotating file handlers."""
    ensure_runtime_directories()
    log_file = constants.LOG_DIR / "sheetbox.log"

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    file_handler = RotatingFileHandler(log_file, maxBytes=5_000_000, backupCount=5)
    file_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(resolve_level(level))
    root.handlers.clear()
    root.addHandler(console_handler)
    root.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
