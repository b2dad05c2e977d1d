"""Logging setup: console output in debug mode, daily log files otherwise."""

from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from xuul.config import get_debug

LOG_DIR = Path("logs")
LOG_FILE = "server.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(threadName)s(%(thread)d) %(name)s: %(message)s"

_installed: logging.Handler | None = None


def _level_from_env() -> int:
    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "ERROR").strip().upper())
    return level if isinstance(level, int) else logging.ERROR


def init_logging() -> logging.Handler:
    """Install the root log handler and return it.

    The level comes from LOG_LEVEL (ERROR when unset). Calling this again
    replaces the handler installed by the previous call.
    """
    global _installed

    if get_debug():
        handler: logging.Handler = logging.StreamHandler()
    else:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        handler = TimedRotatingFileHandler(
            LOG_DIR / LOG_FILE, when="midnight", encoding="utf-8", delay=True
        )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    if _installed is not None:
        root.removeHandler(_installed)
        _installed.close()
    root.addHandler(handler)
    root.setLevel(_level_from_env())
    _installed = handler
    return handler