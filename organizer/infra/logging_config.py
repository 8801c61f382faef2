"""Centralized logging configuration for the organizer.

configure_logging() sets the root logger level and format and optionally
adds a rotating file handler. LOG_LEVEL and LOG_FILE are read from the
environment.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

_DEFAULT_LEVEL = "INFO"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3
_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _get_level() -> int:
    raw = os.environ.get("LOG_LEVEL", _DEFAULT_LEVEL).strip().upper()
    level = getattr(logging, raw, None)
    return level if isinstance(level, int) else logging.INFO


def _get_log_file() -> str | None:
    path = os.environ.get("LOG_FILE", "").strip()
    return path or None


def configure_logging(*, level: int | None = None, log_file: str | None = None) -> None:
    """Configure process-wide logging.

    Call once at startup. Existing root handlers are replaced, so calling it
    again (e.g. in tests) does not duplicate output.

    Args:
        level: Log level (e.g. logging.INFO). If None, taken from LOG_LEVEL env.
        log_file: If set, log to this file with rotation. If None, from LOG_FILE env.
    """
    if level is None:
        level = _get_level()
    if log_file is None:
        log_file = _get_log_file()

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        try:
            path = Path(log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=_MAX_BYTES,
                backupCount=_BACKUP_COUNT,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        except OSError as e:
            root.warning("Could not open log file %s: %s; logging to stderr only", log_file, e)
