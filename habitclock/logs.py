"""Application-wide logging writing to platformdirs user_log_dir."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

_LOGGER_NAME = "habitclock"
_LOG_FILE = "habitclock.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3


def setup_logging(level: str = "INFO", log_dir: Path | None = None) -> logging.Logger:
    """Attach the rotating file handler to the package logger.

    Module loggers (``habitclock.store`` and friends) inherit it. Calling
    this twice does not add a second handler.
    """
    if log_dir is None:
        log_dir = Path(user_log_dir("HabitTracker", appauthor=False))
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not logger.handlers:
        handler = logging.handlers.RotatingFileHandler(
            log_dir / _LOG_FILE,
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
        logger.addHandler(handler)
    # The TUI owns the terminal; keep records out of the root logger.
    logger.propagate = False
    return logger
