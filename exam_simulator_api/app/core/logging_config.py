"""
Logging configuration for the application.

Everything logs through the root logger.  The console always gets the
log lines; when ``LOG_FILE`` is set they also go to a size-rotated
file.  Logging is set up exactly once per process.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def rotating_file_handler(logfile: str, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    """Return a handler writing to ``logfile`` and keeping ``backup_count`` old files.

    The parent folder is created if needed.  ``max_bytes`` of 0 turns
    rotation off.
    """
    log_path = Path(logfile).resolve()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path of the log file.  If omitted or empty only the console
        handler is attached.
    max_bytes, backup_count : int
        Rotation settings for the log file.
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured (tests and repeated ``create_app`` calls).
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console_handler)

    if logfile:
        root.addHandler(rotating_file_handler(logfile, max_bytes, backup_count))
