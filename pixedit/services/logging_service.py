"""
Logging setup for PixEdit.

Everything logs through the "pixedit" package logger, which gets one stderr
handler and, when possible, one dated file handler under
~/.local/share/pixedit/logs/. Third-party loggers (Qt, pynput) are left
alone. PIXEDIT_LOG_LEVEL (debug, info, warning, error) overrides the level
given by the caller.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "pixedit"

DEFAULT_LOG_DIR = Path.home() / ".local" / "share" / "pixedit" / "logs"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVEL_NAMES = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def resolve_level(default: int) -> int:
    """Level from PIXEDIT_LOG_LEVEL, or default when unset or unknown."""
    name = (os.getenv("PIXEDIT_LOG_LEVEL") or "").strip().lower()
    return LEVEL_NAMES.get(name, default)


def log_file_path(log_dir: Path, when: Optional[datetime] = None) -> Path:
    """One log file per day: pixedit_YYYYMMDD.log."""
    when = when or datetime.now()
    return log_dir / f"pixedit_{when.strftime('%Y%m%d')}.log"


def setup_logging(
    log_level: int = logging.INFO,
    log_to_file: bool = True,
    log_dir: Optional[Path] = None,
) -> Optional[Path]:
    """
    Configure the package logger.

    Safe to call more than once: handlers installed by an earlier call are
    replaced, not duplicated.

    Args:
        log_level: Level used unless PIXEDIT_LOG_LEVEL says otherwise.
        log_to_file: Also write to a dated file in log_dir.
        log_dir: Directory for log files. Defaults to DEFAULT_LOG_DIR.

    Returns:
        The log file in use, or None when logging to stderr only.
    """
    level = resolve_level(log_level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_pixedit_handler", False):
            logger.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    console._pixedit_handler = True
    logger.addHandler(console)

    if not log_to_file:
        return None

    path = log_file_path(log_dir or DEFAULT_LOG_DIR)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
    except OSError as e:
        logger.warning(f"Could not open log file {path}: {e}. Logging to stderr only.")
        return None

    file_handler.setFormatter(formatter)
    file_handler._pixedit_handler = True
    logger.addHandler(file_handler)
    return path


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; pass __name__."""
    return logging.getLogger(name)
