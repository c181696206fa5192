"""
PixEdit - a small raster image editor with screen capture.

This is the main entry point for the application.
Run with: python -m pixedit.app
"""

import fcntl
import os
import signal
import sys
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QApplication

from pixedit import __version__
from pixedit.core.app_core import AppCore
from pixedit.services.logging_service import get_logger, setup_logging


# Lock file for single-instance enforcement
LOCK_FILE = Path.home() / ".cache" / "pixedit" / "pixedit.lock"

# Global app reference for signal handlers
_app: Optional[QApplication] = None
_app_core: Optional[AppCore] = None
_lock_fd: Optional[int] = None
_should_quit = False


def acquire_single_instance_lock(lock_file: Path = LOCK_FILE) -> bool:
    """
    Acquire a file lock to ensure only one instance runs.

    Returns:
        True if lock acquired (first instance), False if another instance exists.
    """
    global _lock_fd

    lock_file.parent.mkdir(parents=True, exist_ok=True)

    try:
        lock_fd = os.open(str(lock_file), os.O_CREAT | os.O_RDWR)
    except OSError:
        return False

    try:
        fcntl.flock(lock_fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
    except OSError:
        # Lock already held by another process
        os.close(lock_fd)
        return False

    os.ftruncate(lock_fd, 0)
    os.write(lock_fd, str(os.getpid()).encode())

    # Keep the descriptor open for the lifetime of the process
    _lock_fd = lock_fd
    return True


def request_quit(signum, frame) -> None:
    """Signal handler; the quit happens on the next timer tick."""
    global _should_quit
    _should_quit = True


def check_for_quit() -> None:
    """Timer callback to check if we should quit."""
    if _should_quit and _app:
        get_logger(__name__).info("Signal received, quitting...")
        _app.quit()


def main() -> int:
    """
    Main entry point for PixEdit.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    global _app, _app_core

    setup_logging()
    logger = get_logger(__name__)

    try:
        logger.info("Starting PixEdit...")

        if not acquire_single_instance_lock():
            logger.warning("Another instance of PixEdit is already running. Exiting.")
            print("PixEdit is already running.")
            return 1

        _app = QApplication(sys.argv)
        _app.setApplicationName("PixEdit")
        _app.setOrganizationName("PixEdit")
        _app.setApplicationVersion(__version__)
        # The editor hides during capture; the main window quits explicitly
        _app.setQuitOnLastWindowClosed(False)

        signal.signal(signal.SIGINT, request_quit)
        signal.signal(signal.SIGTERM, request_quit)

        # Timer to poll for quit signal (Qt event loop blocks Python signals)
        quit_timer = QTimer()
        quit_timer.timeout.connect(check_for_quit)
        quit_timer.start(100)

        _app_core = AppCore(_app)

        logger.info("PixEdit initialization complete. Entering event loop...")
        exit_code = _app.exec()

        logger.info(f"PixEdit exiting with code {exit_code}")
        return exit_code

    except Exception as e:
        logger.critical(f"Fatal error during startup: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
