import logging
from datetime import datetime
from pathlib import Path

import pytest

from pixedit.services.logging_service import (
    PACKAGE_LOGGER,
    get_logger,
    log_file_path,
    resolve_level,
    setup_logging,
)


@pytest.fixture
def package_logger(monkeypatch):
    monkeypatch.delenv("PIXEDIT_LOG_LEVEL", raising=False)
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    yield logger
    for handler in list(logger.handlers):
        if handler not in saved_handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(saved_level)


def test_log_file_is_dated(tmp_path: Path) -> None:
    path = log_file_path(tmp_path, datetime(2024, 3, 9))
    assert path == tmp_path / "pixedit_20240309.log"


def test_file_and_console_handlers(package_logger, tmp_path: Path) -> None:
    path = setup_logging(log_dir=tmp_path / "logs")

    assert path is not None and path.parent == tmp_path / "logs"
    get_logger("pixedit.editor.session").info("hello log")
    for handler in package_logger.handlers:
        handler.flush()
    assert "hello log" in path.read_text(encoding="utf-8")


def test_root_logger_is_untouched(package_logger, tmp_path: Path) -> None:
    root_handlers = list(logging.getLogger().handlers)
    setup_logging(log_dir=tmp_path)
    assert logging.getLogger().handlers == root_handlers


def test_repeat_setup_does_not_duplicate_handlers(package_logger, tmp_path: Path) -> None:
    setup_logging(log_dir=tmp_path)
    count = len(package_logger.handlers)
    setup_logging(log_dir=tmp_path)
    assert len(package_logger.handlers) == count


def test_console_only(package_logger) -> None:
    assert setup_logging(log_to_file=False) is None
    assert not any(isinstance(h, logging.FileHandler) for h in package_logger.handlers)


def test_unwritable_log_dir_falls_back_to_console(package_logger, tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")

    assert setup_logging(log_dir=blocker / "logs") is None
    assert package_logger.handlers


@pytest.mark.parametrize(
    "value, expected",
    [("debug", logging.DEBUG), (" WARNING ", logging.WARNING), ("loud", logging.INFO), ("", logging.INFO)],
)
def test_env_level_override(monkeypatch, value: str, expected: int) -> None:
    monkeypatch.setenv("PIXEDIT_LOG_LEVEL", value)
    assert resolve_level(logging.INFO) == expected


def test_env_level_applies_to_package_logger(package_logger, monkeypatch) -> None:
    monkeypatch.setenv("PIXEDIT_LOG_LEVEL", "error")
    setup_logging(log_level=logging.DEBUG, log_to_file=False)
    assert package_logger.level == logging.ERROR
