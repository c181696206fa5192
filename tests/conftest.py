"""Pytest configuration.

The editor core paints with QPainter on QImages, and the widget tests need
a QApplication. A single one is created for the whole session before any
test module imports Qt widgets, using the offscreen platform so the suite
runs headless.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

_APP: Any | None = None


def pytest_configure(config) -> None:  # noqa: ARG001
    """Ensure a QApplication exists before collecting/running tests."""
    from PySide6.QtWidgets import QApplication

    global _APP

    app = QApplication.instance()
    if app is None:
        # Keep a strong ref so it isn't GC'd mid-session.
        _APP = QApplication([])
    else:
        _APP = app


def pytest_sessionfinish(session, exitstatus) -> None:  # noqa: ARG001
    """Attempt a clean Qt shutdown at the end of the run."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        return

    app.quit()
    app.processEvents()


@pytest.fixture(autouse=True)
def _debug_logging(caplog):
    caplog.set_level(logging.DEBUG, logger="pixedit")
    yield


def make_image(width: int, height: int, color: int = 0xFF3366AA):
    """Solid ARGB image."""
    from PySide6.QtGui import QImage

    img = QImage(width, height, QImage.Format.Format_ARGB32)
    img.fill(color)
    return img


@pytest.fixture
def solid_image():
    return make_image


@pytest.fixture
def session():
    """EditorSession with a 200x100 white image in a 400x300 viewport."""
    from pixedit.editor.session import EditorSession

    s = EditorSession()
    s.set_viewport_size(400, 300)
    s.load_image(make_image(200, 100, 0xFFFFFFFF))
    return s
