"""
Screen capture service for PixEdit.

The capture is asynchronous: begin_screen_capture() freezes the whole
virtual desktop, shows a SelectionOverlay on top of it and returns
immediately. The outcome arrives later through capture_finished as an
OperationResult:

- OK with the selected QImage
- CANCELLED when the user backs out or cancel_capture() is called
- UNAVAILABLE when there is no screen to grab
- FAILED when grabbing the screens produced nothing
"""

from typing import Optional

from PySide6.QtCore import QObject, QRect, Signal
from PySide6.QtGui import QGuiApplication, QImage, QPainter

from pixedit.core.results import OperationResult
from pixedit.core.selection_overlay import SelectionOverlay
from pixedit.editor.surface import SURFACE_FORMAT
from pixedit.services.logging_service import get_logger


class CaptureService(QObject):
    """
    Region capture across all monitors.

    Signals:
        capture_finished: Emitted once per capture with an OperationResult.
    """

    capture_finished = Signal(object)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._logger = get_logger(__name__)
        self._overlay: Optional[SelectionOverlay] = None

    @property
    def is_capturing(self) -> bool:
        return self._overlay is not None

    def begin_screen_capture(self) -> None:
        """Start a region capture; the result is delivered by capture_finished."""
        if self.is_capturing:
            self._logger.debug("Capture already in progress")
            return

        self._logger.info("Starting screen capture")

        primary_screen = QGuiApplication.primaryScreen()
        if primary_screen is None:
            self._logger.error("No screen available for capture")
            self.capture_finished.emit(OperationResult.unavailable("No screen available"))
            return

        virtual_geo = primary_screen.virtualGeometry()
        desktop = self._capture_virtual_desktop(virtual_geo)
        if desktop.isNull():
            self._logger.error("Failed to capture the desktop")
            self.capture_finished.emit(OperationResult.failure("Screen capture failed"))
            return

        self._overlay = SelectionOverlay(desktop, virtual_geo)
        self._overlay.region_selected.connect(self._on_region_selected)
        self._overlay.selection_cancelled.connect(self._on_selection_cancelled)
        self._overlay.begin()

    def cancel_capture(self) -> None:
        """Abort a running capture; capture_finished reports CANCELLED."""
        if self._overlay is not None:
            self._logger.info("Capture cancelled by caller")
            self._overlay.close()

    def _capture_virtual_desktop(self, virtual_geo: QRect) -> QImage:
        """Grab every screen into one image laid out like the virtual desktop."""
        if virtual_geo.isEmpty():
            return QImage()

        result = QImage(virtual_geo.size(), SURFACE_FORMAT)
        result.fill(0)

        painter = QPainter(result)
        for screen in QGuiApplication.screens():
            screen_geo = screen.geometry()
            self._logger.debug(f"Capturing screen {screen.name()}: {screen_geo}")
            pixmap = screen.grabWindow(0)
            painter.drawPixmap(
                screen_geo.x() - virtual_geo.x(),
                screen_geo.y() - virtual_geo.y(),
                pixmap
            )
        painter.end()
        return result

    def _on_region_selected(self, image: QImage) -> None:
        self._overlay = None
        self._logger.info(f"Captured region {image.width()}x{image.height()}")
        self.capture_finished.emit(OperationResult.success(image))

    def _on_selection_cancelled(self) -> None:
        self._overlay = None
        self._logger.debug("Capture cancelled")
        self.capture_finished.emit(OperationResult.cancelled())
