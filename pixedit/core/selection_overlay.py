"""
Region selection overlay for screen capture.

A frameless fullscreen window showing a frozen copy of the desktop. The user
drags out a rectangle; the overlay crops it from the frozen copy and emits
the pixels. Escape, a right click or a tiny drag cancels.
"""

from typing import Optional

from PySide6.QtCore import QPoint, QRect, Qt, Signal
from PySide6.QtGui import QColor, QCursor, QImage, QKeyEvent, QMouseEvent, QPainter, QPen
from PySide6.QtWidgets import QWidget

from pixedit.services.logging_service import get_logger

# Drags this small or smaller are treated as an accidental click
MIN_SELECTION_SIZE = 5


class SelectionOverlay(QWidget):
    """
    Fullscreen drag-to-select window over a frozen desktop image.

    Signals:
        region_selected: Emitted with the cropped QImage.
        selection_cancelled: Emitted when the user backs out.
    """

    region_selected = Signal(QImage)
    selection_cancelled = Signal()

    DIM_COLOR = QColor(0, 0, 0, 110)
    BORDER_COLOR = QColor(80, 160, 255)
    BORDER_WIDTH = 2

    def __init__(self, desktop: QImage, geometry: QRect, parent: Optional[QWidget] = None) -> None:
        """
        Args:
            desktop: Frozen image of the whole virtual desktop.
            geometry: Virtual desktop geometry the image was taken from.
            parent: Optional parent widget.
        """
        super().__init__(parent)
        self._logger = get_logger(__name__)
        self._desktop = desktop
        self._desktop_geometry = geometry

        self._anchor: Optional[QPoint] = None
        self._selection = QRect()
        self._finished = False

        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.BypassWindowManagerHint
        )
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
        self.setCursor(QCursor(Qt.CursorShape.CrossCursor))
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

    @property
    def selection(self) -> QRect:
        return QRect(self._selection)

    def begin(self) -> None:
        """Show the overlay over the whole desktop and grab input."""
        self.setGeometry(self._desktop_geometry)
        self.showFullScreen()
        self.raise_()
        self.activateWindow()
        self.setFocus()
        self.grabMouse()
        self.grabKeyboard()
        self._logger.debug(f"Selection overlay shown over {self._desktop_geometry}")

    # ─── Painting ─────────────────────────────────────────────────────────

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.drawImage(0, 0, self._desktop)
        painter.fillRect(self.rect(), self.DIM_COLOR)

        if not self._selection.isEmpty():
            # Undimmed selection
            painter.drawImage(self._selection, self._desktop, self._selection)

            painter.setPen(QPen(self.BORDER_COLOR, self.BORDER_WIDTH))
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawRect(self._selection)
            self._draw_dimensions(painter)

        painter.end()

    def _draw_dimensions(self, painter: QPainter) -> None:
        label = f"{self._selection.width()} × {self._selection.height()}"
        x = self._selection.left()
        y = self._selection.bottom() + 20
        if y > self.height() - 10:
            y = self._selection.top() - 8

        painter.setPen(QColor(0, 0, 0, 200))
        painter.drawText(x + 1, y + 1, label)
        painter.setPen(QColor(255, 255, 255))
        painter.drawText(x, y, label)

    # ─── Input ────────────────────────────────────────────────────────────

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.RightButton:
            self._cancel()
        elif event.button() == Qt.MouseButton.LeftButton:
            self._anchor = event.position().toPoint()
            self._selection = QRect(self._anchor, self._anchor)
            self.update()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self._anchor is not None:
            self._selection = QRect(self._anchor, event.position().toPoint()).normalized()
            self.update()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton or self._anchor is None:
            return

        self._selection = QRect(self._anchor, event.position().toPoint()).normalized()
        self._anchor = None

        if self._selection.width() > MIN_SELECTION_SIZE and self._selection.height() > MIN_SELECTION_SIZE:
            self._accept()
        else:
            self._logger.info("Selection too small, cancelling capture")
            self._cancel()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if event.key() == Qt.Key.Key_Escape:
            self._cancel()
        else:
            super().keyPressEvent(event)

    # ─── Completion ───────────────────────────────────────────────────────

    def _accept(self) -> None:
        region = self._selection.intersected(self._desktop.rect())
        image = self._desktop.copy(region)
        self._logger.info(f"Selected region {region.width()}x{region.height()}")
        self._finish()
        self.region_selected.emit(image)

    def _cancel(self) -> None:
        self._finish()
        self.selection_cancelled.emit()

    def _finish(self) -> None:
        self._finished = True
        self.releaseMouse()
        self.releaseKeyboard()
        self.close()

    def closeEvent(self, event) -> None:
        self.releaseMouse()
        self.releaseKeyboard()
        # Closed by the window manager or cancel_capture(): still a cancel
        if not self._finished:
            self._finished = True
            self.selection_cancelled.emit()
        super().closeEvent(event)
