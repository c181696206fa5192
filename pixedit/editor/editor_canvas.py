"""
Editor canvas widget for PixEdit.

The EditorCanvas displays the session surface (base image with the
annotation overlay on top) through the session viewport, and translates Qt
input events into session commands.

Supports:
- Zoom toward the cursor (Ctrl+wheel, touchpad pinch) and keyboard zoom shortcuts
- Pan (Space+drag)
- Tool gestures (delegated to the session's stroke renderer)
"""

from typing import Optional

from PySide6.QtCore import QEvent, QPointF, Qt
from PySide6.QtGui import (
    QColor,
    QKeyEvent,
    QMouseEvent,
    QPainter,
    QWheelEvent,
)
from PySide6.QtWidgets import QWidget

from pixedit.editor.session import EditorSession
from pixedit.services.logging_service import get_logger

# Additive zoom step for the zoom buttons and keyboard zoom
ZOOM_STEP = 0.1
# Multiplicative zoom for Ctrl+wheel
WHEEL_ZOOM_IN = 1.1
WHEEL_ZOOM_OUT = 0.9


class EditorCanvas(QWidget):
    """Widget that paints an EditorSession and feeds it pointer input."""

    def __init__(self, session: EditorSession, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._logger = get_logger(__name__)
        self._session = session

        # Interaction state
        self._panning: bool = False
        self._pan_start: Optional[QPointF] = None
        self._space_pressed: bool = False

        self._setup_widget()
        self._session.surface_updated.connect(self.update)

    def _setup_widget(self) -> None:
        """Configure widget properties."""
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMinimumSize(200, 200)
        self.setCursor(self._session.renderer.active_tool.cursor)

    @property
    def session(self) -> EditorSession:
        return self._session

    def refresh_cursor(self) -> None:
        """Use the cursor of the active tool."""
        if not self._space_pressed:
            self.setCursor(self._session.renderer.active_tool.cursor)

    # ─── Zoom Shortcuts ───────────────────────────────────────────────────

    def zoom_in(self) -> None:
        """Zoom in about the viewport center."""
        self._session.zoom_by(ZOOM_STEP)

    def zoom_out(self) -> None:
        """Zoom out about the viewport center."""
        self._session.zoom_by(-ZOOM_STEP)

    # ─── Rendering ────────────────────────────────────────────────────────

    def paintEvent(self, event) -> None:
        """Paint the surface through the viewport transform."""
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(26, 26, 26))

        surface = self._session.surface
        if surface.is_empty:
            painter.setPen(QColor(100, 100, 100))
            painter.drawText(
                self.rect(),
                Qt.AlignmentFlag.AlignCenter,
                "Open, paste or capture an image to start"
            )
            painter.end()
            return

        viewport = self._session.viewport
        scroll = viewport.scroll
        painter.translate(-scroll.x(), -scroll.y())
        painter.scale(viewport.zoom, viewport.zoom)

        # Pixel-exact when zoomed in, smooth when zoomed out
        if viewport.zoom < 1.0:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)

        painter.drawImage(0, 0, surface.base)
        painter.drawImage(0, 0, surface.overlay)
        painter.end()

    # ─── Event Handlers ───────────────────────────────────────────────────

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """Start panning or a tool gesture."""
        if event.button() != Qt.MouseButton.LeftButton:
            return

        if self._space_pressed:
            self._panning = True
            self._pan_start = event.position()
            self.setCursor(Qt.CursorShape.ClosedHandCursor)
        else:
            self._session.apply_pointer_down(event.position())

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        """Pan or extend the gesture."""
        if self._panning and self._pan_start is not None:
            delta = event.position() - self._pan_start
            self._session.pan_by(delta.x(), delta.y())
            self._pan_start = event.position()
        else:
            self._session.apply_pointer_move(event.position())

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        """Finish panning or the gesture."""
        if event.button() != Qt.MouseButton.LeftButton:
            return

        if self._panning:
            self._panning = False
            self._pan_start = None
            self.setCursor(
                Qt.CursorShape.OpenHandCursor if self._space_pressed
                else self._session.renderer.active_tool.cursor
            )
        else:
            self._session.apply_pointer_up(event.position())

    def leaveEvent(self, event) -> None:
        """Leaving the canvas finishes the gesture like a release."""
        self._session.apply_pointer_leave()
        super().leaveEvent(event)

    def wheelEvent(self, event: QWheelEvent) -> None:
        """Ctrl+wheel zooms toward the cursor."""
        if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            delta = event.angleDelta().y()
            factor = WHEEL_ZOOM_IN if delta > 0 else WHEEL_ZOOM_OUT
            self._session.zoom_toward(self._session.zoom * factor, event.position())
            event.accept()
        else:
            event.ignore()

    def event(self, event: QEvent) -> bool:
        """Touchpad pinch zooms toward the fingers."""
        if (event.type() == QEvent.Type.NativeGesture
                and event.gestureType() == Qt.NativeGestureType.ZoomNativeGesture):
            # value() is the scale change since the previous pinch event
            self._session.zoom_toward(
                self._session.zoom * (1.0 + event.value()), event.position()
            )
            event.accept()
            return True
        return super().event(event)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        """Space for panning, Ctrl shortcuts for zoom."""
        key = event.key()
        modifiers = event.modifiers()

        if key == Qt.Key.Key_Space and not event.isAutoRepeat():
            self._space_pressed = True
            self.setCursor(Qt.CursorShape.OpenHandCursor)
            return

        if modifiers & Qt.KeyboardModifier.ControlModifier:
            if key in (Qt.Key.Key_Plus, Qt.Key.Key_Equal):
                self.zoom_in()
                return
            elif key == Qt.Key.Key_Minus:
                self.zoom_out()
                return
            elif key == Qt.Key.Key_0:
                self._session.zoom_to_100()
                return

        super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent) -> None:
        if event.key() == Qt.Key.Key_Space and not event.isAutoRepeat():
            self._space_pressed = False
            self.setCursor(self._session.renderer.active_tool.cursor)
            return
        super().keyReleaseEvent(event)

    def resizeEvent(self, event) -> None:
        """Keep the viewport in sync with the widget size."""
        super().resizeEvent(event)
        self._session.set_viewport_size(self.width(), self.height())
