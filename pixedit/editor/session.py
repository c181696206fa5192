"""
Editor session: all state of one open document.

The session owns the raster surface, the history stack, the viewport and
the stroke renderer, and exposes the command interface the canvas drives:

    apply_pointer_down / apply_pointer_move / apply_pointer_up / apply_pointer_leave

Pointer positions given to these commands are in screen (widget)
coordinates and are mapped through the viewport before reaching the tools.
"""

from typing import Any, Optional

from PySide6.QtCore import QObject, QPointF, QRectF, Signal
from PySide6.QtGui import QImage

from pixedit.core.image_io import resize_pixels
from pixedit.core.results import OperationResult
from pixedit.editor import transform
from pixedit.editor.history import DEFAULT_MAX_HISTORY, HistoryEntry, HistoryStack
from pixedit.editor.renderer import StrokeRenderer
from pixedit.editor.surface import Surface
from pixedit.editor.tools import ToolStyle, ToolType
from pixedit.editor.viewport import DEFAULT_MAX_ZOOM, DEFAULT_MIN_ZOOM, Viewport
from pixedit.services.logging_service import get_logger


class EditorSession(QObject):
    """
    One document being edited.

    Signals:
        image_changed: The surface was replaced (load, crop, resize, or an
            undo/redo that changed its size).
        surface_updated: Pixels changed and the canvas should repaint.
        zoom_changed: Zoom level changed.
        history_changed: (can_undo, can_redo) after any history move.
        status_message: Short non-fatal message for the status bar.
    """

    image_changed = Signal()
    surface_updated = Signal()
    zoom_changed = Signal(float)
    history_changed = Signal(bool, bool)
    status_message = Signal(str)

    def __init__(
        self,
        max_history: int = DEFAULT_MAX_HISTORY,
        min_zoom: float = DEFAULT_MIN_ZOOM,
        max_zoom: float = DEFAULT_MAX_ZOOM,
        resize_collaborator: transform.ResizeCollaborator = resize_pixels,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._logger = get_logger(__name__)

        self._surface = Surface()
        self._history = HistoryStack(max_history)
        self._viewport = Viewport(min_zoom, max_zoom)
        self._renderer = StrokeRenderer(self)
        self._resize_pixels = resize_collaborator

        # Fit mode follows the window size until the user zooms manually
        self._fit_mode: bool = True
        self._fit_upscale: bool = False

    # ─── Components ───────────────────────────────────────────────────────

    @property
    def surface(self) -> Surface:
        return self._surface

    @property
    def history(self) -> HistoryStack:
        return self._history

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def renderer(self) -> StrokeRenderer:
        return self._renderer

    @property
    def has_image(self) -> bool:
        return not self._surface.is_empty

    @property
    def fit_mode(self) -> bool:
        return self._fit_mode

    # ─── Document Lifecycle ───────────────────────────────────────────────

    def load_image(self, image: QImage) -> OperationResult:
        """
        Start a new document from image.

        Clears the overlay and history (the image becomes entry 0) and
        resets the zoom to fit the window, never above 100%.
        """
        if image is None or image.isNull():
            return OperationResult.decode_failure("Image could not be decoded")

        self._renderer.cancel()
        self._surface.load_image(image)
        self._history.reset(self._surface.merged_pixels())

        self._viewport.set_surface_size(self._surface.width, self._surface.height)
        self._fit_mode = True
        self._fit_upscale = False
        self._viewport.fit_to_window(allow_upscale=False)

        self._logger.info(f"Image loaded: {self._surface.width}x{self._surface.height}")
        self.image_changed.emit()
        self.zoom_changed.emit(self._viewport.zoom)
        self._emit_history()
        self.surface_updated.emit()
        return OperationResult.success(image)

    def merged_pixels(self) -> QImage:
        """What the user currently sees, for save and copy."""
        return self._surface.merged_pixels()

    # ─── History ──────────────────────────────────────────────────────────

    def commit(self) -> None:
        """
        Flatten the overlay into the base and record a snapshot.

        Called after every finished gesture, crop and resize.
        """
        if not self.has_image:
            return

        snapshot = self._surface.merged_pixels()
        self._surface.replace_base(snapshot)
        self._history.commit(snapshot)

        self._emit_history()
        self.surface_updated.emit()

    def undo(self) -> bool:
        """Step back one snapshot. Returns False if nothing to undo."""
        if self._renderer.is_active:
            return False
        entry = self._history.undo()
        if entry is None:
            return False
        self._restore(entry)
        self._logger.debug(f"Undo to entry {self._history.current_index}")
        return True

    def redo(self) -> bool:
        """Step forward one snapshot. Returns False if nothing to redo."""
        if self._renderer.is_active:
            return False
        entry = self._history.redo()
        if entry is None:
            return False
        self._restore(entry)
        self._logger.debug(f"Redo to entry {self._history.current_index}")
        return True

    def _restore(self, entry: HistoryEntry) -> None:
        # Restoring must never commit
        old_size = self._surface.size
        self._surface.replace_base(entry.image)

        if self._surface.size != old_size:
            self._viewport.set_surface_size(self._surface.width, self._surface.height)
            self._refit()
            self.image_changed.emit()

        self._emit_history()
        self.surface_updated.emit()

    def _emit_history(self) -> None:
        self.history_changed.emit(self._history.can_undo, self._history.can_redo)

    # ─── Crop / Resize ────────────────────────────────────────────────────

    def crop(self, rect: QRectF) -> OperationResult:
        """
        Crop to rect (surface coordinates, any drag direction).

        Selections under the minimum size are abandoned: the preview is
        cleared and nothing else changes.
        """
        if self._renderer.is_active:
            return OperationResult.unavailable("A gesture is in progress")

        result = transform.crop(self._surface, rect)
        if not result.ok:
            self._surface.clear_overlay()
            self.surface_updated.emit()
            return result

        self._install(result.value)
        self.status_message.emit(f"Cropped to {self._surface.width} × {self._surface.height}")
        return result

    def resize(self, width: Any, height: Any) -> OperationResult:
        """
        Rescale the image to width x height.

        Invalid sizes are ignored; collaborator failures leave the document
        untouched and are returned to the caller.
        """
        if self._renderer.is_active:
            return OperationResult.unavailable("A gesture is in progress")

        result = transform.resize(self._surface, width, height, self._resize_pixels)
        if result.ok:
            self._install(result.value)
            self.status_message.emit(f"Resized to {self._surface.width} × {self._surface.height}")
        return result

    def _install(self, image: QImage) -> None:
        """Make image the new base, commit it and refit the view."""
        self._surface.replace_base(image)
        self._history.commit(self._surface.merged_pixels())

        self._viewport.set_surface_size(self._surface.width, self._surface.height)
        self._refit()

        self.image_changed.emit()
        self._emit_history()
        self.surface_updated.emit()

    # ─── Tools ────────────────────────────────────────────────────────────

    @property
    def tool_type(self) -> ToolType:
        return self._renderer.tool_type

    def set_tool(self, tool_type: ToolType) -> None:
        self._renderer.set_tool(tool_type)

    @property
    def style(self) -> ToolStyle:
        return self._renderer.style

    def set_style(self, style: ToolStyle) -> None:
        self._renderer.style = style

    # ─── Pointer Commands ─────────────────────────────────────────────────

    def apply_pointer_down(self, screen_pos: QPointF) -> bool:
        handled = self._renderer.pointer_down(self._viewport.screen_to_surface(screen_pos))
        if handled:
            self.surface_updated.emit()
        return handled

    def apply_pointer_move(self, screen_pos: QPointF) -> bool:
        handled = self._renderer.pointer_move(self._viewport.screen_to_surface(screen_pos))
        if handled:
            self.surface_updated.emit()
        return handled

    def apply_pointer_up(self, screen_pos: QPointF) -> bool:
        if not self._renderer.is_active:
            return False
        self._renderer.pointer_up(self._viewport.screen_to_surface(screen_pos))
        self.surface_updated.emit()
        return True

    def apply_pointer_leave(self) -> bool:
        if not self._renderer.is_active:
            return False
        self._renderer.pointer_leave()
        self.surface_updated.emit()
        return True

    # ─── Viewport ─────────────────────────────────────────────────────────

    @property
    def zoom(self) -> float:
        return self._viewport.zoom

    def set_viewport_size(self, width: float, height: float) -> None:
        """Called by the canvas whenever it is resized."""
        self._viewport.set_viewport_size(width, height)
        if self._fit_mode:
            self._refit()
        else:
            self._viewport.center()
        self.surface_updated.emit()

    def zoom_to(self, zoom: float) -> float:
        self._fit_mode = False
        return self._after_zoom(self._viewport.zoom_to(zoom))

    def zoom_by(self, delta: float) -> float:
        self._fit_mode = False
        return self._after_zoom(self._viewport.zoom_by(delta))

    def zoom_toward(self, zoom: float, anchor: QPointF) -> float:
        self._fit_mode = False
        return self._after_zoom(self._viewport.zoom_toward(zoom, anchor))

    def zoom_to_100(self) -> float:
        self._fit_mode = False
        self._viewport.reset()
        return self._after_zoom(self._viewport.zoom)

    def fit_to_window(self) -> float:
        self._fit_mode = True
        self._fit_upscale = True
        return self._after_zoom(self._viewport.fit_to_window())

    def pan_by(self, dx: float, dy: float) -> None:
        self._viewport.pan_by(dx, dy)
        self.surface_updated.emit()

    def _refit(self) -> None:
        if self._fit_mode:
            self._viewport.fit_to_window(allow_upscale=self._fit_upscale)
        else:
            self._viewport.center()
        self.zoom_changed.emit(self._viewport.zoom)

    def _after_zoom(self, zoom: float) -> float:
        self.zoom_changed.emit(zoom)
        self.surface_updated.emit()
        return zoom
