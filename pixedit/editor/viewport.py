"""
Viewport zoom controller for the PixEdit editor.

Maps surface pixels to screen (widget) pixels:

    screen = surface * zoom - scroll

The scroll offset may be negative, which is how a surface smaller than the
viewport gets centered.
"""

from PySide6.QtCore import QPointF, QRectF, QSizeF

from pixedit.services.logging_service import get_logger

DEFAULT_MIN_ZOOM = 0.1
DEFAULT_MAX_ZOOM = 10.0

# Space kept free around the image when fitting it to the window
FIT_PADDING = 40


class Viewport:
    """
    Zoom factor and scroll offset of the canvas.

    Zoom changes can keep an anchor point visually fixed (cursor zoom) or
    zoom about the viewport center.
    """

    def __init__(
        self,
        min_zoom: float = DEFAULT_MIN_ZOOM,
        max_zoom: float = DEFAULT_MAX_ZOOM,
        padding: float = FIT_PADDING,
    ) -> None:
        if min_zoom <= 0 or max_zoom < min_zoom:
            raise ValueError(f"Invalid zoom limits: {min_zoom}..{max_zoom}")
        self._logger = get_logger(__name__)
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.padding = padding

        self._zoom: float = 1.0
        self._scroll = QPointF(0, 0)
        self._viewport_size = QSizeF(0, 0)
        self._surface_size = QSizeF(0, 0)

    # ─── State ────────────────────────────────────────────────────────────

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def scroll(self) -> QPointF:
        return QPointF(self._scroll)

    @scroll.setter
    def scroll(self, value: QPointF) -> None:
        self._scroll = QPointF(value)

    @property
    def viewport_size(self) -> QSizeF:
        return QSizeF(self._viewport_size)

    @property
    def surface_size(self) -> QSizeF:
        return QSizeF(self._surface_size)

    def set_viewport_size(self, width: float, height: float) -> None:
        self._viewport_size = QSizeF(width, height)

    def set_surface_size(self, width: float, height: float) -> None:
        self._surface_size = QSizeF(width, height)

    def clamp(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, zoom))

    # ─── Coordinate Conversion ────────────────────────────────────────────

    def surface_to_screen(self, pos: QPointF) -> QPointF:
        """Convert surface (image) coordinates to screen coordinates."""
        return QPointF(
            pos.x() * self._zoom - self._scroll.x(),
            pos.y() * self._zoom - self._scroll.y(),
        )

    def screen_to_surface(self, pos: QPointF) -> QPointF:
        """Convert screen coordinates to surface (image) coordinates."""
        return QPointF(
            (pos.x() + self._scroll.x()) / self._zoom,
            (pos.y() + self._scroll.y()) / self._zoom,
        )

    def surface_rect_on_screen(self) -> QRectF:
        """Bounding box of the rendered surface in screen coordinates."""
        top_left = self.surface_to_screen(QPointF(0, 0))
        return QRectF(
            top_left.x(),
            top_left.y(),
            self._surface_size.width() * self._zoom,
            self._surface_size.height() * self._zoom,
        )

    def viewport_center(self) -> QPointF:
        return QPointF(self._viewport_size.width() / 2, self._viewport_size.height() / 2)

    # ─── Zoom ─────────────────────────────────────────────────────────────

    def zoom_to(self, zoom: float) -> float:
        """Set the zoom level about the viewport center. Returns the new zoom."""
        self._zoom_about(self.clamp(zoom), self.viewport_center())
        return self._zoom

    def zoom_by(self, delta: float) -> float:
        """Add delta to the zoom level (clamped). Returns the new zoom."""
        return self.zoom_to(self._zoom + delta)

    def zoom_toward(self, zoom: float, anchor: QPointF) -> float:
        """
        Change zoom while keeping the pixel under anchor stationary.

        If anchor lies outside the rendered surface, zoom about the
        viewport center instead.
        """
        new_zoom = self.clamp(zoom)
        if self.surface_rect_on_screen().contains(anchor):
            self._zoom_about(new_zoom, anchor)
        else:
            self._zoom_about(new_zoom, self.viewport_center())
        return self._zoom

    def _zoom_about(self, new_zoom: float, anchor: QPointF) -> None:
        # Surface pixel under the anchor at the old zoom
        surface_pt = self.screen_to_surface(anchor)

        self._zoom = new_zoom

        # Where that pixel lands at the new zoom, then shift it back under the anchor
        moved = self.surface_to_screen(surface_pt)
        self._scroll = QPointF(
            self._scroll.x() + moved.x() - anchor.x(),
            self._scroll.y() + moved.y() - anchor.y(),
        )

    def fit_to_window(self, allow_upscale: bool = True) -> float:
        """
        Zoom so the whole surface fits the viewport, then center it.

        Args:
            allow_upscale: When False the fit zoom never exceeds 100%.

        Returns:
            The new zoom level.
        """
        img_w = self._surface_size.width()
        img_h = self._surface_size.height()
        avail_w = self._viewport_size.width() - self.padding
        avail_h = self._viewport_size.height() - self.padding

        if img_w > 0 and img_h > 0 and avail_w > 0 and avail_h > 0:
            zoom = min(avail_w / img_w, avail_h / img_h)
            if not allow_upscale:
                zoom = min(zoom, 1.0)
            self._zoom = self.clamp(zoom)
        else:
            self._logger.debug("Fit skipped: viewport or surface has no area")

        self.center()
        return self._zoom

    def reset(self) -> None:
        """Back to 100% with the surface centered."""
        self._zoom = 1.0
        self.center()

    # ─── Scrolling ────────────────────────────────────────────────────────

    def center(self) -> None:
        """Center the rendered surface in the viewport."""
        self._scroll = QPointF(
            (self._surface_size.width() * self._zoom - self._viewport_size.width()) / 2,
            (self._surface_size.height() * self._zoom - self._viewport_size.height()) / 2,
        )

    def pan_by(self, dx: float, dy: float) -> None:
        """Move the surface on screen by (dx, dy) screen pixels."""
        self._scroll = QPointF(self._scroll.x() - dx, self._scroll.y() - dy)
