"""
Raster surface for the PixEdit editor.

A Surface holds two bitmaps of identical size:
- base: the committed pixels (opened, pasted, cropped, resized image)
- overlay: annotation strokes not yet committed to history

The base is never painted on directly. It is only replaced wholesale
(load, commit, crop, resize, undo, redo). Strokes go to the overlay.
"""

from typing import Optional, Tuple

from PySide6.QtCore import QRect, Qt
from PySide6.QtGui import QImage, QPainter

from pixedit.services.logging_service import get_logger

# Pixel format used for every bitmap the editor owns
SURFACE_FORMAT = QImage.Format.Format_ARGB32_Premultiplied


def new_bitmap(width: int, height: int) -> QImage:
    """Create a fully transparent bitmap of the given size."""
    image = QImage(width, height, SURFACE_FORMAT)
    image.fill(Qt.GlobalColor.transparent)
    return image


def to_surface_format(image: QImage) -> QImage:
    """Return a private copy of image in the surface pixel format."""
    return image.convertToFormat(SURFACE_FORMAT).copy()


class Surface:
    """
    The pair of bitmaps (base, overlay) representing the current document.

    Both bitmaps always have the same dimensions; they are resized together.
    """

    def __init__(self) -> None:
        self._logger = get_logger(__name__)
        self._base: Optional[QImage] = None
        self._overlay: Optional[QImage] = None

    # ─── Properties ───────────────────────────────────────────────────────

    @property
    def is_empty(self) -> bool:
        return self._base is None

    @property
    def width(self) -> int:
        return self._base.width() if self._base is not None else 0

    @property
    def height(self) -> int:
        return self._base.height() if self._base is not None else 0

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height) of the surface."""
        return (self.width, self.height)

    @property
    def base(self) -> Optional[QImage]:
        """The committed bitmap. Treat as read-only."""
        return self._base

    @property
    def overlay(self) -> Optional[QImage]:
        """The annotation bitmap. Painted on in place by tools."""
        return self._overlay

    # ─── Base Replacement ─────────────────────────────────────────────────

    def load_image(self, image: QImage) -> None:
        """
        Replace the document with the given image.

        The base becomes a private copy of image and the overlay is reset
        to a transparent bitmap of the same size.
        """
        if image.isNull() or image.width() <= 0 or image.height() <= 0:
            raise ValueError("Cannot load an empty image into the surface")

        self.replace_base(image)
        self._logger.debug(f"Surface loaded: {self.width}x{self.height}")

    def replace_base(self, image: QImage) -> None:
        """Swap in a new base bitmap and clear the overlay to match it."""
        self._base = to_surface_format(image)
        self._overlay = new_bitmap(self._base.width(), self._base.height())

    # ─── Overlay ──────────────────────────────────────────────────────────

    def clear_overlay(self) -> None:
        """Reset the overlay to fully transparent."""
        if self._overlay is not None:
            self._overlay.fill(Qt.GlobalColor.transparent)

    def overlay_snapshot(self) -> QImage:
        """Return a copy of the overlay as it is now."""
        if self._overlay is None:
            return QImage()
        return self._overlay.copy()

    def restore_overlay(self, snapshot: QImage) -> None:
        """Overwrite the overlay with a snapshot previously taken."""
        if self._overlay is None:
            return
        if snapshot.size() != self._overlay.size():
            raise ValueError("Overlay snapshot does not match the surface size")
        self._overlay = to_surface_format(snapshot)

    # ─── Compositing ──────────────────────────────────────────────────────

    def merged_pixels(self) -> QImage:
        """
        Return a new bitmap with the overlay composited over the base.

        This is what the user sees; save, copy, crop, resize and history
        all work from it.
        """
        if self._base is None:
            return QImage()

        result = self._base.copy()
        painter = QPainter(result)
        painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_SourceOver)
        painter.drawImage(0, 0, self._overlay)
        painter.end()
        return result

    def merged_region(self, rect: QRect) -> QImage:
        """Return the merged pixels inside rect (surface coordinates)."""
        return self.merged_pixels().copy(rect)
