"""
Crop and resize of the merged surface.

Both operations work on what the user sees (base with overlay on top) and
produce a new image that the session installs as the base. Rejected
geometry is reported as INVALID_GEOMETRY and changes nothing.
"""

from typing import Any, Callable, Optional

from PySide6.QtCore import QRect, QRectF
from PySide6.QtGui import QImage

from pixedit.core.image_io import decode_image, encode_png
from pixedit.core.results import DecodeError, OperationResult
from pixedit.editor.surface import Surface
from pixedit.services.logging_service import get_logger

logger = get_logger(__name__)

# Smallest crop selection accepted, in surface pixels
MIN_CROP_SIZE = 10

# resize_pixels(png_bytes, width, height) -> OperationResult with PNG bytes
ResizeCollaborator = Callable[[bytes, int, int], OperationResult]


def normalize_crop_rect(rect: QRectF, width: int, height: int) -> Optional[QRect]:
    """
    Turn a drag rectangle into a pixel rectangle inside the surface.

    The rectangle may have been dragged in any direction. Returns None if
    the part inside the surface is smaller than MIN_CROP_SIZE on either side.
    """
    bounds = QRectF(0, 0, width, height)
    clipped = rect.normalized().intersected(bounds)

    if clipped.width() < MIN_CROP_SIZE or clipped.height() < MIN_CROP_SIZE:
        return None

    return clipped.toRect().intersected(bounds.toRect())


def parse_dimension(value: Any) -> Optional[int]:
    """
    Validate a resize dimension.

    Accepts positive ints and strings of digits; returns None otherwise.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        text = value.strip()
        if not text.isdecimal():
            return None
        try:
            number = int(text)
        except ValueError:
            return None
        return number if number > 0 else None
    return None


def crop(surface: Surface, rect: QRectF) -> OperationResult:
    """
    Cut rect out of the merged surface.

    Returns a result whose value is the cropped image, or INVALID_GEOMETRY.
    """
    if surface.is_empty:
        return OperationResult.unavailable("No image to crop")

    region = normalize_crop_rect(rect, surface.width, surface.height)
    if region is None:
        logger.debug(f"Crop abandoned, selection too small: {rect}")
        return OperationResult.invalid_geometry(
            f"Crop selection must be at least {MIN_CROP_SIZE}x{MIN_CROP_SIZE} pixels"
        )

    cropped = surface.merged_region(region)
    logger.info(
        f"Cropped to {region.width()}x{region.height()} at ({region.x()}, {region.y()})"
    )
    return OperationResult.success(cropped)


def resize(
    surface: Surface,
    width: Any,
    height: Any,
    resize_pixels: ResizeCollaborator,
) -> OperationResult:
    """
    Rescale the merged surface through the resize collaborator.

    Args:
        surface: The surface to read the merged pixels from.
        width: Target width; positive int or string of digits.
        height: Target height; positive int or string of digits.
        resize_pixels: Codec collaborator doing the resampling.

    Returns:
        A result whose value is the resized QImage, or the collaborator's
        failure, or INVALID_GEOMETRY.
    """
    if surface.is_empty:
        return OperationResult.unavailable("No image to resize")

    target_w = parse_dimension(width)
    target_h = parse_dimension(height)
    if target_w is None or target_h is None:
        logger.debug(f"Resize abandoned, invalid size: {width!r}x{height!r}")
        return OperationResult.invalid_geometry(
            "Width and height must be positive integers"
        )

    result = resize_pixels(encode_png(surface.merged_pixels()), target_w, target_h)
    if not result.ok:
        logger.warning(f"Resize to {target_w}x{target_h} failed: {result.message}")
        return result

    try:
        resized: QImage = decode_image(result.value)
    except DecodeError as e:
        logger.warning(f"Resize returned undecodable data: {e}")
        return OperationResult.decode_failure(str(e))

    logger.info(f"Resized to {resized.width()}x{resized.height()}")
    return OperationResult.success(resized)
