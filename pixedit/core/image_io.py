"""
File, codec and clipboard collaborators for PixEdit.

Everything that touches the outside world (dialogs, disk, clipboard, image
encoding) lives here. Public operations return an OperationResult and never
raise into the editor; the low-level codec helpers raise DecodeError.
"""

from pathlib import Path
from typing import Optional

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, Qt
from PySide6.QtGui import QGuiApplication, QImage
from PySide6.QtWidgets import QFileDialog, QWidget

from pixedit.core.results import DecodeError, OperationResult
from pixedit.services.config_service import ConfigService
from pixedit.services.logging_service import get_logger

logger = get_logger(__name__)

OPEN_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.tif *.tiff *.webp)"
SAVE_FILTERS = "PNG (*.png);;JPEG (*.jpg *.jpeg);;BMP (*.bmp)"


# ─── Codec ────────────────────────────────────────────────────────────────

def encode_png(image: QImage) -> bytes:
    """Encode an image as PNG bytes."""
    data = QByteArray()
    buffer = QBuffer(data)
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    ok = image.save(buffer, "PNG")
    buffer.close()
    if not ok:
        raise ValueError("PNG encoding failed")
    return bytes(data)


def decode_image(data: bytes) -> QImage:
    """
    Decode image bytes in any format Qt can read.

    Raises:
        DecodeError: If data is empty or not a readable image.
    """
    if not data:
        raise DecodeError("No image data")
    image = QImage.fromData(data)
    if image.isNull():
        raise DecodeError("Data is not a supported image")
    return image


def resize_pixels(png: bytes, width: int, height: int) -> OperationResult:
    """
    Resample encoded image bytes to width x height.

    Returns:
        OK with PNG bytes, DECODE_FAILURE for bad input, FAILED otherwise.
    """
    if width <= 0 or height <= 0:
        return OperationResult.failure(f"Invalid target size {width}x{height}")

    try:
        source = decode_image(png)
    except DecodeError as e:
        return OperationResult.decode_failure(str(e))

    scaled = source.scaled(
        width,
        height,
        Qt.AspectRatioMode.IgnoreAspectRatio,
        Qt.TransformationMode.SmoothTransformation,
    )
    try:
        return OperationResult.success(encode_png(scaled))
    except ValueError as e:
        return OperationResult.failure(str(e))


def load_image_file(path: str) -> OperationResult:
    """Read and decode an image file."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        logger.error(f"Could not read {path}: {e}")
        return OperationResult.failure(f"Could not read {path}: {e.strerror or e}")

    try:
        image = decode_image(data)
    except DecodeError as e:
        logger.warning(f"Could not decode {path}: {e}")
        return OperationResult.decode_failure(f"{Path(path).name}: {e}")

    logger.info(f"Opened {path} ({image.width()}x{image.height()})")
    return OperationResult.success(image, path=path)


def save_image_file(image: QImage, path: str) -> OperationResult:
    """Write an image; the format follows the file extension (PNG if none)."""
    target = Path(path)
    if not target.suffix:
        target = target.with_suffix(".png")

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return OperationResult.failure(f"Could not create {target.parent}: {e}")

    if not image.save(str(target)):
        logger.error(f"Failed to save image to {target}")
        return OperationResult.failure(f"Failed to save image to {target}")

    logger.info(f"Saved image to {target}")
    return OperationResult.success(path=str(target))


# ─── File Dialogs ─────────────────────────────────────────────────────────

class FileService:
    """
    Open/save dialogs backed by QFileDialog.

    Remembers the last directory in the config when one is given.
    """

    def __init__(
        self,
        config_service: Optional[ConfigService] = None,
        parent: Optional[QWidget] = None
    ) -> None:
        self._logger = get_logger(__name__)
        self._config = config_service
        self._parent = parent

    def _start_dir(self) -> str:
        if self._config:
            return self._config.last_directory
        return str(Path.home())

    def _remember_dir(self, path: str) -> None:
        if self._config:
            self._config.set("last_directory", str(Path(path).parent))
            self._config.save()

    def open_image(self) -> OperationResult:
        """Ask the user for an image file and decode it."""
        path, _ = QFileDialog.getOpenFileName(
            self._parent, "Open Image", self._start_dir(), OPEN_FILTER
        )
        if not path:
            return OperationResult.cancelled()

        self._remember_dir(path)
        return load_image_file(path)

    def save_image(self, image: QImage) -> OperationResult:
        """Ask the user for a destination and write the image there."""
        if image.isNull():
            return OperationResult.unavailable("No image to save")

        default_path = str(Path(self._start_dir()) / "untitled.png")
        path, _ = QFileDialog.getSaveFileName(
            self._parent, "Save Image", default_path, SAVE_FILTERS
        )
        if not path:
            return OperationResult.cancelled()

        self._remember_dir(path)
        return save_image_file(image, path)


# ─── Clipboard ────────────────────────────────────────────────────────────

class ClipboardService:
    """Image paste/copy through the system clipboard."""

    def __init__(self) -> None:
        self._logger = get_logger(__name__)

    def paste_from_clipboard(self) -> OperationResult:
        clipboard = QGuiApplication.clipboard()
        image = clipboard.image()
        if image.isNull():
            self._logger.info("Clipboard has no image")
            return OperationResult.unavailable("Clipboard does not contain an image")

        self._logger.info(f"Pasted image from clipboard: {image.width()}x{image.height()}")
        return OperationResult.success(image)

    def copy_to_clipboard(self, image: QImage) -> OperationResult:
        if image.isNull():
            return OperationResult.failure("Nothing to copy")

        QGuiApplication.clipboard().setImage(image)
        self._logger.info("Copied image to clipboard")
        return OperationResult.success()
