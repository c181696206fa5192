from pathlib import Path

import pytest

from PySide6.QtGui import QGuiApplication, QImage
from PySide6.QtWidgets import QFileDialog

from pixedit.core import image_io
from pixedit.core.image_io import (
    ClipboardService,
    FileService,
    decode_image,
    encode_png,
    load_image_file,
    resize_pixels,
    save_image_file,
)
from pixedit.core.results import DecodeError, ResultStatus
from pixedit.services.config_service import ConfigService


def test_encode_png_produces_png_signature(solid_image) -> None:
    data = encode_png(solid_image(8, 6))
    assert data.startswith(b"\x89PNG")
    decoded = decode_image(data)
    assert (decoded.width(), decoded.height()) == (8, 6)


def test_decode_rejects_garbage() -> None:
    with pytest.raises(DecodeError):
        decode_image(b"definitely not an image")
    with pytest.raises(DecodeError):
        decode_image(b"")


def test_resize_pixels_scales(solid_image) -> None:
    result = resize_pixels(encode_png(solid_image(40, 20)), 10, 30)
    assert result.ok
    out = decode_image(result.value)
    assert (out.width(), out.height()) == (10, 30)


def test_resize_pixels_bad_input() -> None:
    assert resize_pixels(b"junk", 10, 10).status is ResultStatus.DECODE_FAILURE
    assert resize_pixels(b"junk", 0, 10).status is ResultStatus.FAILED


def test_save_and_load_round_trip(tmp_path: Path, solid_image) -> None:
    target = tmp_path / "nested" / "out"
    saved = save_image_file(solid_image(12, 7, 0xFF112233), str(target))

    assert saved.ok
    assert saved.path.endswith("out.png")
    assert Path(saved.path).is_file()

    loaded = load_image_file(saved.path)
    assert loaded.ok
    assert loaded.path == saved.path
    assert loaded.value.pixel(3, 3) & 0xFFFFFF == 0x112233


def test_load_missing_file_fails(tmp_path: Path) -> None:
    result = load_image_file(str(tmp_path / "missing.png"))
    assert result.status is ResultStatus.FAILED
    assert result.is_error


def test_load_corrupt_file_is_decode_failure(tmp_path: Path) -> None:
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"\x89PNG but not really")
    result = load_image_file(str(bad))
    assert result.status is ResultStatus.DECODE_FAILURE
    assert "bad.png" in result.message


def test_open_dialog_cancel(monkeypatch) -> None:
    monkeypatch.setattr(QFileDialog, "getOpenFileName", staticmethod(lambda *a, **k: ("", "")))
    assert FileService().open_image().status is ResultStatus.CANCELLED


def test_open_dialog_remembers_directory(monkeypatch, tmp_path: Path, solid_image) -> None:
    path = tmp_path / "pics" / "a.png"
    path.parent.mkdir()
    solid_image(5, 5).save(str(path))
    monkeypatch.setattr(QFileDialog, "getOpenFileName", staticmethod(lambda *a, **k: (str(path), "")))

    config = ConfigService(tmp_path / "config.json")
    result = FileService(config).open_image()

    assert result.ok
    assert config.last_directory == str(path.parent)


def test_save_dialog(monkeypatch, tmp_path: Path, solid_image) -> None:
    target = tmp_path / "saved.png"
    monkeypatch.setattr(QFileDialog, "getSaveFileName", staticmethod(lambda *a, **k: (str(target), "")))

    result = FileService().save_image(solid_image(5, 5))
    assert result.ok
    assert target.is_file()


def test_save_dialog_cancel(monkeypatch, solid_image) -> None:
    monkeypatch.setattr(QFileDialog, "getSaveFileName", staticmethod(lambda *a, **k: ("", "")))
    assert FileService().save_image(solid_image(5, 5)).status is ResultStatus.CANCELLED


def test_save_null_image_unavailable() -> None:
    assert FileService().save_image(QImage()).status is ResultStatus.UNAVAILABLE


def test_clipboard_round_trip(solid_image) -> None:
    clipboard = ClipboardService()
    assert clipboard.copy_to_clipboard(solid_image(9, 4)).ok

    pasted = clipboard.paste_from_clipboard()
    assert pasted.ok
    assert (pasted.value.width(), pasted.value.height()) == (9, 4)


def test_paste_without_image_is_unavailable() -> None:
    QGuiApplication.clipboard().setText("just text")
    result = ClipboardService().paste_from_clipboard()
    assert result.status is ResultStatus.UNAVAILABLE
    assert not result.is_error


def test_module_filters_cover_png() -> None:
    assert "*.png" in image_io.OPEN_FILTER
    assert "PNG" in image_io.SAVE_FILTERS
