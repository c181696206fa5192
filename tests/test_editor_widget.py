"""Widget-level tests: toolbar state, status bar and result reporting."""

from pathlib import Path

import pytest

from PySide6.QtCore import QCoreApplication, QPointF, Qt
from PySide6.QtGui import QNativeGestureEvent, QPointingDevice
from PySide6.QtWidgets import QDialogButtonBox, QMessageBox

from pixedit.core.results import OperationResult
from pixedit.editor.editor_canvas import EditorCanvas
from pixedit.editor.editor_widget import EditorWidget, ResizeDialog, StatusBar
from pixedit.editor.session import EditorSession
from pixedit.editor.tools import ToolType
from pixedit.services.config_service import ConfigService
from pixedit.ui.main_window import MainWindow


@pytest.fixture
def editor(qtbot, solid_image):
    widget = EditorWidget()
    qtbot.addWidget(widget)
    widget.resize(800, 600)
    widget.set_image(solid_image(200, 100))
    return widget


@pytest.fixture
def warnings(monkeypatch):
    calls = []
    monkeypatch.setattr(QMessageBox, "warning", lambda *args: calls.append(args[1:]))
    return calls


def scribble(widget: EditorWidget) -> None:
    session = widget.session
    origin = session.viewport.surface_to_screen(QPointF(10, 10))
    end = session.viewport.surface_to_screen(QPointF(120, 10))
    session.apply_pointer_down(origin)
    session.apply_pointer_move(end)
    session.apply_pointer_up(end)


def test_status_shows_dimensions(editor) -> None:
    assert editor.status_bar.dimensions_text == "200 × 100"


def test_tool_keys_switch_tools(qtbot, editor) -> None:
    assert editor.current_tool is ToolType.PEN
    qtbot.keyClick(editor, Qt.Key.Key_H)
    assert editor.current_tool is ToolType.HIGHLIGHTER
    qtbot.keyClick(editor, Qt.Key.Key_K)
    assert editor.current_tool is ToolType.CROP
    qtbot.keyClick(editor, Qt.Key.Key_C)
    assert editor.current_tool is ToolType.CIRCLE


def test_undo_button_follows_history(qtbot, editor) -> None:
    assert not editor._undo_btn.isEnabled()
    scribble(editor)
    assert editor._undo_btn.isEnabled()
    assert not editor._redo_btn.isEnabled()

    qtbot.keyClick(editor, Qt.Key.Key_Z, Qt.KeyboardModifier.ControlModifier)
    assert not editor._undo_btn.isEnabled()
    assert editor._redo_btn.isEnabled()

    qtbot.keyClick(editor, Qt.Key.Key_Y, Qt.KeyboardModifier.ControlModifier)
    assert editor._undo_btn.isEnabled()


def test_invalid_resize_is_silent(editor, warnings) -> None:
    result = editor.resize_image("0", "50")
    assert not result.ok
    assert editor.session.surface.size == (200, 100)
    assert warnings == []


def test_resize_updates_dimensions(editor) -> None:
    assert editor.resize_image(64, 32).ok
    assert editor.status_bar.dimensions_text == "64 × 32"
    assert editor.status_bar.message == "Resized to 64 × 32"


def test_unavailable_goes_to_status_bar(editor, warnings) -> None:
    editor.report(OperationResult.unavailable("Clipboard does not contain an image"), "Paste")
    assert editor.status_bar.message == "Clipboard does not contain an image"
    assert warnings == []


def test_failure_shows_message_box(editor, warnings) -> None:
    editor.report(OperationResult.decode_failure("broken.png: bad data"), "Open")
    assert warnings == [("Open failed", "broken.png: bad data")]


def test_cancel_is_silent(editor, warnings) -> None:
    editor.report(OperationResult.cancelled(), "Save")
    assert editor.status_bar.message == ""
    assert warnings == []


def test_capture_result_loads_image(editor, solid_image) -> None:
    editor.handle_capture_result(OperationResult.success(solid_image(30, 40)))
    assert editor.session.surface.size == (30, 40)
    assert not editor.session.history.can_undo


def test_cancelled_capture_keeps_document(editor) -> None:
    scribble(editor)
    editor.handle_capture_result(OperationResult.cancelled())
    assert editor.session.surface.size == (200, 100)
    assert editor.session.history.can_undo


def test_copy_without_image(qtbot) -> None:
    widget = EditorWidget()
    qtbot.addWidget(widget)
    widget.copy_image()
    assert widget.status_bar.message == "No image to copy"


def test_capture_button_requests_capture(qtbot, editor) -> None:
    with qtbot.waitSignal(editor.capture_requested):
        editor.capture_requested.emit()


def test_status_bar_zoom_presets(qtbot) -> None:
    bar = StatusBar()
    qtbot.addWidget(bar)
    bar.set_zoom(2.0)
    assert bar.zoom_text == "200%"

    with qtbot.waitSignal(bar.zoom_selected) as blocker:
        bar._on_zoom_selected("Fit")
    assert blocker.args == [-1]

    with qtbot.waitSignal(bar.zoom_selected) as blocker:
        bar._on_zoom_selected("150 %")
    assert blocker.args == [1.5]


def test_resize_dialog_validates_input(qtbot) -> None:
    dialog = ResizeDialog(200, 100)
    qtbot.addWidget(dialog)
    ok_button = dialog._buttons.button(QDialogButtonBox.StandardButton.Ok)

    dialog._width_edit.setText("abc")
    assert not ok_button.isEnabled()
    dialog._width_edit.setText("²")
    assert not ok_button.isEnabled()
    dialog._width_edit.setText("320")
    assert ok_button.isEnabled()
    assert (dialog.width_text, dialog.height_text) == ("320", "100")


def test_editor_uses_config_defaults(qtbot, tmp_path: Path) -> None:
    config = ConfigService(tmp_path / "config.json")
    config.set("default_line_width", 7)
    config.set("max_history", 4)

    widget = EditorWidget(config)
    qtbot.addWidget(widget)

    assert widget.session.style.width == 7
    assert widget.session.history.max_size == 4


def test_main_window_title_and_bounds(qtbot, tmp_path: Path, solid_image) -> None:
    config = ConfigService(tmp_path / "config.json")
    config.window_bounds = (900, 700)

    window = MainWindow(config)
    qtbot.addWidget(window)
    assert (window.width(), window.height()) == (900, 700)

    window.editor.set_image(solid_image(30, 20))
    assert window.windowTitle() == "PixEdit - 30×20"

    window.show()
    window.resize(1000, 640)
    size = (window.width(), window.height())
    with qtbot.waitSignal(window.closed):
        window.close()
    assert ConfigService(config.path).window_bounds == size


@pytest.fixture
def canvas(qtbot, solid_image):
    session = EditorSession()
    widget = EditorCanvas(session)
    qtbot.addWidget(widget)
    widget.resize(400, 300)
    widget.show()
    qtbot.waitExposed(widget)
    session.load_image(solid_image(200, 100, 0xFFFFFFFF))
    return widget


def test_canvas_mouse_drag_commits(qtbot, canvas) -> None:
    session = canvas.session
    start = session.viewport.surface_to_screen(QPointF(10, 50)).toPoint()
    end = session.viewport.surface_to_screen(QPointF(150, 50)).toPoint()

    qtbot.mousePress(canvas, Qt.MouseButton.LeftButton, pos=start)
    qtbot.mouseMove(canvas, end)
    qtbot.mouseRelease(canvas, Qt.MouseButton.LeftButton, pos=end)

    assert not session.renderer.is_active
    assert session.history.can_undo


def test_canvas_keyboard_zoom(qtbot, canvas) -> None:
    session = canvas.session
    assert session.zoom == 1.0

    qtbot.keyClick(canvas, Qt.Key.Key_Equal, Qt.KeyboardModifier.ControlModifier)
    assert session.zoom == pytest.approx(1.1)
    assert not session.fit_mode

    qtbot.keyClick(canvas, Qt.Key.Key_Minus, Qt.KeyboardModifier.ControlModifier)
    qtbot.keyClick(canvas, Qt.Key.Key_Minus, Qt.KeyboardModifier.ControlModifier)
    assert session.zoom == pytest.approx(0.9)

    qtbot.keyClick(canvas, Qt.Key.Key_0, Qt.KeyboardModifier.ControlModifier)
    assert session.zoom == 1.0


def test_canvas_pinch_zooms_toward_fingers(canvas) -> None:
    session = canvas.session
    fingers = QPointF(150, 125)
    under_fingers = session.viewport.screen_to_surface(fingers)

    pinch = QNativeGestureEvent(
        Qt.NativeGestureType.ZoomNativeGesture,
        QPointingDevice.primaryPointingDevice(),
        2,
        fingers,
        fingers,
        fingers,
        0.5,
        QPointF(0, 0),
    )
    QCoreApplication.sendEvent(canvas, pinch)

    assert session.zoom == pytest.approx(1.5)
    assert not session.fit_mode
    after = session.viewport.screen_to_surface(fingers)
    assert after.x() == pytest.approx(under_fingers.x())
    assert after.y() == pytest.approx(under_fingers.y())


def test_canvas_ignores_other_native_gestures(canvas) -> None:
    rotate = QNativeGestureEvent(
        Qt.NativeGestureType.RotateNativeGesture,
        QPointingDevice.primaryPointingDevice(),
        2,
        QPointF(150, 125),
        QPointF(150, 125),
        QPointF(150, 125),
        15.0,
        QPointF(0, 0),
    )
    QCoreApplication.sendEvent(canvas, rotate)
    assert canvas.session.zoom == 1.0
