"""
Editor widget for PixEdit - the main editor UI component.

This widget composes the complete editor interface:
- Top toolbar with document actions, tools, style and zoom controls
- Center canvas showing the session surface
- Bottom status bar with zoom, dimensions and status messages

All pixel work is done by the EditorSession; this widget only wires
buttons, dialogs and collaborator results to it.
"""

from typing import Optional

from PySide6.QtCore import QPointF, QRectF, Qt, Signal, Slot
from PySide6.QtGui import QColor, QIcon, QImage, QPainter, QPen, QPixmap
from PySide6.QtWidgets import (
    QButtonGroup,
    QColorDialog,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QSizePolicy,
    QSpinBox,
    QToolBar,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from pixedit.core.image_io import ClipboardService, FileService
from pixedit.core.results import OperationResult, ResultStatus
from pixedit.editor.editor_canvas import EditorCanvas
from pixedit.editor.session import EditorSession
from pixedit.editor.tools import ToolStyle, ToolType
from pixedit.editor.transform import parse_dimension
from pixedit.services.config_service import ConfigService
from pixedit.services.logging_service import get_logger

MAX_LINE_WIDTH = 50

# (tool, tooltip, icon shape, key)
TOOL_CONFIGS = [
    (ToolType.PEN, "Pen", "pen", Qt.Key.Key_P),
    (ToolType.HIGHLIGHTER, "Highlighter", "highlighter", Qt.Key.Key_H),
    (ToolType.LINE, "Line", "line", Qt.Key.Key_L),
    (ToolType.RECTANGLE, "Rectangle", "rectangle", Qt.Key.Key_R),
    (ToolType.CIRCLE, "Circle", "circle", Qt.Key.Key_C),
    (ToolType.CROP, "Crop", "crop", Qt.Key.Key_K),
]


class ColorButton(QPushButton):
    """Button that shows a color and opens color picker on click."""

    color_changed = Signal(QColor)

    def __init__(self, color: QColor = QColor(255, 0, 0), parent=None):
        super().__init__(parent)
        self._color = QColor(color)
        self.setFixedSize(28, 28)
        self.setToolTip("Color")
        self.clicked.connect(self._on_click)
        self._update_style()

    @property
    def color(self) -> QColor:
        return QColor(self._color)

    @color.setter
    def color(self, value: QColor) -> None:
        self._color = QColor(value)
        self._update_style()

    def _update_style(self) -> None:
        self.setStyleSheet(f"""
            QPushButton {{
                background-color: {self._color.name()};
                border: 2px solid #555;
                border-radius: 4px;
            }}
            QPushButton:hover {{
                border-color: #888;
            }}
        """)

    def _on_click(self) -> None:
        color = QColorDialog.getColor(self._color, self, "Select Color")
        if color.isValid():
            self.color = color
            self.color_changed.emit(color)


class StatusBar(QFrame):
    """Bottom status bar showing zoom, image dimensions and messages."""

    zoom_selected = Signal(float)

    ZOOM_PRESETS = ["25%", "50%", "100%", "200%", "400%", "Fit"]

    def __init__(self, parent=None):
        super().__init__(parent)
        self._setup_ui()

    def _setup_ui(self) -> None:
        self.setFrameStyle(QFrame.Shape.StyledPanel)
        self.setFixedHeight(32)
        self.setStyleSheet("""
            QFrame {
                background-color: #2a2a2a;
                border-top: 1px solid #3a3a3a;
            }
            QLabel {
                color: #aaa;
                font-size: 11px;
            }
            QComboBox {
                background-color: #3a3a3a;
                color: #ddd;
                border: 1px solid #555;
                padding: 2px 8px;
                min-width: 70px;
            }
        """)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 0, 12, 0)
        layout.setSpacing(20)

        zoom_layout = QHBoxLayout()
        zoom_layout.setSpacing(6)
        zoom_layout.addWidget(QLabel("Zoom:"))

        self._zoom_combo = QComboBox()
        self._zoom_combo.setEditable(True)
        self._zoom_combo.addItems(self.ZOOM_PRESETS)
        self._zoom_combo.setCurrentText("100%")
        self._zoom_combo.textActivated.connect(self._on_zoom_selected)
        zoom_layout.addWidget(self._zoom_combo)
        layout.addLayout(zoom_layout)

        self._dimensions = QLabel("No image")
        layout.addWidget(self._dimensions)

        self._message = QLabel("")
        layout.addWidget(self._message)

        layout.addStretch()

    @property
    def zoom_text(self) -> str:
        return self._zoom_combo.currentText()

    @property
    def dimensions_text(self) -> str:
        return self._dimensions.text()

    @property
    def message(self) -> str:
        return self._message.text()

    def set_zoom(self, zoom: float) -> None:
        self._zoom_combo.blockSignals(True)
        self._zoom_combo.setEditText(f"{round(zoom * 100)}%")
        self._zoom_combo.blockSignals(False)

    def set_dimensions(self, width: int, height: int) -> None:
        self._dimensions.setText(f"{width} × {height}")

    def show_message(self, text: str) -> None:
        self._message.setText(text)

    def _on_zoom_selected(self, text: str) -> None:
        if text == "Fit":
            self.zoom_selected.emit(-1)  # Special value for fit
            return
        try:
            percent = float(text.replace("%", "").strip())
        except ValueError:
            return
        if percent > 0:
            self.zoom_selected.emit(percent / 100.0)


class ResizeDialog(QDialog):
    """Asks for a new width and height, prefilled with the current size."""

    def __init__(self, width: int, height: int, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Resize Image")

        self._width_edit = QLineEdit(str(width))
        self._height_edit = QLineEdit(str(height))

        form = QFormLayout(self)
        form.addRow("Width:", self._width_edit)
        form.addRow("Height:", self._height_edit)

        self._buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        self._buttons.accepted.connect(self.accept)
        self._buttons.rejected.connect(self.reject)
        form.addRow(self._buttons)

        self._width_edit.textChanged.connect(self._validate)
        self._height_edit.textChanged.connect(self._validate)

    @property
    def width_text(self) -> str:
        return self._width_edit.text()

    @property
    def height_text(self) -> str:
        return self._height_edit.text()

    def _validate(self) -> None:
        valid = (
            parse_dimension(self.width_text) is not None
            and parse_dimension(self.height_text) is not None
        )
        self._buttons.button(QDialogButtonBox.StandardButton.Ok).setEnabled(valid)


def _create_icon(shape: str, color: QColor = QColor(220, 220, 220)) -> QIcon:
    """Draw a small toolbar icon."""
    size = 24
    pixmap = QPixmap(size, size)
    pixmap.fill(Qt.GlobalColor.transparent)

    painter = QPainter(pixmap)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    pen = QPen(color, 2)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    painter.setPen(pen)
    painter.setBrush(Qt.BrushStyle.NoBrush)

    if shape == "pen":
        painter.drawLine(QPointF(5, 19), QPointF(19, 5))
        painter.drawLine(QPointF(5, 19), QPointF(4, 20))
    elif shape == "highlighter":
        thick = QPen(QColor(255, 255, 100), 6)
        thick.setCapStyle(Qt.PenCapStyle.RoundCap)
        painter.setPen(thick)
        painter.drawLine(4, 16, 20, 8)
    elif shape == "line":
        painter.drawLine(5, 19, 19, 5)
    elif shape == "rectangle":
        painter.drawRect(5, 6, 14, 12)
    elif shape == "circle":
        painter.drawEllipse(QPointF(12, 12), 7, 7)
    elif shape == "crop":
        painter.drawLine(7, 3, 7, 17)
        painter.drawLine(7, 17, 21, 17)
        painter.drawLine(3, 7, 17, 7)
        painter.drawLine(17, 7, 17, 21)
    elif shape == "resize":
        painter.drawRect(QRectF(4, 10, 10, 10))
        painter.drawLine(12, 12, 20, 4)
        painter.drawLine(20, 4, 15, 4)
        painter.drawLine(20, 4, 20, 9)

    painter.end()
    return QIcon(pixmap)


class EditorWidget(QWidget):
    """
    Main editor widget composing toolbar, canvas and status bar.

    Signals:
        capture_requested: The user asked for a screen capture. The owner
            runs the capture and hands the result to handle_capture_result().
    """

    capture_requested = Signal()

    def __init__(self, config_service: Optional[ConfigService] = None, parent=None):
        super().__init__(parent)
        self._logger = get_logger(__name__)
        self._config = config_service

        if config_service:
            min_zoom, max_zoom = config_service.zoom_limits
            self._session = EditorSession(
                max_history=config_service.max_history,
                min_zoom=min_zoom,
                max_zoom=max_zoom,
                parent=self
            )
            initial_style = ToolStyle(
                color=QColor(config_service.default_color),
                width=config_service.default_line_width
            )
        else:
            self._session = EditorSession(parent=self)
            initial_style = ToolStyle()
        self._session.set_style(initial_style)

        self._files = FileService(config_service, self)
        self._clipboard = ClipboardService()

        self._setup_ui()
        self._connect_signals()
        self._select_tool(ToolType.PEN)
        self._on_history_changed(False, False)

    @property
    def session(self) -> EditorSession:
        return self._session

    @property
    def canvas(self) -> EditorCanvas:
        return self._canvas

    @property
    def status_bar(self) -> StatusBar:
        return self._status

    def _setup_ui(self) -> None:
        """Build the UI layout."""
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        # ─── Top Toolbar ──────────────────────────────────────────────
        self._toolbar = QToolBar()
        self._toolbar.setMovable(False)
        self._toolbar.setStyleSheet("""
            QToolBar {
                background-color: #2a2a2a;
                border-bottom: 1px solid #3a3a3a;
                padding: 6px 8px;
                spacing: 4px;
            }
            QToolBar::separator {
                background-color: #444;
                width: 1px;
                margin: 4px 6px;
            }
            QToolButton {
                background-color: transparent;
                color: #ddd;
                border: none;
                border-radius: 8px;
                padding: 6px 8px;
                margin: 2px;
                min-width: 32px;
                min-height: 32px;
            }
            QToolButton:hover {
                background-color: rgba(255, 255, 255, 0.1);
            }
            QToolButton:disabled {
                color: #666;
            }
            QToolButton:checked {
                background-color: rgba(74, 144, 226, 0.3);
            }
        """)

        self._add_text_button("Open", "Open image (Ctrl+O)", self.open_image)
        self._add_text_button("Save", "Save image (Ctrl+S)", self.save_image)
        self._add_text_button("Paste", "Paste from clipboard (Ctrl+V)", self.paste_image)
        self._add_text_button("Copy", "Copy to clipboard (Ctrl+C)", self.copy_image)
        self._add_text_button("Capture", "Capture a screen region", self.capture_requested.emit)
        self._toolbar.addSeparator()

        # Tool buttons
        self._tool_group = QButtonGroup(self)
        self._tool_group.setExclusive(True)

        for tool_type, tooltip, icon_shape, key in TOOL_CONFIGS:
            btn = QToolButton()
            btn.setIcon(_create_icon(icon_shape))
            btn.setToolTip(f"{tooltip} ({chr(key.value)})")
            btn.setCheckable(True)
            btn.setProperty("tool_type", tool_type.name)
            btn.clicked.connect(lambda checked, t=tool_type: self._select_tool(t))
            self._tool_group.addButton(btn)
            self._toolbar.addWidget(btn)

        self._toolbar.addSeparator()

        # Style
        style = self._session.style
        self._color_btn = ColorButton(style.color)
        self._toolbar.addWidget(self._color_btn)

        self._width_spin = QSpinBox()
        self._width_spin.setRange(1, MAX_LINE_WIDTH)
        self._width_spin.setValue(style.width)
        self._width_spin.setToolTip("Line width")
        self._toolbar.addWidget(self._width_spin)

        self._toolbar.addSeparator()

        resize_btn = QToolButton()
        resize_btn.setIcon(_create_icon("resize"))
        resize_btn.setToolTip("Resize image")
        resize_btn.clicked.connect(self.show_resize_dialog)
        self._toolbar.addWidget(resize_btn)

        self._undo_btn = self._add_text_button("Undo", "Undo (Ctrl+Z)", self.undo)
        self._redo_btn = self._add_text_button("Redo", "Redo (Ctrl+Shift+Z)", self.redo)

        spacer = QWidget()
        spacer.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Preferred)
        self._toolbar.addWidget(spacer)

        self._add_text_button("−", "Zoom out (Ctrl+-)", lambda: self._canvas.zoom_out())
        self._add_text_button("+", "Zoom in (Ctrl+=)", lambda: self._canvas.zoom_in())
        self._add_text_button("Fit", "Fit to window", self._session.fit_to_window)
        self._add_text_button("1:1", "Actual size (Ctrl+0)", self._session.zoom_to_100)

        main_layout.addWidget(self._toolbar)

        # ─── Center Canvas ────────────────────────────────────────────
        self._canvas = EditorCanvas(self._session)
        main_layout.addWidget(self._canvas, 1)

        # ─── Bottom Status Bar ────────────────────────────────────────
        self._status = StatusBar()
        main_layout.addWidget(self._status)

    def _add_text_button(self, text: str, tooltip: str, slot) -> QToolButton:
        btn = QToolButton()
        btn.setText(text)
        btn.setToolTip(tooltip)
        btn.clicked.connect(lambda checked=False: slot())
        self._toolbar.addWidget(btn)
        return btn

    def _connect_signals(self) -> None:
        self._session.zoom_changed.connect(self._status.set_zoom)
        self._session.image_changed.connect(self._on_image_changed)
        self._session.history_changed.connect(self._on_history_changed)
        self._session.status_message.connect(self._status.show_message)
        self._status.zoom_selected.connect(self._on_zoom_selected)
        self._color_btn.color_changed.connect(self._on_style_changed)
        self._width_spin.valueChanged.connect(self._on_style_changed)

    # ─── Tool Management ──────────────────────────────────────────────────

    @property
    def current_tool(self) -> ToolType:
        return self._session.tool_type

    def _select_tool(self, tool_type: ToolType) -> None:
        self._session.set_tool(tool_type)
        self._canvas.refresh_cursor()

        for btn in self._tool_group.buttons():
            if btn.property("tool_type") == tool_type.name:
                btn.setChecked(True)
                break

    def _on_style_changed(self, *args) -> None:
        style = ToolStyle(color=self._color_btn.color, width=self._width_spin.value())
        self._session.set_style(style)

    # ─── Signal Handlers ──────────────────────────────────────────────────

    @Slot()
    def _on_image_changed(self) -> None:
        surface = self._session.surface
        self._status.set_dimensions(surface.width, surface.height)

    @Slot(bool, bool)
    def _on_history_changed(self, can_undo: bool, can_redo: bool) -> None:
        self._undo_btn.setEnabled(can_undo)
        self._redo_btn.setEnabled(can_redo)

    @Slot(float)
    def _on_zoom_selected(self, zoom: float) -> None:
        if zoom < 0:
            self._session.fit_to_window()
        else:
            self._session.zoom_to(zoom)

    # ─── Result Reporting ─────────────────────────────────────────────────

    def report(self, result: OperationResult, action: str) -> None:
        """
        Surface a collaborator result to the user.

        Cancellations and rejected geometry are silent, unavailability goes
        to the status bar and real failures get a message box.
        """
        if result.status in (ResultStatus.OK, ResultStatus.CANCELLED, ResultStatus.INVALID_GEOMETRY):
            return

        if result.status is ResultStatus.UNAVAILABLE:
            self._status.show_message(result.message)
            return

        self._logger.error(f"{action} failed: {result.message}")
        QMessageBox.warning(self, f"{action} failed", result.message or "Unknown error")

    # ─── Image Management ─────────────────────────────────────────────────

    def set_image(self, image: QImage) -> OperationResult:
        """Load an image into the editor."""
        result = self._session.load_image(image)
        if result.ok:
            self._status.show_message("")
        return result

    def open_image(self) -> None:
        result = self._files.open_image()
        if result.ok:
            result = self.set_image(result.value)
        self.report(result, "Open")

    def save_image(self) -> None:
        if not self._session.has_image:
            self._status.show_message("No image to save")
            return
        result = self._files.save_image(self._session.merged_pixels())
        if result.ok:
            self._status.show_message(f"Saved {result.path}")
        self.report(result, "Save")

    def paste_image(self) -> None:
        result = self._clipboard.paste_from_clipboard()
        if result.ok:
            result = self.set_image(result.value)
        self.report(result, "Paste")

    def copy_image(self) -> None:
        if not self._session.has_image:
            self._status.show_message("No image to copy")
            return
        result = self._clipboard.copy_to_clipboard(self._session.merged_pixels())
        if result.ok:
            self._status.show_message("Copied to clipboard")
        self.report(result, "Copy")

    def handle_capture_result(self, result: OperationResult) -> None:
        """Load a finished screen capture; other outcomes leave the document alone."""
        if result.ok:
            result = self.set_image(result.value)
        self.report(result, "Capture")

    def show_resize_dialog(self) -> None:
        if not self._session.has_image:
            self._status.show_message("No image to resize")
            return

        surface = self._session.surface
        dialog = ResizeDialog(surface.width, surface.height, self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        self.resize_image(dialog.width_text, dialog.height_text)

    def resize_image(self, width, height) -> OperationResult:
        result = self._session.resize(width, height)
        self.report(result, "Resize")
        return result

    def undo(self) -> None:
        self._session.undo()

    def redo(self) -> None:
        self._session.redo()

    # ─── Key Events ───────────────────────────────────────────────────────

    def keyPressEvent(self, event) -> None:
        """Handle keyboard shortcuts."""
        key = event.key()
        modifiers = event.modifiers()
        ctrl = bool(modifiers & Qt.KeyboardModifier.ControlModifier)
        shift = bool(modifiers & Qt.KeyboardModifier.ShiftModifier)

        if not ctrl:
            for tool_type, _tooltip, _icon, tool_key in TOOL_CONFIGS:
                if key == tool_key and not shift:
                    self._select_tool(tool_type)
                    return
            super().keyPressEvent(event)
            return

        if key == Qt.Key.Key_Z and shift:
            self.redo()
        elif key == Qt.Key.Key_Z:
            self.undo()
        elif key == Qt.Key.Key_Y:
            self.redo()
        elif key == Qt.Key.Key_O:
            self.open_image()
        elif key == Qt.Key.Key_S:
            self.save_image()
        elif key == Qt.Key.Key_V:
            self.paste_image()
        elif key == Qt.Key.Key_C:
            self.copy_image()
        else:
            super().keyPressEvent(event)
