"""
Main window for PixEdit.

Hosts the EditorWidget, offers the menu bar and remembers its size between
runs through the config service.
"""

from typing import Optional

from PySide6.QtCore import Signal
from PySide6.QtGui import QAction, QImage
from PySide6.QtWidgets import QMainWindow, QMessageBox, QWidget

from pixedit import __version__
from pixedit.editor.editor_widget import EditorWidget
from pixedit.services.config_service import ConfigService
from pixedit.services.logging_service import get_logger

MIN_WINDOW_WIDTH = 640
MIN_WINDOW_HEIGHT = 480


class MainWindow(QMainWindow):
    """
    Main application window for PixEdit.

    Features:
    - Dark themed UI
    - File, Edit and View menus mirroring the toolbar
    - Window size restored from and saved to the config

    Signals:
        closed: Emitted after the window accepted a close request.
    """

    closed = Signal()

    def __init__(
        self,
        config_service: Optional[ConfigService] = None,
        parent: Optional[QWidget] = None
    ) -> None:
        super().__init__(parent)
        self._logger = get_logger(__name__)
        self._config = config_service

        self._editor = EditorWidget(self._config, self)
        self.setCentralWidget(self._editor)
        self._editor.session.image_changed.connect(self._update_title)

        self._setup_window()
        self._setup_menu_bar()
        self._logger.info("MainWindow initialized")

    @property
    def editor(self) -> EditorWidget:
        return self._editor

    def _setup_window(self) -> None:
        """Title and size, restoring the last window bounds."""
        self.setWindowTitle("PixEdit")
        self.setMinimumSize(MIN_WINDOW_WIDTH, MIN_WINDOW_HEIGHT)

        if self._config:
            width, height = self._config.window_bounds
        else:
            width, height = 1200, 800
        self.resize(max(width, MIN_WINDOW_WIDTH), max(height, MIN_WINDOW_HEIGHT))

    def _add_action(self, menu, text: str, slot, shortcut_hint: str = "") -> QAction:
        # Keys are handled by the editor widget; the hint is display only
        label = f"{text}\t{shortcut_hint}" if shortcut_hint else text
        action = QAction(label, self)
        action.triggered.connect(lambda checked=False: slot())
        menu.addAction(action)
        return action

    def _setup_menu_bar(self) -> None:
        """Create and configure the menu bar."""
        editor = self._editor
        session = editor.session
        menu_bar = self.menuBar()

        # ─── File Menu ────────────────────────────────────────────────
        file_menu = menu_bar.addMenu("&File")
        self._add_action(file_menu, "&Open...", editor.open_image, "Ctrl+O")
        self._add_action(file_menu, "&Save As...", editor.save_image, "Ctrl+S")
        file_menu.addSeparator()
        self._add_action(file_menu, "Capture &Screen Region", editor.capture_requested.emit)
        file_menu.addSeparator()
        self._add_action(file_menu, "&Quit", self.close)

        # ─── Edit Menu ────────────────────────────────────────────────
        edit_menu = menu_bar.addMenu("&Edit")
        self._undo_action = self._add_action(edit_menu, "&Undo", editor.undo, "Ctrl+Z")
        self._redo_action = self._add_action(edit_menu, "&Redo", editor.redo, "Ctrl+Shift+Z")
        edit_menu.addSeparator()
        self._add_action(edit_menu, "&Copy Image", editor.copy_image, "Ctrl+C")
        self._add_action(edit_menu, "&Paste Image", editor.paste_image, "Ctrl+V")
        edit_menu.addSeparator()
        self._add_action(edit_menu, "Re&size Image...", editor.show_resize_dialog)

        self._undo_action.setEnabled(False)
        self._redo_action.setEnabled(False)
        session.history_changed.connect(self._on_history_changed)

        # ─── View Menu ────────────────────────────────────────────────
        view_menu = menu_bar.addMenu("&View")
        self._add_action(view_menu, "Zoom &In", editor.canvas.zoom_in, "Ctrl+=")
        self._add_action(view_menu, "Zoom &Out", editor.canvas.zoom_out, "Ctrl+-")
        self._add_action(view_menu, "Actual &Size", session.zoom_to_100, "Ctrl+0")
        self._add_action(view_menu, "&Fit to Window", session.fit_to_window)

        # ─── Help Menu ────────────────────────────────────────────────
        help_menu = menu_bar.addMenu("&Help")
        self._add_action(help_menu, "&About", self._show_about_dialog)

    # ─── Public Methods ───────────────────────────────────────────────────

    def load_image_in_editor(self, image: QImage) -> None:
        """Load an image and bring the window to the front."""
        self._editor.set_image(image)
        self.show()
        self.raise_()
        self.activateWindow()

    # ─── Handlers ─────────────────────────────────────────────────────────

    def _update_title(self) -> None:
        surface = self._editor.session.surface
        self.setWindowTitle(f"PixEdit - {surface.width}×{surface.height}")

    def _on_history_changed(self, can_undo: bool, can_redo: bool) -> None:
        self._undo_action.setEnabled(can_undo)
        self._redo_action.setEnabled(can_redo)

    def _show_about_dialog(self) -> None:
        about_text = (
            "<h2>PixEdit</h2>"
            f"<p><b>Version:</b> {__version__}</p>"
            "<p>A small raster image editor: open, paste or capture an image, "
            "annotate it, crop or resize it, and save or copy the result.</p>"
            "<p><b>Tools:</b> P pen, H highlighter, L line, R rectangle, "
            "C circle, K crop</p>"
            "<p><b>View:</b> Ctrl+wheel zooms toward the cursor, "
            "Space+drag pans</p>"
        )
        QMessageBox.about(self, "About PixEdit", about_text)

    def closeEvent(self, event) -> None:
        """Persist the window size before closing."""
        if self._config:
            self._config.window_bounds = (self.width(), self.height())
            self._config.save()
            self._logger.debug(f"Saved window bounds {self.width()}x{self.height()}")
        self._logger.info("MainWindow closing")
        super().closeEvent(event)
        self.closed.emit()
