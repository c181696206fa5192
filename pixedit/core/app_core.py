"""
Application core for PixEdit.

This module contains the AppCore class which is responsible for:
- Initializing all services (config, capture, hotkeys)
- Creating and showing the main window
- Applying global styling (dark theme)
- Handling the capture-to-editor flow

This is the central orchestration point for the application.
"""

from typing import Optional

from PySide6.QtCore import QObject, QTimer, Slot
from PySide6.QtGui import QColor, QPalette
from PySide6.QtWidgets import QApplication

from pixedit.core.capture_service import CaptureService
from pixedit.core.hotkey_service import HotkeyService
from pixedit.core.results import OperationResult
from pixedit.services.config_service import ConfigService
from pixedit.services.logging_service import get_logger
from pixedit.ui.main_window import MainWindow

# Time for the main window to disappear before the desktop is grabbed
HIDE_BEFORE_CAPTURE_MS = 200


class AppCore(QObject):
    """
    Central application core that wires together all components.

    The capture flow:
    1. User triggers capture (toolbar, menu or global shortcut)
    2. The main window hides so it is not part of the screenshot
    3. CaptureService shows the region overlay
    4. The window comes back and the editor loads the region, if any
    """

    def __init__(
        self,
        app: QApplication,
        config_service: Optional[ConfigService] = None
    ) -> None:
        super().__init__()
        self._app = app
        self._logger = get_logger(__name__)
        self._logger.info("Initializing PixEdit application core...")

        self._config_service = config_service or ConfigService()
        self._capture_service = CaptureService(self)
        self._hotkey_service: Optional[HotkeyService] = None

        self._apply_dark_theme()
        self._main_window = MainWindow(self._config_service)
        self._init_hotkeys()
        self._connect_signals()

        self._main_window.show()

    def _init_hotkeys(self) -> None:
        """Initialize the global capture shortcut."""
        self._hotkey_service = HotkeyService(self._config_service, self)

    def _apply_dark_theme(self) -> None:
        """Apply a dark color palette to the application."""
        palette = QPalette()

        palette.setColor(QPalette.ColorRole.Window, QColor(45, 45, 45))
        palette.setColor(QPalette.ColorRole.WindowText, QColor(220, 220, 220))
        palette.setColor(QPalette.ColorRole.Base, QColor(35, 35, 35))
        palette.setColor(QPalette.ColorRole.AlternateBase, QColor(50, 50, 50))
        palette.setColor(QPalette.ColorRole.Text, QColor(220, 220, 220))
        palette.setColor(QPalette.ColorRole.BrightText, QColor(255, 255, 255))
        palette.setColor(QPalette.ColorRole.Button, QColor(55, 55, 55))
        palette.setColor(QPalette.ColorRole.ButtonText, QColor(220, 220, 220))
        palette.setColor(QPalette.ColorRole.Highlight, QColor(80, 120, 180))
        palette.setColor(QPalette.ColorRole.HighlightedText, QColor(255, 255, 255))
        palette.setColor(QPalette.ColorRole.ToolTipBase, QColor(60, 60, 60))
        palette.setColor(QPalette.ColorRole.ToolTipText, QColor(220, 220, 220))

        for role in (
            QPalette.ColorRole.WindowText,
            QPalette.ColorRole.Text,
            QPalette.ColorRole.ButtonText,
        ):
            palette.setColor(QPalette.ColorGroup.Disabled, role, QColor(127, 127, 127))

        self._app.setPalette(palette)
        self._app.setStyleSheet("""
            QToolTip {
                background-color: #3d3d3d;
                color: #dcdcdc;
                border: 1px solid #5a5a5a;
                padding: 4px;
            }
            QMenuBar {
                background-color: #2d2d2d;
                padding: 2px;
            }
            QMenuBar::item:selected {
                background-color: #4a4a4a;
            }
            QMenu {
                background-color: #2d2d2d;
                border: 1px solid #3a3a3a;
            }
            QMenu::item:selected {
                background-color: #4a6a9a;
            }
        """)
        self._logger.debug("Dark theme applied")

    def _connect_signals(self) -> None:
        self._main_window.editor.capture_requested.connect(self.request_capture)
        self._capture_service.capture_finished.connect(self._on_capture_finished)
        if self._hotkey_service:
            self._hotkey_service.capture_triggered.connect(self.request_capture)
        self._main_window.closed.connect(self._app.quit)
        self._app.aboutToQuit.connect(self.shutdown)

    # ─── Capture Flow ─────────────────────────────────────────────────────

    @Slot()
    def request_capture(self) -> None:
        """Hide the editor and start a region capture."""
        if self._capture_service.is_capturing:
            return

        self._logger.info("Screen capture requested")
        self._main_window.hide()
        QTimer.singleShot(HIDE_BEFORE_CAPTURE_MS, self._capture_service.begin_screen_capture)

    @Slot(object)
    def _on_capture_finished(self, result: OperationResult) -> None:
        self._logger.info(f"Capture finished: {result.status.name}")

        self._main_window.show()
        self._main_window.raise_()
        self._main_window.activateWindow()
        self._main_window.editor.handle_capture_result(result)

    # ─── Application Lifecycle ────────────────────────────────────────────

    @Slot()
    def shutdown(self) -> None:
        """Stop background services before the event loop exits."""
        self._logger.info("Shutting down PixEdit...")
        self._capture_service.cancel_capture()
        if self._hotkey_service:
            self._hotkey_service.stop()

    # ─── Properties ───────────────────────────────────────────────────────

    @property
    def config(self) -> ConfigService:
        return self._config_service

    @property
    def main_window(self) -> MainWindow:
        return self._main_window

    @property
    def capture_service(self) -> CaptureService:
        return self._capture_service
