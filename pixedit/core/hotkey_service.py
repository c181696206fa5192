"""
Global capture hotkey for PixEdit.

Listens for the configured capture shortcut with pynput, so it fires even
when no PixEdit window has focus. The shortcut is only registered when it
passes validation (at least one modifier plus one other key).

Note: pynput's listener works on X11, Windows and macOS. Wayland sessions
do not deliver global key events to it.
"""

import threading
from typing import Optional, Set

from PySide6.QtCore import QMetaObject, QObject, Qt, Signal, Slot

from pixedit.core.shortcuts import parse_shortcut
from pixedit.services.config_service import ConfigService
from pixedit.services.logging_service import get_logger

try:
    from pynput import keyboard
    PYNPUT_AVAILABLE = True
except ImportError:
    PYNPUT_AVAILABLE = False


def _modifier_keys():
    return {
        "ctrl": keyboard.Key.ctrl_l,
        "shift": keyboard.Key.shift_l,
        "alt": keyboard.Key.alt_l,
        "super": keyboard.Key.cmd,
    }


def _named_key(name: str):
    # Names in NAMED_KEYS match pynput attribute names
    return getattr(keyboard.Key, name)


class HotkeyService(QObject):
    """
    Registers the global capture shortcut.

    Signals:
        capture_triggered: Emitted on the GUI thread when the shortcut is pressed.
    """

    capture_triggered = Signal()

    def __init__(
        self,
        config_service: ConfigService,
        parent: Optional[QObject] = None
    ) -> None:
        super().__init__(parent)
        self._logger = get_logger(__name__)
        self._config = config_service

        self._listener = None
        self._pressed: Set = set()
        self._combo: Optional[frozenset] = None
        self._lock = threading.Lock()

        if not PYNPUT_AVAILABLE:
            self._logger.warning(
                "pynput not available. The global capture shortcut will not work."
            )
            return

        self._combo = self._build_combo(self._config.capture_shortcut)
        if self._combo is not None:
            self._start_listener()

    @property
    def is_registered(self) -> bool:
        return self._combo is not None

    def _build_combo(self, shortcut: str) -> Optional[frozenset]:
        """Translate a shortcut string into the pynput keys to watch for."""
        if not shortcut:
            self._logger.info("No capture shortcut configured")
            return None

        parsed = parse_shortcut(shortcut)
        if parsed is None:
            self._logger.warning(
                f"Ignoring capture shortcut '{shortcut}': it needs at least one "
                "modifier and exactly one other key"
            )
            return None

        modifiers, key = parsed
        mapping = _modifier_keys()
        keys = {mapping[name] for name in modifiers}
        if len(key) == 1:
            keys.add(keyboard.KeyCode.from_char(key))
        else:
            try:
                keys.add(_named_key(key))
            except AttributeError:
                self._logger.warning(f"Key '{key}' is not supported on this platform")
                return None

        self._logger.info(f"Capture shortcut registered: {shortcut}")
        return frozenset(keys)

    def _start_listener(self) -> None:
        self._listener = keyboard.Listener(
            on_press=self._on_key_press,
            on_release=self._on_key_release
        )
        self._listener.daemon = True
        self._listener.start()
        self._logger.debug("Global hotkey listener started")

    def _normalize_key(self, key):
        """Fold right-hand modifiers and letter case onto one key each."""
        modifier_map = {
            keyboard.Key.ctrl_r: keyboard.Key.ctrl_l,
            keyboard.Key.ctrl: keyboard.Key.ctrl_l,
            keyboard.Key.shift_r: keyboard.Key.shift_l,
            keyboard.Key.shift: keyboard.Key.shift_l,
            keyboard.Key.alt_r: keyboard.Key.alt_l,
            keyboard.Key.alt_gr: keyboard.Key.alt_l,
            keyboard.Key.alt: keyboard.Key.alt_l,
            keyboard.Key.cmd_r: keyboard.Key.cmd,
            keyboard.Key.cmd_l: keyboard.Key.cmd,
        }
        if isinstance(key, keyboard.KeyCode) and key.char:
            return keyboard.KeyCode.from_char(key.char.lower())
        return modifier_map.get(key, key)

    def _on_key_press(self, key) -> None:
        with self._lock:
            self._pressed.add(self._normalize_key(key))
            if self._combo is not None and frozenset(self._pressed) == self._combo:
                QMetaObject.invokeMethod(
                    self,
                    "_emit_capture",
                    Qt.ConnectionType.QueuedConnection
                )

    def _on_key_release(self, key) -> None:
        with self._lock:
            self._pressed.discard(self._normalize_key(key))

    @Slot()
    def _emit_capture(self) -> None:
        self._logger.debug("Capture shortcut pressed")
        self.capture_triggered.emit()

    def stop(self) -> None:
        """Stop the listener thread."""
        if self._listener:
            self._listener.stop()
            self._listener = None
            self._logger.info("Global hotkey listener stopped")
