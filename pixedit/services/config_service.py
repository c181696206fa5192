"""
Configuration service for PixEdit.

This module handles loading, saving, and managing application settings.
Configuration is stored as JSON in ~/.config/pixedit/config.json following
the XDG Base Directory Specification.
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pixedit.services.logging_service import get_logger

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "pixedit"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    # Last main window size, restored on startup
    "window_bounds": {"width": 1200, "height": 800},
    # Global capture hotkey, e.g. "ctrl+shift+x". Empty disables it.
    "capture_shortcut": "ctrl+shift+x",
    # Number of snapshots kept for undo/redo
    "max_history": 50,
    "min_zoom": 0.1,
    "max_zoom": 10.0,
    # Initial drawing style
    "default_color": "#ff0000",
    "default_line_width": 2,
    # Directory the open/save dialogs start in
    "last_directory": str(Path.home() / "Pictures"),
}


class ConfigService:
    """
    Service for managing application configuration.

    Handles loading, saving, and accessing configuration values.
    Provides sensible defaults when config file is missing or corrupted.
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize the ConfigService.

        Args:
            config_path: Optional path to config file. Defaults to
                        ~/.config/pixedit/config.json
        """
        self._logger = get_logger(__name__)
        self._config_path = config_path or DEFAULT_CONFIG_FILE
        self._config: Dict[str, Any] = {}

        self._load()

    def _load(self) -> None:
        """Load configuration from file, using defaults if needed."""
        self._config = copy.deepcopy(DEFAULT_CONFIG)

        if not self._config_path.exists():
            self._logger.info(
                f"Config file not found at {self._config_path}. Using defaults."
            )
            self._save_to_file()
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                loaded_config = json.load(f)

            if isinstance(loaded_config, dict):
                self._deep_merge(self._config, loaded_config)
                self._logger.info(f"Configuration loaded from {self._config_path}")
                # Persist any default keys missing from the file
                self._save_to_file()
            else:
                raise ValueError("Config file does not contain a valid JSON object")

        except (json.JSONDecodeError, ValueError) as e:
            self._logger.warning(
                f"Config file corrupted or invalid: {e}. Recreating with defaults."
            )
            self._config = copy.deepcopy(DEFAULT_CONFIG)
            self._save_to_file()

        except (OSError, PermissionError) as e:
            self._logger.warning(
                f"Could not read config file: {e}. Using defaults."
            )

    def _deep_merge(self, base: Dict, override: Dict) -> None:
        """Recursively merge override dict into base dict."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _save_to_file(self) -> None:
        """Save current configuration to file."""
        try:
            self._config_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self._config_path, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=2)

            self._logger.debug(f"Configuration saved to {self._config_path}")

        except (OSError, PermissionError) as e:
            self._logger.error(f"Could not save config file: {e}")

    @property
    def path(self) -> Path:
        return self._config_path

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: The configuration key to retrieve.
            default: Default value if key doesn't exist.

        Returns:
            The configuration value, or default if not found.
        """
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value (in memory only).

        Call save() to persist changes to disk.
        """
        self._config[key] = value
        self._logger.debug(f"Config key '{key}' set to '{value}'")

    def save(self) -> None:
        """Persist current configuration to disk."""
        self._save_to_file()

    # ─── Window Settings ──────────────────────────────────────────────────

    @property
    def window_bounds(self) -> Tuple[int, int]:
        """Get the saved (width, height) of the main window."""
        bounds = self.get("window_bounds", DEFAULT_CONFIG["window_bounds"])
        try:
            return int(bounds["width"]), int(bounds["height"])
        except (KeyError, TypeError, ValueError):
            self._logger.warning(f"Invalid window bounds in config: {bounds!r}")
            default = DEFAULT_CONFIG["window_bounds"]
            return default["width"], default["height"]

    @window_bounds.setter
    def window_bounds(self, size: Tuple[int, int]) -> None:
        width, height = size
        self.set("window_bounds", {"width": int(width), "height": int(height)})

    # ─── Capture Settings ─────────────────────────────────────────────────

    @property
    def capture_shortcut(self) -> str:
        """Get the global capture shortcut ("" when disabled)."""
        return self.get("capture_shortcut", "") or ""

    # ─── Editor Settings ──────────────────────────────────────────────────

    @property
    def max_history(self) -> int:
        return int(self.get("max_history", DEFAULT_CONFIG["max_history"]))

    @property
    def zoom_limits(self) -> Tuple[float, float]:
        """Get (min_zoom, max_zoom)."""
        return (
            float(self.get("min_zoom", DEFAULT_CONFIG["min_zoom"])),
            float(self.get("max_zoom", DEFAULT_CONFIG["max_zoom"])),
        )

    @property
    def default_color(self) -> str:
        return self.get("default_color", DEFAULT_CONFIG["default_color"])

    @property
    def default_line_width(self) -> int:
        return int(self.get("default_line_width", DEFAULT_CONFIG["default_line_width"]))

    @property
    def last_directory(self) -> str:
        return self.get("last_directory", DEFAULT_CONFIG["last_directory"])
