#!/usr/bin/env python3
"""
Settings manager for the dot editor
Handles saving and loading user preferences
"""

# Standard library imports
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from .dot_editor_constants import (
    EXPORT_SCALE_DEFAULT,
    EXPORT_SCALE_MAX,
    GRID_SIZE_DEFAULT,
    GRID_SIZE_MAX,
    GRID_SIZE_MIN,
    MOVE_MODE_COPY,
    MOVE_MODES,
)
from .dot_editor_utils import debug_log


class SettingsManager:
    """Manages application settings with persistence"""

    def __init__(
        self,
        app_name: str = "dot_editor",
        settings_dir: Optional[Union[str, Path]] = None,
    ):
        self.app_name = app_name
        self.settings_file = self._get_settings_path(settings_dir)
        self.settings = self._load_settings()

    def _get_settings_path(self, settings_dir: Optional[Union[str, Path]]) -> Path:
        """Get the appropriate settings directory for the platform"""
        if settings_dir is not None:
            directory = Path(settings_dir)
        elif os.name == "nt":  # Windows
            base = Path(os.environ.get("APPDATA", os.path.expanduser("~")))
            directory = base / self.app_name
        else:  # Linux/Mac
            directory = Path(os.path.expanduser("~")) / f".{self.app_name}"

        directory.mkdir(parents=True, exist_ok=True)
        return directory / "settings.json"

    def _load_settings(self) -> dict[str, Any]:
        """Load settings from file"""
        if self.settings_file.exists():
            try:
                with open(self.settings_file) as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                # If file is corrupted, start fresh
                debug_log("SETTINGS", f"Ignoring unreadable settings: {e}", "WARNING")
                return self._get_default_settings()
            if isinstance(data, dict):
                settings = self._get_default_settings()
                settings.update(data)
                return settings
        return self._get_default_settings()

    def _get_default_settings(self) -> dict[str, Any]:
        """Get default settings"""
        return {
            "grid_size": GRID_SIZE_DEFAULT,
            "export_scale": EXPORT_SCALE_DEFAULT,
            "move_mode": MOVE_MODE_COPY,
            "last_export_dir": "",
            "window_geometry": None,
            "recent_files": {"export": [], "background": []},
            "preferences": {
                "max_recent_files": 10,
            },
        }

    def save_settings(self) -> bool:
        """Save current settings to file"""
        try:
            with open(self.settings_file, "w") as f:
                json.dump(self.settings, f, indent=2)
        except OSError as e:
            debug_log("SETTINGS", f"Could not save settings: {e}", "WARNING")
            return False
        return True

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value, dotted keys reach into nested sections"""
        keys = key.split(".")
        value = self.settings
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a setting value"""
        keys = key.split(".")
        target = self.settings
        for k in keys[:-1]:
            if not isinstance(target.get(k), dict):
                target[k] = {}
            target = target[k]
        target[keys[-1]] = value
        self.save_settings()

    def add_recent_file(self, file_type: str, file_path: Union[str, Path]) -> None:
        """Add a file to the front of a recent files list"""
        file_path = str(file_path)

        recent_files = self.settings.setdefault("recent_files", {})
        recent_list = [p for p in recent_files.get(file_type, []) if p != file_path]
        recent_list.insert(0, file_path)

        max_recent = self.get("preferences.max_recent_files", 10)
        recent_files[file_type] = recent_list[:max_recent]
        self.save_settings()

    def get_recent_files(self, file_type: str) -> list[str]:
        """Get recent files for a specific type"""
        return list(self.settings.get("recent_files", {}).get(file_type, []))

    # Engine configuration

    def get_grid_size(self) -> int:
        """Stored grid size, or the default when missing or out of range"""
        size = self.get("grid_size", GRID_SIZE_DEFAULT)
        if isinstance(size, int) and GRID_SIZE_MIN <= size <= GRID_SIZE_MAX:
            return size
        return GRID_SIZE_DEFAULT

    def get_export_scale(self) -> int:
        scale = self.get("export_scale", EXPORT_SCALE_DEFAULT)
        if isinstance(scale, int) and 1 <= scale <= EXPORT_SCALE_MAX:
            return scale
        return EXPORT_SCALE_DEFAULT

    def get_move_mode(self) -> str:
        mode = self.get("move_mode", MOVE_MODE_COPY)
        return mode if mode in MOVE_MODES else MOVE_MODE_COPY

    def add_recent_export(self, file_path: Union[str, Path]) -> None:
        """Remember an exported file and its directory"""
        self.add_recent_file("export", file_path)
        self.set("last_export_dir", os.path.dirname(str(file_path)))

    def get_recent_exports(self) -> list[str]:
        return self.get_recent_files("export")

    def reset_settings(self) -> None:
        """Reset all settings to defaults"""
        self.settings = self._get_default_settings()
        self.save_settings()
