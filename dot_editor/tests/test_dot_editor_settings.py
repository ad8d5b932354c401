#!/usr/bin/env python3
"""
Tests for the JSON settings manager
"""

import json

from dot_editor.core.dot_editor_constants import (
    EXPORT_SCALE_DEFAULT,
    GRID_SIZE_DEFAULT,
    MOVE_MODE_COPY,
)
from dot_editor.core.dot_editor_settings import SettingsManager


class TestSettingsManager:
    """Test settings persistence"""

    def test_defaults(self, tmp_path):
        settings = SettingsManager(settings_dir=tmp_path)
        assert settings.get_grid_size() == GRID_SIZE_DEFAULT
        assert settings.get_export_scale() == EXPORT_SCALE_DEFAULT
        assert settings.get_move_mode() == MOVE_MODE_COPY
        assert settings.get_recent_exports() == []
        assert settings.settings_file == tmp_path / "settings.json"

    def test_set_persists(self, tmp_path):
        settings = SettingsManager(settings_dir=tmp_path)
        settings.set("grid_size", 24)

        reloaded = SettingsManager(settings_dir=tmp_path)
        assert reloaded.get_grid_size() == 24

    def test_dotted_keys(self, tmp_path):
        settings = SettingsManager(settings_dir=tmp_path)
        assert settings.get("preferences.max_recent_files") == 10
        settings.set("preferences.theme", "dark")
        assert settings.get("preferences.theme") == "dark"
        assert settings.get("preferences.missing", "x") == "x"
        assert settings.get("grid_size.nested", 5) == 5

    def test_out_of_range_values_fall_back(self, tmp_path):
        settings = SettingsManager(settings_dir=tmp_path)
        settings.set("grid_size", 500)
        settings.set("export_scale", "big")
        settings.set("move_mode", "teleport")
        assert settings.get_grid_size() == GRID_SIZE_DEFAULT
        assert settings.get_export_scale() == EXPORT_SCALE_DEFAULT
        assert settings.get_move_mode() == MOVE_MODE_COPY

    def test_corrupt_file_uses_defaults(self, tmp_path):
        (tmp_path / "settings.json").write_text("{not json")
        settings = SettingsManager(settings_dir=tmp_path)
        assert settings.get_grid_size() == GRID_SIZE_DEFAULT

    def test_partial_file_merges_defaults(self, tmp_path):
        (tmp_path / "settings.json").write_text(json.dumps({"grid_size": 16}))
        settings = SettingsManager(settings_dir=tmp_path)
        assert settings.get_grid_size() == 16
        assert settings.get_export_scale() == EXPORT_SCALE_DEFAULT

    def test_recent_files(self, tmp_path):
        settings = SettingsManager(settings_dir=tmp_path)
        settings.set("preferences.max_recent_files", 2)
        settings.add_recent_file("background", "a.png")
        settings.add_recent_file("background", "b.png")
        settings.add_recent_file("background", "a.png")
        settings.add_recent_file("background", "c.png")
        assert settings.get_recent_files("background") == ["c.png", "a.png"]

    def test_add_recent_export(self, tmp_path):
        settings = SettingsManager(settings_dir=tmp_path)
        path = tmp_path / "out" / "art.png"
        settings.add_recent_export(path)
        assert settings.get_recent_exports() == [str(path)]
        assert settings.get("last_export_dir") == str(tmp_path / "out")

    def test_reset_settings(self, tmp_path):
        settings = SettingsManager(settings_dir=tmp_path)
        settings.set("grid_size", 12)
        settings.reset_settings()
        assert SettingsManager(settings_dir=tmp_path).get_grid_size() == GRID_SIZE_DEFAULT
