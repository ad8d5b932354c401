"""
Qt configuration and shared fixtures for dot editor tests.
Widget tests run on the offscreen platform; tests marked ``gui`` need a
real display and are skipped when headless.
"""

import os
import sys
from unittest.mock import MagicMock

import pytest

# Detect if we're in a headless environment
IS_HEADLESS = (
    not os.environ.get("DISPLAY")
    or os.environ.get("QT_QPA_PLATFORM") == "offscreen"
    or os.environ.get("CI")
    or (sys.platform == "linux" and "microsoft" in os.uname().release.lower())
)

if IS_HEADLESS:
    os.environ["QT_QPA_PLATFORM"] = "offscreen"
    os.environ["QT_LOGGING_RULES"] = "*.debug=false"


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "gui: mark test as requiring GUI (skip in headless)"
    )
    config.addinivalue_line(
        "markers", "mock_gui: mark test as GUI test that runs offscreen"
    )


def pytest_collection_modifyitems(config, items):
    """Skip real-display tests when headless"""
    if IS_HEADLESS:
        skip_gui = pytest.mark.skip(reason="GUI tests skipped in headless environment")
        for item in items:
            if "gui" in item.keywords and "mock_gui" not in item.keywords:
                item.add_marker(skip_gui)


@pytest.fixture
def settings(tmp_path):
    """Settings manager writing into a temporary directory"""
    from dot_editor.core.dot_editor_settings import SettingsManager

    return SettingsManager(settings_dir=tmp_path / "settings")


@pytest.fixture
def controller(settings):
    """Controller on a default grid with mock signal handlers attached"""
    from dot_editor.core.dot_editor_controller import DotEditorController

    controller = DotEditorController(settings=settings)
    controller.error_handler = MagicMock()
    controller.error.connect(controller.error_handler)
    controller.grid_changed_handler = MagicMock()
    controller.gridChanged.connect(controller.grid_changed_handler)
    controller.selection_changed_handler = MagicMock()
    controller.selectionChanged.connect(controller.selection_changed_handler)
    return controller


@pytest.fixture
def small_controller(controller):
    """Controller on an 8x8 grid"""
    controller.resize_grid(8)
    controller.grid_changed_handler.reset_mock()
    controller.selection_changed_handler.reset_mock()
    return controller
