#!/usr/bin/env python3
"""
Main window for the dot editor
Wires the side panels and canvas to a DotEditorController
"""

# Standard library imports
import os
import sys

# Third-party imports
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeyEvent, QKeySequence
from PyQt6.QtWidgets import (
    QApplication,
    QCheckBox,
    QFileDialog,
    QHBoxLayout,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from .dot_editor_canvas import DotCanvas
from .dot_editor_constants import (
    DIRECTION_DOWN,
    DIRECTION_LEFT,
    DIRECTION_RIGHT,
    DIRECTION_UP,
    EXPORT_DEFAULT_FILENAME,
    IMAGE_FILE_FILTER,
    LEFT_PANEL_MAX_WIDTH,
    MAIN_WINDOW_HEIGHT,
    MAIN_WINDOW_WIDTH,
    PNG_FILE_FILTER,
)
from .dot_editor_controller import DotEditorController
from .dot_editor_utils import debug_log
from .dot_editor_widgets import (
    GridSizePanel,
    PalettePanel,
    PreviewPanel,
    SelectionPanel,
    ToolPanel,
)

ARROW_KEY_DIRECTIONS = {
    Qt.Key.Key_Up: DIRECTION_UP,
    Qt.Key.Key_Down: DIRECTION_DOWN,
    Qt.Key.Key_Left: DIRECTION_LEFT,
    Qt.Key.Key_Right: DIRECTION_RIGHT,
}


class DotEditorWindow(QMainWindow):
    """Main window for the dot editor"""

    def __init__(self, controller=None):
        super().__init__()

        self.controller = controller if controller is not None else DotEditorController(self)

        self.init_ui()
        self._connect_controller_signals()
        self._refresh_palette()
        self._refresh_preview()
        self._on_selection_changed()

    def _connect_controller_signals(self):
        """Connect all controller signals to UI updates"""
        self.controller.paletteChanged.connect(self._refresh_palette)
        self.controller.gridChanged.connect(self._refresh_preview)
        self.controller.paletteChanged.connect(self._refresh_preview)
        self.controller.activeIndexChanged.connect(self.palette_panel.set_active_index)
        self.controller.toolChanged.connect(self.tool_panel.set_current_tool)
        self.controller.selectionChanged.connect(self._on_selection_changed)
        self.controller.gridResized.connect(self.grid_size_panel.set_size)
        self.controller.overlayChanged.connect(self._on_overlay_changed)
        self.controller.statusMessage.connect(self._show_status_message)
        self.controller.error.connect(self._show_error)

    def init_ui(self):
        """Initialize the user interface"""
        self.setWindowTitle("Dot Editor")
        self.resize(MAIN_WINDOW_WIDTH, MAIN_WINDOW_HEIGHT)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QHBoxLayout(central_widget)

        layout.addWidget(self._create_left_panel())

        # Canvas in a scroll area so large grids stay reachable
        self.canvas = DotCanvas(self.controller)
        scroll_area = QScrollArea()
        scroll_area.setWidget(self.canvas)
        scroll_area.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(scroll_area, 1)

        self.create_menu_bar()

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)

    def _create_left_panel(self) -> QWidget:
        """Create the left panel with tools, selection, grid size, palette and preview"""
        left_panel = QWidget()
        left_layout = QVBoxLayout(left_panel)
        left_panel.setMaximumWidth(LEFT_PANEL_MAX_WIDTH)

        self.tool_panel = ToolPanel()
        self.tool_panel.toolChanged.connect(self.controller.set_tool)
        left_layout.addWidget(self.tool_panel)

        self.selection_panel = SelectionPanel()
        self.selection_panel.moveRequested.connect(self.controller.move_selection)
        self.selection_panel.commitRequested.connect(self.controller.commit_selection)
        self.selection_panel.clearRequested.connect(self.controller.clear_selection)
        left_layout.addWidget(self.selection_panel)

        self.grid_size_panel = GridSizePanel()
        self.grid_size_panel.set_size(self.controller.get_grid_size())
        self.grid_size_panel.resizeRequested.connect(self.controller.resize_grid)
        left_layout.addWidget(self.grid_size_panel)

        self.palette_panel = PalettePanel()
        self.palette_panel.colorSelected.connect(self.controller.set_active_index)
        self.palette_panel.backgroundRequested.connect(self.controller.set_background_index)
        self.palette_panel.colorEdited.connect(self.controller.set_selected_color)
        left_layout.addWidget(self.palette_panel)

        self.overlay_checkbox = QCheckBox("Show background image")
        self.overlay_checkbox.setEnabled(False)
        self.overlay_checkbox.toggled.connect(self.controller.set_overlay_active)
        left_layout.addWidget(self.overlay_checkbox)

        self.preview_panel = PreviewPanel()
        left_layout.addWidget(self.preview_panel)

        left_layout.addStretch()
        return left_panel

    def create_menu_bar(self):
        """Create the menu bar"""
        menubar = self.menuBar()

        # File menu
        file_menu = menubar.addMenu("File")

        export_action = QAction("Export PNG...", self)
        export_action.setShortcut(QKeySequence.StandardKey.Save)
        export_action.triggered.connect(self.export_png)
        file_menu.addAction(export_action)

        background_action = QAction("Load Background Image...", self)
        background_action.triggered.connect(self.load_background_image)
        file_menu.addAction(background_action)

        clear_background_action = QAction("Clear Background Image", self)
        clear_background_action.triggered.connect(self.controller.clear_background_image)
        file_menu.addAction(clear_background_action)

        file_menu.addSeparator()
        quit_action = QAction("Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        # View menu
        view_menu = menubar.addMenu("View")

        grid_action = QAction("Show Grid", self)
        grid_action.setCheckable(True)
        grid_action.setChecked(True)
        grid_action.toggled.connect(self.canvas.set_grid_visible)
        view_menu.addAction(grid_action)

    # File operations
    def export_png(self):
        """Ask for a path and export the drawing"""
        start_dir = self.controller.settings.get("last_export_dir", "") or ""
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            "Export PNG",
            os.path.join(start_dir, EXPORT_DEFAULT_FILENAME),
            PNG_FILE_FILTER,
        )
        if file_path:
            self.controller.export_png(file_path)

    def load_background_image(self):
        """Ask for a reference image to trace over"""
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Load Background Image", "", IMAGE_FILE_FILTER
        )
        if file_path:
            self.controller.load_background_image(file_path)

    # Controller signal handlers
    def _refresh_palette(self):
        self.palette_panel.set_palette(
            self.controller.get_palette_colors(), self.controller.background_index
        )
        self.palette_panel.set_active_index(self.controller.active_index)

    def _refresh_preview(self):
        self.preview_panel.set_grid(
            self.controller.grid,
            self.controller.get_palette_colors(),
            self.controller.background_index,
        )

    def _on_selection_changed(self):
        self.selection_panel.set_selection_active(self.controller.selection is not None)

    def _on_overlay_changed(self):
        overlay = self.controller.overlay
        self.overlay_checkbox.blockSignals(True)
        self.overlay_checkbox.setEnabled(overlay.has_image)
        self.overlay_checkbox.setChecked(overlay.active)
        self.overlay_checkbox.blockSignals(False)

    def _show_status_message(self, message: str, timeout: int):
        """Show status bar message"""
        self.status_bar.showMessage(message, timeout)

    def _show_error(self, message: str):
        """Show error dialog"""
        QMessageBox.critical(self, "Error", message)

    def keyPressEvent(self, event: QKeyEvent):
        """Arrow keys move the selection; Enter applies it; Escape clears it"""
        key = event.key()
        if key in ARROW_KEY_DIRECTIONS and self.controller.selection is not None:
            self.controller.move_selection(ARROW_KEY_DIRECTIONS[key])
        elif key in (Qt.Key.Key_Return, Qt.Key.Key_Enter) and self.controller.selection is not None:
            self.controller.commit_selection()
        elif key == Qt.Key.Key_Escape:
            self.controller.clear_selection()
        else:
            super().keyPressEvent(event)


def main():
    """Main entry point"""
    app = QApplication(sys.argv)
    editor = DotEditorWindow()

    # Optional background image from the command line
    if len(sys.argv) > 1:
        file_path = sys.argv[1]
        if os.path.exists(file_path):
            editor.controller.load_background_image(file_path)
        else:
            debug_log("MAIN", f"File not found: {file_path}", "ERROR")

    editor.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
