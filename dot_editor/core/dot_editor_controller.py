#!/usr/bin/env python3
"""
Controller for the dot editor
Owns the editing session and coordinates between models, managers and views
"""

# Standard library imports
import os
from pathlib import Path
from typing import Any, Optional, Union

# Third-party imports
import numpy as np
from PIL import Image
from PyQt6.QtCore import QObject, pyqtSignal

from .dot_editor_constants import BACKGROUND_INDEX_DEFAULT, STATUS_MESSAGE_TIMEOUT
from .dot_editor_exceptions import (
    ExportError,
    ImageFormatError,
    InvalidPaletteIndexError,
    InvalidSizeInputError,
    ValidationError,
    format_error_message,
)
from .dot_editor_managers import (
    BackgroundOverlay,
    ExportManager,
    SelectionManager,
    ToolManager,
    ToolType,
    resolve_tool_type,
)
from .dot_editor_models import (
    Color,
    GridModel,
    MoveOffset,
    PaletteModel,
    Selection,
    validate_grid_size,
)
from .dot_editor_settings import SettingsManager
from .dot_editor_utils import debug_color, debug_exception, debug_log, parse_color


class DotEditorController(QObject):
    """Controller coordinating all dot editor operations"""

    # Signals
    gridChanged = pyqtSignal()
    gridResized = pyqtSignal(int)  # new grid size
    paletteChanged = pyqtSignal()
    selectionChanged = pyqtSignal()
    overlayChanged = pyqtSignal()
    toolChanged = pyqtSignal(str)  # tool name
    activeIndexChanged = pyqtSignal(int)  # palette index
    statusMessage = pyqtSignal(str, int)  # message, timeout
    error = pyqtSignal(str)

    def __init__(self, parent=None, settings: Optional[SettingsManager] = None):
        super().__init__(parent)

        # Initialize settings
        self.settings = settings if settings is not None else SettingsManager()

        # Initialize models
        self.palette_model = PaletteModel()
        self.grid_model = GridModel(
            size=self.settings.get_grid_size(), fill_index=self._background_fill_index()
        )

        # Initialize managers
        self.selection_manager = SelectionManager(self.settings.get_move_mode())
        self.tool_manager = ToolManager(
            self.selection_manager, palette_length=len(self.palette_model)
        )
        self.overlay = BackgroundOverlay()
        self.export_manager = ExportManager(self.settings.get_export_scale())

    def _background_fill_index(self) -> int:
        """Index new grids are filled with"""
        background_index = self.palette_model.background_index
        return BACKGROUND_INDEX_DEFAULT if background_index is None else background_index

    # Read accessors
    @property
    def grid(self) -> np.ndarray:
        return self.grid_model.data

    @property
    def selection(self) -> Optional[Selection]:
        return self.selection_manager.selection

    @property
    def move_offset(self) -> MoveOffset:
        return self.selection_manager.offset

    @property
    def active_index(self) -> int:
        return self.tool_manager.current_color

    @property
    def background_index(self) -> Optional[int]:
        return self.palette_model.background_index

    def get_grid_size(self) -> int:
        return self.grid_model.size

    def get_current_tool_name(self) -> str:
        """Get the name of the current tool"""
        return self.tool_manager.current_tool_name

    def get_palette_colors(self) -> list[Color]:
        """Stored palette colors"""
        return list(self.palette_model.colors)

    def get_display_colors(self) -> list[Color]:
        """Palette colors as a renderer should show them"""
        overlay_active = self.overlay.active
        return [
            self.palette_model.display_color(i, overlay_active)
            for i in range(len(self.palette_model))
        ]

    def get_preview_cells(self) -> list[tuple[int, int, int]]:
        """Translated cells of a pending selection move"""
        return self.selection_manager.preview_cells(self.grid_model)

    # Tool operations
    def set_tool(self, tool_name: Union[str, ToolType]) -> None:
        """Set the current editing tool"""
        tool_type = resolve_tool_type(tool_name)
        if tool_type is None:
            self.error.emit(f"Unknown tool: {tool_name}")
            return

        # Choosing select again while it is active drops the selection
        # and falls back to the brush
        if tool_type == ToolType.SELECT and self.tool_manager.current_tool == ToolType.SELECT:
            tool_type = ToolType.BRUSH

        had_selection = (
            self.selection_manager.selection is not None or self.selection_manager.is_dragging
        )
        changed_cells = self.tool_manager.set_tool(
            tool_type, self.grid_model, self.palette_model.background_index
        )

        if changed_cells:
            self.gridChanged.emit()
        if had_selection and self.selection_manager.selection is None:
            self.selectionChanged.emit()

        name = self.tool_manager.current_tool_name
        debug_log("CONTROLLER", f"Tool changed to: {name}")
        self.toolChanged.emit(name)

    def set_active_index(self, index: int) -> bool:
        """Set the palette index used by brush and fill"""
        if not self.tool_manager.set_color(index):
            return False
        debug_log("CONTROLLER", f"Active palette index set to: {index}")
        self.activeIndexChanged.emit(self.tool_manager.current_color)
        return True

    # Pointer events
    def handle_pointer_down(self, x: int, y: int) -> None:
        """Handle pointer press on cell (x, y)"""
        tool_type = self.tool_manager.current_tool
        result = self.tool_manager.press(x, y, self.grid_model)

        if tool_type == ToolType.EYEDROPPER:
            if result is not None:
                self.activeIndexChanged.emit(result)
        elif tool_type == ToolType.SELECT:
            self.selectionChanged.emit()
        elif result:
            self.gridChanged.emit()

    def handle_pointer_move(self, x: int, y: int) -> None:
        """Handle pointer move to cell (x, y)"""
        tool_type = self.tool_manager.current_tool
        result = self.tool_manager.move(x, y, self.grid_model)

        if tool_type == ToolType.SELECT:
            if result:
                self.selectionChanged.emit()
        elif result:
            self.gridChanged.emit()

    def handle_pointer_up(self, x: int, y: int) -> None:
        """Handle pointer release on cell (x, y)"""
        tool_type = self.tool_manager.current_tool
        was_dragging = self.selection_manager.is_dragging
        self.tool_manager.release(x, y, self.grid_model)

        if tool_type == ToolType.SELECT and was_dragging:
            self.selectionChanged.emit()

    # Selection operations
    def move_selection(self, direction: str) -> bool:
        """Shift the pending selection move one cell"""
        try:
            moved = self.selection_manager.move(direction)
        except ValidationError as e:
            self.error.emit(format_error_message("move selection", e))
            return False

        if moved:
            self.selectionChanged.emit()
        return moved

    def commit_selection(self) -> list[tuple[int, int]]:
        """Bake the pending move into the grid and drop the selection"""
        had_selection = self.selection_manager.selection is not None
        changed_cells = self.selection_manager.commit(
            self.grid_model, self.palette_model.background_index
        )
        self._after_selection_update(had_selection, changed_cells)
        return changed_cells

    def clear_selection(self) -> list[tuple[int, int]]:
        """Commit any pending move, then drop the selection"""
        had_selection = (
            self.selection_manager.selection is not None or self.selection_manager.is_dragging
        )
        changed_cells = self.selection_manager.clear(
            self.grid_model, self.palette_model.background_index
        )
        self._after_selection_update(had_selection, changed_cells)
        return changed_cells

    def _after_selection_update(
        self, had_selection: bool, changed_cells: list[tuple[int, int]]
    ) -> None:
        if changed_cells:
            self.gridChanged.emit()
        if had_selection:
            self.selectionChanged.emit()

    def set_move_mode(self, move_mode: str) -> bool:
        """Choose whether committing a move copies or relocates cells"""
        try:
            self.selection_manager.set_move_mode(move_mode)
        except ValidationError as e:
            self.error.emit(format_error_message("set move mode", e))
            return False
        self.settings.set("move_mode", move_mode)
        return True

    # Grid operations
    def resize_grid(self, value: Any) -> bool:
        """
        Reallocate the grid at a new size filled with the background index
        Invalid sizes are reported through the error signal and change nothing
        """
        try:
            size = validate_grid_size(value)
            self.grid_model.resize(size, self._background_fill_index())
        except InvalidSizeInputError as e:
            debug_log("CONTROLLER", f"Rejected grid size {value!r}: {e}", "WARNING")
            self.error.emit(format_error_message("resize grid", e))
            return False

        self.selection_manager.discard()
        self.tool_manager.end_stroke()
        self.overlay.resize(size)
        self.settings.set("grid_size", size)

        self.gridResized.emit(size)
        self.gridChanged.emit()
        self.selectionChanged.emit()
        self.statusMessage.emit(f"New {size}x{size} grid", STATUS_MESSAGE_TIMEOUT)
        return True

    # Palette operations
    def set_palette_color(self, index: int, color: Any) -> bool:
        """Set the color of a palette slot from a tuple or color text"""
        try:
            changed = self.palette_model.set(index, parse_color(color))
        except InvalidPaletteIndexError as e:
            debug_log("CONTROLLER", f"Ignoring palette edit: {e}", "WARNING")
            return False

        if changed:
            debug_log("CONTROLLER", f"Palette edit: {debug_color(index, self.palette_model.get(index))}")
            self.paletteChanged.emit()
        return changed

    def set_selected_color(self, color: Any) -> bool:
        """Set the color of the active palette slot"""
        return self.set_palette_color(self.tool_manager.current_color, color)

    def set_background_index(self, index: int) -> Optional[int]:
        """Flag a palette slot as the background"""
        try:
            background_index = self.palette_model.set_background(index)
        except InvalidPaletteIndexError as e:
            debug_log("CONTROLLER", f"Ignoring background change: {e}", "WARNING")
            return self.palette_model.background_index

        self.paletteChanged.emit()
        return background_index

    # Background overlay
    def load_background_image(self, file_path: Union[str, Path]) -> bool:
        """Load a reference image shown beneath background cells"""
        try:
            self.overlay.load(file_path, self.grid_model.size)
        except (FileNotFoundError, ImageFormatError) as e:
            debug_exception("CONTROLLER", e)
            self.error.emit(format_error_message("load background image", e))
            return False

        self.settings.add_recent_file("background", str(file_path))
        self.overlayChanged.emit()
        self.statusMessage.emit(
            f"Loaded background {os.path.basename(str(file_path))}", STATUS_MESSAGE_TIMEOUT
        )
        return True

    def set_overlay_active(self, active: bool) -> bool:
        """Show or hide the background image"""
        result = self.overlay.set_active(active)
        self.overlayChanged.emit()
        return result

    def clear_background_image(self) -> None:
        self.overlay.clear()
        self.overlayChanged.emit()

    # Export
    def render_export(self, scale: Optional[int] = None) -> Image.Image:
        """Export raster with background cells transparent"""
        return self.export_manager.render_image(self.grid_model, self.palette_model, scale)

    def export_png(
        self, file_path: Union[str, Path], scale: Optional[int] = None
    ) -> Optional[str]:
        """Save the export raster as PNG; returns the path or None on failure"""
        try:
            saved_path = self.export_manager.save_png(
                self.grid_model, self.palette_model, file_path, scale
            )
        except (ExportError, ValidationError) as e:
            self.error.emit(format_error_message("export image", e))
            return None

        self.settings.add_recent_export(saved_path)
        self.statusMessage.emit(f"Saved to {saved_path}", STATUS_MESSAGE_TIMEOUT)
        debug_log("CONTROLLER", f"Successfully exported: {saved_path}")
        return saved_path
