#!/usr/bin/env python3
"""
Manager classes for the dot editor
Handle coordination between models and provide business logic
"""

# Standard library imports
import os
from abc import ABC, abstractmethod
from enum import Enum, auto
from pathlib import Path
from typing import Any, Optional, Union

# Third-party imports
import numpy as np
from PIL import Image

from .dot_editor_algorithms import rasterize_line
from .dot_editor_constants import (
    DIRECTION_VECTORS,
    EXPORT_SCALE_DEFAULT,
    EXPORT_SCALE_MAX,
    MOVE_MODE_COPY,
    MOVE_MODE_MOVE,
    MOVE_MODES,
    PALETTE_LENGTH,
    TRANSPARENT_COLOR,
)
from .dot_editor_exceptions import (
    ExportError,
    ImageFormatError,
    OutOfBoundsError,
    ValidationError,
)
from .dot_editor_models import GridModel, MoveOffset, PaletteModel, Selection
from .dot_editor_utils import debug_exception, debug_log


class ToolType(Enum):
    """Available editing tools"""

    BRUSH = auto()
    EYEDROPPER = auto()
    FILL = auto()
    SELECT = auto()


TOOL_NAMES = {
    "brush": ToolType.BRUSH,
    "eyedropper": ToolType.EYEDROPPER,
    "fill": ToolType.FILL,
    "select": ToolType.SELECT,
}


def resolve_tool_type(tool_type: Union[ToolType, str]) -> Optional[ToolType]:
    """Map a tool name (case insensitive) or enum to a ToolType"""
    if isinstance(tool_type, ToolType):
        return tool_type
    if isinstance(tool_type, str):
        return TOOL_NAMES.get(tool_type.lower())
    return None


class Tool(ABC):
    """Abstract base class for editing tools"""

    @abstractmethod
    def on_press(self, x: int, y: int, color: int, grid_model: GridModel) -> Any:
        """Handle pointer press event"""

    @abstractmethod
    def on_move(self, x: int, y: int, color: int, grid_model: GridModel) -> Any:
        """Handle pointer move event"""

    @abstractmethod
    def on_release(self, x: int, y: int, color: int, grid_model: GridModel) -> Any:
        """Handle pointer release event"""


class StrokeTool(Tool):
    """Tool that applies an action to every cell along a drag stroke"""

    def __init__(self) -> None:
        self.last_x: Optional[int] = None
        self.last_y: Optional[int] = None

    @abstractmethod
    def apply(
        self, cells: list[tuple[int, int]], color: int, grid_model: GridModel
    ) -> list[tuple[int, int]]:
        """Apply the tool action to cells in order, returning changed cells"""

    def on_press(
        self, x: int, y: int, color: int, grid_model: GridModel
    ) -> list[tuple[int, int]]:
        """Apply at the pressed cell and start tracking position"""
        self.last_x = x
        self.last_y = y
        return self.apply([(x, y)], color, grid_model)

    def on_move(
        self, x: int, y: int, color: int, grid_model: GridModel
    ) -> list[tuple[int, int]]:
        """Apply along the line from the last sampled cell to this one"""
        if self.last_x is None or self.last_y is None:
            line_points = [(x, y)]
        else:
            line_points = rasterize_line(self.last_x, self.last_y, x, y)

        self.last_x = x
        self.last_y = y
        return self.apply(line_points, color, grid_model)

    def on_release(self, x: int, y: int, color: int, grid_model: GridModel) -> None:
        """Clear tracking state"""
        self.reset()

    def reset(self) -> None:
        self.last_x = None
        self.last_y = None


class BrushTool(StrokeTool):
    """Paint single cells with line interpolation between samples"""

    def apply(
        self, cells: list[tuple[int, int]], color: int, grid_model: GridModel
    ) -> list[tuple[int, int]]:
        return grid_model.paint_cells(cells, color)


class FillTool(StrokeTool):
    """Flood fill tool; dragging reseeds a fill at every cell crossed"""

    def apply(
        self, cells: list[tuple[int, int]], color: int, grid_model: GridModel
    ) -> list[tuple[int, int]]:
        changed_cells = []
        for x, y in cells:
            # Each cell seeds its own fill from its current index
            changed_cells.extend(grid_model.fill(x, y, color))
        return changed_cells


class EyedropperTool(Tool):
    """Pick the palette index under the pointer"""

    def on_press(
        self, x: int, y: int, color: int, grid_model: GridModel
    ) -> Optional[int]:
        """Pick index at position"""
        try:
            picked_index = grid_model.get(x, y)
        except OutOfBoundsError:
            return None
        return picked_index

    def on_move(self, x: int, y: int, color: int, grid_model: GridModel) -> None:
        """No action on move"""

    def on_release(self, x: int, y: int, color: int, grid_model: GridModel) -> None:
        """Nothing to do on release"""


class SelectionManager:
    """
    Owns the optional rectangular selection and its pending move offset

    In "copy" mode a commit writes the translated contents and leaves the
    source cells untouched, so content is duplicated. "move" mode resets the
    source cells to the background index first.
    """

    def __init__(self, move_mode: str = MOVE_MODE_COPY) -> None:
        self.selection: Optional[Selection] = None
        self.offset = MoveOffset()
        self.move_mode = MOVE_MODE_COPY
        self.set_move_mode(move_mode)

        # Drag state while the select tool rubber-bands a rectangle
        self.is_dragging = False
        self.anchor: Optional[tuple[int, int]] = None
        self.cursor: Optional[tuple[int, int]] = None

    def set_move_mode(self, move_mode: str) -> None:
        if move_mode not in MOVE_MODES:
            raise ValidationError(
                f"Unknown move mode '{move_mode}', expected one of {MOVE_MODES}"
            )
        self.move_mode = move_mode

    @property
    def has_pending_move(self) -> bool:
        return self.selection is not None and not self.offset.is_zero

    def begin_drag(self, x: int, y: int) -> None:
        """Start a new rectangle; any uncommitted move is discarded"""
        self.is_dragging = True
        self.anchor = (x, y)
        self.cursor = (x, y)
        if not self.offset.is_zero:
            debug_log("SELECTION", f"Discarding uncommitted move {self.offset}")
        self.offset = MoveOffset()

    def update_drag(self, x: int, y: int) -> None:
        if self.is_dragging:
            self.cursor = (x, y)

    def finish_drag(self, grid_size: int) -> Optional[Selection]:
        """Normalize anchor and cursor into the committed selection"""
        if not self.is_dragging or self.anchor is None or self.cursor is None:
            return self.selection

        self.selection = Selection.from_corners(
            self.anchor[0], self.anchor[1], self.cursor[0], self.cursor[1], grid_size
        )
        self.is_dragging = False
        self.anchor = None
        self.cursor = None
        debug_log("SELECTION", f"Selection set to {self.selection.as_dict()}")
        return self.selection

    def move(self, direction: str) -> bool:
        """
        Shift the pending offset one cell in a compass direction
        Offsets accumulate and are not clipped; returns False when there is
        no selection to move or a rectangle is still being dragged
        """
        vector = DIRECTION_VECTORS.get(direction)
        if vector is None:
            raise ValidationError(f"Unknown direction '{direction}'")
        if self.selection is None or self.is_dragging:
            return False

        self.offset = self.offset.shifted(*vector)
        debug_log("SELECTION", f"Move offset now ({self.offset.dx}, {self.offset.dy})")
        return True

    def preview_cells(self, grid_model: GridModel) -> list[tuple[int, int, int]]:
        """Translated (x, y, index) cells a renderer shows for a pending move"""
        if not self.has_pending_move:
            return []

        dx, dy = self.offset.dx, self.offset.dy
        return [
            (x + dx, y + dy, int(grid_model.data[y, x]))
            for x, y in self.selection.cells()
            if grid_model.in_bounds(x + dx, y + dy)
        ]

    def commit(
        self, grid_model: GridModel, background_index: Optional[int] = None
    ) -> list[tuple[int, int]]:
        """
        Bake the pending offset into the grid and clear the selection
        Returns the cells whose value changed
        """
        changed_cells: list[tuple[int, int]] = []

        if self.has_pending_move:
            source = grid_model.data
            working = grid_model.clone_for_edit()
            dx, dy = self.offset.dx, self.offset.dy

            if self.move_mode == MOVE_MODE_MOVE:
                clear_index = (
                    background_index if background_index is not None else grid_model.fill_index
                )
                for x, y in self.selection.cells():
                    working[y, x] = clear_index

            for x, y in self.selection.cells():
                if grid_model.in_bounds(x + dx, y + dy):
                    working[y + dy, x + dx] = source[y, x]

            changed_rows, changed_cols = np.nonzero(working != source)
            changed_cells = [
                (int(x), int(y)) for y, x in zip(changed_rows, changed_cols)
            ]
            if changed_cells:
                grid_model.replace(working)
            debug_log(
                "SELECTION",
                f"Committed move ({dx}, {dy}) in {self.move_mode} mode, "
                f"{len(changed_cells)} cells changed",
            )

        self.offset = MoveOffset()
        self.selection = None
        return changed_cells

    def clear(
        self, grid_model: GridModel, background_index: Optional[int] = None
    ) -> list[tuple[int, int]]:
        """Commit any pending move, then drop the selection"""
        changed_cells = self.commit(grid_model, background_index)
        self.discard()
        return changed_cells

    def discard(self) -> None:
        """Forget selection, offset and drag state without touching the grid"""
        self.selection = None
        self.offset = MoveOffset()
        self.is_dragging = False
        self.anchor = None
        self.cursor = None


class SelectTool(Tool):
    """Rubber-band rectangle selection"""

    def __init__(self, selection_manager: SelectionManager) -> None:
        self.selection_manager = selection_manager

    def on_press(self, x: int, y: int, color: int, grid_model: GridModel) -> bool:
        self.selection_manager.begin_drag(x, y)
        return True

    def on_move(self, x: int, y: int, color: int, grid_model: GridModel) -> bool:
        self.selection_manager.update_drag(x, y)
        return self.selection_manager.is_dragging

    def on_release(
        self, x: int, y: int, color: int, grid_model: GridModel
    ) -> Optional[Selection]:
        return self.selection_manager.finish_drag(grid_model.size)


class ToolManager:
    """Manages editing tools and interprets pointer events for the active one"""

    def __init__(
        self,
        selection_manager: Optional[SelectionManager] = None,
        palette_length: int = PALETTE_LENGTH,
    ) -> None:
        self.selection_manager = selection_manager or SelectionManager()
        self.tools: dict[ToolType, Tool] = {
            ToolType.BRUSH: BrushTool(),
            ToolType.EYEDROPPER: EyedropperTool(),
            ToolType.FILL: FillTool(),
            ToolType.SELECT: SelectTool(self.selection_manager),
        }
        self.current_tool = ToolType.BRUSH
        self.current_color = 0
        self.palette_length = palette_length
        self.is_painting = False

    @property
    def current_tool_name(self) -> str:
        """Get the name of the current tool"""
        return self.current_tool.name.lower()

    def get_tool(self, tool_type: Optional[Union[ToolType, str]] = None) -> Tool:
        """Get tool instance (current tool if no type specified)"""
        if tool_type is None:
            return self.tools[self.current_tool]

        resolved = resolve_tool_type(tool_type)
        if resolved is None:
            raise ValueError(f"Unknown tool: {tool_type}")
        return self.tools[resolved]

    def set_tool(
        self,
        tool_type: Union[ToolType, str],
        grid_model: Optional[GridModel] = None,
        background_index: Optional[int] = None,
    ) -> list[tuple[int, int]]:
        """
        Activate a tool
        Leaving the select tool commits a pending move into grid_model and
        drops the selection. Returns the cells changed by that commit.
        """
        resolved = resolve_tool_type(tool_type)
        if resolved is None:
            debug_log("TOOL", f"Ignoring unknown tool {tool_type!r}", "WARNING")
            return []

        changed_cells: list[tuple[int, int]] = []
        if self.current_tool == ToolType.SELECT and resolved != ToolType.SELECT:
            if grid_model is not None:
                changed_cells = self.selection_manager.clear(grid_model, background_index)
            else:
                self.selection_manager.discard()

        self.end_stroke()
        self.current_tool = resolved
        debug_log("TOOL", f"Tool changed to {resolved.name}")
        return changed_cells

    def set_color(self, color: int) -> bool:
        """Set the active palette index; invalid indices are ignored"""
        if not isinstance(color, (int, np.integer)) or not 0 <= color < self.palette_length:
            debug_log("TOOL", f"Ignoring invalid palette index {color}", "WARNING")
            return False
        self.current_color = int(color)
        return True

    # Pointer events

    def press(self, x: int, y: int, grid_model: GridModel) -> Any:
        """Pointer down on cell (x, y)"""
        tool = self.get_tool()

        if self.current_tool == ToolType.EYEDROPPER:
            picked_index = tool.on_press(x, y, self.current_color, grid_model)
            if picked_index is not None:
                self.set_color(picked_index)
            return picked_index

        if self.current_tool == ToolType.SELECT:
            return tool.on_press(x, y, self.current_color, grid_model)

        self.is_painting = True
        return tool.on_press(x, y, self.current_color, grid_model)

    def move(self, x: int, y: int, grid_model: GridModel) -> Any:
        """Pointer move to cell (x, y)"""
        if self.current_tool == ToolType.SELECT:
            return self.get_tool().on_move(x, y, self.current_color, grid_model)
        if self.is_painting and self.current_tool in (ToolType.BRUSH, ToolType.FILL):
            return self.get_tool().on_move(x, y, self.current_color, grid_model)
        return None

    def release(self, x: int, y: int, grid_model: GridModel) -> Any:
        """Pointer up at cell (x, y)"""
        if self.current_tool == ToolType.SELECT:
            tool = self.get_tool()
            tool.on_move(x, y, self.current_color, grid_model)
            return tool.on_release(x, y, self.current_color, grid_model)

        self.end_stroke()
        return None

    def end_stroke(self) -> None:
        self.is_painting = False
        for tool in self.tools.values():
            if isinstance(tool, StrokeTool):
                tool.reset()


class BackgroundOverlay:
    """Preview-only reference image shown under background cells"""

    def __init__(self) -> None:
        self.source_image: Optional[Image.Image] = None
        self.image: Optional[Image.Image] = None
        self.file_path: Optional[str] = None
        self.active = False

    @property
    def has_image(self) -> bool:
        return self.image is not None

    def load(self, file_path: Union[str, Path], grid_size: int) -> Image.Image:
        """Open an image and sample it down to one texel per grid cell"""
        file_path_str = str(file_path)
        if not os.path.exists(file_path_str):
            raise FileNotFoundError(f"Image not found: {file_path_str}")

        try:
            with Image.open(file_path_str) as img:
                source = img.convert("RGBA")
        except OSError as e:
            raise ImageFormatError(f"Cannot read image {file_path_str}: {e}") from e

        self.source_image = source
        self.file_path = file_path_str
        self.resize(grid_size)
        self.active = True
        debug_log("OVERLAY", f"Loaded background image {file_path_str}")
        return self.image

    def resize(self, grid_size: int) -> None:
        """Re-sample the source image for a new grid size"""
        if self.source_image is not None:
            self.image = self.source_image.resize((grid_size, grid_size), Image.NEAREST)

    def set_active(self, active: bool) -> bool:
        """Toggle the overlay; stays inactive while no image is loaded"""
        self.active = bool(active) and self.has_image
        return self.active

    def clear(self) -> None:
        self.source_image = None
        self.image = None
        self.file_path = None
        self.active = False

    def to_array(self) -> Optional[np.ndarray]:
        """Overlay texels as an (H, W, 4) uint8 array"""
        if self.image is None:
            return None
        return np.array(self.image, dtype=np.uint8)


class ExportManager:
    """Renders the grid to RGBA rasters and writes PNG files"""

    def __init__(self, scale: int = EXPORT_SCALE_DEFAULT) -> None:
        self.scale = self._validate_scale(scale)

    @staticmethod
    def _validate_scale(scale: int) -> int:
        if not isinstance(scale, int) or not 1 <= scale <= EXPORT_SCALE_MAX:
            raise ValidationError(f"Export scale must be 1-{EXPORT_SCALE_MAX}, got {scale}")
        return scale

    def render_rgba(self, grid_model: GridModel, palette_model: PaletteModel) -> np.ndarray:
        """
        One RGBA texel per cell, row-major
        Background cells are always fully transparent, whether or not a
        background overlay is showing
        """
        lut = palette_model.to_rgba_array()
        if palette_model.background_index is not None:
            lut[palette_model.background_index] = TRANSPARENT_COLOR

        indices = np.clip(grid_model.data, 0, len(lut) - 1)
        return lut[indices]

    def render_image(
        self,
        grid_model: GridModel,
        palette_model: PaletteModel,
        scale: Optional[int] = None,
    ) -> Image.Image:
        """Export raster upscaled with nearest-neighbor sampling"""
        scale = self._validate_scale(self.scale if scale is None else scale)
        img = Image.fromarray(self.render_rgba(grid_model, palette_model))
        if scale != 1:
            img = img.resize((img.width * scale, img.height * scale), Image.NEAREST)
        return img

    def save_png(
        self,
        grid_model: GridModel,
        palette_model: PaletteModel,
        file_path: Union[str, Path],
        scale: Optional[int] = None,
    ) -> str:
        """Write the export raster as PNG, returning the written path"""
        file_path_str = str(file_path)
        if not file_path_str:
            raise ExportError("File path cannot be empty")

        directory = os.path.dirname(file_path_str)
        if directory and not os.path.isdir(directory):
            raise ExportError(f"Directory does not exist: {directory}")

        img = self.render_image(grid_model, palette_model, scale)
        try:
            img.save(file_path_str, format="PNG")
        except OSError as e:
            debug_exception("EXPORT", e)
            raise ExportError(f"Cannot write {file_path_str}: {e}") from e

        debug_log("EXPORT", f"Saved {img.width}x{img.height} PNG to {file_path_str}")
        return file_path_str
