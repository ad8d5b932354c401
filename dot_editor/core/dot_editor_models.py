#!/usr/bin/env python3
"""
Core data models for the dot editor
These models handle the business logic without any UI dependencies
"""

# Standard library imports
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

# Third-party imports
import numpy as np

from .dot_editor_algorithms import flood_fill
from .dot_editor_constants import (
    BACKGROUND_DISPLAY_COLOR,
    BACKGROUND_INDEX_DEFAULT,
    DEFAULT_PALETTE_COLOR,
    GRID_SIZE_DEFAULT,
    GRID_SIZE_MAX,
    GRID_SIZE_MIN,
    PALETTE_LENGTH,
    TRANSPARENT_COLOR,
)
from .dot_editor_exceptions import (
    InvalidPaletteIndexError,
    InvalidSizeInputError,
    OutOfBoundsError,
    ValidationError,
)
from .dot_editor_utils import debug_log, validate_rgba_color

# Palette indices go up to 256, so cells need more than 8 bits
GRID_DTYPE = np.uint16

Color = tuple[int, int, int, int]


def validate_grid_size(value: Any) -> int:
    """
    Validate a grid size request from user input
    Accepts ints (numpy ints included), integral floats and numeric strings
    Raises InvalidSizeInputError for anything else or anything out of range
    """
    if isinstance(value, bool):
        raise InvalidSizeInputError(f"'{value}' is not a number")

    if isinstance(value, (int, np.integer)):
        size = int(value)
    elif isinstance(value, float):
        if not value.is_integer():
            raise InvalidSizeInputError(f"'{value}' is not a whole number")
        size = int(value)
    elif isinstance(value, str):
        try:
            size = int(value.strip())
        except ValueError:
            raise InvalidSizeInputError(f"'{value}' is not a number") from None
    else:
        raise InvalidSizeInputError(f"'{value}' is not a number")

    if not GRID_SIZE_MIN <= size <= GRID_SIZE_MAX:
        raise InvalidSizeInputError(
            f"Grid size must be between {GRID_SIZE_MIN} and {GRID_SIZE_MAX}, got {size}"
        )
    return size


@dataclass
class PaletteModel:
    """
    Model for the fixed-length color palette
    One slot may be flagged as the background index
    """

    colors: list[Color] = field(
        default_factory=lambda: [DEFAULT_PALETTE_COLOR] * PALETTE_LENGTH
    )
    background_index: Optional[int] = BACKGROUND_INDEX_DEFAULT
    allow_no_background: bool = False

    def __post_init__(self):
        """Normalize colors to exactly PALETTE_LENGTH opaque RGBA entries"""
        self.from_rgb_list(self.colors)
        if self.background_index is None:
            if not self.allow_no_background:
                self.background_index = BACKGROUND_INDEX_DEFAULT
        elif not self.is_valid_index(self.background_index):
            self.background_index = BACKGROUND_INDEX_DEFAULT

    def __len__(self) -> int:
        return len(self.colors)

    def from_rgb_list(self, rgb_list: list) -> None:
        """Load palette from RGB(A) tuples, padding with white or truncating"""
        normalized = [validate_rgba_color(c) for c in rgb_list[:PALETTE_LENGTH]]
        if len(normalized) < PALETTE_LENGTH:
            normalized.extend(
                [DEFAULT_PALETTE_COLOR] * (PALETTE_LENGTH - len(normalized))
            )
        self.colors = normalized

    def is_valid_index(self, index: int) -> bool:
        return isinstance(index, (int, np.integer)) and 0 <= index < len(self.colors)

    def _check_index(self, index: int) -> None:
        if not self.is_valid_index(index):
            raise InvalidPaletteIndexError(
                f"Palette index {index} outside [0, {len(self.colors)})"
            )

    def get(self, index: int) -> Color:
        """Get the stored color of a palette slot"""
        self._check_index(index)
        return self.colors[index]

    def set(self, index: int, color: Any) -> bool:
        """
        Set the color of a palette slot
        Returns True if the palette changed; setting an equal color is a no-op
        """
        self._check_index(index)
        new_color = validate_rgba_color(color)
        if self.colors[index] == new_color:
            return False

        # Replace the list wholesale so readers never see a half-edited palette
        new_colors = list(self.colors)
        new_colors[index] = new_color
        self.colors = new_colors
        debug_log("PALETTE", f"Slot {index} set to {new_color}")
        return True

    def set_background(self, index: int) -> Optional[int]:
        """
        Flag a slot as the background index, unflagging the previous one

        Flagging the already flagged slot clears the flag when
        allow_no_background is set, and is a no-op otherwise.
        Returns the resulting background index.
        """
        self._check_index(index)
        if index == self.background_index:
            if self.allow_no_background:
                self.background_index = None
                debug_log("PALETTE", f"Background flag cleared from slot {index}")
        else:
            self.background_index = index
            debug_log("PALETTE", f"Background flag moved to slot {index}")
        return self.background_index

    def is_background(self, index: int) -> bool:
        return self.background_index is not None and index == self.background_index

    def display_color(self, index: int, overlay_active: bool = False) -> Color:
        """
        Color a renderer should show for a slot
        The background slot is derived: transparent over an active overlay,
        opaque white otherwise. Its stored color is never shown.
        """
        if self.is_background(index):
            return TRANSPARENT_COLOR if overlay_active else BACKGROUND_DISPLAY_COLOR
        return self.get(index)

    def to_rgba_array(self) -> np.ndarray:
        """Stored colors as an (N, 4) uint8 lookup table"""
        return np.array(self.colors, dtype=np.uint8).reshape(len(self.colors), 4)


@dataclass(frozen=True)
class Selection:
    """Axis-aligned inclusive rectangle with x1 <= x2 and y1 <= y2"""

    x1: int
    y1: int
    x2: int
    y2: int

    def __post_init__(self):
        if self.x1 > self.x2 or self.y1 > self.y2:
            raise ValidationError(f"Unordered selection rectangle: {self}")

    @classmethod
    def from_corners(
        cls, ax: int, ay: int, bx: int, by: int, grid_size: int
    ) -> "Selection":
        """Normalize two corner cells into an ordered rectangle clamped to the grid"""

        def clamp(value: int) -> int:
            return max(0, min(grid_size - 1, value))

        return cls(
            clamp(min(ax, bx)), clamp(min(ay, by)), clamp(max(ax, bx)), clamp(max(ay, by))
        )

    @property
    def width(self) -> int:
        return self.x2 - self.x1 + 1

    @property
    def height(self) -> int:
        return self.y2 - self.y1 + 1

    def contains(self, x: int, y: int) -> bool:
        return self.x1 <= x <= self.x2 and self.y1 <= y <= self.y2

    def cells(self) -> Iterator[tuple[int, int]]:
        """Iterate cells row-major"""
        for y in range(self.y1, self.y2 + 1):
            for x in range(self.x1, self.x2 + 1):
                yield (x, y)

    def as_dict(self) -> dict[str, int]:
        return {"x1": self.x1, "y1": self.y1, "x2": self.x2, "y2": self.y2}


@dataclass(frozen=True)
class MoveOffset:
    """Uncommitted translation of the selection contents"""

    dx: int = 0
    dy: int = 0

    @property
    def is_zero(self) -> bool:
        return self.dx == 0 and self.dy == 0

    def shifted(self, dx: int, dy: int) -> "MoveOffset":
        return MoveOffset(self.dx + dx, self.dy + dy)


@dataclass
class GridModel:
    """
    Model for the square grid of palette indices
    Every mutation builds a new array and swaps it in (copy-on-write)
    """

    size: int = GRID_SIZE_DEFAULT
    fill_index: int = BACKGROUND_INDEX_DEFAULT
    data: Optional[np.ndarray] = None
    palette_length: int = PALETTE_LENGTH
    modified: bool = False

    def __post_init__(self):
        """Ensure data array matches dimensions"""
        if self.data is None or self.data.shape != (self.size, self.size):
            self.data = np.full((self.size, self.size), self.fill_index, dtype=GRID_DTYPE)
        else:
            self.data = self.data.astype(GRID_DTYPE)

    def resize(self, new_size: Any, fill_index: int) -> np.ndarray:
        """
        Replace the grid with a fresh new_size x new_size grid of fill_index
        Prior content is discarded; nothing is resampled
        """
        size = validate_grid_size(new_size)
        if not 0 <= fill_index < self.palette_length:
            raise InvalidPaletteIndexError(f"Fill index {fill_index} is not a palette slot")

        self.size = size
        self.fill_index = fill_index
        self.data = np.full((size, size), fill_index, dtype=GRID_DTYPE)
        self.modified = False
        debug_log("GRID", f"Grid reallocated to {size}x{size} filled with {fill_index}")
        return self.data

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def get(self, x: int, y: int) -> int:
        """Get the palette index at a cell, raising OutOfBoundsError off-grid"""
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(f"Cell ({x}, {y}) outside {self.size}x{self.size} grid")
        return int(self.data[y, x])

    def clone_for_edit(self) -> np.ndarray:
        """Private working copy for a batch of mutations"""
        return self.data.copy()

    def replace(self, new_data: np.ndarray) -> None:
        """Publish an edited copy as the new grid"""
        if new_data.shape != (self.size, self.size):
            raise ValidationError(
                f"Replacement grid has shape {new_data.shape}, expected {(self.size, self.size)}"
            )
        self.data = new_data
        self.modified = True

    def set_cell(self, x: int, y: int, index: int) -> bool:
        """
        Set the palette index of a single cell
        Returns True if the cell changed; off-grid cells and invalid
        indices are ignored
        """
        return bool(self.paint_cells([(x, y)], index))

    def paint_cells(self, cells: list[tuple[int, int]], index: int) -> list[tuple[int, int]]:
        """
        Set every in-bounds cell of the sequence to index in one edit
        Returns the cells that actually changed
        """
        if not 0 <= index < self.palette_length:
            debug_log("GRID", f"Ignoring invalid palette index {index}", "WARNING")
            return []

        working = None
        changed_cells = []
        for x, y in cells:
            if not self.in_bounds(x, y):
                continue
            source = working if working is not None else self.data
            if source[y, x] == index:
                continue
            if working is None:
                working = self.clone_for_edit()
            working[y, x] = index
            changed_cells.append((x, y))

        if working is not None:
            self.replace(working)
        return changed_cells

    def fill(self, x: int, y: int, new_index: int) -> list[tuple[int, int]]:
        """
        Flood fill from coordinates
        Returns list of changed cells
        """
        if not 0 <= new_index < self.palette_length:
            debug_log("GRID", f"Ignoring fill with invalid index {new_index}", "WARNING")
            return []

        filled, changed_cells = flood_fill(self.data, x, y, new_index)
        if changed_cells:
            self.replace(filled)
        return changed_cells

    def to_list(self) -> list[list[int]]:
        """Grid as nested row-major lists"""
        return self.data.tolist()
