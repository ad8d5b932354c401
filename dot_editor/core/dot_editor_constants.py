#!/usr/bin/env python3
"""
Constants for the dot editor
Centralizes all magic numbers and configuration values
"""

# ============================================================================
# PALETTE CONSTANTS
# ============================================================================

# 256 paintable slots + 1 reserved background slot
PALETTE_PAINTABLE_COUNT = 256
PALETTE_LENGTH = PALETTE_PAINTABLE_COUNT + 1
BACKGROUND_INDEX_DEFAULT = PALETTE_PAINTABLE_COUNT  # 256

# Palette widget layout
PALETTE_GRID_COLUMNS = 16
PALETTE_CELL_SIZE = 16

# ============================================================================
# COLOR CONSTANTS
# ============================================================================

DEFAULT_PALETTE_COLOR = (255, 255, 255, 255)  # Opaque white
TRANSPARENT_COLOR = (0, 0, 0, 0)
BACKGROUND_DISPLAY_COLOR = (255, 255, 255, 255)  # Background slot without overlay
PARSE_FALLBACK_COLOR = (255, 255, 255, 255)
INVALID_COLOR = (0, 0, 0, 255)

# ============================================================================
# GRID CONSTANTS
# ============================================================================

GRID_SIZE_MIN = 8
GRID_SIZE_MAX = 64
GRID_SIZE_DEFAULT = 40

# ============================================================================
# EXPORT CONSTANTS
# ============================================================================

EXPORT_SCALE_DEFAULT = 10  # Nearest-neighbor upscale factor for saved images
EXPORT_SCALE_MAX = 100
EXPORT_DEFAULT_FILENAME = "pixel-art.png"
PNG_FILE_FILTER = "PNG Files (*.png);;All Files (*)"
IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.gif *.bmp);;All Files (*)"

# ============================================================================
# TOOL CONSTANTS
# ============================================================================

TOOL_BRUSH = "brush"
TOOL_EYEDROPPER = "eyedropper"
TOOL_FILL = "fill"
TOOL_SELECT = "select"

# ============================================================================
# SELECTION CONSTANTS
# ============================================================================

MOVE_MODE_COPY = "copy"  # Destination written, source left untouched
MOVE_MODE_MOVE = "move"  # Source reset to background before destination written
MOVE_MODES = (MOVE_MODE_COPY, MOVE_MODE_MOVE)

DIRECTION_UP = "up"
DIRECTION_DOWN = "down"
DIRECTION_LEFT = "left"
DIRECTION_RIGHT = "right"

# Unit vectors (dx, dy) in grid space, y grows downward
DIRECTION_VECTORS = {
    DIRECTION_UP: (0, -1),
    DIRECTION_DOWN: (0, 1),
    DIRECTION_LEFT: (-1, 0),
    DIRECTION_RIGHT: (1, 0),
}

# ============================================================================
# UI DIMENSIONS
# ============================================================================

MAIN_WINDOW_WIDTH = 1000
MAIN_WINDOW_HEIGHT = 700
CANVAS_CELL_SIZE = 14
CANVAS_MIN_SIZE = 200
LEFT_PANEL_MAX_WIDTH = 320
STATUS_MESSAGE_TIMEOUT = 3000  # milliseconds

COLOR_GRID_LINES = (221, 221, 221)
COLOR_SELECTION_BORDER = (0, 0, 0)
COLOR_PREVIEW_BACKGROUND = (221, 221, 221, 255)
PREVIEW_SIZE = 160
