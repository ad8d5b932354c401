#!/usr/bin/env python3
"""
Common utilities for the dot editor
Debug logging and color conversion helpers shared between modules
"""

# Standard library imports
import os
import re
import traceback
from datetime import datetime, timezone
from typing import Any, Optional, Union

from .dot_editor_constants import INVALID_COLOR, PARSE_FALLBACK_COLOR

# ================================================================================
# Debug Configuration
# ================================================================================

DEBUG_MODE = os.environ.get("DOT_EDITOR_DEBUG", "0").lower() not in ("", "0", "false")


# ================================================================================
# Debug Logging Utilities
# ================================================================================


def debug_log(category: str, message: str, level: str = "INFO") -> None:
    """Debug logging with timestamps and categories

    Args:
        category: Category for the log message (e.g., "GRID", "PALETTE", "TOOL")
        message: The log message to display
        level: Log level ("INFO", "WARNING", "ERROR", "DEBUG")
    """
    if not DEBUG_MODE:
        return

    timestamp = datetime.now(timezone.utc).strftime("%H:%M:%S.%f")[:-3]
    formatted_msg = f"[{timestamp}] [{category}] [{level}] {message}"

    if level == "ERROR":
        print(f"\033[91m{formatted_msg}\033[0m")  # Red
    elif level == "WARNING":
        print(f"\033[93m{formatted_msg}\033[0m")  # Yellow
    elif level == "DEBUG":
        print(f"\033[94m{formatted_msg}\033[0m")  # Blue
    else:
        print(formatted_msg)


def debug_color(index: int, rgba: Optional[tuple[int, int, int, int]] = None) -> str:
    """Format palette slot information for debugging"""
    if rgba:
        return f"Index {index} (RGBA: {rgba}, Hex: {color_to_hex(rgba)})"
    return f"Index {index}"


def debug_exception(category: str, exception: Exception) -> None:
    """Log exceptions with full traceback

    Args:
        category: Category for the log message
        exception: The exception to log
    """
    debug_log(
        category, f"Exception: {type(exception).__name__}: {exception!s}", "ERROR"
    )
    if DEBUG_MODE:
        traceback.print_exc()


# ================================================================================
# Color Validation Utilities
# ================================================================================


def validate_rgba_color(color: Any) -> tuple[int, int, int, int]:
    """Validate and normalize an RGB or RGBA color

    Args:
        color: RGB(A) color as tuple or list

    Returns:
        RGBA tuple with values clamped to 0-255, alpha defaulting to opaque
    """
    if not isinstance(color, (tuple, list)) or len(color) < 3:
        return INVALID_COLOR

    try:
        channels = [
            max(0, min(255, int(value) if value is not None else 0))
            for value in color[:4]
        ]
    except (TypeError, ValueError):
        return INVALID_COLOR

    if len(channels) == 3:
        channels.append(255)
    return (channels[0], channels[1], channels[2], channels[3])


_RGBA_PATTERN = re.compile(
    r"rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([\d.]+)\s*)?\)"
)
_HEX_PATTERN = re.compile(r"[0-9a-fA-F]{6}")


def parse_color(text: Union[str, tuple, list]) -> tuple[int, int, int, int]:
    """Parse a color from CSS-style text or a channel sequence

    Accepts ``rgb(r, g, b)``, ``rgba(r, g, b, a)``, ``#RGB`` and ``#RRGGBB``.
    Alpha from ``rgba()`` text is ignored: palette colors are always opaque.
    Anything unparseable becomes opaque white.
    """
    if isinstance(text, (tuple, list)):
        return validate_rgba_color(text)
    if not isinstance(text, str):
        return PARSE_FALLBACK_COLOR

    text = text.strip()
    match = _RGBA_PATTERN.fullmatch(text)
    if match:
        r, g, b = (max(0, min(255, int(match.group(i)))) for i in (1, 2, 3))
        return (r, g, b, 255)

    hex_digits = text[1:] if text.startswith("#") else text
    if len(hex_digits) == 3:
        hex_digits = "".join(c * 2 for c in hex_digits)
    if _HEX_PATTERN.fullmatch(hex_digits):
        value = int(hex_digits, 16)
        return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF, 255)

    return PARSE_FALLBACK_COLOR


def color_to_hex(color: tuple) -> str:
    """Format an RGB(A) color as upper-case #RRGGBB"""
    r, g, b, _ = validate_rgba_color(color)
    return f"#{r:02X}{g:02X}{b:02X}"


def color_to_css(color: tuple) -> str:
    """Format an RGB(A) color as an opaque rgba() string"""
    r, g, b, _ = validate_rgba_color(color)
    return f"rgba({r}, {g}, {b}, 1)"


def get_color_brightness(rgba: tuple) -> float:
    """Calculate the perceived brightness of a color (0-255)"""
    r, g, b = rgba[:3]
    return 0.299 * r + 0.587 * g + 0.114 * b


def should_use_white_text(rgba: tuple) -> bool:
    """Determine if white text should be drawn over a given background color"""
    return get_color_brightness(rgba) < 128
