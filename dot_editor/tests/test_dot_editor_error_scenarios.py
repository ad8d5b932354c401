#!/usr/bin/env python3
"""
Error handling and color utility tests for the dot editor
"""

import pytest

from dot_editor.core.dot_editor_constants import INVALID_COLOR, PARSE_FALLBACK_COLOR
from dot_editor.core.dot_editor_exceptions import (
    DotEditorError,
    ExportError,
    ImageFormatError,
    InvalidPaletteIndexError,
    InvalidSizeInputError,
    OutOfBoundsError,
    ValidationError,
    format_error_message,
)
from dot_editor.core.dot_editor_utils import (
    color_to_css,
    color_to_hex,
    parse_color,
    should_use_white_text,
    validate_rgba_color,
)


class TestExceptionHierarchy:
    def test_all_derive_from_base(self):
        for cls in (
            OutOfBoundsError,
            InvalidPaletteIndexError,
            ValidationError,
            InvalidSizeInputError,
            ExportError,
            ImageFormatError,
        ):
            assert issubclass(cls, DotEditorError)

    def test_out_of_bounds_is_index_error(self):
        assert issubclass(OutOfBoundsError, IndexError)
        assert issubclass(InvalidPaletteIndexError, OutOfBoundsError)


class TestFormatErrorMessage:
    @pytest.mark.parametrize(
        "error,expected",
        [
            (InvalidSizeInputError("too big"), "Invalid grid size: too big"),
            (ValidationError("bad"), "Invalid input: bad"),
            (InvalidPaletteIndexError("300"), "Palette error: 300"),
            (ExportError("disk full"), "Export failed: disk full"),
            (ImageFormatError("junk"), "Invalid image format: junk"),
            (FileNotFoundError("x"), "File not found during load"),
            (PermissionError("x"), "Permission denied during load"),
            (RuntimeError("boom"), "Failed to load: boom"),
        ],
    )
    def test_messages(self, error, expected):
        assert format_error_message("load", error) == expected


class TestColorUtilities:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("#FF8000", (255, 128, 0, 255)),
            ("#ff8000", (255, 128, 0, 255)),
            ("#F80", (255, 136, 0, 255)),
            ("rgb(1, 2, 3)", (1, 2, 3, 255)),
            ("rgba(10,20,30,0.5)", (10, 20, 30, 255)),
            ("rgb(300, 0, 0)", (255, 0, 0, 255)),
            ((5, 6, 7), (5, 6, 7, 255)),
        ],
    )
    def test_parse_color(self, text, expected):
        assert parse_color(text) == expected

    @pytest.mark.parametrize("text", ["", "red", "#GG0000", "#+12345", "rgb(1,2)", None, 42])
    def test_parse_color_fallback(self, text):
        assert parse_color(text) == PARSE_FALLBACK_COLOR

    def test_validate_rgba_color(self):
        assert validate_rgba_color((1, 2, 3)) == (1, 2, 3, 255)
        assert validate_rgba_color([-5, 300, 7, 9]) == (0, 255, 7, 9)
        assert validate_rgba_color((1, 2)) == INVALID_COLOR
        assert validate_rgba_color("red") == INVALID_COLOR
        assert validate_rgba_color(("a", 1, 2)) == INVALID_COLOR

    def test_formatting(self):
        assert color_to_hex((171, 205, 239, 255)) == "#ABCDEF"
        assert color_to_css((1, 2, 3)) == "rgba(1, 2, 3, 1)"

    def test_text_contrast(self):
        assert should_use_white_text((0, 0, 0, 255))
        assert not should_use_white_text((255, 255, 255, 255))


class TestControllerErrorReporting:
    """Errors reach the error signal and leave state unchanged"""

    def test_invalid_resize_message(self, controller):
        controller.resize_grid("abc")
        message = controller.error_handler.call_args[0][0]
        assert message.startswith("Invalid grid size:")

    def test_export_error_message(self, controller, tmp_path):
        controller.export_png(tmp_path / "missing" / "x.png")
        message = controller.error_handler.call_args[0][0]
        assert message.startswith("Export failed:")

    def test_background_image_error_message(self, controller, tmp_path):
        path = tmp_path / "bad.png"
        path.write_bytes(b"garbage")
        assert controller.load_background_image(path) is False
        message = controller.error_handler.call_args[0][0]
        assert message.startswith("Invalid image format:")
