#!/usr/bin/env python3
"""
Custom exceptions and error handling utilities for the dot editor.

This module defines domain-specific exceptions and provides utilities
for consistent error handling across the application.
"""


class DotEditorError(Exception):
    """Base exception for all dot editor errors"""
    pass


class OutOfBoundsError(DotEditorError, IndexError):
    """Raised when a grid coordinate lies outside [0, grid_size)"""
    pass


class InvalidPaletteIndexError(OutOfBoundsError):
    """Raised when a palette index lies outside [0, palette length)"""
    pass


class ValidationError(DotEditorError):
    """Raised when input validation fails"""
    pass


class InvalidSizeInputError(ValidationError):
    """Raised when a grid size request is non-numeric or out of range"""
    pass


class ExportError(DotEditorError):
    """Raised when the raster export cannot be written"""
    pass


class ImageFormatError(DotEditorError):
    """Raised when an image file cannot be read"""
    pass


def format_error_message(operation: str, error: Exception) -> str:
    """
    Format an error message for user display.

    Args:
        operation: Description of the operation that failed
        error: The exception that was raised

    Returns:
        User-friendly error message
    """
    if isinstance(error, FileNotFoundError):
        return f"File not found during {operation}"
    elif isinstance(error, PermissionError):
        return f"Permission denied during {operation}"
    elif isinstance(error, MemoryError):
        return f"Out of memory during {operation}"
    elif isinstance(error, InvalidSizeInputError):
        return f"Invalid grid size: {error}"
    elif isinstance(error, ValidationError):
        return f"Invalid input: {error}"
    elif isinstance(error, InvalidPaletteIndexError):
        return f"Palette error: {error}"
    elif isinstance(error, ImageFormatError):
        return f"Invalid image format: {error}"
    elif isinstance(error, ExportError):
        return f"Export failed: {error}"
    else:
        return f"Failed to {operation}: {error}"
