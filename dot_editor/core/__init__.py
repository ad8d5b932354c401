"""Core dot editor modules"""

# Make key classes available at package level
from .dot_editor_canvas import DotCanvas
from .dot_editor_controller import DotEditorController
from .dot_editor_window import DotEditorWindow

__all__ = ["DotCanvas", "DotEditorController", "DotEditorWindow"]
