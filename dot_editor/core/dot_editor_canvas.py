#!/usr/bin/env python3
"""
Canvas widget for the dot editor
Draws the controller's grid and forwards pointer events as cell coordinates
"""

# Standard library imports
from typing import Optional

# Third-party imports
import numpy as np
from PyQt6.QtCore import QPoint, QRect, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QImage, QMouseEvent, QPainter, QPen
from PyQt6.QtWidgets import QWidget

from .dot_editor_constants import (
    CANVAS_CELL_SIZE,
    CANVAS_MIN_SIZE,
    COLOR_GRID_LINES,
    COLOR_SELECTION_BORDER,
    TOOL_BRUSH,
    TOOL_EYEDROPPER,
    TOOL_FILL,
    TOOL_SELECT,
)


def rgba_to_qimage(rgba: np.ndarray) -> QImage:
    """Wrap an (H, W, 4) uint8 array as a detached QImage"""
    rgba = np.ascontiguousarray(rgba, dtype=np.uint8)
    height, width = rgba.shape[:2]
    image = QImage(rgba.data, width, height, width * 4, QImage.Format.Format_RGBA8888)
    return image.copy()


class DotCanvas(QWidget):
    """Canvas that renders the grid and delegates editing to the controller"""

    # Signals
    cellPressed = pyqtSignal(int, int)  # x, y in grid space
    cellMoved = pyqtSignal(int, int)  # x, y in grid space
    cellReleased = pyqtSignal(int, int)  # x, y in grid space

    def __init__(self, controller, parent=None):
        super().__init__(parent)

        self.controller = controller

        # View state
        self.cell_size = CANVAS_CELL_SIZE
        self.grid_visible = True

        # Interaction state
        self.drawing = False
        self.last_pos: Optional[QPoint] = None

        # Render cache, rebuilt when grid, palette or overlay change
        self._grid_image: Optional[QImage] = None
        self._overlay_image: Optional[QImage] = None

        self.setMouseTracking(True)
        self.setMinimumSize(CANVAS_MIN_SIZE, CANVAS_MIN_SIZE)

        # Connect to controller signals
        self.controller.gridChanged.connect(self._on_grid_changed)
        self.controller.gridResized.connect(self._on_grid_resized)
        self.controller.paletteChanged.connect(self._on_grid_changed)
        self.controller.overlayChanged.connect(self._on_overlay_changed)
        self.controller.selectionChanged.connect(self.update)
        self.controller.toolChanged.connect(self._update_cursor_for_tool)

        # Route pointer events to the controller
        self.cellPressed.connect(self.controller.handle_pointer_down)
        self.cellMoved.connect(self.controller.handle_pointer_move)
        self.cellReleased.connect(self.controller.handle_pointer_up)

        self._update_size()
        self._update_cursor_for_tool(self.controller.get_current_tool_name())

    def _on_grid_changed(self):
        self._grid_image = None
        self.update()

    def _on_grid_resized(self, size: int):
        self._grid_image = None
        self._overlay_image = None
        self._update_size()
        self.update()

    def _on_overlay_changed(self):
        # Background cells change appearance with the overlay
        self._grid_image = None
        self._overlay_image = None
        self.update()

    def _update_cursor_for_tool(self, tool_name: str):
        """Update cursor based on the current tool"""
        if tool_name == TOOL_BRUSH:
            self.setCursor(Qt.CursorShape.CrossCursor)
        elif tool_name == TOOL_FILL:
            self.setCursor(Qt.CursorShape.PointingHandCursor)
        elif tool_name == TOOL_EYEDROPPER:
            # Qt has no built-in eyedropper cursor
            self.setCursor(Qt.CursorShape.WhatsThisCursor)
        elif tool_name == TOOL_SELECT:
            self.setCursor(Qt.CursorShape.SizeAllCursor)
        else:
            self.setCursor(Qt.CursorShape.ArrowCursor)

    def _update_size(self):
        """Update widget size based on grid size and cell size"""
        side = self.controller.get_grid_size() * self.cell_size
        self.setFixedSize(side, side)

    def set_grid_visible(self, visible: bool):
        """Toggle grid line visibility"""
        self.grid_visible = visible
        self.update()

    def _display_lut(self) -> np.ndarray:
        return np.array(self.controller.get_display_colors(), dtype=np.uint8)

    def _get_grid_image(self) -> QImage:
        """Grid rendered one texel per cell with display colors"""
        if self._grid_image is None:
            lut = self._display_lut()
            indices = np.clip(self.controller.grid, 0, len(lut) - 1)
            self._grid_image = rgba_to_qimage(lut[indices])
        return self._grid_image

    def _get_overlay_image(self) -> Optional[QImage]:
        overlay = self.controller.overlay
        if not overlay.active:
            return None
        if self._overlay_image is None:
            texels = overlay.to_array()
            if texels is None:
                return None
            self._overlay_image = rgba_to_qimage(texels)
        return self._overlay_image

    def paintEvent(self, event):
        """Paint overlay, cells, move preview, grid lines and selection"""
        painter = QPainter(self)
        size = self.controller.get_grid_size()
        target = QRect(0, 0, size * self.cell_size, size * self.cell_size)

        painter.fillRect(target, QColor(255, 255, 255))

        overlay_image = self._get_overlay_image()
        if overlay_image is not None:
            painter.drawImage(target, overlay_image)

        painter.drawImage(target, self._get_grid_image())

        self._draw_move_preview(painter)

        if self.grid_visible:
            self._draw_grid(painter, size)

        self._draw_selection(painter)
        painter.end()

    def _draw_move_preview(self, painter: QPainter):
        """Draw the translated selection contents of a pending move"""
        preview_cells = self.controller.get_preview_cells()
        if not preview_cells:
            return

        colors = self.controller.get_display_colors()
        cell = self.cell_size
        for x, y, index in preview_cells:
            painter.fillRect(x * cell, y * cell, cell, cell, QColor(*colors[index]))

    def _draw_grid(self, painter: QPainter, size: int):
        """Draw grid lines"""
        painter.setPen(QPen(QColor(*COLOR_GRID_LINES), 1))
        extent = size * self.cell_size
        for i in range(size + 1):
            offset = i * self.cell_size
            painter.drawLine(offset, 0, offset, extent)
            painter.drawLine(0, offset, extent, offset)

    def _draw_selection(self, painter: QPainter):
        """Dashed rectangle around the selection, shifted by the pending move"""
        selection_manager = self.controller.selection_manager
        if selection_manager.is_dragging and selection_manager.anchor and selection_manager.cursor:
            (ax, ay), (bx, by) = selection_manager.anchor, selection_manager.cursor
            x1, y1, x2, y2 = min(ax, bx), min(ay, by), max(ax, bx), max(ay, by)
        elif self.controller.selection is not None:
            selection = self.controller.selection
            offset = self.controller.move_offset
            x1, y1 = selection.x1 + offset.dx, selection.y1 + offset.dy
            x2, y2 = selection.x2 + offset.dx, selection.y2 + offset.dy
        else:
            return

        pen = QPen(QColor(*COLOR_SELECTION_BORDER), 2)
        pen.setStyle(Qt.PenStyle.DashLine)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        cell = self.cell_size
        painter.drawRect(x1 * cell, y1 * cell, (x2 - x1 + 1) * cell, (y2 - y1 + 1) * cell)

    def mousePressEvent(self, event: QMouseEvent):
        """Handle mouse press"""
        if event.button() == Qt.MouseButton.LeftButton:
            pos = self._get_cell_pos(event.position())
            if pos is not None:
                self.drawing = True
                self.last_pos = pos
                self.cellPressed.emit(pos.x(), pos.y())

    def mouseMoveEvent(self, event: QMouseEvent):
        """Handle mouse move while a button is held"""
        if not self.drawing:
            return
        pos = self._get_cell_pos(event.position())
        if pos is not None and pos != self.last_pos:
            self.last_pos = pos
            self.cellMoved.emit(pos.x(), pos.y())

    def mouseReleaseEvent(self, event: QMouseEvent):
        """Handle mouse release"""
        if event.button() == Qt.MouseButton.LeftButton and self.drawing:
            pos = self._get_cell_pos(event.position())
            self._end_drawing(pos if pos is not None else self.last_pos)

    def leaveEvent(self, event):
        """Leaving the canvas ends the stroke at the last cell reached"""
        if self.drawing:
            self._end_drawing(self.last_pos)
        super().leaveEvent(event)

    def _end_drawing(self, pos: Optional[QPoint]):
        self.drawing = False
        self.last_pos = None
        if pos is not None:
            self.cellReleased.emit(pos.x(), pos.y())

    def _get_cell_pos(self, pos) -> Optional[QPoint]:
        """Convert mouse position to cell coordinates"""
        x = int(pos.x() // self.cell_size)
        y = int(pos.y() // self.cell_size)

        size = self.controller.get_grid_size()
        if 0 <= x < size and 0 <= y < size:
            return QPoint(x, y)
        return None

    def enterEvent(self, event):
        """Show tooltip on enter"""
        self.setToolTip("Left click: use current tool")
        super().enterEvent(event)
