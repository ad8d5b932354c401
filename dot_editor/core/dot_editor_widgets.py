#!/usr/bin/env python3
"""
Side panel widgets for the dot editor
Tool selection, selection moves, grid size, palette grid and preview
"""

# Standard library imports
from typing import Optional

# Third-party imports
import numpy as np
from PyQt6.QtCore import QRect, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QImage, QMouseEvent, QPainter, QPen, QPixmap
from PyQt6.QtWidgets import (
    QButtonGroup,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QRadioButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from .dot_editor_canvas import rgba_to_qimage
from .dot_editor_constants import (
    COLOR_PREVIEW_BACKGROUND,
    DIRECTION_DOWN,
    DIRECTION_LEFT,
    DIRECTION_RIGHT,
    DIRECTION_UP,
    GRID_SIZE_DEFAULT,
    GRID_SIZE_MAX,
    GRID_SIZE_MIN,
    PALETTE_CELL_SIZE,
    PALETTE_GRID_COLUMNS,
    PREVIEW_SIZE,
    TOOL_BRUSH,
    TOOL_EYEDROPPER,
    TOOL_FILL,
    TOOL_SELECT,
)
from .dot_editor_utils import color_to_hex, should_use_white_text


class ToolPanel(QWidget):
    """Panel for tool selection (brush, eyedropper, fill, select)"""

    # Signals
    toolChanged = pyqtSignal(str)  # Emits tool name when clicked

    TOOL_IDS = {TOOL_BRUSH: 0, TOOL_EYEDROPPER: 1, TOOL_FILL: 2, TOOL_SELECT: 3}

    def __init__(self, parent=None):
        super().__init__(parent)
        self.init_ui()

    def init_ui(self):
        """Initialize the tool panel UI"""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        tool_group = QGroupBox("Tools")
        tool_layout = QVBoxLayout()

        self.tool_group = QButtonGroup(self)
        self.buttons: dict[str, QRadioButton] = {}
        for name, tool_id in self.TOOL_IDS.items():
            button = QRadioButton(name.capitalize())
            self.tool_group.addButton(button, tool_id)
            tool_layout.addWidget(button)
            self.buttons[name] = button
        self.buttons[TOOL_BRUSH].setChecked(True)
        tool_group.setLayout(tool_layout)

        # buttonClicked also fires for the already checked button, which
        # lets the controller treat a second click on select as a toggle
        self.tool_group.buttonClicked.connect(self._on_tool_clicked)

        layout.addWidget(tool_group)

    def _on_tool_clicked(self, button):
        tool_id = self.tool_group.id(button)
        for name, known_id in self.TOOL_IDS.items():
            if known_id == tool_id:
                self.toolChanged.emit(name)
                return

    def set_current_tool(self, tool_name: str):
        """Reflect the controller's tool without emitting toolChanged"""
        button = self.buttons.get(tool_name)
        if button is not None:
            button.setChecked(True)


class SelectionPanel(QWidget):
    """Arrow buttons for moving the selection plus commit and clear"""

    # Signals
    moveRequested = pyqtSignal(str)  # direction
    commitRequested = pyqtSignal()
    clearRequested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.init_ui()

    def init_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        group = QGroupBox("Selection")
        grid = QGridLayout()

        self.direction_buttons: dict[str, QPushButton] = {}
        positions = {
            DIRECTION_UP: (0, 1, "↑"),
            DIRECTION_LEFT: (1, 0, "←"),
            DIRECTION_RIGHT: (1, 2, "→"),
            DIRECTION_DOWN: (2, 1, "↓"),
        }
        for direction, (row, column, label) in positions.items():
            button = QPushButton(label)
            button.setToolTip(f"Move selection {direction}")
            button.clicked.connect(
                lambda checked=False, d=direction: self.moveRequested.emit(d)
            )
            grid.addWidget(button, row, column)
            self.direction_buttons[direction] = button

        self.commit_btn = QPushButton("Apply")
        self.commit_btn.setToolTip("Write the moved selection into the grid")
        self.commit_btn.clicked.connect(self.commitRequested)
        self.clear_btn = QPushButton("Clear")
        self.clear_btn.setToolTip("Apply any move and drop the selection")
        self.clear_btn.clicked.connect(self.clearRequested)

        buttons = QHBoxLayout()
        buttons.addWidget(self.commit_btn)
        buttons.addWidget(self.clear_btn)

        group_layout = QVBoxLayout()
        group_layout.addLayout(grid)
        group_layout.addLayout(buttons)
        group.setLayout(group_layout)
        layout.addWidget(group)

        self.set_selection_active(False)

    def set_selection_active(self, active: bool):
        """Enable the buttons only while a selection exists"""
        for button in self.direction_buttons.values():
            button.setEnabled(active)
        self.commit_btn.setEnabled(active)
        self.clear_btn.setEnabled(active)


class GridSizePanel(QWidget):
    """Spin box and button for creating a new grid"""

    # Signals
    resizeRequested = pyqtSignal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        layout.addWidget(QLabel("Grid size:"))
        self.size_spinbox = QSpinBox()
        self.size_spinbox.setRange(GRID_SIZE_MIN, GRID_SIZE_MAX)
        self.size_spinbox.setValue(GRID_SIZE_DEFAULT)
        layout.addWidget(self.size_spinbox)

        self.apply_btn = QPushButton("New grid")
        self.apply_btn.setToolTip("Discard the drawing and start a new grid")
        self.apply_btn.clicked.connect(
            lambda checked=False: self.resizeRequested.emit(self.size_spinbox.value())
        )
        layout.addWidget(self.apply_btn)

    def set_size(self, size: int):
        self.size_spinbox.setValue(size)


class PaletteGrid(QWidget):
    """
    Grid of palette swatches
    Left click selects the active index, right click flags the background slot
    """

    # Signals
    colorSelected = pyqtSignal(int)
    backgroundRequested = pyqtSignal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.colors: list[tuple[int, int, int, int]] = []
        self.active_index = 0
        self.background_index: Optional[int] = None
        self.cell_size = PALETTE_CELL_SIZE
        self.columns = PALETTE_GRID_COLUMNS
        self.setToolTip("Left click: select color • Right click: set background")

    def set_palette(self, colors: list, background_index: Optional[int]):
        self.colors = list(colors)
        self.background_index = background_index
        rows = (len(self.colors) + self.columns - 1) // self.columns
        self.setFixedSize(self.columns * self.cell_size + 1, rows * self.cell_size + 1)
        self.update()

    def set_active_index(self, index: int):
        self.active_index = index
        self.update()

    def _cell_rect(self, index: int) -> QRect:
        row, column = divmod(index, self.columns)
        return QRect(
            column * self.cell_size, row * self.cell_size, self.cell_size, self.cell_size
        )

    def paintEvent(self, event):
        painter = QPainter(self)
        for index, color in enumerate(self.colors):
            rect = self._cell_rect(index)
            painter.fillRect(rect, QColor(*color))
            painter.setPen(QPen(QColor(128, 128, 128), 1))
            painter.drawRect(rect)

            if index == self.background_index:
                # Cross out the background slot; its color is never painted
                mark = QColor(255, 255, 255) if should_use_white_text(color) else QColor(0, 0, 0)
                painter.setPen(QPen(mark, 1))
                painter.drawLine(rect.topLeft(), rect.bottomRight())
                painter.drawLine(rect.topRight(), rect.bottomLeft())

        if 0 <= self.active_index < len(self.colors):
            painter.setPen(QPen(QColor(255, 0, 0), 2))
            painter.drawRect(self._cell_rect(self.active_index).adjusted(1, 1, -1, -1))
        painter.end()

    def _index_at(self, pos) -> Optional[int]:
        column = int(pos.x() // self.cell_size)
        row = int(pos.y() // self.cell_size)
        if column >= self.columns:
            return None
        index = row * self.columns + column
        return index if 0 <= index < len(self.colors) else None

    def mousePressEvent(self, event: QMouseEvent):
        index = self._index_at(event.position())
        if index is None:
            return
        if event.button() == Qt.MouseButton.LeftButton:
            self.colorSelected.emit(index)
        elif event.button() == Qt.MouseButton.RightButton:
            self.backgroundRequested.emit(index)


class PalettePanel(QWidget):
    """Palette grid plus a text entry for editing the active color"""

    # Signals
    colorSelected = pyqtSignal(int)
    backgroundRequested = pyqtSignal(int)
    colorEdited = pyqtSignal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        group = QGroupBox("Palette")
        group_layout = QVBoxLayout()

        self.palette_grid = PaletteGrid()
        self.palette_grid.colorSelected.connect(self.colorSelected)
        self.palette_grid.backgroundRequested.connect(self.backgroundRequested)
        group_layout.addWidget(self.palette_grid)

        entry_layout = QHBoxLayout()
        self.index_label = QLabel("0")
        self.color_entry = QLineEdit()
        self.color_entry.setPlaceholderText("#RRGGBB or rgb(r, g, b)")
        self.color_entry.returnPressed.connect(
            lambda: self.colorEdited.emit(self.color_entry.text())
        )
        entry_layout.addWidget(self.index_label)
        entry_layout.addWidget(self.color_entry)
        group_layout.addLayout(entry_layout)

        group.setLayout(group_layout)
        layout.addWidget(group)

    def set_palette(self, colors: list, background_index: Optional[int]):
        self.palette_grid.set_palette(colors, background_index)
        self._refresh_entry()

    def set_active_index(self, index: int):
        self.palette_grid.set_active_index(index)
        self._refresh_entry()

    def _refresh_entry(self):
        index = self.palette_grid.active_index
        self.index_label.setText(str(index))
        if 0 <= index < len(self.palette_grid.colors):
            self.color_entry.setText(color_to_hex(self.palette_grid.colors[index]))


class PreviewPanel(QWidget):
    """Scaled live preview of the drawing with background cells in light gray"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.image: Optional[QImage] = None
        self.init_ui()

    def init_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        preview_group = QGroupBox("Preview")
        preview_layout = QVBoxLayout()

        self.preview_label = QLabel()
        self.preview_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.preview_label.setStyleSheet(
            "QLabel { background-color: #030303; border: 1px solid #000; }"
        )
        self.preview_label.setFixedSize(PREVIEW_SIZE, PREVIEW_SIZE)
        preview_layout.addWidget(self.preview_label)

        preview_group.setLayout(preview_layout)
        layout.addWidget(preview_group)

    def set_grid(self, grid: np.ndarray, colors: list, background_index: Optional[int]):
        """Rebuild the preview from grid indices and stored palette colors"""
        lut = np.array(colors, dtype=np.uint8)
        if background_index is not None:
            lut[background_index] = COLOR_PREVIEW_BACKGROUND
        indices = np.clip(grid, 0, len(lut) - 1)
        self.image = rgba_to_qimage(lut[indices])

        scaled = QPixmap.fromImage(self.image).scaled(
            self.preview_label.size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.FastTransformation,
        )
        self.preview_label.setPixmap(scaled)
