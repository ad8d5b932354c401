#!/usr/bin/env python3
"""
Widget tests for the dot editor canvas and main window
Run on the offscreen Qt platform
"""

from unittest.mock import patch

import numpy as np
import pytest
from PyQt6.QtCore import QEvent, QPoint, QPointF, Qt
from PyQt6.QtGui import QMouseEvent

from dot_editor.core.dot_editor_canvas import DotCanvas
from dot_editor.core.dot_editor_window import DotEditorWindow


def _mouse_event(event_type, pos, button=Qt.MouseButton.LeftButton):
    buttons = Qt.MouseButton.NoButton if event_type == QEvent.Type.MouseButtonRelease else button
    if event_type == QEvent.Type.MouseMove:
        button = Qt.MouseButton.NoButton
    return QMouseEvent(
        event_type, QPointF(pos), QPointF(pos), button, buttons, Qt.KeyboardModifier.NoModifier
    )


@pytest.fixture
def canvas(qtbot, small_controller):
    canvas = DotCanvas(small_controller)
    qtbot.addWidget(canvas)
    return canvas


@pytest.mark.mock_gui
class TestDotCanvas:
    """Test the canvas widget against a real controller"""

    def test_size_follows_grid(self, canvas, small_controller):
        assert canvas.width() == 8 * canvas.cell_size
        small_controller.resize_grid(10)
        assert canvas.width() == 10 * canvas.cell_size

    def test_click_paints_cell(self, qtbot, canvas, small_controller):
        small_controller.set_active_index(4)
        cell = canvas.cell_size
        qtbot.mouseClick(
            canvas, Qt.MouseButton.LeftButton, pos=QPoint(2 * cell + 1, 3 * cell + 1)
        )
        assert small_controller.grid[3, 2] == 4

    def test_click_paints_top_left_cell(self, qtbot, canvas, small_controller):
        small_controller.set_active_index(4)
        qtbot.mouseClick(canvas, Qt.MouseButton.LeftButton, pos=QPoint(1, 1))
        assert small_controller.grid[0, 0] == 4

    def test_drag_through_top_left_cell(self, canvas, small_controller):
        small_controller.set_active_index(2)
        cell = canvas.cell_size
        press = _mouse_event(QEvent.Type.MouseButtonPress, QPoint(1, 2 * cell + 1))
        canvas.mousePressEvent(press)
        canvas.mouseMoveEvent(_mouse_event(QEvent.Type.MouseMove, QPoint(1, 1)))
        canvas.mouseReleaseEvent(_mouse_event(QEvent.Type.MouseButtonRelease, QPoint(1, 1)))
        assert [small_controller.grid[y, 0] for y in range(3)] == [2, 2, 2]
        assert not canvas.drawing

    def test_leaving_canvas_ends_stroke(self, canvas, small_controller):
        small_controller.set_active_index(5)
        cell = canvas.cell_size
        released = []
        canvas.cellReleased.connect(lambda x, y: released.append((x, y)))

        press = _mouse_event(QEvent.Type.MouseButtonPress, QPoint(cell + 1, 3 * cell + 1))
        canvas.mousePressEvent(press)
        canvas.mouseMoveEvent(_mouse_event(QEvent.Type.MouseMove, QPoint(-20, 3 * cell + 1)))
        canvas.leaveEvent(QEvent(QEvent.Type.Leave))

        assert not canvas.drawing
        assert released == [(1, 3)]

        # Coming back with the button held draws nothing
        canvas.mouseMoveEvent(_mouse_event(QEvent.Type.MouseMove, QPoint(7 * cell + 1, 1)))
        painted = {(int(x), int(y)) for y, x in zip(*np.nonzero(small_controller.grid == 5))}
        assert painted == {(1, 3)}

    def test_cell_pos_outside_grid(self, canvas):
        assert canvas._get_cell_pos(QPoint(-1, 5)) is None
        assert canvas._get_cell_pos(QPoint(8 * canvas.cell_size, 0)) is None
        assert canvas._get_cell_pos(QPoint(canvas.cell_size, 0)) == QPoint(1, 0)

    def test_cursor_follows_tool(self, canvas, small_controller):
        small_controller.set_tool("fill")
        assert canvas.cursor().shape() == Qt.CursorShape.PointingHandCursor
        small_controller.set_tool("select")
        assert canvas.cursor().shape() == Qt.CursorShape.SizeAllCursor

    def test_grid_image_uses_display_colors(self, canvas, small_controller):
        small_controller.set_palette_color(1, "#00FF00")
        small_controller.grid_model.set_cell(0, 0, 1)
        small_controller.gridChanged.emit()
        image = canvas._get_grid_image()
        assert image.width() == 8
        assert image.pixelColor(0, 0).getRgb() == (0, 255, 0, 255)
        assert image.pixelColor(1, 1).getRgb() == (255, 255, 255, 255)

    def test_paint_with_selection_preview(self, canvas, small_controller):
        small_controller.set_tool("select")
        small_controller.handle_pointer_down(0, 0)
        small_controller.handle_pointer_up(1, 1)
        small_controller.move_selection("right")
        # Rendering into a pixmap exercises the full paint path
        pixmap = canvas.grab()
        assert not pixmap.isNull()


@pytest.mark.mock_gui
class TestDotEditorWindow:
    """Test the main window wiring"""

    @pytest.fixture
    def window(self, qtbot, small_controller):
        window = DotEditorWindow(small_controller)
        qtbot.addWidget(window)
        return window

    def test_tool_panel_sets_tool(self, window, small_controller):
        window.tool_panel.buttons["fill"].click()
        assert small_controller.get_current_tool_name() == "fill"

    def test_reclicking_select_checks_brush(self, window, small_controller):
        window.tool_panel.buttons["select"].click()
        window.tool_panel.buttons["select"].click()
        assert small_controller.get_current_tool_name() == "brush"
        assert window.tool_panel.buttons["brush"].isChecked()

    def test_selection_buttons_enabled_with_selection(self, window, small_controller):
        assert not window.selection_panel.commit_btn.isEnabled()
        small_controller.set_tool("select")
        small_controller.handle_pointer_down(0, 0)
        small_controller.handle_pointer_up(2, 2)
        assert window.selection_panel.commit_btn.isEnabled()
        window.selection_panel.direction_buttons["down"].click()
        assert small_controller.move_offset.dy == 1

    def test_palette_click_selects_index(self, window, small_controller):
        window.palette_panel.colorSelected.emit(12)
        assert small_controller.active_index == 12
        assert window.palette_panel.index_label.text() == "12"

    def test_color_entry_edits_active_slot(self, window, small_controller):
        small_controller.set_active_index(3)
        window.palette_panel.color_entry.setText("#102030")
        window.palette_panel.color_entry.returnPressed.emit()
        assert small_controller.palette_model.get(3) == (16, 32, 48, 255)

    def test_preview_tracks_grid(self, window, small_controller):
        small_controller.set_palette_color(1, "#FF0000")
        small_controller.set_active_index(1)
        small_controller.handle_pointer_down(0, 0)
        small_controller.handle_pointer_up(0, 0)
        image = window.preview_panel.image
        assert image.width() == 8
        assert image.pixelColor(0, 0).getRgb() == (255, 0, 0, 255)
        # Background cells show as light gray
        assert image.pixelColor(1, 1).getRgb() == (221, 221, 221, 255)

    def test_grid_size_panel(self, window, small_controller):
        window.grid_size_panel.size_spinbox.setValue(20)
        window.grid_size_panel.apply_btn.click()
        assert small_controller.get_grid_size() == 20
        assert np.all(small_controller.grid == 256)

    def test_arrow_keys_move_selection(self, qtbot, window, small_controller):
        small_controller.set_tool("select")
        small_controller.handle_pointer_down(0, 0)
        small_controller.handle_pointer_up(0, 0)
        qtbot.keyClick(window, Qt.Key.Key_Right)
        assert small_controller.move_offset.dx == 1
        qtbot.keyClick(window, Qt.Key.Key_Return)
        assert small_controller.selection is None

    def test_error_shows_message_box(self, window, small_controller):
        with patch("dot_editor.core.dot_editor_window.QMessageBox.critical") as critical:
            small_controller.resize_grid("abc")
        critical.assert_called_once()

    def test_export_action(self, window, small_controller, tmp_path):
        path = str(tmp_path / "art.png")
        with patch(
            "dot_editor.core.dot_editor_window.QFileDialog.getSaveFileName",
            return_value=(path, "PNG Files (*.png)"),
        ):
            window.export_png()
        assert (tmp_path / "art.png").exists()
