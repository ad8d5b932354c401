#!/usr/bin/env python3
"""
Grid algorithms for the dot editor
Line rasterization for drag strokes and stack-based flood fill.
Both work on plain numpy arrays and never touch models or UI.
"""

# Third-party imports
import numpy as np


def rasterize_line(x0: int, y0: int, x1: int, y1: int) -> list[tuple[int, int]]:
    """Get all cells on a line using Bresenham's algorithm

    The result starts at (x0, y0), ends at (x1, y1) and every consecutive
    pair of cells is 4- or 8-adjacent, so fast pointer motion leaves no gaps.
    """
    points = []

    dx = abs(x1 - x0)
    dy = abs(y1 - y0)

    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1

    err = dx - dy
    x, y = x0, y0

    while True:
        points.append((x, y))

        if x == x1 and y == y1:
            break

        e2 = 2 * err

        if e2 > -dy:
            err -= dy
            x += sx

        if e2 < dx:
            err += dx
            y += sy

    return points


def flood_fill(
    data: np.ndarray, x: int, y: int, new_index: int
) -> tuple[np.ndarray, list[tuple[int, int]]]:
    """
    Flood fill the 4-connected region containing (x, y)

    Works on a private copy of ``data``; the input array is never modified.
    Returns the filled copy and the list of changed cells. Out-of-bounds
    seeds and fills over the same index return the input unchanged.
    """
    height, width = data.shape
    if not (0 <= x < width and 0 <= y < height):
        return data, []

    target_index = data[y, x]
    if target_index == new_index:
        return data, []

    filled = data.copy()
    changed_cells = []
    stack = [(x, y)]

    while stack:
        cx, cy = stack.pop()
        if 0 <= cx < width and 0 <= cy < height and filled[cy, cx] == target_index:
            filled[cy, cx] = new_index
            changed_cells.append((cx, cy))

            # Neighbors: +x, -x, +y, -y
            stack.extend([(cx + 1, cy), (cx - 1, cy), (cx, cy + 1), (cx, cy - 1)])

    return filled, changed_cells
