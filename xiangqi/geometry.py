"""Board geometry in logical pixels: squares, hit testing and the drawn grid.

The board is laid out on a 960 x 960 logical canvas that the view scales
to fit its window.
"""

from __future__ import annotations

from typing import Optional

__all__ = ["center", "hit_square", "real_point", "board_lines"]

LOGICAL_SIZE = 960.0
OFFSET = 60
SPACING = 90
RADIUS = SPACING // 2
ROWS = 10
COLS = 9

Point = tuple[int, int]
Line = tuple[Point, Point]

# River inscription: each character with its box (x, y, width, height).
RIVER_TEXT = (
    ("楚", (OFFSET + SPACING, OFFSET + 4 * SPACING, SPACING, SPACING)),
    ("河", (OFFSET + 2 * SPACING, OFFSET + 4 * SPACING, SPACING, SPACING)),
    ("汉", (OFFSET + 5 * SPACING, OFFSET + 4 * SPACING, SPACING, SPACING)),
    ("界", (OFFSET + 6 * SPACING, OFFSET + 4 * SPACING, SPACING, SPACING)),
)


def center(row: int, col: int) -> Point:
    """Logical (x, y) of the intersection at (row, col)."""
    return col * SPACING + OFFSET, row * SPACING + OFFSET


def hit_square(x: int, y: int) -> Optional[tuple[int, int]]:
    """The (row, col) whose piece circle contains the point, or None."""
    for row in range(ROWS):
        for col in range(COLS):
            cx, cy = center(row, col)
            dx, dy = cx - x, cy - y
            if dx * dx + dy * dy < RADIUS * RADIUS:
                return row, col
    return None


def real_point(x: float, y: float, side: float) -> Point:
    """Map a widget point to logical coordinates, given the drawn board's side."""
    if side <= 0:
        raise ValueError(f"board side must be positive: {side}")
    scale = LOGICAL_SIZE / float(side)
    return int(x * scale), int(y * scale)


def board_lines() -> list[Line]:
    """Every line of the grid: ranks, files broken at the river, palace diagonals."""
    lines: list[Line] = []
    right = OFFSET + (COLS - 1) * SPACING
    bottom = OFFSET + (ROWS - 1) * SPACING
    river_top = OFFSET + 4 * SPACING
    river_bottom = OFFSET + 5 * SPACING

    for row in range(ROWS):
        y = OFFSET + row * SPACING
        lines.append(((OFFSET, y), (right, y)))

    for col in range(COLS):
        x = OFFSET + col * SPACING
        if col in (0, COLS - 1):
            lines.append(((x, OFFSET), (x, bottom)))
        else:
            lines.append(((x, OFFSET), (x, river_top)))
            lines.append(((x, river_bottom), (x, bottom)))

    left_palace = OFFSET + 3 * SPACING
    right_palace = OFFSET + 5 * SPACING
    lines.extend(
        [
            ((left_palace, OFFSET), (right_palace, OFFSET + 2 * SPACING)),
            ((left_palace, OFFSET + 2 * SPACING), (right_palace, OFFSET)),
            ((left_palace, OFFSET + 7 * SPACING), (right_palace, bottom)),
            ((left_palace, bottom), (right_palace, OFFSET + 7 * SPACING)),
        ]
    )
    return lines