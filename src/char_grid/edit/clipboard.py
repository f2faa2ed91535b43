"""Clipboard transfer between the rectangular grid and linear text.

Copying produces one line per grid row with trailing whitespace trimmed per
row. Pasting walks the text left-to-right, top-to-bottom from an origin
cell.
"""

from __future__ import annotations

from char_grid.core.cell import Position
from char_grid.core.grid import Grid
from char_grid.edit.selection import Bounds

NEWLINE = '\n'
CARRIAGE_RETURN = '\r'


def full_bounds(grid: Grid) -> Bounds:
    """Bounds covering the whole grid."""
    return Bounds(0, grid.rows - 1, 0, grid.cols - 1)


def grid_to_text(grid: Grid, bounds: Bounds | None = None) -> str:
    """
    Extract a rectangular region as text.

    Each row of the region becomes one line with its trailing whitespace
    removed; lines are joined with a newline and there is no newline after
    the last one.

    Args:
        grid: Source grid
        bounds: Region to extract (default: the whole grid)
    """
    region = bounds or full_bounds(grid)
    lines = []
    for r in range(region.min_row, region.max_row + 1):
        line = ''.join(grid.read(r, c) for c in range(region.min_col, region.max_col + 1))
        lines.append(line.rstrip())
    return NEWLINE.join(lines)


def text_to_grid(grid: Grid, text: str, origin_row: int, origin_col: int) -> Position:
    """
    Write text into the grid starting at an origin cell.

    A newline returns to the origin column on the next row. Any other
    character is written and the column advances, wrapping to column 0 of
    the next row past the right edge. Characters after the last row are
    dropped. Carriage returns are ignored so CRLF text behaves like LF.

    Returns:
        The (row, col) reached after the last character. The row equals
        grid.rows when the text ran off the bottom.
    """
    row, col = origin_row, origin_col
    for char in text:
        if row >= grid.rows:
            break
        if char == CARRIAGE_RETURN:
            continue
        if char == NEWLINE:
            col = origin_col
            row += 1
            continue
        grid.write(row, col, char)
        col += 1
        if col >= grid.cols:
            col = 0
            row += 1
    return row, col


def is_fill_text(text: str) -> bool:
    """Check whether pasted text is a single character that fills a selection."""
    return len(text) == 1
