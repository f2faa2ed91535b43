"""Selection model - selected cells, cursor, and anchor.

A selection is either a rectangle spanned between two corners or an
arbitrary set of cells built by toggling. Both live in the same set of
(row, col) keys; the shape only matters for how the set was built.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from char_grid.core.cell import BLANK, Position
from char_grid.core.grid import Grid
from char_grid.errors import OutOfBounds


@dataclass(frozen=True)
class Bounds:
    """Inclusive bounding rectangle of a set of cells."""
    min_row: int
    max_row: int
    min_col: int
    max_col: int

    @classmethod
    def spanning(cls, r1: int, c1: int, r2: int, c2: int) -> Bounds:
        """Rectangle between two corners in any order."""
        return cls(min(r1, r2), max(r1, r2), min(c1, c2), max(c1, c2))

    @property
    def height(self) -> int:
        return self.max_row - self.min_row + 1

    @property
    def width(self) -> int:
        return self.max_col - self.min_col + 1

    def contains(self, row: int, col: int) -> bool:
        return self.min_row <= row <= self.max_row and self.min_col <= col <= self.max_col

    def positions(self) -> Iterator[Position]:
        """Row-major iteration over every cell in the rectangle."""
        for r in range(self.min_row, self.max_row + 1):
            for c in range(self.min_col, self.max_col + 1):
                yield r, c


@dataclass
class PointerState:
    """In-progress pointer gesture.

    Attributes:
        selecting: A rubber-band selection is being dragged out
        selection_start: Cell where the rubber band started
        drag_start: Cell where a move-drag of the selection started
    """
    selecting: bool = False
    selection_start: Position | None = None
    drag_start: Position | None = None

    @property
    def dragging(self) -> bool:
        return self.drag_start is not None

    def reset(self) -> None:
        self.selecting = False
        self.selection_start = None
        self.drag_start = None


class Selection:
    """
    The active set of selected cells plus the cursor and anchor.

    All three are tied to one grid size and are reset together when the
    grid is recreated. Every stored position is in bounds for that size.
    """

    def __init__(self, rows: int, cols: int) -> None:
        self._rows = rows
        self._cols = cols
        self._cells: set[Position] = set()
        self.cursor: Position = (0, 0)
        self.anchor: Position = (0, 0)
        self.pointer = PointerState()

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    def reset(self, rows: int, cols: int) -> None:
        """Forget everything and adopt new grid dimensions."""
        self._rows = rows
        self._cols = cols
        self._cells.clear()
        self.cursor = (0, 0)
        self.anchor = (0, 0)
        self.pointer.reset()

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._rows and 0 <= col < self._cols

    def _check(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise OutOfBounds(row, col, self._rows, self._cols)

    def __contains__(self, pos: object) -> bool:
        return pos in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Position]:
        return iter(sorted(self._cells))

    @property
    def is_empty(self) -> bool:
        return not self._cells

    @property
    def cells(self) -> frozenset[Position]:
        return frozenset(self._cells)

    # -------------------------------------------------------------------------
    # Cursor
    # -------------------------------------------------------------------------

    def move_cursor(self, row: int, col: int, update_anchor: bool = False) -> None:
        """Place the cursor, optionally dropping the anchor there too."""
        self._check(row, col)
        self.cursor = (row, col)
        if update_anchor:
            self.anchor = (row, col)

    # -------------------------------------------------------------------------
    # Selection operations
    # -------------------------------------------------------------------------

    def clear(self) -> None:
        """Deselect everything. Safe to call when already empty."""
        self._cells.clear()

    def select_rectangle(self, r1: int, c1: int, r2: int, c2: int,
                         move_cursor: bool = True) -> None:
        """Replace the selection with the rectangle between two corners.

        The cursor follows the second corner unless move_cursor is False
        (rubber-band dragging leaves it at the press cell).
        """
        self._check(r1, c1)
        self._check(r2, c2)
        self._cells = set(Bounds.spanning(r1, c1, r2, c2).positions())
        if move_cursor:
            self.cursor = (r2, c2)

    def toggle_cell(self, row: int, col: int) -> None:
        """Add or remove one cell without touching the rest."""
        self._check(row, col)
        key = (row, col)
        if key in self._cells:
            self._cells.discard(key)
        else:
            self._cells.add(key)
        self.cursor = key

    def extend_from_anchor(self, row: int, col: int) -> None:
        """Select the rectangle from the anchor to (row, col)."""
        anchor_row, anchor_col = self.anchor
        self.select_rectangle(anchor_row, anchor_col, row, col)

    def set_cells(self, positions: Iterable[Position]) -> None:
        """Replace the selection with positions, dropping out-of-bounds ones."""
        self._cells = {(r, c) for r, c in positions if self.in_bounds(r, c)}

    def bounds(self) -> Bounds | None:
        """Smallest rectangle covering the selection, or None when empty."""
        if not self._cells:
            return None
        rows = [r for r, _ in self._cells]
        cols = [c for _, c in self._cells]
        return Bounds(min(rows), max(rows), min(cols), max(cols))


# -----------------------------------------------------------------------------
# Grid operations over a selection
# -----------------------------------------------------------------------------

def fill_selection(grid: Grid, selection: Selection, char: str) -> None:
    """Write char into every selected cell."""
    for row, col in selection:
        grid.write(row, col, char)


def blank_selection(grid: Grid, selection: Selection) -> None:
    """Blank every selected cell."""
    fill_selection(grid, selection, BLANK)


def move_selection(grid: Grid, selection: Selection, d_row: int, d_col: int) -> bool:
    """Relocate the selection's bounding rectangle by an offset.

    The whole bounding rectangle is captured, including cells inside it
    that are not selected. Selected cells are blanked, the rectangle is
    written at the offset, and the relocated rectangle becomes the new
    selection. Cells that would land outside the grid are dropped.

    Returns:
        False if there was nothing selected
    """
    bounds = selection.bounds()
    if bounds is None:
        return False

    captured = [
        [grid.read(r, c) for c in range(bounds.min_col, bounds.max_col + 1)]
        for r in range(bounds.min_row, bounds.max_row + 1)
    ]

    blank_selection(grid, selection)

    moved: list[Position] = []
    for i, line in enumerate(captured):
        for j, char in enumerate(line):
            row = bounds.min_row + i + d_row
            col = bounds.min_col + j + d_col
            if grid.in_bounds(row, col):
                grid.write(row, col, char)
                moved.append((row, col))

    selection.set_cells(moved)
    return True
