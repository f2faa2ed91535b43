"""EditorSession - owns the grid, selection, history, branches and playback.

Every engine operation is a method here. Input adapters usually go through
char_grid.commands.apply instead of calling these directly.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Awaitable, Callable

from char_grid.branch.snapshot import Snapshot
from char_grid.branch.store import BranchStore
from char_grid.core.cell import BLANK, Position
from char_grid.core.grid import Grid
from char_grid.edit import clipboard
from char_grid.edit.history import DEFAULT_HISTORY_LIMIT, History
from char_grid.edit.selection import (
    Selection,
    blank_selection,
    fill_selection,
    move_selection,
)
from char_grid.playback.engine import DEFAULT_INTERVAL_MS, PlaybackEngine
from char_grid.playback.scheduler import ManualScheduler, Scheduler

if TYPE_CHECKING:
    from char_grid.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_ROWS = 30
DEFAULT_COLS = 50

ChangeListener = Callable[["EditorSession"], None]


class Direction(Enum):
    """Arrow-key directions as (row, col) steps."""
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def delta(self) -> tuple[int, int]:
        return self.value


class EditorSession:
    """
    One editing session: the single owner of all engine state.

    Mutating operations record an undo entry before touching the grid and
    notify change listeners afterwards (the persistence adapter subscribes
    here). Selection-only changes do not notify.

    Without a scheduler argument playback runs on a ManualScheduler, a
    virtual clock that only moves when its advance() is called: start()
    shows the first frame and later frames wait for the clock. Pass an
    AsyncioScheduler to play in real time inside a running event loop.

    Example:
        session = EditorSession(rows=2, cols=3)
        session.type_character("A")
        session.type_character("B")
        session.text()   # 'AB\\n'
        session.undo()
    """

    def __init__(
        self,
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        scheduler: Scheduler | None = None,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        loop: bool = False,
        branches: BranchStore | None = None,
    ) -> None:
        self.grid = Grid.create(rows, cols)
        self.selection = Selection(rows, cols)
        self.history = History(history_limit)
        self.branches = branches or BranchStore()
        self.playback = PlaybackEngine(
            self,
            scheduler or ManualScheduler(),
            interval_ms=interval_ms,
            loop=loop,
        )
        self._listeners: list[ChangeListener] = []

    @classmethod
    def from_settings(cls, settings: Settings, scheduler: Scheduler | None = None) -> EditorSession:
        """Create a blank session sized and tuned from settings."""
        return cls(
            rows=settings.default_rows,
            cols=settings.default_cols,
            history_limit=settings.history_limit,
            scheduler=scheduler,
            interval_ms=settings.playback_interval_ms,
            loop=settings.playback_loop,
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def cols(self) -> int:
        return self.grid.cols

    @property
    def cursor(self) -> Position:
        return self.selection.cursor

    @property
    def anchor(self) -> Position:
        return self.selection.anchor

    # -------------------------------------------------------------------------
    # Change notification
    # -------------------------------------------------------------------------

    def add_listener(self, listener: ChangeListener) -> None:
        """Call listener(session) after every state-changing operation."""
        self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        self._listeners.remove(listener)

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _record(self) -> None:
        """Push the pre-edit state onto the undo stack."""
        self.history.push(self.grid, self.selection.cursor)

    # -------------------------------------------------------------------------
    # Grid lifecycle
    # -------------------------------------------------------------------------

    def resize(self, rows: int, cols: int) -> None:
        """Replace the grid with a blank one of the new size.

        Old contents are discarded, not cropped. Selection, cursor, anchor
        and undo history are reset in the same step.
        """
        grid = Grid.create(rows, cols)
        self.grid = grid
        self.selection.reset(rows, cols)
        self.history.reset()
        logger.info("Grid recreated at %dx%d", rows, cols)
        self._changed()

    def restore_grid(self, contents: list[list[str]] | list[str], rows: int, cols: int) -> None:
        """Adopt persisted grid contents without recording history."""
        self.grid = Grid.create(rows, cols)
        self.grid.load(contents)
        self.selection.reset(rows, cols)
        self.history.reset()

    def clear_grid(self) -> None:
        """Blank every cell as one undoable edit."""
        self._record()
        self.grid.clear()
        self.selection.move_cursor(0, 0, update_anchor=True)
        self._changed()

    def text(self) -> str:
        """Full grid as text, trailing whitespace trimmed per row."""
        return clipboard.grid_to_text(self.grid)

    # -------------------------------------------------------------------------
    # Keyboard editing
    # -------------------------------------------------------------------------

    def type_character(self, char: str) -> None:
        """Write at the cursor and advance it, wrapping to the next row.

        At the last cell the cursor stays put.
        """
        self._record()
        row, col = self.selection.cursor
        self.grid.write(row, col, char)
        self.selection.clear()

        col += 1
        if col >= self.cols:
            col = 0
            row += 1
            if row >= self.rows:
                row, col = self.rows - 1, self.cols - 1
        self.selection.move_cursor(row, col, update_anchor=True)
        self._changed()

    def backspace(self) -> None:
        """Blank the cursor cell and step back one cell."""
        self._record()
        row, col = self.selection.cursor
        self.grid.write(row, col, BLANK)
        self.selection.clear()
        if col > 0:
            self.selection.move_cursor(row, col - 1, update_anchor=True)
        elif row > 0:
            self.selection.move_cursor(row - 1, self.cols - 1, update_anchor=True)
        self._changed()

    def navigate(self, direction: Direction, extend: bool = False) -> bool:
        """Move the cursor one cell.

        With extend, the selection becomes the rectangle from the anchor
        to the new cursor. Otherwise the selection is cleared and the
        anchor follows the cursor.

        Returns:
            False if the move would leave the grid (nothing changes)
        """
        d_row, d_col = direction.delta
        row, col = self.selection.cursor
        row, col = row + d_row, col + d_col
        if not self.grid.in_bounds(row, col):
            return False

        if extend:
            self.selection.extend_from_anchor(row, col)
        else:
            self.selection.clear()
            self.selection.move_cursor(row, col, update_anchor=True)
        return True

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def select_rectangle(self, r1: int, c1: int, r2: int, c2: int) -> None:
        self.selection.select_rectangle(r1, c1, r2, c2)

    def toggle_cell(self, row: int, col: int) -> None:
        self.selection.toggle_cell(row, col)

    def extend_from_anchor(self, row: int, col: int) -> None:
        self.selection.extend_from_anchor(row, col)

    def clear_selection(self) -> None:
        self.selection.clear()

    def fill_selection(self, char: str) -> bool:
        """Write one character into every selected cell."""
        if self.selection.is_empty:
            return False
        self._record()
        fill_selection(self.grid, self.selection, char)
        self._changed()
        return True

    def delete_selection(self) -> bool:
        """Blank the selected cells and deselect them."""
        if self.selection.is_empty:
            return False
        self._record()
        blank_selection(self.grid, self.selection)
        self.selection.clear()
        self._changed()
        return True

    def move_selection(self, d_row: int, d_col: int) -> bool:
        """Relocate the selection's bounding rectangle by an offset."""
        if self.selection.is_empty:
            return False
        self._record()
        move_selection(self.grid, self.selection, d_row, d_col)
        self._changed()
        return True

    # -------------------------------------------------------------------------
    # Pointer gestures
    # -------------------------------------------------------------------------

    def pointer_down(self, row: int, col: int, toggle: bool = False, extend: bool = False) -> None:
        """Press on a cell.

        Args:
            toggle: Ctrl/meta held - add or remove the cell
            extend: Shift held - select from the anchor to this cell

        A plain press on a selected cell starts dragging the selection;
        on any other cell it starts a new rectangle there.
        """
        pointer = self.selection.pointer
        if toggle:
            self.selection.toggle_cell(row, col)
        elif extend:
            self.selection.extend_from_anchor(row, col)
        elif (row, col) in self.selection:
            pointer.drag_start = (row, col)
        else:
            pointer.selecting = True
            pointer.selection_start = (row, col)
            self.selection.anchor = (row, col)
            self.selection.select_rectangle(row, col, row, col)

    def pointer_enter(self, row: int, col: int) -> None:
        """Pointer moved over a cell while pressed."""
        pointer = self.selection.pointer
        if pointer.selecting and pointer.selection_start is not None:
            start_row, start_col = pointer.selection_start
            self.selection.select_rectangle(start_row, start_col, row, col, move_cursor=False)

    def pointer_up(self, target: Position | None = None) -> bool:
        """Release the pointer, over target or outside the grid (None).

        Returns:
            True if a selection drag moved cells
        """
        pointer = self.selection.pointer
        moved = False
        if pointer.dragging and target is not None:
            start_row, start_col = pointer.drag_start
            moved = self.move_selection(target[0] - start_row, target[1] - start_col)
        pointer.reset()
        return moved

    def double_activate(self, row: int, col: int) -> None:
        """Double click: select from the remembered anchor to this cell."""
        self.selection.extend_from_anchor(row, col)

    # -------------------------------------------------------------------------
    # Undo
    # -------------------------------------------------------------------------

    def undo(self) -> bool:
        """Restore the state before the most recent edit.

        Returns:
            False when there is nothing to undo
        """
        cursor = self.history.undo(self.grid)
        if cursor is None:
            return False
        self.selection.move_cursor(*cursor)
        self._changed()
        return True

    # -------------------------------------------------------------------------
    # Clipboard
    # -------------------------------------------------------------------------

    def copy(self, full_grid: bool = False) -> str | None:
        """Text of the selection's bounding rectangle, or of the whole grid.

        Returns None when copying the selection and nothing is selected.
        """
        if full_grid:
            return clipboard.grid_to_text(self.grid)
        bounds = self.selection.bounds()
        if bounds is None:
            return None
        return clipboard.grid_to_text(self.grid, bounds)

    def cut(self) -> str | None:
        """Copy the selection, then blank each selected cell."""
        text = self.copy()
        if text is None:
            return None
        self._record()
        blank_selection(self.grid, self.selection)
        self._changed()
        return text

    def paste(self, text: str | None) -> bool:
        """Apply clipboard text at the cursor.

        A single character with a non-empty selection fills the selected
        cells instead, moves the cursor to the selection's far corner and
        clears the selection. Carriage returns are dropped first, and text
        that is empty after that changes nothing.

        Returns:
            False if nothing was pasted
        """
        text = (text or "").replace(clipboard.CARRIAGE_RETURN, "")
        if not text:
            return False

        self._record()
        bounds = self.selection.bounds()
        if bounds is not None and clipboard.is_fill_text(text):
            fill_selection(self.grid, self.selection, text)
            self.selection.move_cursor(bounds.max_row, bounds.max_col, update_anchor=True)
            self.selection.clear()
            self._changed()
            return True

        row, col = self.selection.cursor
        end_row, end_col = clipboard.text_to_grid(self.grid, text, row, col)
        if self.grid.in_bounds(end_row, end_col):
            self.selection.move_cursor(end_row, end_col, update_anchor=True)
        self._changed()
        return True

    async def paste_from(self, read: Callable[[], Awaitable[str | None]]) -> bool:
        """Await a clipboard read, then paste what it returned.

        If the read is cancelled the cancellation propagates and nothing
        is applied; an empty result is a no-op.
        """
        text = await read()
        return self.paste(text)

    # -------------------------------------------------------------------------
    # Branches and snapshots
    # -------------------------------------------------------------------------

    def create_branch(self, name: str) -> None:
        """Create an empty branch and switch to it."""
        self.branches.create(name)
        self.playback.stop()
        self._changed()

    def switch_branch(self, name: str) -> None:
        """Activate another branch. Stops playback."""
        self.branches.switch(name)
        self.playback.stop()
        self._changed()

    def delete_branch(self, name: str) -> None:
        """Delete a branch; playback stops if it was the active one."""
        was_active = self.branches.active == name
        self.branches.delete(name)
        if was_active:
            self.playback.stop()
        self._changed()

    def save_snapshot(self) -> int:
        """Append the current grid to the active branch.

        Returns:
            Index of the new snapshot
        """
        index = self.branches.append(Snapshot.capture(self.grid))
        logger.debug("Saved snapshot %d on %r", index, self.branches.active)
        self._changed()
        return index

    def load_snapshot(self, index: int) -> None:
        """Replace the grid with a snapshot from the active branch.

        A snapshot of a different size recreates the grid first, which
        clears history and selection. The state being replaced is then
        recorded, so a load can be undone.
        """
        snapshot = self.branches.get(index)
        if snapshot.size != self.grid.size:
            self.resize(snapshot.rows, snapshot.cols)
        self._record()
        self.grid.load(snapshot.contents)
        self.selection.move_cursor(0, 0)
        self._changed()

    def delete_snapshot(self, index: int) -> Snapshot:
        """Remove a snapshot from the active branch; the grid is untouched."""
        snapshot = self.branches.remove(index)
        self._changed()
        return snapshot

    def snapshots(self) -> list[Snapshot]:
        """Snapshots of the active branch."""
        return self.branches.snapshots()
