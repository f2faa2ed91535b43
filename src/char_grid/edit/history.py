"""History - bounded undo log of whole-grid snapshots."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

from char_grid.core.cell import Position
from char_grid.core.grid import Grid

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


@dataclass(frozen=True)
class HistoryEntry:
    """Grid contents and cursor captured before an edit."""
    contents: tuple[str, ...]
    cursor: Position


class History:
    """
    Undo stack capped at a fixed number of entries.

    push() appends at the tail and undo() pops from the tail; once the cap
    is reached each push evicts the oldest entry instead.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError(f"history limit must be positive, got {limit}")
        self._entries: deque[HistoryEntry] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        return self._entries.maxlen or DEFAULT_HISTORY_LIMIT

    @property
    def can_undo(self) -> bool:
        return bool(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, grid: Grid, cursor: Position) -> None:
        """Record the current grid and cursor. Call before mutating."""
        if len(self._entries) == self.limit:
            logger.debug("History full, evicting oldest entry")
        self._entries.append(HistoryEntry(grid.contents(), cursor))

    def pop(self) -> HistoryEntry | None:
        """Remove and return the newest entry, or None when empty."""
        if not self._entries:
            return None
        return self._entries.pop()

    def undo(self, grid: Grid) -> Position | None:
        """Restore the newest entry into grid.

        Returns:
            The cursor to restore, or None if there was nothing to undo
        """
        entry = self.pop()
        if entry is None:
            return None
        grid.load(entry.contents)
        return entry.cursor

    def reset(self) -> None:
        """Drop every entry."""
        self._entries.clear()
