"""Edit module - selection, undo history and clipboard transfer."""

from char_grid.edit.clipboard import grid_to_text, text_to_grid
from char_grid.edit.history import History, HistoryEntry
from char_grid.edit.selection import Bounds, PointerState, Selection

__all__ = [
    "grid_to_text",
    "text_to_grid",
    "History",
    "HistoryEntry",
    "Bounds",
    "PointerState",
    "Selection",
]
