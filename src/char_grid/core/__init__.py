"""Core data structures: cells and the grid buffer."""

from char_grid.core.cell import BLANK, Position, normalize_char
from char_grid.core.grid import Grid

__all__ = ["BLANK", "Position", "normalize_char", "Grid"]
