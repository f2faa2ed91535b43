"""Grid - fixed-size 2D buffer of single-character cells."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence

from char_grid.core.cell import BLANK, normalize_char
from char_grid.errors import InvalidDimensions, OutOfBounds


@dataclass
class Grid:
    """
    A rows x cols buffer of cells, stored row-major.

    The dimensions never change after construction; a resize builds a new
    Grid. Every stored cell is exactly one character.
    """
    rows: int = 30
    cols: int = 50
    _cells: list[list[str]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise InvalidDimensions(self.rows, self.cols)
        if not self._cells:
            self._cells = [[BLANK] * self.cols for _ in range(self.rows)]

    @classmethod
    def create(cls, rows: int, cols: int) -> "Grid":
        """Allocate a blank grid."""
        return cls(rows=rows, cols=cols)

    @classmethod
    def from_contents(cls, contents: Sequence[Sequence[str]]) -> "Grid":
        """Build a grid sized to the given rows of cells."""
        rows = len(contents)
        cols = max((len(row) for row in contents), default=0)
        grid = cls(rows=rows, cols=cols)
        grid.load(contents)
        return grid

    @property
    def size(self) -> tuple[int, int]:
        """(rows, cols) of this grid."""
        return self.rows, self.cols

    def in_bounds(self, row: int, col: int) -> bool:
        """Check whether (row, col) addresses a cell of this grid."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def _check(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise OutOfBounds(row, col, self.rows, self.cols)

    def read(self, row: int, col: int) -> str:
        """Get the character at (row, col)."""
        self._check(row, col)
        return self._cells[row][col]

    def write(self, row: int, col: int, char: str | None) -> None:
        """Store the first character of char at (row, col), or a space."""
        self._check(row, col)
        self._cells[row][col] = normalize_char(char)

    def __getitem__(self, pos: tuple[int, int]) -> str:
        row, col = pos
        return self.read(row, col)

    def __setitem__(self, pos: tuple[int, int], char: str) -> None:
        row, col = pos
        self.write(row, col, char)

    def clear(self) -> None:
        """Blank every cell."""
        for row in self._cells:
            row[:] = [BLANK] * self.cols

    def contents(self) -> tuple[str, ...]:
        """Untrimmed row strings, one character per cell."""
        return tuple(''.join(row) for row in self._cells)

    def load(self, contents: Iterable[Sequence[str]]) -> None:
        """
        Overwrite cells from row data.

        Each row may be a string or a list of strings; every value is
        normalized to one character. Rows or cells missing from contents
        become blank, and anything beyond the grid is ignored.
        """
        loaded = list(contents)
        for r in range(self.rows):
            source = loaded[r] if r < len(loaded) else ()
            for c in range(self.cols):
                self._cells[r][c] = normalize_char(source[c]) if c < len(source) else BLANK

    def serialize(self) -> list[str]:
        """Row strings with trailing whitespace trimmed per row."""
        return [''.join(row).rstrip() for row in self._cells]

    def iter_rows(self) -> Iterator[list[str]]:
        """Iterate over rows (copies)."""
        for row in self._cells:
            yield list(row)

    def cells(self) -> Iterator[tuple[int, int, str]]:
        """Iterate over all cells as (row, col, char) tuples."""
        for r, row in enumerate(self._cells):
            for c, char in enumerate(row):
                yield r, c, char
