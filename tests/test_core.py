"""Tests for cells and the grid buffer."""

import pytest

from char_grid.core.cell import BLANK, normalize_char
from char_grid.core.grid import Grid
from char_grid.errors import InvalidDimensions, OutOfBounds


class TestNormalizeChar:
    """Tests for the one-character-per-cell rule."""

    def test_keeps_single_character(self) -> None:
        assert normalize_char('A') == 'A'

    def test_takes_first_character(self) -> None:
        assert normalize_char('Hello') == 'H'

    def test_empty_becomes_space(self) -> None:
        assert normalize_char('') == BLANK
        assert normalize_char(None) == BLANK

    def test_non_ascii(self) -> None:
        assert normalize_char('█▀') == '█'


class TestGrid:
    """Tests for Grid."""

    def test_create_blank(self) -> None:
        grid = Grid.create(2, 3)
        assert grid.size == (2, 3)
        assert grid.contents() == ('   ', '   ')

    def test_rejects_empty_dimensions(self) -> None:
        with pytest.raises(InvalidDimensions):
            Grid.create(0, 3)
        with pytest.raises(ValueError):
            Grid.create(3, 0)

    def test_read_write(self) -> None:
        grid = Grid.create(2, 3)
        grid.write(1, 2, 'Z')
        assert grid.read(1, 2) == 'Z'
        assert grid[1, 2] == 'Z'

    def test_write_normalizes(self) -> None:
        grid = Grid.create(1, 2)
        grid.write(0, 0, 'xyz')
        grid[0, 1] = ''
        assert grid.contents() == ('x ',)

    def test_out_of_bounds(self) -> None:
        grid = Grid.create(2, 3)
        for row, col in [(2, 0), (0, 3), (-1, 0), (0, -1)]:
            with pytest.raises(OutOfBounds):
                grid.read(row, col)
        with pytest.raises(IndexError):
            grid.write(5, 5, 'A')

    def test_serialize_trims_each_row(self) -> None:
        grid = Grid.create(2, 5)
        for col, char in enumerate('A B'):
            grid.write(0, col, char)
        assert grid.serialize() == ['A B', '']

    def test_load_pads_and_normalizes(self) -> None:
        grid = Grid.create(2, 3)
        grid.load([['ab', '', 'c', 'd'], 'X'])
        assert grid.contents() == ('a c', 'X  ')

    def test_from_contents(self) -> None:
        grid = Grid.from_contents(['ab', 'cde'])
        assert grid.size == (2, 3)
        assert grid.contents() == ('ab ', 'cde')

    def test_clear(self) -> None:
        grid = Grid.from_contents(['ab'])
        grid.clear()
        assert grid.contents() == ('  ',)

    def test_cells_iteration(self) -> None:
        grid = Grid.from_contents(['ab'])
        assert list(grid.cells()) == [(0, 0, 'a'), (0, 1, 'b')]
