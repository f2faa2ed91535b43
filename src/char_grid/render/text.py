"""Render a grid to plain text."""

from char_grid.core.grid import Grid


class TextRenderer:
    """Render a Grid to plain text, trimming trailing whitespace per row."""

    def __init__(self, preserve_whitespace: bool = False):
        self.preserve_whitespace = preserve_whitespace

    def lines(self, grid: Grid) -> list[str]:
        if self.preserve_whitespace:
            return list(grid.contents())
        return grid.serialize()

    def render(self, grid: Grid) -> str:
        """Rows joined by newlines, no newline after the last row."""
        return '\n'.join(self.lines(grid))

    def preview(self, grid: Grid) -> str:
        """Preview-panel text: every row followed by a newline."""
        return ''.join(line + '\n' for line in self.lines(grid))
