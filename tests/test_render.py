"""Tests for text and thumbnail renderers."""

from pathlib import Path

import pytest

from char_grid.branch.snapshot import Snapshot
from char_grid.core.grid import Grid
from char_grid.render.preview import BACKGROUND, INK, render_thumbnail, save_thumbnail, thumbnail_size
from char_grid.render.text import TextRenderer

PIL = pytest.importorskip('PIL')


@pytest.fixture
def grid() -> Grid:
    grid = Grid.create(2, 4)
    grid.load(['ab  ', ' c  '])
    return grid


class TestTextRenderer:
    """Tests for TextRenderer."""

    def test_render_trims_rows(self, grid: Grid) -> None:
        assert TextRenderer().render(grid) == 'ab\n c'

    def test_preview_ends_every_row(self, grid: Grid) -> None:
        assert TextRenderer().preview(grid) == 'ab\n c\n'

    def test_preserve_whitespace(self, grid: Grid) -> None:
        renderer = TextRenderer(preserve_whitespace=True)
        assert renderer.lines(grid) == ['ab  ', ' c  ']

    def test_blank_grid(self) -> None:
        assert TextRenderer().preview(Grid.create(2, 2)) == '\n\n'


class TestThumbnail:
    """Tests for raster thumbnails."""

    def test_size_keeps_aspect(self) -> None:
        assert thumbnail_size(30, 50) == (250, 150)
        assert thumbnail_size(1, 1000, width=100) == (100, 1)

    def test_pixels(self, grid: Grid) -> None:
        image = render_thumbnail(Snapshot.capture(grid), width=8)
        assert image.size == (8, 4)
        assert image.getpixel((0, 0)) == INK
        assert image.getpixel((2, 0)) == INK
        assert image.getpixel((4, 0)) == BACKGROUND
        assert image.getpixel((0, 2)) == BACKGROUND
        assert image.getpixel((2, 2)) == INK

    def test_save(self, grid: Grid, tmp_path: Path) -> None:
        dest = save_thumbnail(Snapshot.capture(grid), tmp_path / 'shot.png', width=40)
        assert dest.exists()
        from PIL import Image
        with Image.open(dest) as image:
            assert image.size == (40, 20)
