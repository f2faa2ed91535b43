"""Renderers for grids and snapshots."""

from char_grid.render.text import TextRenderer
from char_grid.render.preview import render_thumbnail, save_thumbnail

__all__ = ["TextRenderer", "render_thumbnail", "save_thumbnail"]
