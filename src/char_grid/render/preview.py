"""
Rasterized snapshot thumbnails.

Each cell becomes one pixel: white for blanks, dark for anything else.
The pixel image is then scaled to a fixed width keeping the grid's aspect.

Requires Pillow: pip install char-grid[image]
"""

from __future__ import annotations

from pathlib import Path

try:
    from PIL import Image
    HAS_PIL = True
except ImportError:
    HAS_PIL = False

from char_grid.branch.snapshot import Snapshot
from char_grid.core.cell import BLANK

BACKGROUND = (255, 255, 255)
INK = (42, 42, 42)
DEFAULT_WIDTH = 250


def _require_pil() -> None:
    """Raise ImportError if PIL is not available."""
    if not HAS_PIL:
        raise ImportError(
            "Pillow is required for thumbnails. "
            "Install with: pip install char-grid[image]"
        )


def thumbnail_size(rows: int, cols: int, width: int = DEFAULT_WIDTH) -> tuple[int, int]:
    """(width, height) of a thumbnail; height follows the rows/cols ratio."""
    return width, max(1, (width * rows) // cols)


def render_thumbnail(snapshot: Snapshot, width: int = DEFAULT_WIDTH) -> "Image.Image":
    """Render a snapshot as a small RGB image."""
    _require_pil()

    image = Image.new("RGB", (snapshot.cols, snapshot.rows), BACKGROUND)
    pixels = image.load()
    for r, line in enumerate(snapshot.contents):
        for c, char in enumerate(line):
            if char != BLANK:
                pixels[c, r] = INK

    return image.resize(thumbnail_size(snapshot.rows, snapshot.cols, width), Image.Resampling.NEAREST)


def save_thumbnail(snapshot: Snapshot, path: str | Path, width: int = DEFAULT_WIDTH) -> Path:
    """Render a snapshot thumbnail and write it to path (format from suffix)."""
    path = Path(path)
    render_thumbnail(snapshot, width).save(path)
    return path
