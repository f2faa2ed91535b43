"""Snapshot - a deliberately saved state of the whole grid."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from char_grid.core.grid import Grid


@dataclass(frozen=True)
class Snapshot:
    """
    Immutable copy of a grid saved into a branch.

    Unlike undo history entries, snapshots are curated by the user,
    persisted, and replayed by playback.
    """
    contents: tuple[str, ...]
    rows: int
    cols: int
    timestamp: datetime = field(default_factory=datetime.now)

    @classmethod
    def capture(cls, grid: Grid, timestamp: datetime | None = None) -> Snapshot:
        """Copy the current contents and size of grid."""
        return cls(
            contents=grid.contents(),
            rows=grid.rows,
            cols=grid.cols,
            timestamp=timestamp or datetime.now(),
        )

    @property
    def size(self) -> tuple[int, int]:
        return self.rows, self.cols

    def to_grid(self) -> Grid:
        """Build a standalone grid holding this snapshot."""
        grid = Grid.create(self.rows, self.cols)
        grid.load(self.contents)
        return grid

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the session store."""
        return {
            "grid": [list(row) for row in self.contents],
            "rows": self.rows,
            "cols": self.cols,
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Snapshot:
        """Deserialize from the session store, normalizing every cell."""
        rows = int(data["rows"])
        cols = int(data["cols"])
        grid = Grid.create(rows, cols)
        grid.load(data.get("grid", []))
        stamp = data.get("timestamp")
        return cls(
            contents=grid.contents(),
            rows=rows,
            cols=cols,
            timestamp=datetime.fromisoformat(stamp) if stamp else datetime.now(),
        )
