"""
char-grid: character-grid art editor engine

Edit a grid of single-character cells, select regions, undo, save snapshots
into branches, and replay a branch as an animation.

Quick Start:
    >>> import char_grid as cg
    >>> session = cg.EditorSession(rows=2, cols=3)
    >>> session.type_character("A")
    >>> session.save_snapshot()
    0
    >>> cg.apply(session, cg.commands.Undo()).changed
    True

Features:
    - Rectangular and scattered selections with drag-move and fill
    - Bounded undo history
    - Named branches of timestamped snapshots
    - Timed playback on a pluggable scheduler (virtual clock or asyncio)
    - Copy/cut/paste between the grid and linear text
    - JSON session persistence with periodic autosave
"""

__version__ = "0.1.0"

from char_grid import commands
from char_grid.branch.snapshot import Snapshot
from char_grid.branch.store import MAIN_BRANCH, BranchStore
from char_grid.commands import Command, CommandResult, apply
from char_grid.core.grid import Grid
from char_grid.edit.selection import Bounds, Selection
from char_grid.errors import (
    CharGridError,
    DuplicateBranch,
    EmptyInput,
    IndexOutOfRange,
    InvalidDimensions,
    OutOfBounds,
    ProtectedBranch,
    StoreError,
    UnknownBranch,
)
from char_grid.io.store import AutoSaver, SessionStore
from char_grid.playback.engine import PlaybackEngine, PlaybackState
from char_grid.playback.scheduler import AsyncioScheduler, ManualScheduler
from char_grid.session import Direction, EditorSession

__all__ = [
    # Version
    "__version__",
    # Session and dispatch
    "EditorSession",
    "Direction",
    "commands",
    "Command",
    "CommandResult",
    "apply",
    # Data model
    "Grid",
    "Bounds",
    "Selection",
    "Snapshot",
    "BranchStore",
    "MAIN_BRANCH",
    # Playback
    "PlaybackEngine",
    "PlaybackState",
    "ManualScheduler",
    "AsyncioScheduler",
    # Persistence
    "SessionStore",
    "AutoSaver",
    # Errors
    "CharGridError",
    "OutOfBounds",
    "IndexOutOfRange",
    "UnknownBranch",
    "ProtectedBranch",
    "DuplicateBranch",
    "EmptyInput",
    "InvalidDimensions",
    "StoreError",
]
