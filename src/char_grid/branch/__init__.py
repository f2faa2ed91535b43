"""Branches - named, ordered histories of saved grid snapshots."""

from char_grid.branch.snapshot import Snapshot
from char_grid.branch.store import MAIN_BRANCH, BranchStore

__all__ = ["Snapshot", "BranchStore", "MAIN_BRANCH"]
