"""BranchStore - named, ordered collections of snapshots."""

from __future__ import annotations

import logging
from typing import Iterator

from char_grid.branch.snapshot import Snapshot
from char_grid.errors import (
    DuplicateBranch,
    EmptyInput,
    IndexOutOfRange,
    ProtectedBranch,
    UnknownBranch,
)

logger = logging.getLogger(__name__)

MAIN_BRANCH = "main"


class BranchStore:
    """
    Mapping from branch name to its snapshot list, plus the active branch.

    Branches keep insertion order. The main branch always exists and can
    never be deleted, so there is always a valid active branch.
    """

    def __init__(self) -> None:
        self._branches: dict[str, list[Snapshot]] = {MAIN_BRANCH: []}
        self._active: str = MAIN_BRANCH

    @classmethod
    def from_mapping(cls, branches: dict[str, list[Snapshot]], active: str | None = None) -> BranchStore:
        """Rebuild a store from loaded data.

        A missing main branch is added back, and an unknown active name
        falls back to main.
        """
        store = cls()
        store._branches = {MAIN_BRANCH: []}
        for name, snapshots in branches.items():
            store._branches[name] = list(snapshots)
        if active in store._branches:
            store._active = active
        elif active is not None:
            logger.warning("Active branch %r not found, using %r", active, MAIN_BRANCH)
        return store

    # -------------------------------------------------------------------------
    # Branches
    # -------------------------------------------------------------------------

    @property
    def active(self) -> str:
        """Name of the active branch."""
        return self._active

    def names(self) -> list[str]:
        """Branch names in creation order."""
        return list(self._branches)

    def __contains__(self, name: object) -> bool:
        return name in self._branches

    def __iter__(self) -> Iterator[str]:
        return iter(self._branches)

    def __len__(self) -> int:
        return len(self._branches)

    def create(self, name: str) -> None:
        """Create an empty branch and make it active."""
        if not name or not name.strip():
            raise EmptyInput("branch name must not be blank")
        if name in self._branches:
            raise DuplicateBranch(name)
        self._branches[name] = []
        self._active = name
        logger.info("Created branch %r", name)

    def switch(self, name: str) -> None:
        """Make an existing branch active."""
        if name not in self._branches:
            raise UnknownBranch(name)
        self._active = name
        logger.debug("Switched to branch %r", name)

    def delete(self, name: str) -> None:
        """Remove a branch. Falls back to main if it was active."""
        if name == MAIN_BRANCH:
            raise ProtectedBranch(name)
        if name not in self._branches:
            raise UnknownBranch(name)
        del self._branches[name]
        if self._active == name:
            self._active = MAIN_BRANCH
        logger.info("Deleted branch %r", name)

    def next_default_name(self) -> str:
        """Suggested name for a new branch, e.g. 'branch-2'."""
        n = len(self._branches) + 1
        while f"branch-{n}" in self._branches:
            n += 1
        return f"branch-{n}"

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def snapshots(self, name: str | None = None) -> list[Snapshot]:
        """Snapshots of a branch (default: the active one), oldest first."""
        key = self._active if name is None else name
        if key not in self._branches:
            raise UnknownBranch(key)
        return list(self._branches[key])

    def count(self, name: str | None = None) -> int:
        key = self._active if name is None else name
        if key not in self._branches:
            raise UnknownBranch(key)
        return len(self._branches[key])

    def append(self, snapshot: Snapshot) -> int:
        """Append to the active branch and return the new index."""
        sequence = self._branches[self._active]
        sequence.append(snapshot)
        return len(sequence) - 1

    def get(self, index: int) -> Snapshot:
        """Snapshot at index in the active branch."""
        sequence = self._branches[self._active]
        if not 0 <= index < len(sequence):
            raise IndexOutOfRange(index, len(sequence))
        return sequence[index]

    def remove(self, index: int) -> Snapshot:
        """Delete and return the snapshot at index in the active branch."""
        sequence = self._branches[self._active]
        if not 0 <= index < len(sequence):
            raise IndexOutOfRange(index, len(sequence))
        return sequence.pop(index)

    def to_dict(self) -> dict[str, list[dict]]:
        return {
            name: [snapshot.to_dict() for snapshot in sequence]
            for name, sequence in self._branches.items()
        }
