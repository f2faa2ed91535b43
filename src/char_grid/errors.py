"""Exceptions raised by the editing engine.

Every engine error derives from CharGridError. The command dispatcher turns
them into rejected results, so none of them ends an editing session.
"""


class CharGridError(Exception):
    """Base class for all engine errors."""


class OutOfBounds(CharGridError, IndexError):
    """A cell access fell outside the current grid dimensions.

    Reaching this means an engine invariant was violated by the caller.
    """

    def __init__(self, row: int, col: int, rows: int, cols: int) -> None:
        super().__init__(f"cell ({row}, {col}) out of bounds for {rows}x{cols} grid")
        self.row = row
        self.col = col


class IndexOutOfRange(CharGridError, IndexError):
    """A snapshot index is not within the active branch."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"snapshot index {index} out of range (branch has {length})")
        self.index = index
        self.length = length


class UnknownBranch(CharGridError, KeyError):
    """No branch with the requested name exists."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown branch: {self.name!r}"


class ProtectedBranch(CharGridError):
    """Attempt to delete the main branch."""

    def __init__(self, name: str) -> None:
        super().__init__(f"branch {name!r} cannot be deleted")
        self.name = name


class DuplicateBranch(CharGridError):
    """A branch with the requested name already exists."""

    def __init__(self, name: str) -> None:
        super().__init__(f"branch {name!r} already exists")
        self.name = name


class EmptyInput(CharGridError, ValueError):
    """A required name was empty or blank."""


class InvalidDimensions(CharGridError, ValueError):
    """Grid rows or columns below 1."""

    def __init__(self, rows: int, cols: int) -> None:
        super().__init__(f"grid dimensions must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols


class StoreError(CharGridError):
    """A persisted session could not be read."""
