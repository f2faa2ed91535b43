"""Command dispatcher - the single entry point for input adapters.

Input adapters translate device events into Command objects and hand them
to apply(). Engine errors never escape: they come back as rejected results
for the adapter to surface.

Example:
    session = EditorSession(rows=2, cols=3)
    apply(session, TypeCharacter("A"))
    result = apply(session, DeleteBranch("main"))
    result.ok      # False
    result.error   # ProtectedBranch('main')
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from char_grid.core.cell import Position
from char_grid.errors import CharGridError, OutOfBounds
from char_grid.session import Direction, EditorSession

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

class Command:
    """Base class for all commands."""


@dataclass(frozen=True)
class TypeCharacter(Command):
    char: str


@dataclass(frozen=True)
class Backspace(Command):
    pass


@dataclass(frozen=True)
class Navigate(Command):
    direction: Direction
    extend: bool = False


@dataclass(frozen=True)
class SelectRectangle(Command):
    r1: int
    c1: int
    r2: int
    c2: int


@dataclass(frozen=True)
class ToggleCell(Command):
    row: int
    col: int


@dataclass(frozen=True)
class ExtendSelection(Command):
    """Select from the anchor to a cell (shift-click, double click)."""
    row: int
    col: int


@dataclass(frozen=True)
class ClearSelection(Command):
    """Escape key."""


@dataclass(frozen=True)
class PointerDown(Command):
    row: int
    col: int
    toggle: bool = False
    extend: bool = False


@dataclass(frozen=True)
class PointerEnter(Command):
    row: int
    col: int


@dataclass(frozen=True)
class PointerUp(Command):
    """Pointer released over target, or outside the grid when None."""
    target: Position | None = None


@dataclass(frozen=True)
class DoubleActivate(Command):
    row: int
    col: int


@dataclass(frozen=True)
class MoveSelection(Command):
    d_row: int
    d_col: int


@dataclass(frozen=True)
class FillSelection(Command):
    char: str


@dataclass(frozen=True)
class Delete(Command):
    """Blank the selected cells."""


@dataclass(frozen=True)
class Undo(Command):
    pass


@dataclass(frozen=True)
class Copy(Command):
    full_grid: bool = False


@dataclass(frozen=True)
class Cut(Command):
    pass


@dataclass(frozen=True)
class Paste(Command):
    text: str | None


@dataclass(frozen=True)
class ClearGrid(Command):
    pass


@dataclass(frozen=True)
class Resize(Command):
    rows: int
    cols: int


@dataclass(frozen=True)
class CreateBranch(Command):
    name: str


@dataclass(frozen=True)
class SwitchBranch(Command):
    name: str


@dataclass(frozen=True)
class DeleteBranch(Command):
    name: str


@dataclass(frozen=True)
class SaveSnapshot(Command):
    pass


@dataclass(frozen=True)
class LoadSnapshot(Command):
    index: int


@dataclass(frozen=True)
class DeleteSnapshot(Command):
    index: int


@dataclass(frozen=True)
class TogglePlayback(Command):
    """Enter key."""


@dataclass(frozen=True)
class StartPlayback(Command):
    pass


@dataclass(frozen=True)
class StopPlayback(Command):
    pass


@dataclass(frozen=True)
class SetPlaybackOptions(Command):
    interval_ms: int | None = None
    loop: bool | None = None


# -----------------------------------------------------------------------------
# Results
# -----------------------------------------------------------------------------

@dataclass
class CommandResult:
    """Outcome of apply().

    Attributes:
        ok: False if the engine rejected the command
        changed: Whether engine state was modified
        text: Clipboard text produced by Copy/Cut
        value: Command-specific return value (e.g. new snapshot index)
        error: The rejection, when ok is False
    """
    ok: bool = True
    changed: bool = False
    text: str | None = None
    value: Any = None
    error: CharGridError | None = None

    @classmethod
    def rejected(cls, error: CharGridError) -> CommandResult:
        return cls(ok=False, error=error)


# -----------------------------------------------------------------------------
# Dispatch
# -----------------------------------------------------------------------------

Handler = Callable[[EditorSession, Any], CommandResult]

_HANDLERS: dict[type[Command], Handler] = {}


def _handles(command_type: type[Command]) -> Callable[[Handler], Handler]:
    """Register fn as the handler for command_type."""
    def register(fn: Handler) -> Handler:
        _HANDLERS[command_type] = fn
        return fn
    return register


def apply(session: EditorSession, command: Command) -> CommandResult:
    """Run one command against a session.

    Raises:
        TypeError: If command is not a known Command type
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"unknown command: {command!r}")
    try:
        return handler(session, command)
    except OutOfBounds as exc:
        logger.error("Rejected %r: %s", command, exc)
        return CommandResult.rejected(exc)
    except CharGridError as exc:
        logger.warning("Rejected %r: %s", command, exc)
        return CommandResult.rejected(exc)


# Keyboard editing

@_handles(TypeCharacter)
def _type_character(session: EditorSession, cmd: TypeCharacter) -> CommandResult:
    session.type_character(cmd.char)
    return CommandResult(changed=True)


@_handles(Backspace)
def _backspace(session: EditorSession, cmd: Backspace) -> CommandResult:
    session.backspace()
    return CommandResult(changed=True)


@_handles(Navigate)
def _navigate(session: EditorSession, cmd: Navigate) -> CommandResult:
    return CommandResult(value=session.navigate(cmd.direction, cmd.extend))


# Selection

@_handles(SelectRectangle)
def _select_rectangle(session: EditorSession, cmd: SelectRectangle) -> CommandResult:
    session.select_rectangle(cmd.r1, cmd.c1, cmd.r2, cmd.c2)
    return CommandResult()


@_handles(ToggleCell)
def _toggle_cell(session: EditorSession, cmd: ToggleCell) -> CommandResult:
    session.toggle_cell(cmd.row, cmd.col)
    return CommandResult()


@_handles(ExtendSelection)
def _extend_selection(session: EditorSession, cmd: ExtendSelection) -> CommandResult:
    session.extend_from_anchor(cmd.row, cmd.col)
    return CommandResult()


@_handles(ClearSelection)
def _clear_selection(session: EditorSession, cmd: ClearSelection) -> CommandResult:
    session.clear_selection()
    return CommandResult()


@_handles(PointerDown)
def _pointer_down(session: EditorSession, cmd: PointerDown) -> CommandResult:
    session.pointer_down(cmd.row, cmd.col, toggle=cmd.toggle, extend=cmd.extend)
    return CommandResult()


@_handles(PointerEnter)
def _pointer_enter(session: EditorSession, cmd: PointerEnter) -> CommandResult:
    session.pointer_enter(cmd.row, cmd.col)
    return CommandResult()


@_handles(PointerUp)
def _pointer_up(session: EditorSession, cmd: PointerUp) -> CommandResult:
    return CommandResult(changed=session.pointer_up(cmd.target))


@_handles(DoubleActivate)
def _double_activate(session: EditorSession, cmd: DoubleActivate) -> CommandResult:
    session.double_activate(cmd.row, cmd.col)
    return CommandResult()


@_handles(MoveSelection)
def _move_selection(session: EditorSession, cmd: MoveSelection) -> CommandResult:
    return CommandResult(changed=session.move_selection(cmd.d_row, cmd.d_col))


@_handles(FillSelection)
def _fill_selection(session: EditorSession, cmd: FillSelection) -> CommandResult:
    return CommandResult(changed=session.fill_selection(cmd.char))


@_handles(Delete)
def _delete(session: EditorSession, cmd: Delete) -> CommandResult:
    return CommandResult(changed=session.delete_selection())


# Undo and clipboard

@_handles(Undo)
def _undo(session: EditorSession, cmd: Undo) -> CommandResult:
    return CommandResult(changed=session.undo())


@_handles(Copy)
def _copy(session: EditorSession, cmd: Copy) -> CommandResult:
    return CommandResult(text=session.copy(full_grid=cmd.full_grid))


@_handles(Cut)
def _cut(session: EditorSession, cmd: Cut) -> CommandResult:
    text = session.cut()
    return CommandResult(changed=text is not None, text=text)


@_handles(Paste)
def _paste(session: EditorSession, cmd: Paste) -> CommandResult:
    return CommandResult(changed=session.paste(cmd.text))


@_handles(ClearGrid)
def _clear_grid(session: EditorSession, cmd: ClearGrid) -> CommandResult:
    session.clear_grid()
    return CommandResult(changed=True)


@_handles(Resize)
def _resize(session: EditorSession, cmd: Resize) -> CommandResult:
    session.resize(cmd.rows, cmd.cols)
    return CommandResult(changed=True)


# Branches

@_handles(CreateBranch)
def _create_branch(session: EditorSession, cmd: CreateBranch) -> CommandResult:
    session.create_branch(cmd.name)
    return CommandResult(changed=True)


@_handles(SwitchBranch)
def _switch_branch(session: EditorSession, cmd: SwitchBranch) -> CommandResult:
    session.switch_branch(cmd.name)
    return CommandResult(changed=True)


@_handles(DeleteBranch)
def _delete_branch(session: EditorSession, cmd: DeleteBranch) -> CommandResult:
    session.delete_branch(cmd.name)
    return CommandResult(changed=True)


@_handles(SaveSnapshot)
def _save_snapshot(session: EditorSession, cmd: SaveSnapshot) -> CommandResult:
    return CommandResult(changed=True, value=session.save_snapshot())


@_handles(LoadSnapshot)
def _load_snapshot(session: EditorSession, cmd: LoadSnapshot) -> CommandResult:
    session.load_snapshot(cmd.index)
    return CommandResult(changed=True)


@_handles(DeleteSnapshot)
def _delete_snapshot(session: EditorSession, cmd: DeleteSnapshot) -> CommandResult:
    session.delete_snapshot(cmd.index)
    return CommandResult(changed=True)


# Playback

@_handles(TogglePlayback)
def _toggle_playback(session: EditorSession, cmd: TogglePlayback) -> CommandResult:
    return CommandResult(value=session.playback.toggle())


@_handles(StartPlayback)
def _start_playback(session: EditorSession, cmd: StartPlayback) -> CommandResult:
    return CommandResult(value=session.playback.start())


@_handles(StopPlayback)
def _stop_playback(session: EditorSession, cmd: StopPlayback) -> CommandResult:
    session.playback.stop()
    return CommandResult(value=False)


@_handles(SetPlaybackOptions)
def _set_playback_options(session: EditorSession, cmd: SetPlaybackOptions) -> CommandResult:
    if cmd.interval_ms is not None:
        session.playback.interval_ms = cmd.interval_ms
    if cmd.loop is not None:
        session.playback.loop = cmd.loop
    return CommandResult()
