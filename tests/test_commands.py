"""Tests for the command dispatcher."""

import logging

import pytest

from char_grid.commands import (
    Backspace,
    ClearGrid,
    ClearSelection,
    Command,
    CommandResult,
    Copy,
    CreateBranch,
    Cut,
    Delete,
    DeleteBranch,
    DeleteSnapshot,
    DoubleActivate,
    ExtendSelection,
    FillSelection,
    LoadSnapshot,
    MoveSelection,
    Navigate,
    Paste,
    PointerDown,
    PointerEnter,
    PointerUp,
    Resize,
    SaveSnapshot,
    SelectRectangle,
    SetPlaybackOptions,
    StartPlayback,
    StopPlayback,
    SwitchBranch,
    ToggleCell,
    TogglePlayback,
    TypeCharacter,
    Undo,
    apply,
)
from char_grid.errors import (
    DuplicateBranch,
    EmptyInput,
    IndexOutOfRange,
    InvalidDimensions,
    OutOfBounds,
    ProtectedBranch,
    UnknownBranch,
)
from char_grid.playback.scheduler import ManualScheduler
from char_grid.session import Direction, EditorSession


class TestEditingCommands:
    """Keyboard, selection and clipboard commands."""

    def test_typing_sequence(self, session: EditorSession) -> None:
        assert apply(session, TypeCharacter('A')).changed
        apply(session, TypeCharacter('B'))
        assert session.grid.contents() == ('AB ', '   ')
        apply(session, Backspace())
        assert session.cursor == (0, 1)
        assert apply(session, Undo()).changed
        assert session.grid.contents() == ('AB ', '   ')

    def test_navigate_reports_move(self, session: EditorSession) -> None:
        assert apply(session, Navigate(Direction.LEFT)).value is False
        assert apply(session, Navigate(Direction.RIGHT)).value is True
        apply(session, Navigate(Direction.DOWN, extend=True))
        assert len(session.selection) == 2

    def test_selection_commands(self, wide_session: EditorSession) -> None:
        apply(wide_session, SelectRectangle(0, 0, 1, 1))
        assert len(wide_session.selection) == 4
        apply(wide_session, ToggleCell(3, 3))
        assert (3, 3) in wide_session.selection
        apply(wide_session, ClearSelection())
        assert wide_session.selection.is_empty
        apply(wide_session, ExtendSelection(1, 2))
        assert len(wide_session.selection) == 6
        apply(wide_session, DoubleActivate(0, 0))
        assert len(wide_session.selection) == 1

    def test_pointer_drag(self, wide_session: EditorSession) -> None:
        apply(wide_session, PointerDown(0, 0))
        apply(wide_session, PointerEnter(0, 1))
        assert apply(wide_session, PointerUp((0, 1))).changed is False
        apply(wide_session, FillSelection('#'))

        apply(wide_session, PointerDown(0, 0))
        assert apply(wide_session, PointerUp((1, 0))).changed is True
        assert wide_session.grid.contents()[:2] == ('        ', '##      ')

    def test_move_and_delete(self, wide_session: EditorSession) -> None:
        assert apply(wide_session, MoveSelection(1, 1)).changed is False
        wide_session.grid.write(0, 0, 'x')
        apply(wide_session, SelectRectangle(0, 0, 0, 0))
        assert apply(wide_session, MoveSelection(2, 2)).changed
        assert wide_session.grid.read(2, 2) == 'x'
        apply(wide_session, SelectRectangle(2, 2, 2, 2))
        assert apply(wide_session, Delete()).changed
        assert wide_session.grid.read(2, 2) == ' '

    def test_clipboard_commands(self, session: EditorSession) -> None:
        apply(session, Paste('hi\nyo'))
        assert apply(session, Copy(full_grid=True)).text == 'hi\nyo'
        assert apply(session, Copy()).text is None

        apply(session, SelectRectangle(0, 0, 0, 1))
        result = apply(session, Cut())
        assert result.changed and result.text == 'hi'
        assert session.grid.contents() == ('   ', 'yo ')
        assert apply(session, Paste('')).changed is False

    def test_clear_and_resize(self, session: EditorSession) -> None:
        apply(session, TypeCharacter('A'))
        apply(session, ClearGrid())
        assert session.text() == '\n'
        apply(session, Resize(4, 5))
        assert session.grid.size == (4, 5)


class TestBranchCommands:
    """Branch, snapshot and playback commands."""

    def test_snapshot_lifecycle(self, session: EditorSession) -> None:
        apply(session, TypeCharacter('A'))
        assert apply(session, SaveSnapshot()).value == 0
        assert apply(session, SaveSnapshot()).value == 1
        apply(session, ClearGrid())
        apply(session, LoadSnapshot(0))
        assert session.grid.read(0, 0) == 'A'
        apply(session, DeleteSnapshot(1))
        assert len(session.snapshots()) == 1

    def test_branch_lifecycle(self, session: EditorSession) -> None:
        apply(session, CreateBranch('alt'))
        assert session.branches.active == 'alt'
        apply(session, SwitchBranch('main'))
        assert session.branches.active == 'main'
        apply(session, DeleteBranch('alt'))
        assert session.branches.names() == ['main']

    def test_playback_commands(self, scheduler: ManualScheduler) -> None:
        session = EditorSession(rows=1, cols=1, scheduler=scheduler)
        assert apply(session, StartPlayback()).value is False
        apply(session, SaveSnapshot())
        apply(session, SetPlaybackOptions(interval_ms=50, loop=True))
        assert session.playback.interval_ms == 50
        assert session.playback.loop is True
        assert apply(session, TogglePlayback()).value is True
        assert apply(session, StopPlayback()).value is False
        assert scheduler.pending == 0

    def test_playback_options_keep_unset_values(self, session: EditorSession) -> None:
        session.playback.loop = True
        apply(session, SetPlaybackOptions(interval_ms=0))
        assert session.playback.interval_ms == 500
        assert session.playback.loop is True


class TestRejections:
    """Engine errors come back as rejected results."""

    @pytest.mark.parametrize('command, error', [
        (DeleteBranch('main'), ProtectedBranch),
        (DeleteBranch('nope'), UnknownBranch),
        (SwitchBranch('nope'), UnknownBranch),
        (CreateBranch(''), EmptyInput),
        (LoadSnapshot(3), IndexOutOfRange),
        (DeleteSnapshot(0), IndexOutOfRange),
        (Resize(0, 5), InvalidDimensions),
        (SelectRectangle(0, 0, 9, 9), OutOfBounds),
    ])
    def test_rejected(self, session: EditorSession, command: Command, error: type) -> None:
        before = session.grid.contents()
        result = apply(session, command)
        assert result.ok is False
        assert isinstance(result.error, error)
        assert session.grid.contents() == before

    def test_duplicate_branch(self, session: EditorSession) -> None:
        apply(session, CreateBranch('alt'))
        result = apply(session, CreateBranch('alt'))
        assert isinstance(result.error, DuplicateBranch)

    def test_rejection_is_logged(self, session: EditorSession, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger='char_grid'):
            apply(session, DeleteBranch('main'))
        assert any('cannot be deleted' in r.getMessage() for r in caplog.records)

    def test_unknown_command(self, session: EditorSession) -> None:
        class Bogus(Command):
            pass

        with pytest.raises(TypeError):
            apply(session, Bogus())

    def test_default_result(self) -> None:
        result = CommandResult()
        assert result.ok and not result.changed and result.error is None
