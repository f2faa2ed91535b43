"""Shared fixtures for engine tests."""

import pytest

from char_grid.playback.scheduler import ManualScheduler
from char_grid.session import EditorSession


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual clock for playback and autosave."""
    return ManualScheduler()


@pytest.fixture
def session(scheduler: ManualScheduler) -> EditorSession:
    """A blank 2x3 session."""
    return EditorSession(rows=2, cols=3, scheduler=scheduler)


@pytest.fixture
def wide_session(scheduler: ManualScheduler) -> EditorSession:
    """A blank 5x8 session."""
    return EditorSession(rows=5, cols=8, scheduler=scheduler)
