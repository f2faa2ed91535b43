"""Tests for session persistence."""

import json
from pathlib import Path

import pytest

from char_grid.errors import StoreError
from char_grid.io.store import AutoSaver, SessionStore, session_from_dict, session_to_dict
from char_grid.playback.scheduler import ManualScheduler
from char_grid.session import EditorSession


@pytest.fixture
def store(tmp_path: Path) -> SessionStore:
    return SessionStore(tmp_path / 'session.json')


class TestSerialization:
    """Tests for the session blob layout."""

    def test_blob_layout(self, session: EditorSession) -> None:
        session.type_character('A')
        session.save_snapshot()
        session.create_branch('alt')

        data = session_to_dict(session)
        assert data['activeBranch'] == 'alt'
        assert list(data['branches']) == ['main', 'alt']
        assert data['branches']['alt'] == []
        shot = data['branches']['main'][0]
        assert shot['grid'] == [['A', ' ', ' '], [' ', ' ', ' ']]
        assert (shot['rows'], shot['cols']) == (2, 3)
        assert 'timestamp' in shot
        assert data['currentGrid'] == {
            'grid': [['A', ' ', ' '], [' ', ' ', ' ']],
            'rows': 2,
            'cols': 3,
        }

    def test_blob_is_json(self, session: EditorSession) -> None:
        session.save_snapshot()
        assert json.loads(json.dumps(session_to_dict(session))) == session_to_dict(session)

    def test_cells_are_normalized_on_load(self) -> None:
        session = session_from_dict({
            'branches': {'main': []},
            'activeBranch': 'main',
            'currentGrid': {'grid': [['xyz', ''], [None, 'q']], 'rows': 2, 'cols': 2},
        })
        assert session.grid.contents() == ('x ', ' q')

    def test_missing_main_and_bad_active(self) -> None:
        session = session_from_dict({'branches': {'alt': []}, 'activeBranch': 'ghost'})
        assert session.branches.names() == ['main', 'alt']
        assert session.branches.active == 'main'

    def test_missing_grid_keeps_default_size(self) -> None:
        session = session_from_dict({}, rows=4, cols=6)
        assert session.grid.size == (4, 6)
        assert session.branches.names() == ['main']

    @pytest.mark.parametrize('data', [
        {'branches': {'main': [{'grid': []}]}},
        {'branches': {'main': [{'rows': 'x', 'cols': 2}]}},
        {'currentGrid': {'grid': [], 'rows': 0, 'cols': 2}},
        {'branches': ['main']},
    ])
    def test_malformed(self, data: dict) -> None:
        with pytest.raises(StoreError):
            session_from_dict(data)


class TestSessionStore:
    """Tests for reading and writing the session file."""

    def test_round_trip(self, store: SessionStore, scheduler: ManualScheduler) -> None:
        session = EditorSession(rows=2, cols=3, scheduler=scheduler)
        session.paste('ab\ncd')
        session.save_snapshot()
        session.create_branch('alt')
        store.save(session)

        loaded = store.load()
        assert loaded.grid.contents() == ('ab ', 'cd ')
        assert loaded.branches.active == 'alt'
        assert loaded.branches.snapshots('main')[0].contents == ('ab ', 'cd ')
        assert not loaded.history.can_undo

    def test_save_leaves_no_temp_file(self, store: SessionStore, session: EditorSession) -> None:
        store.save(session)
        assert store.exists()
        assert [p.name for p in store.path.parent.iterdir()] == ['session.json']

    def test_missing_file_gives_fresh_session(self, store: SessionStore) -> None:
        assert not store.exists()
        session = store.load(rows=3, cols=4)
        assert session.grid.size == (3, 4)
        assert session.snapshots() == []

    def test_invalid_json(self, store: SessionStore) -> None:
        store.path.write_text('{not json', encoding='utf-8')
        with pytest.raises(StoreError):
            store.load()

    def test_invalid_utf8(self, store: SessionStore) -> None:
        store.path.write_bytes(b'{"branches": "\xff\xfe"}')
        with pytest.raises(StoreError, match='UTF-8'):
            store.load()

    def test_unreadable_path(self, store: SessionStore) -> None:
        store.path.mkdir()
        with pytest.raises(StoreError, match='cannot read'):
            store.load()

    def test_non_object_blob(self, store: SessionStore) -> None:
        store.path.write_text('[1, 2]', encoding='utf-8')
        with pytest.raises(StoreError):
            store.load()

    def test_attach_saves_on_change(self, store: SessionStore, session: EditorSession) -> None:
        store.attach(session)
        session.select_rectangle(0, 0, 1, 1)
        assert not store.exists()

        session.type_character('Z')
        assert store.load().grid.read(0, 0) == 'Z'


class TestAutoSaver:
    """Tests for the periodic save timer."""

    def test_saves_every_interval(self, store: SessionStore, session: EditorSession,
                                  scheduler: ManualScheduler) -> None:
        saver = AutoSaver(session, store, scheduler, interval_ms=2000)
        saver.start()
        assert saver.running
        scheduler.advance(1999)
        assert not store.exists()

        scheduler.advance(1)
        assert saver.saves == 1
        session.type_character('Q')
        scheduler.advance(4000)
        assert saver.saves == 3
        assert store.load().grid.read(0, 0) == 'Q'

    def test_stop(self, store: SessionStore, session: EditorSession, scheduler: ManualScheduler) -> None:
        saver = AutoSaver(session, store, scheduler)
        saver.start()
        saver.start()
        assert scheduler.pending == 1
        saver.stop()
        assert not saver.running
        scheduler.advance(10_000)
        assert saver.saves == 0
