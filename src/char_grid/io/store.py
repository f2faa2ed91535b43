"""Session persistence - one JSON blob holding branches and the live grid.

Layout:
    {
      "branches": {"main": [{"grid": [["A", " "], ...], "rows": 2,
                             "cols": 2, "timestamp": "..."}]},
      "activeBranch": "main",
      "currentGrid": {"grid": [[...], ...], "rows": 2, "cols": 2}
    }
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from char_grid.branch.snapshot import Snapshot
from char_grid.branch.store import MAIN_BRANCH, BranchStore
from char_grid.errors import CharGridError, StoreError
from char_grid.playback.scheduler import Scheduler, TimerHandle
from char_grid.session import EditorSession

logger = logging.getLogger(__name__)

DEFAULT_AUTOSAVE_MS = 2000


def session_to_dict(session: EditorSession) -> dict[str, Any]:
    """Serialize branches, the active branch and the current grid."""
    return {
        "branches": session.branches.to_dict(),
        "activeBranch": session.branches.active,
        "currentGrid": {
            "grid": [list(row) for row in session.grid.contents()],
            "rows": session.rows,
            "cols": session.cols,
        },
    }


def session_from_dict(data: dict[str, Any], **session_kwargs: Any) -> EditorSession:
    """
    Rebuild a session from a serialized blob.

    Every cell is normalized to one character on the way in. A blob
    without a current grid keeps the session's default size.

    Args:
        data: Parsed blob
        **session_kwargs: Passed to EditorSession (scheduler, history_limit, ...)

    Raises:
        StoreError: If the blob is malformed
    """
    try:
        raw_branches = data.get("branches") or {MAIN_BRANCH: []}
        branches = BranchStore.from_mapping(
            {
                str(name): [Snapshot.from_dict(item) for item in items]
                for name, items in raw_branches.items()
            },
            active=data.get("activeBranch") or MAIN_BRANCH,
        )
        session = EditorSession(branches=branches, **session_kwargs)
        current = data.get("currentGrid")
        if current:
            session.restore_grid(current.get("grid", []), int(current["rows"]), int(current["cols"]))
    except StoreError:
        raise
    except (CharGridError, KeyError, TypeError, ValueError, AttributeError) as exc:
        raise StoreError(f"malformed session data: {exc}") from exc
    return session


class SessionStore:
    """
    Reads and writes the session blob at a file path.

    Example:
        store = SessionStore("art.json")
        session = store.load()
        session.type_character("x")
        store.save(session)
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self, **session_kwargs: Any) -> EditorSession:
        """Load the stored session, or a fresh one if the file is absent."""
        if not self.path.exists():
            logger.info("No session at %s, starting fresh", self.path)
            return EditorSession(**session_kwargs)

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise StoreError(f"{self.path} is not valid JSON: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise StoreError(f"{self.path} is not valid UTF-8: {exc}") from exc
        except OSError as exc:
            raise StoreError(f"cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"{self.path} does not hold a session object")

        session = session_from_dict(data, **session_kwargs)
        logger.info("Loaded session from %s (%dx%d, %d branches)",
                    self.path, session.rows, session.cols, len(session.branches))
        return session

    def save(self, session: EditorSession) -> None:
        """Write the session, replacing the file in one step."""
        payload = json.dumps(session_to_dict(session), ensure_ascii=False)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.debug("Saved session to %s", self.path)

    def attach(self, session: EditorSession) -> None:
        """Save after every state-changing operation of session."""
        session.add_listener(self.save)


class AutoSaver:
    """
    Periodically writes the session, independent of edits.

    The engine is single-threaded, so each save sees a settled state.
    """

    def __init__(
        self,
        session: EditorSession,
        store: SessionStore,
        scheduler: Scheduler,
        interval_ms: int = DEFAULT_AUTOSAVE_MS,
    ) -> None:
        self._session = session
        self._store = store
        self._scheduler = scheduler
        self.interval_ms = interval_ms
        self._timer: TimerHandle | None = None
        self.saves = 0

    @property
    def running(self) -> bool:
        return self._timer is not None

    def start(self) -> None:
        """Begin the save timer. Restarting cancels the previous timer."""
        self.stop()
        self._timer = self._scheduler.call_later(self.interval_ms, self._tick)

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _tick(self) -> None:
        self._timer = self._scheduler.call_later(self.interval_ms, self._tick)
        self._store.save(self._session)
        self.saves += 1
