"""Playback engine - replays a branch's snapshots onto the live grid."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from char_grid.playback.scheduler import Scheduler, TimerHandle

if TYPE_CHECKING:
    from char_grid.session import EditorSession

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 500


class PlaybackState(Enum):
    """Playback state machine."""
    STOPPED = auto()
    PLAYING = auto()


@dataclass
class PlaybackSession:
    """Transient state of a running playback."""
    branch: str
    index: int = 0


class PlaybackEngine:
    """
    Timed sequential application of the active branch's snapshots.

    Each frame is applied through the session's load_snapshot, so every
    frame shown also leaves an undo entry for the state it replaced. The
    active branch's snapshot list is read again on every tick: snapshots
    appended or deleted while playing affect what is shown next.

    Attributes:
        interval_ms: Delay between frames
        loop: Restart from the first snapshot after the last one
    """

    def __init__(
        self,
        session: EditorSession,
        scheduler: Scheduler,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        loop: bool = False,
    ) -> None:
        self._session = session
        self._scheduler = scheduler
        self._interval_ms = DEFAULT_INTERVAL_MS
        self.interval_ms = interval_ms
        self.loop = loop
        self._current: PlaybackSession | None = None
        self._timer: TimerHandle | None = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @interval_ms.setter
    def interval_ms(self, value: int) -> None:
        """Set the frame delay; non-positive values mean the default."""
        self._interval_ms = value if value and value > 0 else DEFAULT_INTERVAL_MS

    @property
    def scheduler(self) -> Scheduler:
        """Timer source driving the frames."""
        return self._scheduler

    @property
    def state(self) -> PlaybackState:
        return PlaybackState.PLAYING if self._current is not None else PlaybackState.STOPPED

    @property
    def is_playing(self) -> bool:
        return self._current is not None

    @property
    def position(self) -> int:
        """Index of the next snapshot to show (0 when stopped)."""
        return self._current.index if self._current is not None else 0

    @property
    def branch(self) -> str | None:
        """Branch being played, if any."""
        return self._current.branch if self._current is not None else None

    # -------------------------------------------------------------------------
    # Control
    # -------------------------------------------------------------------------

    def start(self) -> bool:
        """Start playing the active branch from its first snapshot.

        Returns:
            False if the active branch has no snapshots
        """
        store = self._session.branches
        if store.count() == 0:
            logger.debug("Nothing to play on branch %r", store.active)
            return False

        self._cancel_timer()
        self._current = PlaybackSession(branch=store.active)
        logger.info("Playback started on %r (%d ms, loop=%s)",
                    store.active, self._interval_ms, self.loop)
        self.advance()
        return True

    def stop(self) -> None:
        """Stop playing. Safe to call when already stopped."""
        self._cancel_timer()
        if self._current is not None:
            logger.info("Playback stopped on %r", self._current.branch)
        self._current = None

    def toggle(self) -> bool:
        """Start if stopped, stop if playing.

        Returns:
            Whether playback is running afterwards
        """
        if self.is_playing:
            self.stop()
        else:
            self.start()
        return self.is_playing

    def advance(self) -> None:
        """Show the next frame and schedule the one after it."""
        self._timer = None
        current = self._current
        if current is None:
            return

        total = self._session.branches.count()
        if current.index >= total:
            if self.loop and total > 0:
                current.index = 0
            else:
                self.stop()
                return

        try:
            self._session.load_snapshot(current.index)
        except Exception:
            logger.warning("Frame %d failed, stopping playback", current.index)
            self.stop()
            raise
        current.index += 1
        self._timer = self._scheduler.call_later(self._interval_ms, self.advance)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
