"""Playback of branch snapshots as a timed animation."""

from char_grid.playback.engine import (
    DEFAULT_INTERVAL_MS,
    PlaybackEngine,
    PlaybackSession,
    PlaybackState,
)
from char_grid.playback.scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    Scheduler,
    TimerHandle,
)

__all__ = [
    "DEFAULT_INTERVAL_MS",
    "PlaybackEngine",
    "PlaybackSession",
    "PlaybackState",
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
]
