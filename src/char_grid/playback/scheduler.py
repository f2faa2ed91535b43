"""Cancellable timers for playback ticks and autosave.

The engine never sleeps or blocks. Anything that must happen later is
handed to a Scheduler, which returns a handle that can cancel it.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class TimerHandle(Protocol):
    """A pending callback."""

    def cancel(self) -> None:
        ...


@runtime_checkable
class Scheduler(Protocol):
    """Runs callbacks after a delay in milliseconds."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        ...


# -----------------------------------------------------------------------------
# Virtual clock
# -----------------------------------------------------------------------------

@dataclass(order=True)
class _ManualTimer:
    due_ms: int
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Scheduler driven by an explicit virtual clock.

    Nothing fires until advance() moves time forward, which makes playback
    deterministic for headless use and tests.

    Example:
        scheduler = ManualScheduler()
        scheduler.call_later(500, tick)
        scheduler.advance(500)  # tick() runs here
    """

    def __init__(self) -> None:
        self._now_ms = 0
        self._queue: list[_ManualTimer] = []
        self._seq = itertools.count()

    @property
    def now_ms(self) -> int:
        return self._now_ms

    @property
    def pending(self) -> int:
        """Number of callbacks still waiting to fire."""
        return sum(1 for timer in self._queue if not timer.cancelled)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> _ManualTimer:
        timer = _ManualTimer(self._now_ms + max(0, delay_ms), next(self._seq), callback)
        heapq.heappush(self._queue, timer)
        return timer

    def advance(self, delta_ms: int) -> int:
        """Move the clock forward, firing every callback that comes due.

        Callbacks scheduled while advancing also fire if they fall inside
        the window.

        Returns:
            Number of callbacks fired
        """
        target = self._now_ms + delta_ms
        fired = 0
        while self._queue and self._queue[0].due_ms <= target:
            timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now_ms = timer.due_ms
            timer.callback()
            fired += 1
        self._now_ms = target
        return fired


# -----------------------------------------------------------------------------
# asyncio
# -----------------------------------------------------------------------------

class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0, delay_ms) / 1000.0, callback)
