"""
Cancellable timer scheduling for the session engines.

Engines never sleep or spawn threads. They ask a Scheduler to call them back
later and keep the returned handle so they can cancel it on every phase
transition. In the CLI the scheduler is the running asyncio loop; tests drive
a ManualScheduler by advancing its clock explicitly.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run ``callback`` after ``delay`` seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Schedules callbacks on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class ManualTimer:
    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler driven by ``advance()``.

    Timers due at the same instant fire in the order they were scheduled.
    Callbacks may schedule new timers; those fire within the same
    ``advance()`` call if they fall inside the advanced window.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, ManualTimer]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + delay, callback)
        heapq.heappush(self._queue, (timer.when, next(self._seq), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of live (not cancelled) timers."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, timer = heapq.heappop(self._queue)
            self.now = when
            if not timer.cancelled:
                timer.callback()
        self.now = target
