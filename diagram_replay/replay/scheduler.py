"""
Tick schedulers for replay playback.

The engine only needs "run this callback after N milliseconds" and a handle
it can cancel. Two implementations:
- ManualScheduler: virtual time, advanced explicitly (tests, tooling)
- AsyncioScheduler: loop.call_later on a running asyncio event loop
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

Callback = Callable[[], None]


class ScheduledTick(ABC):
    """Handle for one pending callback."""

    @abstractmethod
    def cancel(self) -> None:
        ...

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        ...


class Scheduler(ABC):
    """
    Abstract single-threaded timer.

    Implementations must run callbacks on the same logical thread that
    scheduled them.
    """

    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callback) -> ScheduledTick:
        """
        Schedule callback after delay_ms milliseconds.

        Returns:
            Handle that cancels the callback if it has not run yet
        """
        ...


class _ManualTick(ScheduledTick):
    def __init__(self, due: int, callback: Callback) -> None:
        self.due = due
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """
    Deterministic virtual-time scheduler.

    Nothing runs until advance() or run_until_idle() is called. Callbacks
    due at the same instant run in scheduling order.

    Usage:
        sched = ManualScheduler()
        sched.call_later(1000, fn)
        sched.advance(1000)   # fn runs, sched.now == 1000
    """

    def __init__(self) -> None:
        self.now = 0
        self._queue: List[Tuple[int, int, _ManualTick]] = []
        self._counter = itertools.count()

    def call_later(self, delay_ms: int, callback: Callback) -> ScheduledTick:
        tick = _ManualTick(self.now + max(0, int(delay_ms)), callback)
        heapq.heappush(self._queue, (tick.due, next(self._counter), tick))
        return tick

    @property
    def pending(self) -> int:
        """Number of scheduled, not cancelled callbacks."""
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    def next_due(self) -> Optional[int]:
        for due, _, tick in sorted(self._queue):
            if not tick.cancelled:
                return due
        return None

    def advance(self, ms: int) -> int:
        """
        Move virtual time forward by ms, running every callback that falls due.

        Callbacks scheduled while advancing also run if due within the window.

        Returns:
            Number of callbacks run
        """
        if ms < 0:
            raise ValueError("cannot advance a scheduler backwards")
        target = self.now + ms
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, tick = heapq.heappop(self._queue)
            if tick.cancelled:
                continue
            self.now = due
            tick.callback()
            ran += 1
        self.now = target
        return ran

    def run_until_idle(self, max_callbacks: int = 100_000) -> int:
        """Run callbacks in due order until none remain."""
        ran = 0
        while ran < max_callbacks:
            due = self.next_due()
            if due is None:
                break
            ran += self.advance(due - self.now)
        return ran


class _AsyncioTick(ScheduledTick):
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """
    Scheduler backed by an asyncio event loop.

    The loop defaults to the running loop at first use, so construct and
    use it from inside a coroutine.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay_ms: int, callback: Callback) -> ScheduledTick:
        handle = self.loop.call_later(max(0, delay_ms) / 1000.0, callback)
        return _AsyncioTick(handle)
