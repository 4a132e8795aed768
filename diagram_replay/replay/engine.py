"""
Replay engine: Idle/Replaying state machine for timed re-application.

One replay run:
1. capture a snapshot of the log
2. apply a synthetic snapshot event (blank canvas)
3. apply each captured event, one per scheduler tick

Only one tick is ever pending; the next one is scheduled after the current
application returns. Every run (and every stop) bumps a generation number,
and a tick from an older generation is discarded on arrival.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from ..config import (
    DEFAULT_REPLAY_SPEED_MS,
    ReplayCadence,
    parse_cadence,
    validate_replay_speed,
)
from ..core.events import Event, snapshot_event
from ..log.store import EventLog
from .scheduler import ScheduledTick, Scheduler

logger = logging.getLogger(__name__)

ApplyFn = Callable[[Event], None]
Listener = Callable[["ReplayState"], None]


class ReplayPhase(str, Enum):
    IDLE = "idle"
    REPLAYING = "replaying"


@dataclass(frozen=True)
class ReplayState:
    """
    Read-only view of the engine for UI controls.

    Fields:
        events: Snapshot of the log
        is_replaying: True while a replay run is in progress
        replay_speed: Milliseconds between applied events
        current_event_index: Index of the most recently replayed event
    """
    events: Tuple[Event, ...] = ()
    is_replaying: bool = False
    replay_speed: int = DEFAULT_REPLAY_SPEED_MS
    current_event_index: int = 0

    @property
    def phase(self) -> ReplayPhase:
        return ReplayPhase.REPLAYING if self.is_replaying else ReplayPhase.IDLE

    @property
    def event_count(self) -> int:
        return len(self.events)


class ReplayEngine:
    """
    Drives an applier over the event log at a fixed cadence.

    Usage:
        engine = ReplayEngine(log, ManualScheduler())
        engine.start_replay(applier)
        scheduler.run_until_idle()
    """

    def __init__(
        self,
        log: EventLog,
        scheduler: Scheduler,
        replay_speed: int = DEFAULT_REPLAY_SPEED_MS,
        cadence: ReplayCadence = ReplayCadence.FIXED,
    ) -> None:
        self.log = log
        self.scheduler = scheduler
        self._replay_speed = validate_replay_speed(replay_speed)
        self.cadence = parse_cadence(cadence)

        self._phase = ReplayPhase.IDLE
        self._index = 0
        self._generation = 0
        self._pending: Optional[ScheduledTick] = None
        self._playlist: Tuple[Event, ...] = ()
        self._applier: Optional[ApplyFn] = None
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> ReplayState:
        return ReplayState(
            events=self.log.snapshot(),
            is_replaying=self._phase is ReplayPhase.REPLAYING,
            replay_speed=self._replay_speed,
            current_event_index=self._index,
        )

    @property
    def phase(self) -> ReplayPhase:
        return self._phase

    @property
    def is_replaying(self) -> bool:
        return self._phase is ReplayPhase.REPLAYING

    @property
    def replay_speed(self) -> int:
        return self._replay_speed

    @property
    def current_event_index(self) -> int:
        return self._index

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a state listener.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify_listeners(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Replay state listener failed")

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start_replay(self, applier: ApplyFn) -> None:
        """
        Start replaying the log through applier.

        No-op on an empty log. When already replaying, the current run is
        cancelled and a new one starts from the beginning.
        """
        restarting = self._phase is ReplayPhase.REPLAYING
        if restarting:
            logger.warning("start_replay called while replaying; restarting run")
            self._halt()

        events = self.log.snapshot()
        if not events:
            logger.debug("start_replay ignored: event log is empty")
            if restarting:
                self.notify_listeners()
            return

        self._generation += 1
        gen = self._generation
        self._playlist = events
        self._applier = applier
        self._phase = ReplayPhase.REPLAYING
        self._index = 0
        logger.info(
            "Replay started: %d events at %d ms (%s cadence)",
            len(events),
            self._replay_speed,
            self.cadence.value,
        )
        self.notify_listeners()

        self._deliver(snapshot_event())
        if gen != self._generation:
            return
        self._schedule(gen, 0)

    def stop_replay(self) -> None:
        """Cancel the pending tick and go Idle. Canvas and index stay as they are."""
        if self._phase is not ReplayPhase.REPLAYING:
            return
        self._halt()
        logger.info("Replay stopped at index %d", self._index)
        self.notify_listeners()

    def toggle_replay(self, applier: ApplyFn) -> bool:
        """
        Stop when replaying, start when idle.

        Returns:
            True if a replay is running afterwards
        """
        if self._phase is ReplayPhase.REPLAYING:
            self.stop_replay()
        else:
            self.start_replay(applier)
        return self.is_replaying

    def clear_events(self) -> None:
        """
        Empty the log.

        Phase, speed and canvas are untouched; a run in flight keeps playing
        the snapshot it captured at start.
        """
        self.log.clear()
        logger.info("Event log cleared")
        self.notify_listeners()

    def set_replay_speed(self, replay_speed: int) -> None:
        """Change the cadence; applies from the next scheduled tick."""
        self._replay_speed = validate_replay_speed(replay_speed)
        self.notify_listeners()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _halt(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._generation += 1
        self._phase = ReplayPhase.IDLE
        self._playlist = ()
        self._applier = None

    def _delay_before(self, index: int) -> int:
        if self.cadence is ReplayCadence.FIXED or index == 0:
            return self._replay_speed
        gap = max(0, self._playlist[index].timestamp - self._playlist[index - 1].timestamp)
        return round(gap * self._replay_speed / 1000)

    def _schedule(self, gen: int, index: int) -> None:
        self._pending = self.scheduler.call_later(
            self._delay_before(index), lambda: self._tick(gen, index)
        )

    def _tick(self, gen: int, index: int) -> None:
        if gen != self._generation or self._phase is not ReplayPhase.REPLAYING:
            logger.debug("Discarding stale replay tick (generation %d)", gen)
            return
        self._pending = None

        self._deliver(self._playlist[index])
        # The entry is applied even if the applier stopped the run; a restart owns the index.
        if gen == self._generation or self._phase is ReplayPhase.IDLE:
            self._index = index
        if gen != self._generation:
            return

        if index + 1 >= len(self._playlist):
            self._finish()
            return
        self.notify_listeners()
        self._schedule(gen, index + 1)

    def _finish(self) -> None:
        applied = len(self._playlist)
        self._phase = ReplayPhase.IDLE
        self._playlist = ()
        self._applier = None
        self._pending = None
        logger.info("Replay finished: %d events applied", applied)
        self.notify_listeners()

    def _deliver(self, event: Event) -> None:
        # A failing entry is logged and skipped; playback continues.
        try:
            self._applier(event)
        except Exception:
            logger.exception(
                "Applier failed on %s event; continuing replay", event.event_type.value
            )
