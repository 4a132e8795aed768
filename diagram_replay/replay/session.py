"""
Replay session: the public recording/replay surface of one editing session.

Owns the event log, the recorder and the replay engine. The recorder is
gated on the engine, so nothing is recorded while a replay is running.
"""

import asyncio
from typing import Any, Callable, Optional, Tuple, Union

from ..config import ReplayConfig
from ..core.clock import Clock, SystemClock
from ..core.events import Event, EventType
from ..core.recorder import EventRecorder
from ..log.store import EventLog
from .engine import ApplyFn, Listener, ReplayEngine, ReplayState
from .scheduler import Scheduler


class ReplaySession:
    def __init__(
        self,
        scheduler: Scheduler,
        config: Optional[ReplayConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.config = config or ReplayConfig()
        self.log = EventLog()
        self.engine = ReplayEngine(
            self.log,
            scheduler,
            replay_speed=self.config.replay_speed,
            cadence=self.config.cadence,
        )
        self.recorder = EventRecorder(
            self.log,
            clock=clock or SystemClock(),
            session_id=self.config.session_id,
            user_id=self.config.user_id,
            is_suppressed=lambda: self.engine.is_replaying,
        )

    @property
    def state(self) -> ReplayState:
        return self.engine.state

    @property
    def events(self) -> Tuple[Event, ...]:
        return self.log.snapshot()

    @property
    def is_replaying(self) -> bool:
        return self.engine.is_replaying

    def record_event(self, event_type: Union[EventType, str], data: Any) -> None:
        before = len(self.log)
        self.recorder.record_event(event_type, data)
        if len(self.log) != before:
            self.engine.notify_listeners()

    def start_replay(self, applier: ApplyFn) -> None:
        self.engine.start_replay(applier)

    def stop_replay(self) -> None:
        self.engine.stop_replay()

    def toggle_replay(self, applier: ApplyFn) -> bool:
        return self.engine.toggle_replay(applier)

    def clear_events(self) -> None:
        """Stop any replay, then empty the log."""
        self.engine.stop_replay()
        self.engine.clear_events()

    def set_replay_speed(self, replay_speed: int) -> None:
        self.engine.set_replay_speed(replay_speed)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.engine.subscribe(listener)

    async def wait_idle(self) -> ReplayState:
        """
        Wait until the engine is Idle.

        Only meaningful with an asyncio-driven scheduler.
        """
        if not self.engine.is_replaying:
            return self.state

        done: "asyncio.Future[ReplayState]" = asyncio.get_running_loop().create_future()

        def on_change(state: ReplayState) -> None:
            if not state.is_replaying and not done.done():
                done.set_result(state)

        unsubscribe = self.subscribe(on_change)
        try:
            return await done
        finally:
            unsubscribe()
