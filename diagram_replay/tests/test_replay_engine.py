"""
Tests for the replay state machine.

Critical: ordering, cadence, termination and cancellation of pending ticks.
"""

import pytest

from diagram_replay.config import ReplayCadence
from diagram_replay.core.errors import ReplayConfigError
from diagram_replay.core.events import Event, EventType
from diagram_replay.log.store import EventLog
from diagram_replay.replay.engine import ReplayEngine, ReplayPhase
from diagram_replay.replay.scheduler import ManualScheduler


class CallLog:
    """Applier that remembers (virtual time, event) for each call."""

    def __init__(self, scheduler):
        self.scheduler = scheduler
        self.calls = []

    def __call__(self, event):
        self.calls.append((self.scheduler.now, event))

    @property
    def types(self):
        return [ev.event_type.value for _, ev in self.calls]

    @property
    def times(self):
        return [t for t, _ in self.calls]


def _engine(n=0, speed=1000, cadence=ReplayCadence.FIXED, gap=10):
    log = EventLog()
    for i in range(n):
        log.append(Event(timestamp=i * gap, event_type=EventType.NODE_ADD, data={"id": f"n{i}"}))
    sched = ManualScheduler()
    return ReplayEngine(log, sched, replay_speed=speed, cadence=cadence), sched


def test_initial_state():
    engine, _ = _engine()
    st = engine.state

    assert st.is_replaying is False
    assert st.current_event_index == 0
    assert st.replay_speed == 1000
    assert st.events == ()
    assert st.phase is ReplayPhase.IDLE


def test_start_on_empty_log_is_noop():
    engine, sched = _engine()
    applier = CallLog(sched)

    engine.start_replay(applier)

    assert engine.is_replaying is False
    assert applier.calls == []
    assert sched.pending == 0


def test_full_replay_applies_snapshot_then_log_in_order():
    engine, sched = _engine(n=4, speed=250)
    applier = CallLog(sched)

    engine.start_replay(applier)
    assert engine.is_replaying
    assert applier.types == ["snapshot"]

    sched.run_until_idle()

    assert applier.types == ["snapshot"] + ["node_add"] * 4
    assert [ev.data["id"] for _, ev in applier.calls[1:]] == ["n0", "n1", "n2", "n3"]
    assert applier.times == [0, 250, 500, 750, 1000]


def test_goes_idle_after_final_event_without_further_ticks():
    engine, sched = _engine(n=3, speed=100)
    applier = CallLog(sched)

    engine.start_replay(applier)
    sched.advance(300)

    assert len(applier.calls) == 4
    assert engine.is_replaying is False
    assert engine.current_event_index == 2
    assert sched.pending == 0


def test_one_tick_pending_at_a_time():
    engine, sched = _engine(n=5, speed=100)
    engine.start_replay(CallLog(sched))

    for _ in range(5):
        assert sched.pending == 1
        sched.advance(100)
    assert sched.pending == 0


def test_current_index_tracks_last_applied():
    engine, sched = _engine(n=3, speed=100)
    engine.start_replay(CallLog(sched))

    assert engine.current_event_index == 0
    sched.advance(100)
    assert engine.current_event_index == 0
    sched.advance(100)
    assert engine.current_event_index == 1


def test_stop_after_k_applications():
    engine, sched = _engine(n=5, speed=100)
    applier = CallLog(sched)
    engine.start_replay(applier)

    sched.advance(300)  # k = 3 log events applied
    engine.stop_replay()
    sched.advance(10_000)

    assert engine.is_replaying is False
    assert engine.current_event_index == 2
    assert len(applier.calls) == 1 + 3
    assert sched.pending == 0


def test_stop_when_idle_is_noop():
    engine, _ = _engine(n=2)
    engine.stop_replay()

    assert engine.phase is ReplayPhase.IDLE


def test_toggle_starts_and_stops():
    engine, sched = _engine(n=3, speed=100)
    applier = CallLog(sched)

    assert engine.toggle_replay(applier) is True
    sched.advance(100)
    assert engine.toggle_replay(applier) is False
    sched.run_until_idle()

    assert applier.types == ["snapshot", "node_add"]


def test_restart_while_replaying_cancels_old_run():
    engine, sched = _engine(n=3, speed=100)
    first = CallLog(sched)
    second = CallLog(sched)

    engine.start_replay(first)
    sched.advance(150)
    engine.start_replay(second)
    sched.run_until_idle()

    assert first.types == ["snapshot", "node_add"]
    assert second.types == ["snapshot", "node_add", "node_add", "node_add"]
    assert second.times == [150, 250, 350, 450]


def test_stale_tick_discarded_even_if_not_cancelled():
    engine, sched = _engine(n=2, speed=100)
    applier = CallLog(sched)
    engine.start_replay(applier)

    # Simulate a scheduler whose cancel() is lost.
    stale = engine._pending
    stale.cancel = lambda: None  # type: ignore[assignment]
    engine.stop_replay()
    sched.advance(1000)

    assert applier.types == ["snapshot"]


def test_clear_events_then_start_is_noop():
    engine, sched = _engine(n=3)
    engine.clear_events()
    applier = CallLog(sched)
    engine.start_replay(applier)

    assert len(engine.log) == 0
    assert applier.calls == []
    assert engine.is_replaying is False


def test_clear_during_replay_keeps_phase_and_captured_events():
    engine, sched = _engine(n=3, speed=100)
    applier = CallLog(sched)
    engine.start_replay(applier)
    sched.advance(100)

    engine.clear_events()
    assert engine.is_replaying
    assert engine.state.events == ()

    sched.run_until_idle()
    assert applier.types == ["snapshot"] + ["node_add"] * 3


def test_new_events_during_replay_not_played():
    engine, sched = _engine(n=2, speed=100)
    applier = CallLog(sched)
    engine.start_replay(applier)
    engine.log.append(Event(timestamp=99, event_type=EventType.NODE_DELETE, data={"nodeId": "n0"}))
    sched.run_until_idle()

    assert applier.types == ["snapshot", "node_add", "node_add"]


def test_applier_error_does_not_halt_replay():
    engine, sched = _engine(n=3, speed=100)
    seen = []

    def flaky(event):
        seen.append(event)
        if event.data == {"id": "n1"}:
            raise RuntimeError("boom")

    engine.start_replay(flaky)
    sched.run_until_idle()

    assert len(seen) == 4
    assert engine.is_replaying is False
    assert engine.current_event_index == 2


def test_applier_may_stop_replay():
    engine, sched = _engine(n=4, speed=100)
    calls = []

    def stopper(event):
        calls.append(event)
        if len(calls) == 3:
            engine.stop_replay()

    engine.start_replay(stopper)
    sched.run_until_idle()

    assert len(calls) == 3
    assert engine.is_replaying is False
    # snapshot, n0, n1 applied: n1 is index 1
    assert engine.current_event_index == 1


def test_set_replay_speed_applies_to_next_tick():
    engine, sched = _engine(n=3, speed=100)
    applier = CallLog(sched)
    engine.start_replay(applier)
    sched.advance(100)
    engine.set_replay_speed(500)
    sched.run_until_idle()

    # The tick already pending keeps its 100 ms delay.
    assert applier.times == [0, 100, 200, 700]


@pytest.mark.parametrize("bad", [0, -5, 1.5, "100", True, None])
def test_invalid_speed_rejected(bad):
    engine, _ = _engine()
    with pytest.raises(ReplayConfigError):
        engine.set_replay_speed(bad)


def test_recorded_cadence_scales_timestamp_gaps():
    log = EventLog()
    for ts in (1000, 1400, 1400, 2400):
        log.append(Event(timestamp=ts, event_type=EventType.NODE_ADD, data={"id": str(ts)}))
    sched = ManualScheduler()
    engine = ReplayEngine(log, sched, replay_speed=500, cadence="recorded")
    applier = CallLog(sched)

    engine.start_replay(applier)
    sched.run_until_idle()

    # First entry waits one replay_speed, then gaps * 0.5
    assert applier.times == [0, 500, 700, 700, 1200]


def test_listeners_see_transitions():
    engine, sched = _engine(n=2, speed=100)
    states = []
    unsubscribe = engine.subscribe(states.append)

    engine.start_replay(CallLog(sched))
    sched.run_until_idle()
    unsubscribe()
    engine.clear_events()

    assert [s.is_replaying for s in states] == [True, True, False]
    assert states[-1].current_event_index == 1
    assert len(states) == 3


def test_applier_restart_keeps_new_run_index():
    engine, sched = _engine(n=3, speed=100)
    calls = []

    def restarter(event):
        calls.append(event)
        if len(calls) == 3:
            engine.start_replay(lambda ev: None)

    engine.start_replay(restarter)
    sched.advance(200)

    assert engine.is_replaying
    assert engine.current_event_index == 0
