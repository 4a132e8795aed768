"""
Replay system for timed re-application of recorded events.

Replay resets the canvas with a snapshot event, then feeds logged events to
an applier one per tick, in log order.
"""

from .engine import ReplayEngine, ReplayPhase, ReplayState
from .scheduler import AsyncioScheduler, ManualScheduler, ScheduledTick, Scheduler
from .session import ReplaySession

__all__ = [
    "ReplayEngine",
    "ReplayPhase",
    "ReplayState",
    "ReplaySession",
    "Scheduler",
    "ScheduledTick",
    "ManualScheduler",
    "AsyncioScheduler",
]
