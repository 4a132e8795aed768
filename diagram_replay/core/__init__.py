"""
Core recording and application primitives.

This module provides the foundational abstractions for diagram replay:
- Event: Immutable mutation records
- CanvasState: Nodes, edges and viewport owned by the editor
- EventRecorder: Appends mutation events to the log
- Applier: Handler registry turning one event into a canvas mutation
- Clock: Millisecond time sources
"""

from .events import Event, EventType, SNAPSHOT_DEFAULTS, snapshot_event
from .canvas import CanvasState, DEFAULT_VIEWPORT, canvas_fingerprint
from .recorder import EventRecorder
from .applier import Applier, CanvasApplier
from .clock import Clock, SystemClock, ManualClock
from .errors import (
    DiagramReplayError,
    UnknownEventTypeError,
    ReplayConfigError,
    GestureError,
)

__all__ = [
    "Event",
    "EventType",
    "SNAPSHOT_DEFAULTS",
    "snapshot_event",
    "CanvasState",
    "DEFAULT_VIEWPORT",
    "canvas_fingerprint",
    "EventRecorder",
    "Applier",
    "CanvasApplier",
    "Clock",
    "SystemClock",
    "ManualClock",
    "DiagramReplayError",
    "UnknownEventTypeError",
    "ReplayConfigError",
    "GestureError",
]
