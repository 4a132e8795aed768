"""
Exception types for the diagram replay engine.
"""


class DiagramReplayError(Exception):
    """Base class for all diagram replay errors."""
    pass


class UnknownEventTypeError(DiagramReplayError):
    """Raised when an event tag is outside the fixed event type enumeration."""
    pass


class ReplayConfigError(DiagramReplayError):
    """Raised when replay speed, cadence or environment config is invalid."""
    pass


class GestureError(DiagramReplayError):
    """Raised when an editor gesture targets a missing node/edge or a script is malformed."""
    pass
