"""
Event model for recorded diagram mutations.

Events are immutable records of a single canvas change.
"""

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from .errors import UnknownEventTypeError


class EventType(str, Enum):
    NODE_ADD = "node_add"
    NODE_UPDATE = "node_update"
    NODE_DELETE = "node_delete"
    EDGE_ADD = "edge_add"
    EDGE_UPDATE = "edge_update"
    EDGE_DELETE = "edge_delete"
    VIEWPORT_CHANGE = "viewport_change"
    SNAPSHOT = "snapshot"

    @classmethod
    def parse(cls, value: Union["EventType", str]) -> "EventType":
        """
        Resolve a tag to an EventType.

        Raises:
            UnknownEventTypeError: If value is not one of the known tags
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownEventTypeError(f"Unknown event type: {value!r}") from None


# Canvas state a replay resets to before the first logged event.
SNAPSHOT_DEFAULTS: Dict[str, Any] = {
    "nodes": [],
    "edges": [],
    "viewport": {"x": 0, "y": 0, "zoom": 1},
}


@dataclass(frozen=True)
class Event:
    """
    Immutable event record.

    Fields:
        timestamp: Wall-clock milliseconds at recording time
        event_type: One of the EventType tags
        data: Payload whose shape depends on event_type (not validated)
        session_id: Recording session identifier
        user_id: Actor identifier, preserved but unused by replay
    """
    timestamp: int
    event_type: EventType
    data: Any = None
    session_id: Optional[str] = None
    user_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "timestamp": self.timestamp,
            "eventType": self.event_type.value,
            "data": self.data,
        }
        if self.session_id is not None:
            out["sessionId"] = self.session_id
        if self.user_id is not None:
            out["userId"] = self.user_id
        return out


def snapshot_event() -> Event:
    """Synthetic reset event carrying an empty canvas and default viewport."""
    return Event(
        timestamp=0,
        event_type=EventType.SNAPSHOT,
        data=copy.deepcopy(SNAPSHOT_DEFAULTS),
    )
