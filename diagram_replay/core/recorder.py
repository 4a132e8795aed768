"""
Event recorder: turns mutation notifications into log entries.
"""

import copy
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from .clock import Clock, SystemClock
from .events import Event, EventType

if TYPE_CHECKING:
    from ..log.store import EventLog

logger = logging.getLogger(__name__)


class EventRecorder:
    """
    Appends one Event per record_event() call.

    No schema validation, de-duplication or rate limiting: every call
    produces a distinct entry stamped with clock.now().

    Usage:
        recorder = EventRecorder(log, session_id="demo-session")
        recorder.record_event("node_add", {"id": "n1", "position": {"x": 0, "y": 0}})
    """

    def __init__(
        self,
        log: "EventLog",
        clock: Optional[Clock] = None,
        session_id: Optional[str] = None,
        user_id: Optional[str] = None,
        is_suppressed: Optional[Callable[[], bool]] = None,
    ) -> None:
        self.log = log
        self.clock = clock or SystemClock()
        self.session_id = session_id
        self.user_id = user_id
        self._is_suppressed = is_suppressed

    def record_event(self, event_type: Union[EventType, str], data: Any) -> None:
        """
        Record a mutation.

        Args:
            event_type: Tag from the EventType enumeration
            data: Payload, stored as a deep copy

        Raises:
            UnknownEventTypeError: If event_type is not a known tag
        """
        et = EventType.parse(event_type)

        # Replay-driven mutations must not feed back into the log.
        if self._is_suppressed is not None and self._is_suppressed():
            logger.debug("Dropped %s event recorded during replay", et.value)
            return

        event = Event(
            timestamp=self.clock.now(),
            event_type=et,
            data=copy.deepcopy(data),
            session_id=self.session_id,
            user_id=self.user_id,
        )
        index = self.log.append(event)
        logger.debug("Recorded %s at index %d", et.value, index)
