"""
EventLog: ordered in-memory container of recorded events.

The log lives for one editing session only. It is mutated by two writers:
the recorder (append) and clear(). Everything else reads snapshots.
"""

from collections import Counter
from typing import Dict, Iterator, List, Tuple

from ..core.events import Event


class EventLog:
    """
    Insertion-ordered event log.

    Guarantees:
    - Append-only (events are never edited or removed individually)
    - Order equals append order
    - No capacity bound
    """

    def __init__(self) -> None:
        self._events: List[Event] = []

    def append(self, event: Event) -> int:
        """
        Append event to the end of the log.

        Returns:
            Index the event was stored at
        """
        self._events.append(event)
        return len(self._events) - 1

    def clear(self) -> None:
        """Remove every event."""
        self._events = []

    def snapshot(self) -> Tuple[Event, ...]:
        """Immutable view of the log as it is right now."""
        return tuple(self._events)

    def count_by_type(self) -> Dict[str, int]:
        counts = Counter(ev.event_type.value for ev in self._events)
        return dict(sorted(counts.items()))

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(tuple(self._events))

    def __getitem__(self, index: int) -> Event:
        return self._events[index]

    def __bool__(self) -> bool:
        return bool(self._events)
