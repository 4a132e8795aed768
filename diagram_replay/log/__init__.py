"""
In-memory event log.

This module provides:
- EventLog: Ordered, append-only (until cleared) container of Events
"""

from .store import EventLog

__all__ = [
    "EventLog",
]
