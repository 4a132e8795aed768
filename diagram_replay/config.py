"""
Runtime configuration for replay sessions.

Environment Variables:
    DIAGRAM_REPLAY_SPEED_MS: Milliseconds between replayed events - default: 1000
    DIAGRAM_REPLAY_SESSION_ID: Session id stamped on recorded events - default: demo-session
    DIAGRAM_REPLAY_USER_ID: User id stamped on recorded events - default: unset
    DIAGRAM_REPLAY_CADENCE: fixed or recorded - default: fixed
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .core.errors import ReplayConfigError

DEFAULT_REPLAY_SPEED_MS = 1000
DEFAULT_SESSION_ID = "demo-session"


class ReplayCadence(str, Enum):
    # Constant replay_speed between events.
    FIXED = "fixed"
    # Recorded timestamp gaps, scaled by replay_speed / 1000.
    RECORDED = "recorded"


def validate_replay_speed(value: Any) -> int:
    """
    Check a replay speed.

    Raises:
        ReplayConfigError: If value is not a positive integer
    """
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ReplayConfigError(f"replay speed must be a positive integer (ms), got {value!r}")
    return value


def parse_cadence(value: Any) -> ReplayCadence:
    try:
        return ReplayCadence(value)
    except ValueError:
        raise ReplayConfigError(
            f"unsupported cadence: {value!r} (expected 'fixed' or 'recorded')"
        ) from None


@dataclass
class ReplayConfig:
    replay_speed: int = DEFAULT_REPLAY_SPEED_MS
    session_id: Optional[str] = DEFAULT_SESSION_ID
    user_id: Optional[str] = None
    cadence: ReplayCadence = ReplayCadence.FIXED

    def __post_init__(self) -> None:
        validate_replay_speed(self.replay_speed)
        self.cadence = parse_cadence(self.cadence)

    @staticmethod
    def from_env() -> "ReplayConfig":
        raw_speed = os.getenv("DIAGRAM_REPLAY_SPEED_MS", str(DEFAULT_REPLAY_SPEED_MS))
        try:
            speed = int(raw_speed)
        except ValueError:
            raise ReplayConfigError(f"DIAGRAM_REPLAY_SPEED_MS is not an integer: {raw_speed!r}") from None
        return ReplayConfig(
            replay_speed=speed,
            session_id=os.getenv("DIAGRAM_REPLAY_SESSION_ID", DEFAULT_SESSION_ID) or None,
            user_id=os.getenv("DIAGRAM_REPLAY_USER_ID") or None,
            cadence=parse_cadence(os.getenv("DIAGRAM_REPLAY_CADENCE", "fixed").strip().lower()),
        )
