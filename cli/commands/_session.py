"""
Shared helpers: build a session and run a gesture script into it.
"""

import random
from typing import Any, Dict, List, Optional

from diagram_replay.config import ReplayConfig
from diagram_replay.core.clock import ManualClock, SystemClock
from diagram_replay.editor import DiagramEditor
from diagram_replay.replay.scheduler import Scheduler
from diagram_replay.replay.session import ReplaySession
from diagram_replay.script import DEFAULT_SCRIPT, load_script, run_script


def resolve_script(script_path: Optional[str]) -> List[Dict[str, Any]]:
    if script_path:
        return load_script(script_path)
    return DEFAULT_SCRIPT


def record_session(
    scheduler: Scheduler,
    config: ReplayConfig,
    ops: List[Dict[str, Any]],
    seed: Optional[int] = None,
) -> DiagramEditor:
    """Create an editor on a fresh session and perform ops on it."""
    clock = ManualClock(SystemClock().now())
    session = ReplaySession(scheduler, config=config, clock=clock)
    editor = DiagramEditor(session, rng=random.Random(seed))
    run_script(editor, ops, clock=clock)
    return editor
