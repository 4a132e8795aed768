"""
Gesture scripts: scripted editor sessions for demos and tests.

A script is a JSON list of gestures, e.g.
    [{"op": "add_node", "position": {"x": 100, "y": 100}},
     {"op": "connect", "source": "node_0", "target": "node_1", "after_ms": 500}]

"after_ms" (default 250) advances the recording clock before the gesture so
recorded timestamps carry realistic gaps.
"""

import json
from typing import Any, Dict, List, Optional

from .core.clock import ManualClock
from .core.errors import GestureError
from .editor import DiagramEditor

DEFAULT_GAP_MS = 250

DEFAULT_SCRIPT: List[Dict[str, Any]] = [
    {"op": "add_node", "position": {"x": 100, "y": 100}, "label": "Start"},
    {"op": "add_node", "position": {"x": 300, "y": 100}, "label": "Process"},
    {"op": "add_node", "position": {"x": 200, "y": 300}, "label": "End"},
    {"op": "connect", "source": "node_0", "target": "node_1"},
    {"op": "connect", "source": "node_1", "target": "node_2"},
    {"op": "move_node", "node_id": "node_2", "position": {"x": 400, "y": 300}, "after_ms": 800},
    {"op": "viewport", "viewport": {"x": -50, "y": 20, "zoom": 1.25}},
    {"op": "remove_edge", "edge_id": "edge_0", "after_ms": 1200},
    {"op": "connect", "source": "node_0", "target": "node_2"},
    {"op": "delete_node", "node_id": "node_1", "after_ms": 600},
]

# op -> required fields
OPS: Dict[str, tuple] = {
    "add_node": (),
    "move_node": ("node_id", "position"),
    "delete_node": ("node_id",),
    "connect": ("source", "target"),
    "remove_edge": ("edge_id",),
    "viewport": ("viewport",),
}


def load_script(path: str) -> List[Dict[str, Any]]:
    """
    Read and validate a gesture script file.

    Raises:
        GestureError: If the file is not a JSON list of known gestures
    """
    try:
        with open(path, "r") as f:
            ops = json.load(f)
    except json.JSONDecodeError as err:
        raise GestureError(f"Invalid JSON in script {path}: {err}") from err
    validate_script(ops)
    return ops


def validate_script(ops: Any) -> None:
    if not isinstance(ops, list):
        raise GestureError("Gesture script must be a JSON list")
    for i, step in enumerate(ops):
        if not isinstance(step, dict):
            raise GestureError(f"Step {i}: expected an object, got {type(step).__name__}")
        op = step.get("op")
        if op not in OPS:
            raise GestureError(f"Step {i}: unknown op {op!r}")
        missing = [k for k in OPS[op] if k not in step]
        if missing:
            raise GestureError(f"Step {i} ({op}): missing {', '.join(missing)}")
        gap = step.get("after_ms", DEFAULT_GAP_MS)
        if isinstance(gap, bool) or not isinstance(gap, int) or gap < 0:
            raise GestureError(f"Step {i} ({op}): after_ms must be a non-negative integer, got {gap!r}")


def run_script(
    editor: DiagramEditor,
    ops: List[Dict[str, Any]],
    clock: Optional[ManualClock] = None,
) -> int:
    """
    Perform each gesture on the editor.

    Returns:
        Number of gestures performed
    """
    validate_script(ops)
    for step in ops:
        if clock is not None:
            clock.advance(step.get("after_ms", DEFAULT_GAP_MS))
        _perform(editor, step)
    return len(ops)


def _perform(editor: DiagramEditor, step: Dict[str, Any]) -> None:
    op = step["op"]
    if op == "add_node":
        editor.add_node(position=step.get("position"), label=step.get("label"))
    elif op == "move_node":
        editor.move_node(step["node_id"], step["position"])
    elif op == "delete_node":
        editor.delete_node(step["node_id"])
    elif op == "connect":
        editor.connect(
            step["source"],
            step["target"],
            source_handle=step.get("source_handle"),
            target_handle=step.get("target_handle"),
        )
    elif op == "remove_edge":
        editor.remove_edge(step["edge_id"])
    elif op == "viewport":
        editor.change_viewport(step["viewport"])
