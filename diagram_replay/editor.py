"""
Headless diagram editor.

Stands in for the rendering collaborator: user gestures mutate the canvas
and record events, while the plain setters (used by the replay applier)
mutate without recording.
"""

import logging
import random
from typing import Any, Dict, List, Optional

from .core.applier import CanvasApplier
from .core.canvas import CanvasState
from .core.errors import GestureError
from .core.events import EventType
from .replay.session import ReplaySession

logger = logging.getLogger(__name__)


class DiagramEditor:
    """
    Canvas plus gesture handlers for one session.

    Usage:
        editor = DiagramEditor(ReplaySession(ManualScheduler()))
        a = editor.add_node()
        b = editor.add_node()
        editor.connect(a["id"], b["id"])
        editor.toggle_replay()
    """

    def __init__(self, session: ReplaySession, rng: Optional[random.Random] = None) -> None:
        self.session = session
        self.rng = rng or random.Random()
        self._canvas = CanvasState.empty()
        self._node_seq = 0
        self._edge_seq = 0
        self.applier = CanvasApplier(self)

    # ------------------------------------------------------------------
    # Canvas access (non-recording)
    # ------------------------------------------------------------------

    @property
    def canvas(self) -> CanvasState:
        return self._canvas

    @property
    def nodes(self) -> List[Dict[str, Any]]:
        return self._canvas.nodes

    @property
    def edges(self) -> List[Dict[str, Any]]:
        return self._canvas.edges

    @property
    def viewport(self) -> Dict[str, Any]:
        return self._canvas.viewport

    def set_nodes(self, nodes: List[Dict[str, Any]]) -> None:
        self._canvas = self._canvas.with_nodes(nodes)

    def set_edges(self, edges: List[Dict[str, Any]]) -> None:
        self._canvas = self._canvas.with_edges(edges)

    def set_viewport(self, viewport: Dict[str, Any]) -> None:
        self._canvas = self._canvas.with_viewport(viewport)

    # ------------------------------------------------------------------
    # Gestures (recording)
    # ------------------------------------------------------------------

    def add_node(
        self,
        position: Optional[Dict[str, float]] = None,
        label: Optional[str] = None,
    ) -> Dict[str, Any]:
        node_id = f"node_{self._node_seq}"
        self._node_seq += 1
        if position is None:
            position = {
                "x": self.rng.random() * 400 + 100,
                "y": self.rng.random() * 400 + 100,
            }
        node = {
            "id": node_id,
            "position": dict(position),
            "data": {"label": label or f"Node {self._node_seq}"},
            "type": "default",
        }
        self.set_nodes(self.nodes + [node])
        self.session.record_event(EventType.NODE_ADD, node)
        return node

    def drag_node(self, node_id: str, position: Dict[str, float], dragging: bool = True) -> None:
        """
        Move a node. Only the settled position (dragging=False) is recorded.

        Raises:
            GestureError: If node_id is not on the canvas
        """
        self._require_node(node_id)
        position = dict(position)
        self.set_nodes(
            [{**n, "position": position} if n.get("id") == node_id else n for n in self.nodes]
        )
        if not dragging:
            self.session.record_event(
                EventType.NODE_UPDATE, {"nodeId": node_id, "position": position}
            )

    def move_node(self, node_id: str, position: Dict[str, float]) -> None:
        self.drag_node(node_id, position, dragging=False)

    def delete_node(self, node_id: str) -> None:
        """Remove a node and every edge attached to it."""
        self._require_node(node_id)
        attached = [e for e in self.edges if node_id in (e.get("source"), e.get("target"))]
        for edge in attached:
            self.remove_edge(edge["id"])
        self.set_nodes([n for n in self.nodes if n.get("id") != node_id])
        self.session.record_event(EventType.NODE_DELETE, {"nodeId": node_id})

    def connect(
        self,
        source: str,
        target: str,
        source_handle: Optional[str] = None,
        target_handle: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Draw an edge between two nodes.

        Returns:
            The new edge, or None if an identical connection already exists
        """
        self._require_node(source)
        self._require_node(target)
        for e in self.edges:
            if (
                e.get("source") == source
                and e.get("target") == target
                and e.get("sourceHandle") == source_handle
                and e.get("targetHandle") == target_handle
            ):
                logger.debug("Connection %s -> %s already exists", source, target)
                return None

        edge = {
            "id": f"edge_{self._edge_seq}",
            "source": source,
            "target": target,
            "sourceHandle": source_handle,
            "targetHandle": target_handle,
        }
        self._edge_seq += 1
        self.set_edges(self.edges + [edge])
        self.session.record_event(EventType.EDGE_ADD, edge)
        return edge

    def remove_edge(self, edge_id: str) -> None:
        if self._canvas.edge(edge_id) is None:
            raise GestureError(f"Edge not found: {edge_id}")
        self.set_edges([e for e in self.edges if e.get("id") != edge_id])
        self.session.record_event(EventType.EDGE_DELETE, {"edgeId": edge_id})

    def change_viewport(self, viewport: Dict[str, float]) -> None:
        self.set_viewport(viewport)
        self.session.record_event(EventType.VIEWPORT_CHANGE, dict(viewport))

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def toggle_replay(self) -> bool:
        return self.session.toggle_replay(self.applier)

    def clear_all(self) -> None:
        """Stop replay, empty canvas and log, restart node numbering."""
        self.session.stop_replay()
        self.set_nodes([])
        self.set_edges([])
        self.session.clear_events()
        self._node_seq = 0

    def replay_label(self) -> str:
        return "Stop replay" if self.session.is_replaying else "Replay"

    def status_line(self) -> str:
        state = self.session.state
        line = f"Events: {state.event_count}"
        if state.is_replaying:
            line += f" | Replaying: {state.current_event_index + 1}/{state.event_count}"
        return line

    def _require_node(self, node_id: str) -> None:
        if self._canvas.node(node_id) is None:
            raise GestureError(f"Node not found: {node_id}")
