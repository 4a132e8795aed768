"""
Canvas state model.

The canvas (nodes, edges, viewport) belongs to the editor. The replay core
only hands events to an applier that rewrites it.
"""

import hashlib
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_VIEWPORT: Dict[str, Any] = {"x": 0, "y": 0, "zoom": 1}


def _default_viewport() -> Dict[str, Any]:
    return dict(DEFAULT_VIEWPORT)


@dataclass(frozen=True)
class CanvasState:
    """
    Immutable canvas snapshot.

    Fields:
        nodes: Node records, each with at least "id" and "position"
        edges: Edge records, each with at least "id", "source", "target"
        viewport: {"x", "y", "zoom"}

    Use the with_* helpers to derive a new state.
    """
    nodes: List[Dict[str, Any]] = field(default_factory=list)
    edges: List[Dict[str, Any]] = field(default_factory=list)
    viewport: Dict[str, Any] = field(default_factory=_default_viewport)

    @staticmethod
    def empty() -> "CanvasState":
        return CanvasState()

    def node(self, node_id: str) -> Optional[Dict[str, Any]]:
        for n in self.nodes:
            if n.get("id") == node_id:
                return n
        return None

    def edge(self, edge_id: str) -> Optional[Dict[str, Any]]:
        for e in self.edges:
            if e.get("id") == edge_id:
                return e
        return None

    def with_nodes(self, nodes: List[Dict[str, Any]]) -> "CanvasState":
        return CanvasState(nodes=list(nodes), edges=self.edges, viewport=self.viewport)

    def with_edges(self, edges: List[Dict[str, Any]]) -> "CanvasState":
        return CanvasState(nodes=self.nodes, edges=list(edges), viewport=self.viewport)

    def with_viewport(self, viewport: Dict[str, Any]) -> "CanvasState":
        return CanvasState(nodes=self.nodes, edges=self.edges, viewport=dict(viewport))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [dict(n) for n in self.nodes],
            "edges": [dict(e) for e in self.edges],
            "viewport": dict(self.viewport),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "CanvasState":
        data = data or {}
        return CanvasState(
            nodes=list(data.get("nodes") or []),
            edges=list(data.get("edges") or []),
            viewport=dict(data.get("viewport") or DEFAULT_VIEWPORT),
        )


def canvas_fingerprint(canvas: CanvasState) -> str:
    """
    SHA-256 of the canvas dict serialized with sorted keys and no whitespace.

    Equal canvases produce equal fingerprints regardless of key order.
    """
    raw = json.dumps(canvas.to_dict(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()
