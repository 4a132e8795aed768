"""
Tests for the canvas applier.

Critical: a bad entry must never raise; it leaves the canvas untouched.
"""

from diagram_replay.core.applier import Applier, CanvasApplier
from diagram_replay.core.canvas import CanvasState, DEFAULT_VIEWPORT
from diagram_replay.core.events import Event, EventType, snapshot_event


class FakeCanvas:
    """Minimal applier target that counts setter calls."""

    def __init__(self, canvas=None):
        self.canvas = canvas or CanvasState.empty()
        self.calls = []

    def set_nodes(self, nodes):
        self.calls.append("nodes")
        self.canvas = self.canvas.with_nodes(nodes)

    def set_edges(self, edges):
        self.calls.append("edges")
        self.canvas = self.canvas.with_edges(edges)

    def set_viewport(self, viewport):
        self.calls.append("viewport")
        self.canvas = self.canvas.with_viewport(viewport)


def _ev(et, data):
    return Event(timestamp=1, event_type=EventType.parse(et), data=data)


def _node(node_id, x=0, y=0):
    return {"id": node_id, "position": {"x": x, "y": y}, "data": {"label": node_id}}


def test_snapshot_replaces_everything():
    target = FakeCanvas(
        CanvasState(nodes=[_node("old")], edges=[{"id": "e"}], viewport={"x": 9, "y": 9, "zoom": 3})
    )
    CanvasApplier(target)(snapshot_event())

    assert target.canvas.nodes == []
    assert target.canvas.edges == []
    assert target.canvas.viewport == DEFAULT_VIEWPORT


def test_snapshot_missing_keys_default():
    target = FakeCanvas(CanvasState(nodes=[_node("old")]))
    CanvasApplier(target)(_ev("snapshot", {}))

    assert target.canvas == CanvasState.empty()


def test_node_lifecycle():
    target = FakeCanvas()
    applier = CanvasApplier(target)

    applier(_ev("node_add", _node("n1")))
    applier(_ev("node_add", _node("n2")))
    applier(_ev("node_update", {"nodeId": "n1", "position": {"x": 5, "y": 5}}))
    applier(_ev("node_delete", {"nodeId": "n2"}))

    assert [n["id"] for n in target.canvas.nodes] == ["n1"]
    assert target.canvas.node("n1")["position"] == {"x": 5, "y": 5}
    assert target.canvas.node("n1")["data"] == {"label": "n1"}


def test_node_update_missing_node_is_noop():
    target = FakeCanvas(CanvasState(nodes=[_node("n1", 1, 1)]))
    CanvasApplier(target)(_ev("node_update", {"nodeId": "ghost", "position": {"x": 5, "y": 5}}))

    assert target.canvas.nodes == [_node("n1", 1, 1)]


def test_edge_add_then_delete():
    target = FakeCanvas()
    applier = CanvasApplier(target)

    applier(_ev("edge_add", {"id": "e1", "source": "n1", "target": "n2"}))
    assert len(target.canvas.edges) == 1
    applier(_ev("edge_delete", {"edgeId": "e1"}))

    assert target.canvas.edges == []


def test_viewport_change_only_touches_viewport():
    target = FakeCanvas()
    CanvasApplier(target)(_ev("viewport_change", {"x": 10, "y": -4, "zoom": 0.5}))

    assert target.canvas.viewport == {"x": 10, "y": -4, "zoom": 0.5}
    assert target.calls == ["viewport"]


def test_edge_update_is_ignored():
    target = FakeCanvas(CanvasState(edges=[{"id": "e1", "source": "a", "target": "b"}]))
    CanvasApplier(target)(_ev("edge_update", {"edgeId": "e1", "source": "z"}))

    assert target.canvas.edges == [{"id": "e1", "source": "a", "target": "b"}]
    assert target.calls == []


def test_malformed_payloads_are_noops():
    before = CanvasState(nodes=[_node("n1")])
    target = FakeCanvas(before)
    applier = CanvasApplier(target)

    applier(_ev("node_update", {"nodeId": "n1"}))
    applier(_ev("node_update", None))
    applier(_ev("node_add", "garbage"))
    applier(_ev("edge_delete", {}))
    applier(_ev("snapshot", ["not", "a", "dict"]))
    applier(_ev("viewport_change", 7))

    assert target.canvas is before
    assert target.calls == []


def test_custom_applier_registry():
    applier = Applier()
    applier.register("node_add", lambda c, ev: c.with_nodes(c.nodes + [ev.data]))

    out = applier.reduce(CanvasState.empty(), _ev("node_add", {"id": "x"}))
    untouched = applier.reduce(out, _ev("node_delete", {"nodeId": "x"}))

    assert out.nodes == [{"id": "x"}]
    assert untouched is out
    assert applier.handles("node_add")
    assert not applier.handles(EventType.NODE_DELETE)
