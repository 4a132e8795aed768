"""
Tests for the canvas model and canvas fingerprints.
"""

from diagram_replay.core.canvas import CanvasState, DEFAULT_VIEWPORT, canvas_fingerprint


def test_fingerprint_ignores_key_order():
    """Canvases differing only in dict key order fingerprint equally."""
    c1 = CanvasState(
        nodes=[{"id": "n1", "position": {"x": 5, "y": 5}, "data": {"label": "日本語"}}],
        viewport={"x": 0, "y": 0, "zoom": 1},
    )
    c2 = CanvasState(
        nodes=[{"data": {"label": "日本語"}, "position": {"y": 5, "x": 5}, "id": "n1"}],
        viewport={"zoom": 1, "y": 0, "x": 0},
    )

    assert canvas_fingerprint(c1) == canvas_fingerprint(c2)


def test_fingerprint_detects_position_change():
    c1 = CanvasState(nodes=[{"id": "n1", "position": {"x": 5, "y": 5}}])
    c2 = CanvasState(nodes=[{"id": "n1", "position": {"x": 6, "y": 5}}])

    assert canvas_fingerprint(c1) != canvas_fingerprint(c2)


def test_fingerprint_is_stable_hex():
    fp = canvas_fingerprint(CanvasState.empty())

    assert fp == canvas_fingerprint(CanvasState.empty())
    assert len(fp) == 64


def test_with_helpers_leave_original_untouched():
    base = CanvasState.empty()
    moved = base.with_viewport({"x": 3, "y": 4, "zoom": 2})

    assert base.viewport == DEFAULT_VIEWPORT
    assert moved.viewport == {"x": 3, "y": 4, "zoom": 2}
    assert moved.nodes is base.nodes


def test_from_dict_fills_defaults():
    canvas = CanvasState.from_dict({"nodes": [{"id": "a"}]})

    assert canvas.nodes == [{"id": "a"}]
    assert canvas.edges == []
    assert canvas.viewport == DEFAULT_VIEWPORT
