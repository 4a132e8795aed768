"""
Applier: interprets one event as a canvas mutation.

Handlers are pure functions (canvas, event) -> canvas. The applier owns no
canvas; CanvasApplier reads the current canvas from a target and writes the
result back through the target's setters.

A replay must never halt on a single bad entry, so:
- unregistered event types are ignored
- malformed payloads leave the canvas untouched
"""

import logging
from typing import Any, Callable, Dict, List, Protocol, Union

from .canvas import CanvasState
from .events import Event, EventType

logger = logging.getLogger(__name__)

# Handler signature: (current_canvas, event) -> new_canvas
Handler = Callable[[CanvasState, Event], CanvasState]

# Errors that mean "payload did not have the expected shape".
MALFORMED_PAYLOAD_ERRORS = (KeyError, TypeError, AttributeError, ValueError)


class Applier:
    """
    Registry of event handlers for canvas transitions.

    Usage:
        applier = Applier()
        applier.register("node_add", on_node_add)
        new_canvas = applier.reduce(canvas, event)
    """

    def __init__(self) -> None:
        self._handlers: Dict[EventType, Handler] = {}

    def register(self, event_type: Union[EventType, str], handler: Handler) -> None:
        """
        Register event handler.

        Args:
            event_type: Event tag
            handler: Pure function (canvas, event) -> canvas
        """
        self._handlers[EventType.parse(event_type)] = handler

    def handles(self, event_type: Union[EventType, str]) -> bool:
        return EventType.parse(event_type) in self._handlers

    def reduce(self, canvas: CanvasState, event: Event) -> CanvasState:
        """
        Apply event to canvas using registered handler.

        Returns:
            New canvas, or the input canvas unchanged when the event type has
            no handler or its payload is malformed
        """
        handler = self._handlers.get(event.event_type)
        if handler is None:
            logger.debug("No handler for %s, ignoring", event.event_type.value)
            return canvas
        try:
            return handler(canvas, event)
        except MALFORMED_PAYLOAD_ERRORS as ex:
            logger.warning(
                "Malformed %s payload ignored: %s",
                event.event_type.value,
                ex,
                extra={"event_data": repr(event.data)},
            )
            return canvas


class CanvasTarget(Protocol):
    """The editor surface an applier writes to."""

    @property
    def canvas(self) -> CanvasState:
        ...

    def set_nodes(self, nodes: List[Dict[str, Any]]) -> None:
        ...

    def set_edges(self, edges: List[Dict[str, Any]]) -> None:
        ...

    def set_viewport(self, viewport: Dict[str, Any]) -> None:
        ...


def on_snapshot(canvas: CanvasState, ev: Event) -> CanvasState:
    return CanvasState.from_dict(ev.data)


def on_node_add(canvas: CanvasState, ev: Event) -> CanvasState:
    return canvas.with_nodes(canvas.nodes + [dict(ev.data)])


def on_node_update(canvas: CanvasState, ev: Event) -> CanvasState:
    node_id = ev.data["nodeId"]
    position = dict(ev.data["position"])
    nodes = [
        {**n, "position": position} if n.get("id") == node_id else n
        for n in canvas.nodes
    ]
    return canvas.with_nodes(nodes)


def on_node_delete(canvas: CanvasState, ev: Event) -> CanvasState:
    node_id = ev.data["nodeId"]
    return canvas.with_nodes([n for n in canvas.nodes if n.get("id") != node_id])


def on_edge_add(canvas: CanvasState, ev: Event) -> CanvasState:
    return canvas.with_edges(canvas.edges + [dict(ev.data)])


def on_edge_delete(canvas: CanvasState, ev: Event) -> CanvasState:
    edge_id = ev.data["edgeId"]
    return canvas.with_edges([e for e in canvas.edges if e.get("id") != edge_id])


def on_viewport_change(canvas: CanvasState, ev: Event) -> CanvasState:
    return canvas.with_viewport(dict(ev.data))


def register_canvas_handlers(applier: Applier) -> None:
    # edge_update is reserved: left unregistered so it is ignored.
    applier.register(EventType.SNAPSHOT, on_snapshot)
    applier.register(EventType.NODE_ADD, on_node_add)
    applier.register(EventType.NODE_UPDATE, on_node_update)
    applier.register(EventType.NODE_DELETE, on_node_delete)
    applier.register(EventType.EDGE_ADD, on_edge_add)
    applier.register(EventType.EDGE_DELETE, on_edge_delete)
    applier.register(EventType.VIEWPORT_CHANGE, on_viewport_change)


class CanvasApplier(Applier):
    """
    Stock applier for the editor canvas.

    Callable, so it can be passed straight to ReplayEngine.start_replay().
    Only the setters whose slice actually changed are called.
    """

    def __init__(self, target: CanvasTarget) -> None:
        super().__init__()
        self.target = target
        register_canvas_handlers(self)

    def apply(self, event: Event) -> None:
        before = self.target.canvas
        after = self.reduce(before, event)
        if after is before:
            return
        if after.nodes is not before.nodes:
            self.target.set_nodes(after.nodes)
        if after.edges is not before.edges:
            self.target.set_edges(after.edges)
        if after.viewport is not before.viewport:
            self.target.set_viewport(after.viewport)

    def __call__(self, event: Event) -> None:
        self.apply(event)
