# canvas_view.py — one interactive canvas: model + bounding box + window listeners
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from coordinates import BoundingBox, first_contact, map_to_logical
from triangle_model import CANVAS_HEIGHT, CANVAS_WIDTH, TriangleInteractionModel

logger = logging.getLogger(__name__)

Event = Mapping[str, Any]
Handler = Callable[[Event], None]

MOVE_EVENTS = ("mousemove", "touchmove")
END_EVENTS = ("mouseup", "touchend")
DOWN_EVENTS = ("mousedown", "touchstart")


class ListenerRegistry:
    """Window-level listener table, keyed by event type."""

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = {}

    def add(self, event_type: str, handler: Handler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def remove(self, event_type: str, handler: Handler) -> None:
        handlers = self._handlers.get(event_type)
        if not handlers or handler not in handlers:
            return
        handlers.remove(handler)
        if not handlers:
            del self._handlers[event_type]

    def dispatch(self, event: Event) -> bool:
        kind = event.get("type")
        if not isinstance(kind, str):
            return False
        handlers = list(self._handlers.get(kind, ()))
        for h in handlers:
            h(event)
        return bool(handlers)

    def active_types(self) -> List[str]:
        return sorted(self._handlers)


class CanvasView:
    """
    Glue between raw pointer/touch payloads and the TriangleInteractionModel.

    Move/end listeners live on the registry only while a vertex is being
    dragged: they are added by pointer_down and removed by the end handler
    or teardown().
    """

    def __init__(self, model: Optional[TriangleInteractionModel] = None,
                 registry: Optional[ListenerRegistry] = None):
        self.model = model or TriangleInteractionModel()
        self.registry = registry or ListenerRegistry()
        self.box: Optional[BoundingBox] = None
        self._listening = False

    # --- element geometry ---
    def mount(self, box: Optional[BoundingBox]) -> None:
        self.box = box

    def unmount(self) -> None:
        self.box = None

    # --- listener lifecycle ---
    def _acquire_listeners(self) -> None:
        if self._listening:
            return
        for t in MOVE_EVENTS:
            self.registry.add(t, self._on_move)
        for t in END_EVENTS:
            self.registry.add(t, self._on_end)
        self._listening = True
        logger.debug("drag listeners acquired for %s", self.model.target)

    def _release_listeners(self) -> None:
        if not self._listening:
            return
        for t in MOVE_EVENTS:
            self.registry.remove(t, self._on_move)
        for t in END_EVENTS:
            self.registry.remove(t, self._on_end)
        self._listening = False
        logger.debug("drag listeners released")

    @property
    def listening(self) -> bool:
        return self._listening

    # --- handlers ---
    def _on_move(self, event: Event) -> None:
        pos = first_contact(event)
        if pos is None:
            return
        point = map_to_logical(pos[0], pos[1], self.box, CANVAS_WIDTH, CANVAS_HEIGHT)
        self.model.update_drag(point)

    def _on_end(self, event: Event) -> None:
        self.model.end_drag()
        self._release_listeners()

    def pointer_down(self, vertex: str) -> bool:
        if not self.model.begin_drag(vertex):
            return False
        self._acquire_listeners()
        return True

    def handle(self, event: Event) -> bool:
        """Route one event payload from the page. Returns whether anything handled it."""
        kind = event.get("type")
        if kind in DOWN_EVENTS:
            if "rect" in event:
                self.mount(BoundingBox.from_dict(event.get("rect")))
            return self.pointer_down(str(event.get("vertex", "")))
        if kind in MOVE_EVENTS and "rect" in event:
            self.mount(BoundingBox.from_dict(event.get("rect")))
        return self.registry.dispatch(event)

    # --- slider input ---
    def set_base_length(self, value: float) -> None:
        self.model.set_base_length(value)

    def set_height(self, value: float) -> None:
        self.model.set_height(value)

    def teardown(self) -> None:
        self._release_listeners()
        self.model.end_drag()

    def to_dict(self) -> Dict[str, Any]:
        state = self.model.to_dict()
        state["listening"] = self.active_listeners()
        return state

    def active_listeners(self) -> List[str]:
        return self.registry.active_types() if self._listening else []
