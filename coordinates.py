# coordinates.py — device (client) coordinates → logical canvas coordinates
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from triangle_model import Point


@dataclass(frozen=True)
class BoundingBox:
    """On-screen rectangle of the canvas element, in device pixels."""
    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["BoundingBox"]:
        # Accepts the shape of DOMRect.toJSON(); anything unusable means "not mounted"
        if not isinstance(data, Mapping) or not data:
            return None
        try:
            box = cls(
                left=float(data.get("left", data.get("x", 0.0))),
                top=float(data.get("top", data.get("y", 0.0))),
                width=float(data["width"]),
                height=float(data["height"]),
            )
        except (KeyError, TypeError, ValueError):
            return None
        if box.width <= 0 or box.height <= 0:
            return None
        return box


def map_to_logical(device_x: float, device_y: float,
                   box: Optional[BoundingBox],
                   logical_width: float, logical_height: float) -> Point:
    """
    Linear per-axis rescale from the element rectangle to the logical space.
    Assumes the element keeps the logical aspect ratio (it is always drawn that
    way). Without a bounding box the logical origin is returned.
    """
    if box is None:
        return Point(0.0, 0.0)
    return Point(
        (device_x - box.left) * (logical_width / box.width),
        (device_y - box.top) * (logical_height / box.height),
    )


def first_contact(event: Mapping[str, Any]) -> Optional[Tuple[float, float]]:
    """
    Client coordinates of a mouse event, or of the first touch of a touch event.
    Extra touches are ignored. Returns None when the payload carries no position.
    """
    touches = event.get("touches")
    if touches is not None:
        if not isinstance(touches, (list, tuple)) or not touches:
            return None
        src: Any = touches[0]
    else:
        src = event
    if not isinstance(src, Mapping):
        return None
    try:
        return float(src["clientX"]), float(src["clientY"])
    except (KeyError, TypeError, ValueError):
        return None
