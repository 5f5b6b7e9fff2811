# triangle_model.py — geometry state + drag/constraint rules for the area demo
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, asdict, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# ----------------- Canvas constants (logical units) -----------------
CANVAS_WIDTH = 1000
CANVAS_HEIGHT = 600
PADDING = 40
PIXELS_PER_UNIT = 50
MIN_SEPARATION = 20

INITIAL_BASE_Y = 450
INITIAL_TOP_Y = 150
CENTER_X = 500
INITIAL_B_X = 350
INITIAL_C_X = 650

# Slider ranges in math units
BASE_RANGE = (2.0, 16.0)
HEIGHT_RANGE = (1.0, 8.0)

VERTICES = ("A", "B", "C")


# ----------------- Models -----------------
@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass
class GuideLines:
    base_line: float
    apex_line: float


@dataclass(frozen=True)
class Vertices:
    A: Point
    B: Point
    C: Point

    def copy(self) -> "Vertices":
        return Vertices(A=replace(self.A), B=replace(self.B), C=replace(self.C))

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {"A": asdict(self.A), "B": asdict(self.B), "C": asdict(self.C)}


@dataclass(frozen=True)
class DerivedMetrics:
    base_length: float
    height: float
    area: float

    def rounded(self, digits: int = 2) -> "DerivedMetrics":
        """Display values; area is taken from the shown base and height."""
        base_length = round_half_up(self.base_length, digits)
        height = round_half_up(self.height, digits)
        return DerivedMetrics(
            base_length=base_length,
            height=height,
            area=round_half_up(0.5 * base_length * height, digits),
        )


def round_half_up(value: float, digits: int = 2) -> float:
    q = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(q, rounding=ROUND_HALF_UP))


def _clamp(v: float, lo: float, hi: float) -> float:
    return min(max(v, lo), hi)


def _clamp_x(x: float) -> float:
    return _clamp(x, PADDING, CANVAS_WIDTH - PADDING)


# ----------------- Interaction model -----------------
class TriangleInteractionModel:
    """
    Owns the three vertices, the two guide lines, the active drag target and
    the ghost snapshot. Every mutation goes through the methods below; invalid
    input is clamped or ignored, nothing here raises.
    """

    def __init__(self):
        self.lines = GuideLines(base_line=INITIAL_BASE_Y, apex_line=INITIAL_TOP_Y)
        self.vertices = Vertices(
            A=Point(CENTER_X, INITIAL_TOP_Y),
            B=Point(INITIAL_B_X, INITIAL_BASE_Y),
            C=Point(INITIAL_C_X, INITIAL_BASE_Y),
        )
        self.ghost: Optional[Vertices] = None
        self.target: Optional[str] = None

    # --- accessors ---
    @property
    def A(self) -> Point:
        return self.vertices.A

    @property
    def B(self) -> Point:
        return self.vertices.B

    @property
    def C(self) -> Point:
        return self.vertices.C

    @property
    def dragging(self) -> bool:
        return self.target is not None

    def metrics(self) -> DerivedMetrics:
        base_length = (self.C.x - self.B.x) / PIXELS_PER_UNIT
        height = (self.lines.base_line - self.lines.apex_line) / PIXELS_PER_UNIT
        return DerivedMetrics(base_length, height, 0.5 * base_length * height)

    def formula(self) -> str:
        m = self.metrics().rounded()
        return f"S = ½ × {m.base_length:.2f} × {m.height:.2f}"

    def snapshot(self) -> None:
        self.ghost = self.vertices.copy()

    # --- drag state machine ---
    def begin_drag(self, vertex: str) -> bool:
        # Re-entrant begin (no end in between) overrides target and ghost
        if vertex not in VERTICES:
            logger.debug("begin_drag ignored for unknown vertex %r", vertex)
            return False
        self.snapshot()
        self.target = vertex
        return True

    def update_drag(self, point: Point) -> bool:
        """Apply a move in logical coordinates; returns False when nothing changed."""
        if self.target is None or not math.isfinite(point.x):
            return False
        nx = _clamp_x(point.x)
        if self.target == "A":
            self.vertices = replace(self.vertices, A=replace(self.A, x=nx))
            return True
        if self.target == "B":
            if not nx < self.C.x - MIN_SEPARATION:
                logger.debug("B move to %.1f rejected (C at %.1f)", nx, self.C.x)
                return False
            self.vertices = replace(self.vertices, B=replace(self.B, x=nx))
            return True
        if not nx > self.B.x + MIN_SEPARATION:
            logger.debug("C move to %.1f rejected (B at %.1f)", nx, self.B.x)
            return False
        self.vertices = replace(self.vertices, C=replace(self.C, x=nx))
        return True

    def end_drag(self) -> None:
        self.target = None

    # --- programmatic setters (sliders) ---
    def set_base_length(self, value: float) -> None:
        if not math.isfinite(value):
            return
        v = _clamp(float(value), *BASE_RANGE)
        if v != value:
            logger.debug("base length %r clamped to %r", value, v)
        self.snapshot()
        half = v * PIXELS_PER_UNIT / 2
        mid = (self.B.x + self.C.x) / 2
        # keep the pair inside the padded area without changing its length
        mid = _clamp(mid, PADDING + half, CANVAS_WIDTH - PADDING - half)
        base_y = self.lines.base_line
        self.vertices = replace(
            self.vertices,
            B=Point(mid - half, base_y),
            C=Point(mid + half, base_y),
        )

    def set_height(self, value: float) -> None:
        if not math.isfinite(value):
            return
        v = _clamp(float(value), *HEIGHT_RANGE)
        if v != value:
            logger.debug("height %r clamped to %r", value, v)
        self.snapshot()
        self.lines.apex_line = self.lines.base_line - v * PIXELS_PER_UNIT
        self.vertices = replace(self.vertices, A=replace(self.A, y=self.lines.apex_line))

    def to_dict(self) -> Dict[str, Any]:
        raw = self.metrics()
        return {
            "vertices": self.vertices.to_dict(),
            "lines": asdict(self.lines),
            "ghost": self.ghost.to_dict() if self.ghost else None,
            "dragging": self.target,
            "metrics": asdict(raw),
            "display": asdict(raw.rounded()),
            "formula": self.formula(),
        }
