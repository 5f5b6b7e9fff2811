# triangle_plot.py — PNG rendering of the area-invariance canvas
import io
from enum import Enum
from typing import Dict

import matplotlib
matplotlib.use("Agg")  # headless backend for servers
import matplotlib.pyplot as plt
import numpy as np

from triangle_model import (
    CANVAS_HEIGHT, CANVAS_WIDTH, PIXELS_PER_UNIT, TriangleInteractionModel,
)


class Accent(Enum):
    INDIGO = "indigo"
    ORANGE = "orange"
    EMERALD = "emerald"
    RED = "red"
    SLATE = "slate"


# Explicit accent → style table (used by the plot and by the page widgets)
ACCENT_STYLES: Dict[Accent, Dict[str, str]] = {
    Accent.INDIGO: {"stroke": "#6366f1", "strong": "#4338ca", "fill": "#eef2ff",
                    "css": "accent-indigo"},
    Accent.ORANGE: {"stroke": "#f97316", "strong": "#c2410c", "fill": "#ffedd5",
                    "css": "accent-orange"},
    Accent.EMERALD: {"stroke": "#10b981", "strong": "#047857", "fill": "#d1fae5",
                     "css": "accent-emerald"},
    Accent.RED: {"stroke": "#ef4444", "strong": "#b91c1c", "fill": "#fee2e2",
                 "css": "accent-red"},
    Accent.SLATE: {"stroke": "#94a3b8", "strong": "#1e293b", "fill": "#f8fafc",
                   "css": "accent-slate"},
}


def style(accent: Accent) -> Dict[str, str]:
    return ACCENT_STYLES[accent]


def render_png(model: TriangleInteractionModel, dpi: int = 100) -> bytes:
    """
    Draw the canvas in logical coordinates (y grows downward, like the page):
    grid, guide lines, ghost, height marker, triangle, vertex labels.
    """
    tri = style(Accent.INDIGO)
    guide = style(Accent.SLATE)
    marker = style(Accent.RED)
    A, B, C = model.A, model.B, model.C
    base_y = model.lines.base_line
    top_y = model.lines.apex_line
    shown = model.metrics().rounded()

    fig, ax = plt.subplots(figsize=(CANVAS_WIDTH / 100, CANVAS_HEIGHT / 100), dpi=dpi)
    ax.set_xlim(0, CANVAS_WIDTH)
    ax.set_ylim(0, CANVAS_HEIGHT)
    ax.invert_yaxis()
    ax.set_aspect("equal")

    # grid, one cell per math unit
    ax.set_xticks(np.arange(0, CANVAS_WIDTH + 1, PIXELS_PER_UNIT))
    ax.set_yticks(np.arange(0, CANVAS_HEIGHT + 1, PIXELS_PER_UNIT))
    ax.tick_params(labelbottom=False, labelleft=False, length=0)
    ax.grid(True, color="#e2e8f0", linewidth=1)
    ax.set_facecolor(guide["fill"])

    for y in (base_y, top_y):
        ax.axhline(y, color=guide["stroke"], linewidth=2, linestyle=(0, (6, 4)), alpha=0.3)

    if model.ghost is not None:
        g = model.ghost
        ax.fill([g.B.x, g.C.x, g.A.x], [base_y, base_y, g.A.y],
                facecolor=guide["stroke"], alpha=0.1,
                edgecolor=guide["stroke"], linewidth=2, linestyle="--")

    ax.plot([A.x, A.x], [top_y, base_y], color=marker["stroke"], linewidth=3, linestyle="--")
    ax.text(A.x, (base_y + top_y) / 2, f"h={shown.height:g}", ha="center", va="center",
            color=marker["strong"], fontsize=16, fontweight="bold")

    ax.fill([B.x, C.x, A.x], [base_y, base_y, top_y], facecolor=tri["stroke"], alpha=0.12)
    ax.plot([B.x, A.x, C.x], [base_y, top_y, base_y], color=tri["stroke"], linewidth=4)
    ax.plot([B.x, C.x], [base_y, base_y], color=tri["strong"], linewidth=7)

    ax.scatter([A.x], [top_y], s=400, color=tri["stroke"], edgecolors="white", linewidths=3, zorder=5)
    ax.scatter([B.x, C.x], [base_y, base_y], s=200, color=guide["strong"],
               edgecolors="white", linewidths=3, zorder=5)
    ax.text(A.x, top_y - 38, "A", ha="center", fontsize=20, fontweight="bold", color="#312e81")
    ax.text(B.x, base_y + 50, "B", ha="center", fontsize=16, fontweight="bold", color="#334155")
    ax.text(C.x, base_y + 50, "C", ha="center", fontsize=16, fontweight="bold", color="#334155")

    fig.subplots_adjust(0, 0, 1, 1)
    buf = io.BytesIO()
    fig.savefig(buf, format="png")
    plt.close(fig)
    buf.seek(0)
    return buf.getvalue()
