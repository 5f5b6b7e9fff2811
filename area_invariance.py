# area_invariance.py — Triangle area invariance demo (bilingual EN/ZH)
#
# Endpoints:
#   GET    /area-invariance/                          -> HTML page (?lang=en|zh)
#   POST   /area-invariance/api/canvas                -> create a canvas view
#   GET    /area-invariance/api/canvas/<id>           -> current state
#   POST   /area-invariance/api/canvas/<id>/events    -> pointer/touch events, in order
#   POST   /area-invariance/api/canvas/<id>/base      -> {"value": b} slider input
#   POST   /area-invariance/api/canvas/<id>/height    -> {"value": h} slider input
#   GET    /area-invariance/api/canvas/<id>/plot.png  -> server-side render
#   DELETE /area-invariance/api/canvas/<id>           -> teardown
from __future__ import annotations

import logging
import math
import os
import threading
import time
import uuid
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint, Response, jsonify, render_template, request, url_for

from canvas_view import CanvasView
from triangle_model import (
    BASE_RANGE, CANVAS_HEIGHT, CANVAS_WIDTH, HEIGHT_RANGE, PIXELS_PER_UNIT,
)
from triangle_plot import Accent, render_png, style

logger = logging.getLogger(__name__)

area_bp = Blueprint("area_invariance", __name__, url_prefix="/area-invariance")

MAX_CANVASES = int(os.environ.get("AREA_MAX_CANVASES", "256"))

# ---------------- i18n ----------------
def get_lang() -> str:
    lang = (request.args.get("lang") or "").lower()
    return "zh" if lang == "zh" else "en"

def T(lang: str) -> Dict[str, str]:
    """Return translation dict for the selected language."""
    if lang == "zh":
        return {
            "page_title": "几何原理实验室：等积变换演示",
            "controls": "控制面板",
            "live": "实时计算",
            "label_base": "底边长度 (b)",
            "label_height": "高度 (h)",
            "stat_base": "底边 (b)",
            "stat_height": "高度 (h)",
            "area_caption": "当前面积 (S)",
            "card1_title": "平行移动",
            "card1_desc": "顶点 A 在平行线上滑动时，高度 h 恒定。只要底边 b 不变，面积 S 就不会改变。",
            "card2_title": "调整变量",
            "card2_desc": "手动调节滑块来改变底边或高度。观察变量与几何形状的实时反馈。",
            "card3_title": "面积公式",
            "card3_desc": "深刻理解 S = ½ × 底 × 高。面积由底和高共同决定。",
            "footer": "原理：三角形面积 S = ½ × 底 × 高",
            "image_editor": "AI 图像编辑",
            "language": "语言",
            "english": "英文",
            "chinese": "中文",
        }
    return {
        "page_title": "Geometry Lab — Equal-Area Transformations",
        "controls": "Controls",
        "live": "Live calculation",
        "label_base": "Base length (b)",
        "label_height": "Height (h)",
        "stat_base": "Base (b)",
        "stat_height": "Height (h)",
        "area_caption": "Current area (S)",
        "card1_title": "Parallel shift",
        "card1_desc": ("While vertex A slides along the parallel line the height h stays fixed. "
                       "As long as the base b is unchanged, the area S does not change."),
        "card2_title": "Change a variable",
        "card2_desc": "Move the sliders to change the base or the height and watch the shape respond.",
        "card3_title": "Area formula",
        "card3_desc": "S = ½ × base × height. Base and height together decide the area.",
        "footer": "Principle: triangle area S = ½ × base × height",
        "image_editor": "AI image editor",
        "language": "Language",
        "english": "English",
        "chinese": "Chinese",
    }

def _cards(text: Dict[str, str]) -> List[Dict[str, Any]]:
    out = []
    for n, accent in ((1, Accent.INDIGO), (2, Accent.ORANGE), (3, Accent.EMERALD)):
        out.append({
            "title": text[f"card{n}_title"],
            "desc": text[f"card{n}_desc"],
            "style": style(accent),
        })
    return out

def _sliders(text: Dict[str, str]) -> List[Dict[str, Any]]:
    return [
        {"id": "base", "label": text["label_base"], "min": BASE_RANGE[0], "max": BASE_RANGE[1],
         "step": 0.1, "style": style(Accent.INDIGO)},
        {"id": "height", "label": text["label_height"], "min": HEIGHT_RANGE[0], "max": HEIGHT_RANGE[1],
         "step": 0.1, "style": style(Accent.RED)},
    ]

# ---------------- canvas registry ----------------
_CANVASES: "OrderedDict[str, CanvasView]" = OrderedDict()
_LOCK = threading.Lock()

def _json_error(message: str, status: int):
    return jsonify({"error": message}), status

def _new_canvas() -> Tuple[str, CanvasView]:
    cid = uuid.uuid4().hex
    view = CanvasView()
    with _LOCK:
        _CANVASES[cid] = view
        while len(_CANVASES) > MAX_CANVASES:
            old_id, old = _CANVASES.popitem(last=False)
            old.teardown()
            logger.info("canvas %s evicted", old_id)
    logger.info("canvas %s created", cid)
    return cid, view

def _get_view(cid: str) -> Optional[CanvasView]:
    # caller holds _LOCK; a hit marks the canvas as most recently used
    view = _CANVASES.get(cid)
    if view is not None:
        _CANVASES.move_to_end(cid)
    return view

def _state(cid: str, view: CanvasView) -> Dict[str, Any]:
    data = view.to_dict()
    data["id"] = cid
    return data

def _read_value() -> Optional[float]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return None
    try:
        value = float(payload.get("value"))
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None

# --------------- routes ---------------
@area_bp.route("/", methods=["GET"])
def index():
    lang = get_lang()
    text = T(lang)
    return render_template(
        "area_invariance.html",
        t=text, lang=lang,
        cards=_cards(text),
        sliders=_sliders(text),
        ts=int(time.time()),
        canvas={"width": CANVAS_WIDTH, "height": CANVAS_HEIGHT, "unit": PIXELS_PER_UNIT},
        lang_links={
            "en": url_for("area_invariance.index", lang="en"),
            "zh": url_for("area_invariance.index", lang="zh"),
        },
    )

@area_bp.route("/api/canvas", methods=["POST"])
def create_canvas():
    cid, view = _new_canvas()
    with _LOCK:
        return jsonify({"id": cid, "state": _state(cid, view)}), 201

@area_bp.route("/api/canvas/<cid>", methods=["GET"])
def get_canvas(cid: str):
    with _LOCK:
        view = _get_view(cid)
        if view is None:
            return _json_error("Unknown canvas.", 404)
        return jsonify(_state(cid, view))

@area_bp.route("/api/canvas/<cid>", methods=["DELETE"])
def delete_canvas(cid: str):
    with _LOCK:
        view = _CANVASES.pop(cid, None)
    if view is None:
        return _json_error("Unknown canvas.", 404)
    view.teardown()
    logger.info("canvas %s torn down", cid)
    return "", 204

@area_bp.route("/api/canvas/<cid>/events", methods=["POST"])
def post_events(cid: str):
    payload = request.get_json(silent=True)
    if isinstance(payload, dict) and isinstance(payload.get("events"), list):
        events = payload["events"]
    elif isinstance(payload, dict):
        events = [payload]
    else:
        return _json_error("Expected an event object or {\"events\": [...]}.", 400)
    with _LOCK:
        view = _get_view(cid)
        if view is None:
            return _json_error("Unknown canvas.", 404)
        for ev in events:
            if isinstance(ev, dict):
                view.handle(ev)
        return jsonify(_state(cid, view))

@area_bp.route("/api/canvas/<cid>/base", methods=["POST"])
def set_base(cid: str):
    value = _read_value()
    if value is None:
        return _json_error("'value' must be a number.", 400)
    with _LOCK:
        view = _get_view(cid)
        if view is None:
            return _json_error("Unknown canvas.", 404)
        view.set_base_length(value)
        return jsonify(_state(cid, view))

@area_bp.route("/api/canvas/<cid>/height", methods=["POST"])
def set_height(cid: str):
    value = _read_value()
    if value is None:
        return _json_error("'value' must be a number.", 400)
    with _LOCK:
        view = _get_view(cid)
        if view is None:
            return _json_error("Unknown canvas.", 404)
        view.set_height(value)
        return jsonify(_state(cid, view))

@area_bp.route("/api/canvas/<cid>/plot.png", methods=["GET"])
def plot_png(cid: str):
    with _LOCK:
        view = _get_view(cid)
        if view is None:
            return _json_error("Unknown canvas.", 404)
        png = render_png(view.model)
    resp = Response(png, mimetype="image/png")
    resp.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    return resp
