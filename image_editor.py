# image_editor.py — AI image editing panel (upload → Gemini → edited image)
from __future__ import annotations

import base64
import binascii
import logging
import os
from typing import Any, Optional, Tuple

from flask import Blueprint, jsonify, render_template, request
from google import genai
from google.genai import types

logger = logging.getLogger(__name__)

image_editor_bp = Blueprint("image_editor", __name__, url_prefix="/image-editor")

# =========================
# Config
# =========================
GEMINI_API_KEY = (os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY") or "").strip()
GEMINI_IMAGE_MODEL = os.environ.get("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")

MSG_BAD_IMAGE = "Please upload a valid image file."
MSG_NO_PROMPT = "Please describe the edit you want."
MSG_NO_RESULT = "The model could not produce an edited image for this prompt; try another description."
MSG_NO_KEY = "Image editing is not configured (missing GEMINI_API_KEY)."


class ImageEditError(RuntimeError):
    pass


def _client() -> "genai.Client|None":
    if not GEMINI_API_KEY:
        return None
    # a fresh client per request picks up a rotated key
    return genai.Client(api_key=GEMINI_API_KEY)


def _split_data_url(value: str, mime_type: str) -> Tuple[str, str]:
    """Accept 'data:<mime>;base64,<data>' or bare base64; return (base64, mime)."""
    value = (value or "").strip()
    if value.startswith("data:") and "," in value:
        head, data = value.split(",", 1)
        head_mime = head[5:].split(";", 1)[0]
        return data, (head_mime or mime_type)
    return value, mime_type


def _read_upload() -> Tuple[Optional[bytes], str, str]:
    """Return (image bytes, mime type, prompt) from a multipart or JSON request."""
    if request.files:
        f = request.files.get("image")
        prompt = request.form.get("prompt", "")
        if f is None:
            return None, "", prompt
        return (f.read() or None), (f.mimetype or ""), prompt
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return None, "", ""
    data, mime = _split_data_url(str(payload.get("image") or ""), str(payload.get("mime_type") or ""))
    try:
        raw = base64.b64decode(data, validate=True) if data else None
    except (binascii.Error, ValueError):
        raw = None
    return (raw or None), mime, str(payload.get("prompt") or "")


def edit_image(image: bytes, mime_type: str, prompt: str) -> Optional[str]:
    """
    Send image + instruction to the Gemini image model.
    Returns a data URL for the first inline image in the reply, or None.
    """
    client = _client()
    if client is None:
        raise RuntimeError("Missing GEMINI_API_KEY")
    try:
        resp: Any = client.models.generate_content(
            model=GEMINI_IMAGE_MODEL,
            contents=[types.Part.from_bytes(data=image, mime_type=mime_type), prompt],
        )
    except Exception as e:
        logger.exception("Gemini image edit failed")
        raise ImageEditError(str(e)) from e

    for cand in (resp.candidates or [])[:1]:
        parts = (cand.content.parts if cand.content else None) or []
        for part in parts:
            inline = part.inline_data
            if inline is not None and inline.data:
                out_mime = inline.mime_type or "image/png"
                encoded = base64.b64encode(inline.data).decode("ascii")
                return f"data:{out_mime};base64,{encoded}"
    return None


# --------------- routes ---------------
@image_editor_bp.route("/", methods=["GET"])
def index():
    return render_template("image_editor.html")


@image_editor_bp.route("/api/edit", methods=["POST"])
def api_edit():
    image, mime, prompt = _read_upload()
    if not image or not mime.startswith("image/"):
        return jsonify({"error": MSG_BAD_IMAGE}), 400
    if not prompt.strip():
        return jsonify({"error": MSG_NO_PROMPT}), 400
    if not GEMINI_API_KEY:
        return jsonify({"error": MSG_NO_KEY}), 503
    try:
        result = edit_image(image, mime, prompt.strip())
    except ImageEditError as e:
        return jsonify({"error": str(e) or "Error while talking to the image service."}), 502
    if result is None:
        return jsonify({"error": MSG_NO_RESULT}), 422
    return jsonify({"image": result})
