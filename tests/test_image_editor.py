"""Tests for the AI image editor blueprint (Gemini client stubbed)."""
import base64
import io
from types import SimpleNamespace

import pytest

import image_editor

URL = "/image-editor/api/edit"
PNG = "data:image/png;base64,iVBORw0KGgo="


class FakeModels:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate_content(self, model=None, contents=None):
        self.calls.append({"model": model, "contents": contents})
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def gemini(monkeypatch):
    monkeypatch.setattr(image_editor, "GEMINI_API_KEY", "test-key")

    def install(reply=None, error=None):
        models = FakeModels(reply, error)
        monkeypatch.setattr(image_editor, "_client", lambda: SimpleNamespace(models=models))
        return models

    return install


def _reply(*parts):
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=list(parts)))])


def _text(s):
    return SimpleNamespace(text=s, inline_data=None)


def _image(data=b"ABC", mime="image/png"):
    return SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime))


class TestEdit:
    def test_success_json(self, client, gemini):
        models = gemini(_reply(_text("here you go"), _image()))
        resp = client.post(URL, json={"image": PNG, "prompt": "add a hat"})
        assert resp.status_code == 200
        assert resp.get_json() == {"image": "data:image/png;base64,QUJD"}
        call = models.calls[0]
        assert call["model"] == image_editor.GEMINI_IMAGE_MODEL
        part, prompt = call["contents"]
        assert part.inline_data.data == base64.b64decode("iVBORw0KGgo=")
        assert part.inline_data.mime_type == "image/png"
        assert prompt == "add a hat"

    def test_success_multipart(self, client, gemini):
        models = gemini(_reply(_image(mime="image/jpeg")))
        resp = client.post(URL, data={
            "image": (io.BytesIO(b"ABC"), "photo.png", "image/png"),
            "prompt": "retro filter",
        }, content_type="multipart/form-data")
        assert resp.get_json()["image"].startswith("data:image/jpeg;base64,")
        assert models.calls[0]["contents"][0].inline_data.data == b"ABC"

    def test_no_image_in_reply(self, client, gemini):
        gemini(_reply(_text("sorry")))
        resp = client.post(URL, json={"image": PNG, "prompt": "x"})
        assert resp.status_code == 422
        assert resp.get_json()["error"] == image_editor.MSG_NO_RESULT

    def test_no_candidates(self, client, gemini):
        gemini(SimpleNamespace(candidates=None))
        assert client.post(URL, json={"image": PNG, "prompt": "x"}).status_code == 422

    def test_remote_failure(self, client, gemini):
        gemini(error=RuntimeError("503 UNAVAILABLE"))
        resp = client.post(URL, json={"image": PNG, "prompt": "x"})
        assert resp.status_code == 502
        assert "503" in resp.get_json()["error"]


class TestValidation:
    def test_rejects_non_image(self, client, gemini):
        resp = client.post(URL, json={"image": "data:text/plain;base64,aGk=", "prompt": "x"})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == image_editor.MSG_BAD_IMAGE

    def test_rejects_bad_base64(self, client, gemini):
        resp = client.post(URL, json={"image": "data:image/png;base64,@@@", "prompt": "x"})
        assert resp.status_code == 400

    def test_rejects_missing_image(self, client, gemini):
        assert client.post(URL, json={"prompt": "x"}).status_code == 400

    def test_rejects_blank_prompt(self, client, gemini):
        resp = client.post(URL, json={"image": PNG, "prompt": "   "})
        assert resp.status_code == 400

    def test_missing_key(self, client, monkeypatch):
        monkeypatch.setattr(image_editor, "GEMINI_API_KEY", "")
        resp = client.post(URL, json={"image": PNG, "prompt": "x"})
        assert resp.status_code == 503

    def test_page_renders(self, client):
        assert client.get("/image-editor/").status_code == 200


class TestDataUrl:
    def test_bare_base64_keeps_mime(self):
        assert image_editor._split_data_url("QUJD", "image/gif") == ("QUJD", "image/gif")

    def test_data_url_mime_wins(self):
        assert image_editor._split_data_url(PNG, "") == ("iVBORw0KGgo=", "image/png")
