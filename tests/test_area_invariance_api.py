"""Tests for the area-invariance blueprint."""
import area_invariance

API = "/area-invariance/api/canvas"
RECT = {"left": 0, "top": 0, "width": 500, "height": 300}


def _create(client):
    resp = client.post(API)
    assert resp.status_code == 201
    return resp.get_json()


class TestPages:
    def test_home_and_health(self, client):
        assert client.get("/").status_code == 200
        assert client.get("/healthz").data == b"ok"

    def test_page_english_default(self, client):
        resp = client.get("/area-invariance/?lang=xx")
        assert resp.status_code == 200
        assert b"Equal-Area Transformations" in resp.data

    def test_page_chinese(self, client):
        resp = client.get("/area-invariance/?lang=zh")
        assert "等积变换演示" in resp.get_data(as_text=True)


class TestCanvasApi:
    def test_create_returns_initial_state(self, client):
        data = _create(client)
        assert data["state"]["display"] == {"base_length": 6.0, "height": 6.0, "area": 18.0}
        assert data["state"]["ghost"] is None
        assert client.get(f"{API}/{data['id']}").get_json()["id"] == data["id"]

    def test_drag_sequence(self, client):
        cid = _create(client)["id"]
        resp = client.post(f"{API}/{cid}/events", json={"events": [
            {"type": "mousedown", "vertex": "A", "rect": RECT},
            {"type": "mousemove", "clientX": 450, "clientY": 10},
            {"type": "mouseup"},
        ]})
        state = resp.get_json()
        assert state["vertices"]["A"] == {"x": 900, "y": 150}
        assert state["ghost"]["A"]["x"] == 500
        assert state["dragging"] is None
        assert state["display"]["area"] == 18.0

    def test_single_event_object(self, client):
        cid = _create(client)["id"]
        state = client.post(f"{API}/{cid}/events", json={"type": "mousedown", "vertex": "B"}).get_json()
        assert state["dragging"] == "B"
        assert set(state["listening"]) == {"mousemove", "mouseup", "touchmove", "touchend"}

    def test_stray_move_ignored(self, client):
        cid = _create(client)["id"]
        state = client.post(f"{API}/{cid}/events",
                            json={"type": "mousemove", "clientX": 1, "clientY": 1, "rect": RECT}).get_json()
        assert state["vertices"]["A"] == {"x": 500, "y": 150}

    def test_bad_event_body(self, client):
        cid = _create(client)["id"]
        assert client.post(f"{API}/{cid}/events", data="nope").status_code == 400

    def test_sliders(self, client):
        cid = _create(client)["id"]
        state = client.post(f"{API}/{cid}/base", json={"value": 10}).get_json()
        assert state["vertices"]["B"]["x"] == 250
        assert state["vertices"]["C"]["x"] == 750
        state = client.post(f"{API}/{cid}/height", json={"value": 2}).get_json()
        assert state["lines"]["apex_line"] == 350
        assert state["display"]["area"] == 10.0
        assert state["formula"] == "S = ½ × 10.00 × 2.00"

    def test_slider_rejects_non_numbers(self, client):
        cid = _create(client)["id"]
        assert client.post(f"{API}/{cid}/base", json={"value": "big"}).status_code == 400
        assert client.post(f"{API}/{cid}/height", json=[1]).status_code == 400

    def test_unknown_canvas(self, client):
        assert client.get(f"{API}/missing").status_code == 404
        assert client.post(f"{API}/missing/events", json={"type": "mouseup"}).status_code == 404
        assert client.get(f"{API}/missing/plot.png").status_code == 404

    def test_delete(self, client):
        cid = _create(client)["id"]
        assert client.delete(f"{API}/{cid}").status_code == 204
        assert client.get(f"{API}/{cid}").status_code == 404
        assert client.delete(f"{API}/{cid}").status_code == 404

    def test_plot_png(self, client):
        cid = _create(client)["id"]
        client.post(f"{API}/{cid}/height", json={"value": 3})
        resp = client.get(f"{API}/{cid}/plot.png")
        assert resp.status_code == 200
        assert resp.mimetype == "image/png"
        assert resp.data.startswith(b"\x89PNG")
        assert "no-store" in resp.headers["Cache-Control"]

    def test_oldest_canvas_evicted(self, client, monkeypatch):
        monkeypatch.setattr(area_invariance, "MAX_CANVASES", 2)
        first = _create(client)["id"]
        _create(client)
        _create(client)
        assert client.get(f"{API}/{first}").status_code == 404

    def test_recently_used_canvas_survives(self, client, monkeypatch):
        monkeypatch.setattr(area_invariance, "MAX_CANVASES", 2)
        first = _create(client)["id"]
        second = _create(client)["id"]
        client.get(f"{API}/{first}")
        client.post(f"{API}/{first}/events", json={"type": "mousedown", "vertex": "A"})
        _create(client)
        assert client.get(f"{API}/{first}").status_code == 200
        assert client.get(f"{API}/{second}").status_code == 404

    def test_malformed_events_absorbed(self, client):
        cid = _create(client)["id"]
        client.post(f"{API}/{cid}/events", json={"type": "mousedown", "vertex": "A", "rect": RECT})
        for ev in (
            {"type": "touchmove", "touches": 5},
            {"type": "touchmove", "touches": {"0": {"clientX": 1, "clientY": 1}}},
            {"type": "mousemove", "clientX": 1, "clientY": 1, "rect": [1, 2]},
            {"type": ["mousemove"]},
        ):
            resp = client.post(f"{API}/{cid}/events", json=ev)
            assert resp.status_code == 200
        assert resp.get_json()["dragging"] == "A"
