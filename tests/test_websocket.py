"""WebSocket integration tests for real-time play."""

from __future__ import annotations

import json

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from crt_snake.server.app import create_app


@pytest.fixture()
def tc():
    """Starlette TestClient run as a context manager so the lifespan's
    session manager and its tick loops share one event loop."""
    with TestClient(create_app()) as client:
        yield client


def _create_session(tc, **overrides):
    body = {"grid_size": 32, "start_coil": 0, "tick_rate_ms": 20}
    body.update(overrides)
    resp = tc.post("/sessions", json=body)
    assert resp.status_code == 201
    return resp.json()["session_id"]


class TestPlayWebSocket:
    def test_connect_and_receive_initial_frame(self, tc):
        session_id = _create_session(tc)

        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            frame = json.loads(ws.receive_text())
            assert "tick" in frame
            assert frame["game_over"] is False
            assert 0.0 <= frame["noise_level"] <= 1.0
            assert len(frame["grid"]) == 32
            assert len(frame["grid"][0]) == 32

    def test_frames_stream_each_tick(self, tc):
        session_id = _create_session(tc)

        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            first = json.loads(ws.receive_text())
            second = json.loads(ws.receive_text())
            assert second["tick"] > first["tick"] or second["game_over"]

    def test_send_direction(self, tc):
        session_id = _create_session(tc)

        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"direction": "up"}))
            for _ in range(4):
                ws.receive_text()

        state = tc.get(f"/sessions/{session_id}").json()["engine"]
        assert state["direction"] == [0, 1]

    def test_restart_message(self, tc):
        session_id = _create_session(tc)

        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            ws.receive_text()
            ws.send_text(json.dumps({"restart": True}))
            ws.receive_text()
            ws.receive_text()

        resp = tc.get(f"/sessions/{session_id}")
        assert resp.json()["state"] == "running"

    def test_nonexistent_session_rejected(self, tc):
        with pytest.raises(WebSocketDisconnect), tc.websocket_connect(
            "/sessions/nonexistent/play",
        ) as ws:
            ws.receive_text()


class TestDisconnectHandling:
    def test_session_continues_after_disconnect(self, tc):
        session_id = _create_session(tc)

        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            ws.receive_text()

        resp = tc.get(f"/sessions/{session_id}")
        assert resp.status_code == 200

    def test_invalid_messages_ignored(self, tc):
        session_id = _create_session(tc)

        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            ws.receive_text()
            ws.send_text("not-json")
            ws.send_text("[]")
            ws.send_text("123")
            ws.send_text(json.dumps({"direction": "invalid_dir"}))
            ws.send_text(json.dumps({"direction": 5}))
            ws.send_text(json.dumps({"restart": "yes"}))
            frame = json.loads(ws.receive_text())
            assert "grid" in frame

    def test_client_removed_on_disconnect(self, tc):
        session_id = _create_session(tc)
        session = tc.app.state.session_manager.get_session(session_id)

        with tc.websocket_connect(f"/sessions/{session_id}/play") as ws:
            ws.receive_text()
            assert len(session.clients) == 1

        resp = tc.get(f"/sessions/{session_id}")
        assert resp.status_code == 200
        assert session.clients == []
