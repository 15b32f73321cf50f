import pytest
from fastapi.testclient import TestClient

from interview_capture.api import ws_interview
from interview_capture.main import app


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setattr(ws_interview, "QA_MODE", False)
    return TestClient(app)


def _receive_until(ws, message_type: str, limit: int = 20) -> list[dict]:
    seen = []
    for _ in range(limit):
        msg = ws.receive_json()
        seen.append(msg)
        if msg["type"] == message_type:
            return seen
    raise AssertionError(f"{message_type} not received; got {[m['type'] for m in seen]}")


def test_healthz(client: TestClient):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    resp = client.get("/api/metrics")
    assert resp.status_code == 200
    assert "answers_auto_advance_total" in resp.json()


def test_start_without_speech_support_reports_capability_error(client: TestClient):
    with client.websocket_connect("/ws/interview") as ws:
        hello = ws.receive_json()
        assert hello["type"] == "session"
        assert hello["thresholds"]["silence_sec"] == 4

        ws.send_json({"type": "start"})
        msg = ws.receive_json()

    assert msg["type"] == "error"
    assert msg["code"] == "capability_unsupported"
    assert msg["fatal"] is True


def test_capture_denied_reports_permission_error(client: TestClient):
    with client.websocket_connect("/ws/interview") as ws:
        ws.receive_json()
        ws.send_json({"type": "hello", "speech_supported": True})
        ws.send_json({"type": "start"})

        request = ws.receive_json()
        assert request["type"] == "capture_request"

        ws.send_json({"type": "capture_denied", "reason": "permission", "request_id": request["request_id"]})
        msg = ws.receive_json()

    assert msg["type"] == "error"
    assert msg["code"] == "permission_denied"


def test_full_capture_cycle_with_manual_next(client: TestClient):
    with client.websocket_connect("/ws/interview?speech_supported=true") as ws:
        ws.receive_json()
        ws.send_json({"type": "start"})

        request = ws.receive_json()
        assert request["type"] == "capture_request"
        ws.send_json({"type": "capture_granted", "request_id": request["request_id"], "tracks": ["audio", "video"]})

        started = _receive_until(ws, "started")[-1]
        assert started["session_id"]
        _receive_until(ws, "listen_start")

        ws.send_json({"type": "listening", "value": True})
        ws.send_json({"type": "transcript", "text": "I would start with the data model"})
        update = _receive_until(ws, "transcript")[-1]
        assert update["word_count"] == 7

        ws.send_json({"type": "next"})
        seen = _receive_until(ws, "answer_complete")
        assert "listen_stop" in [m["type"] for m in seen]
        assert seen[-1]["text"] == "I would start with the data model"
        assert seen[-1]["answer"]["reason"] == "manual"

        ws.send_json({"type": "stop"})
        seen = _receive_until(ws, "stopped")
        assert "capture_release" in [m["type"] for m in seen]


def test_malformed_message_is_reported(client: TestClient):
    with client.websocket_connect("/ws/interview") as ws:
        ws.receive_json()
        ws.send_text("not json")
        msg = ws.receive_json()
        assert msg["code"] == "invalid_message"

        ws.send_json({"type": "dance"})
        msg = ws.receive_json()
        assert msg["code"] == "unknown_message"


def _grant(ws, request: dict) -> dict:
    ws.send_json({"type": "capture_granted", "request_id": request["request_id"], "tracks": ["audio", "video"]})
    return _receive_until(ws, "started")[-1]


def test_start_can_be_retried_after_permission_denied(client: TestClient):
    with client.websocket_connect("/ws/interview?speech_supported=true") as ws:
        ws.receive_json()
        ws.send_json({"type": "start"})
        first = ws.receive_json()
        ws.send_json({"type": "capture_denied", "reason": "permission", "request_id": first["request_id"]})
        assert ws.receive_json()["code"] == "permission_denied"

        ws.send_json({"type": "start"})
        retry = ws.receive_json()
        assert retry["type"] == "capture_request"
        assert retry["request_id"] != first["request_id"]

        started = _grant(ws, retry)
        assert started["session_id"]


def test_start_can_be_retried_after_late_hello(client: TestClient):
    with client.websocket_connect("/ws/interview") as ws:
        ws.receive_json()
        ws.send_json({"type": "start"})
        assert ws.receive_json()["code"] == "capability_unsupported"

        ws.send_json({"type": "hello", "speech_supported": True})
        ws.send_json({"type": "start"})
        request = ws.receive_json()
        assert request["type"] == "capture_request"

        _grant(ws, request)
        _receive_until(ws, "listen_start")


def test_start_after_stop_opens_a_new_session(client: TestClient):
    with client.websocket_connect("/ws/interview?speech_supported=true") as ws:
        ws.receive_json()
        ws.send_json({"type": "start"})
        first = _grant(ws, ws.receive_json())

        ws.send_json({"type": "stop"})
        _receive_until(ws, "stopped")

        ws.send_json({"type": "start"})
        request = _receive_until(ws, "capture_request")[-1]
        second = _grant(ws, request)

        assert second["session_id"] != first["session_id"]
