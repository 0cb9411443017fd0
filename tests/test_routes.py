import pytest
from fastapi.testclient import TestClient

from conftest import pushup_frame
from repcoach.main import app
from repcoach.routes.session_route import get_registry
from repcoach.session.registry import SessionRegistry
from repcoach.utils.clock import ManualClock


@pytest.fixture
def client():
    registry = SessionRegistry(clock=ManualClock())
    app.dependency_overrides[get_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


def _frame_json(angle, timestamp):
    return pushup_frame(angle, timestamp=timestamp).model_dump()


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["exercises"] == ["pushup", "chinup", "plank"]


def test_session_lifecycle(client):
    created = client.post("/sessions", json={"exercise": "pushup"})
    assert created.status_code == 201
    sid = created.json()["session_id"]

    first = client.post(f"/sessions/{sid}/frames", json=_frame_json(60, 0)).json()
    assert first["completed_rep"] is False
    assert first["phase"] == "Down Position"

    second = client.post(f"/sessions/{sid}/frames", json=_frame_json(170, 1500)).json()
    assert second["completed_rep"] is True
    assert second["rep_count"] == 1

    assert client.get(f"/sessions/{sid}").json()["total_reps"] == 1

    reset = client.post(f"/sessions/{sid}/reset").json()
    assert reset["total_reps"] == 0
    assert reset["phase"] == "Transitioning"

    ended = client.delete(f"/sessions/{sid}")
    assert ended.status_code == 200
    assert client.get(f"/sessions/{sid}").status_code == 404


def test_low_confidence_frame_over_http(client):
    sid = client.post("/sessions", json={"exercise": "plank"}).json()["session_id"]
    body = client.post(
        f"/sessions/{sid}/frames",
        json={"landmarks": [], "confidence": 0.1, "timestamp": 5},
    ).json()
    assert body["is_valid"] is False
    assert body["form_score"] == 0
    assert body["feedback"] == ["Please position yourself clearly in the camera view"]


def test_unknown_session(client):
    assert client.post("/sessions/nope/frames", json=_frame_json(60, 0)).status_code == 404
    assert client.post("/sessions/nope/reset").status_code == 404
    assert client.delete("/sessions/nope").status_code == 404


def test_unknown_exercise(client):
    assert client.post("/sessions", json={"exercise": "burpee"}).status_code == 422


def test_too_many_landmarks(client):
    sid = client.post("/sessions", json={"exercise": "pushup"}).json()["session_id"]
    frame = _frame_json(60, 0)
    frame["landmarks"] = frame["landmarks"] * 2
    assert client.post(f"/sessions/{sid}/frames", json=frame).status_code == 422
