"""Tests for the FastAPI service layer."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from server import app as app_module


@pytest.fixture
def client(monkeypatch) -> TestClient:
    monkeypatch.setattr(app_module, "manager", app_module.SimulationManager())
    return TestClient(app_module.app)


class TestState:

    def test_default_building(self, client):
        state = client.get("/state").json()
        assert state["floors"] == 12
        assert state["tick"] == 0
        assert state["auto_tick"] is False
        assert [e["id"] for e in state["elevators"]] == ["E1", "E2", "F1"]
        assert state["metrics"] == {"served": 0, "average_wait": 0.0, "max_wait": 0}


class TestCalls:

    def test_submit_and_serve(self, client):
        response = client.post("/calls", json={"floor": 0, "direction": "up", "count": 2})
        assert response.status_code == 200
        assert response.json()["submitted"] == [0, 1]
        assert client.get("/waiting").json() == {"0": {"up": 2, "down": 0}}

        state = client.post("/tick", json={"count": 5}).json()
        assert state["tick"] == 5
        assert client.get("/waiting").json() == {}
        assert client.get("/metrics").json() == {"served": 2, "average_wait": 2.0, "max_wait": 2}
        assert any("Stop F:0" in event for event in client.get("/events", params={"limit": 10}).json())

    def test_floor_out_of_range(self, client):
        response = client.post("/calls", json={"floor": 40, "direction": "up", "count": 1})
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "body",
        [
            {"floor": 2, "direction": "up", "count": 0},
            {"floor": 2, "direction": "sideways", "count": 1},
            {"floor": -1, "direction": "down", "count": 1},
        ],
    )
    def test_malformed_calls(self, client, body):
        assert client.post("/calls", json=body).status_code == 422

    def test_tick_count_must_be_positive(self, client):
        assert client.post("/tick", json={"count": 0}).status_code == 422


class TestElevators:

    def test_availability(self, client):
        response = client.post("/elevators/e1/availability", json={"available": False, "reason": "inspection"})
        assert response.status_code == 200
        elevators = {e["id"]: e for e in response.json()["elevators"]}
        assert elevators["E1"]["out_of_service"] is True

        response = client.post("/elevators/E1/availability", json={"available": True})
        assert {e["id"]: e for e in response.json()["elevators"]}["E1"]["out_of_service"] is False

    def test_unknown_elevator(self, client):
        assert client.post("/elevators/Z9/availability", json={"available": False}).status_code == 404
        assert client.post("/elevators/Z9/press", json={"floor": 3}).status_code == 404

    def test_press_button(self, client):
        response = client.post("/elevators/E1/press", json={"floor": 4})
        assert response.status_code == 200
        body = response.json()
        assert body["accepted"] is True
        assert {e["id"]: e for e in body["elevators"]}["E1"]["targets"] == [4]
        assert client.post("/elevators/E1/press", json={"floor": 99}).status_code == 400


class TestMetrics:

    def test_reset(self, client):
        client.post("/calls", json={"floor": 0, "direction": "up", "count": 1})
        client.post("/tick", json={"count": 5})
        assert client.get("/metrics").json()["served"] == 1
        state = client.post("/metrics/reset").json()
        assert state["metrics"] == {"served": 0, "average_wait": 0.0, "max_wait": 0}

    def test_auto_off_is_idempotent(self, client):
        assert client.post("/auto", json={"enabled": False}).json()["auto_tick"] is False
