import pytest
from fastapi.testclient import TestClient

import server.app as app_module
from server.app import DispatchManager, app


@pytest.fixture
def client(monkeypatch) -> TestClient:
    monkeypatch.setattr(app_module, "manager", DispatchManager(num_floors=5, elevator_count=2))
    return TestClient(app)


def test_state(client):
    response = client.get("/state")
    assert response.status_code == 200
    body = response.json()
    assert body["time"] == 0
    assert body["building"]["num_floors"] == 5
    assert len(body["building"]["elevators"]) == 2


def test_hall_call_round_trip(client):
    response = client.post("/hall-calls", json={"floor": 3, "direction": "up"})
    assert response.status_code == 200
    body = response.json()
    assert body["newly_lit"] is True
    assert body["building"]["hall_calls"] == {"up": [3], "down": []}

    response = client.post("/elevators/0/run")
    body = response.json()
    assert body["decision"]["action"] == "stop"
    assert body["decision"]["floor"] == 3
    assert [e["floor"] for e in body["events"] if e["kind"] == "floor_arrived"] == [1, 2, 3]

    response = client.post("/elevators/0/open")
    assert response.status_code == 200
    kinds = [e["kind"] for e in response.json()["events"]]
    assert kinds == ["door_opened", "hall_call_cleared", "door_closed"]
    assert response.json()["metrics"]["pending_hall_calls"] == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"floor": 4, "direction": "up"},
        {"floor": 0, "direction": "down"},
        {"floor": 2, "direction": "neutral"},
        {"floor": 9, "direction": "up"},
    ],
)
def test_missing_buttons_are_bad_requests(client, payload):
    response = client.post("/hall-calls", json=payload)
    assert response.status_code == 400


def test_open_while_neutral_is_a_conflict(client):
    response = client.post("/elevators/0/open")
    assert response.status_code == 409
    assert "neutral" in response.json()["detail"]


def test_cabin_request_and_tick(client):
    response = client.post("/elevators/1/requests", json={"floor": 2})
    assert response.status_code == 200
    assert response.json()["building"]["elevators"][1]["ascending"] == [2]

    decision = client.post("/elevators/1/tick").json()["decision"]
    assert decision == {
        "action": "mode_changed",
        "elevator_id": 1,
        "floor": 0,
        "mode": "up",
        "destination": None,
    }


def test_unknown_elevator(client):
    assert client.post("/elevators/7/tick").status_code == 400
    assert client.post("/elevators/7/requests", json={"floor": 1}).status_code == 400


def test_reset(client):
    client.post("/hall-calls", json={"floor": 2, "direction": "down"})
    client.post("/elevators/0/run")
    body = client.post("/reset").json()
    assert body["building"]["hall_calls"] == {"up": [], "down": []}
    assert body["time"] == 0
    assert {e["floor"] for e in body["building"]["elevators"]} == {0}


def test_reading_state_leaves_events_for_the_next_publish(client):
    building = app_module.manager.building
    building.register_hall_call(2, "up")
    building.run_until_stop(0)

    assert client.get("/state").json()["events"] == []

    kinds = [e["kind"] for e in client.post("/elevators/0/open").json()["events"]]
    assert kinds == [
        "floor_arrived",
        "floor_arrived",
        "door_opened",
        "hall_call_cleared",
        "door_closed",
    ]
