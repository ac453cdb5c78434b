import pytest
from fastapi.testclient import TestClient

from backend import app

MOCK_BATTLE = {
    "heroes": [{"class_type": "fighter", "hp": 200}],
    "monsters": [{"template_id": "goblin"}],
    "seed": 1,
}


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def battle(client):
    response = client.post("/api/battle/mock", json=MOCK_BATTLE)
    assert response.status_code == 200
    return response.json()


def test_mock_battle_starts_in_select(battle):
    state = battle["battle_state"]
    assert state["phase"] == "SELECT"
    assert state["battle_id"] == battle["battle_id"]
    assert [m["id"] for m in state["monsters"]] == ["goblin-0"]
    assert state["players"][0]["hand"]


def test_get_battle(client, battle):
    response = client.get(f"/api/battle/{battle['battle_id']}")
    assert response.status_code == 200
    assert response.json()["version"] == battle["battle_state"]["version"]
    assert client.get("/api/battle/missing").status_code == 404


def test_actions_report_success_and_failure(client, battle):
    battle_id = battle["battle_id"]
    response = client.post(
        "/api/battle/action",
        json={"battle_id": battle_id, "action": {"type": "play", "card_id": "no-such-card"}},
    )
    assert response.json()["success"] is False

    response = client.post("/api/battle/action", json={"battle_id": battle_id, "action": {"type": "pass"}})
    assert response.json() == {"success": True, "message": "Fighter passed"}

    state = client.get(f"/api/battle/{battle_id}").json()
    assert state["turn"] == 2

    response = client.post("/api/battle/action", json={"battle_id": battle_id, "action": {"type": "dance"}})
    assert response.json() == {"success": False, "message": "Unknown action"}


def test_bad_requests(client):
    bad_class = dict(MOCK_BATTLE, heroes=[{"class_type": "necromancer"}])
    assert client.post("/api/battle/mock", json=bad_class).status_code == 400

    bad_monster = dict(MOCK_BATTLE, monsters=[{"template_id": "dragon-king"}])
    assert client.post("/api/battle/mock", json=bad_monster).status_code == 404

    no_heroes = dict(MOCK_BATTLE, heroes=[])
    assert client.post("/api/battle/mock", json=no_heroes).status_code == 400


def test_ai_turn(client, battle):
    response = client.post(f"/api/battle/{battle['battle_id']}/ai-turn")
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_card_listing(client):
    data = client.get("/api/cards").json()
    assert "fighter" in data["classes"]
    assert set(data["rarities"]) <= {"common", "uncommon", "rare", "legendary"}
    assert data["cards"]


def test_websocket_sends_state_on_connect(client, battle):
    with client.websocket_connect(f"/ws/battle/{battle['battle_id']}") as ws:
        message = ws.receive_json()
    assert message["type"] == "connected"
    assert message["battle_state"]["battle_id"] == battle["battle_id"]

    with client.websocket_connect("/ws/battle/missing") as ws:
        assert ws.receive_json()["type"] == "error"
