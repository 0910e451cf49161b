import pytest
from fastapi import status


@pytest.fixture
def finished_game(test_client):
    """Alice up 25, Bob down 25, game ended."""
    ids = {}
    for name in ("Alice", "Bob"):
        ids[name] = test_client.post("/api/v1/players/", json={"display_name": name}).json()["id"]
    test_client.put("/api/v1/settings/", json={"currency_symbol": "$"})
    test_client.post("/api/v1/game/", json={"buy_in_value": 50, "chips_per_buy_in": 1000})
    for player_id in ids.values():
        test_client.post("/api/v1/game/players", json={"player_id": player_id})
    test_client.patch(f"/api/v1/game/players/{ids['Alice']}", json={"current_chips": 1500})
    test_client.patch(f"/api/v1/game/players/{ids['Bob']}", json={"current_chips": 500})
    session = test_client.post("/api/v1/game/end").json()
    return session, ids


def test_toggle_settlement(test_client, finished_game):
    session, _ = finished_game
    settlement_id = session["settlements"][0]["id"]
    url = f"/api/v1/sessions/{session['id']}/settlements/{settlement_id}/toggle"

    paid = test_client.post(url).json()
    assert paid["settlements"][0]["settled"] is True
    assert paid["settlements"][0]["settled_at"] is not None
    assert test_client.get("/api/v1/game/").json()["settlements"][0]["settled"] is True

    unpaid = test_client.post(url).json()
    assert unpaid["settlements"][0]["settled"] is False
    assert unpaid["settlements"][0]["settled_at"] is None


def test_toggle_unknown_settlement(test_client, finished_game):
    session, _ = finished_game

    response = test_client.post(f"/api/v1/sessions/{session['id']}/settlements/nope/toggle")

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_summary(test_client, finished_game):
    session, _ = finished_game

    data = test_client.get(f"/api/v1/sessions/{session['id']}/summary").json()

    assert "[+] Alice: +$25" in data["message"]
    assert "[pending] Bob -> Alice: $25" in data["message"]
    assert data["share_link"].startswith("https://wa.me/?text=")


def test_stats(test_client, finished_game):
    _, ids = finished_game

    stats = test_client.get("/api/v1/stats/").json()
    assert [s["display_name"] for s in stats] == ["Alice", "Bob"]

    bob = test_client.get(f"/api/v1/stats/{ids['Bob']}").json()
    assert bob["games_played"] == 1
    assert bob["total_net"] == pytest.approx(-25)
    assert bob["biggest_win"] == 0


def test_delete_session(test_client, finished_game):
    session, _ = finished_game

    assert test_client.delete(f"/api/v1/sessions/{session['id']}").status_code == status.HTTP_200_OK
    assert test_client.get(f"/api/v1/sessions/{session['id']}").status_code == status.HTTP_404_NOT_FOUND
    assert test_client.delete(f"/api/v1/sessions/{session['id']}").status_code == status.HTTP_404_NOT_FOUND


def test_reset_keeps_players(test_client, finished_game):
    test_client.post("/api/v1/settings/reset")

    assert test_client.get("/api/v1/sessions/").json() == []
    assert test_client.get("/api/v1/game/").json() is None
    assert len(test_client.get("/api/v1/players/").json()) == 2
