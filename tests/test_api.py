from sqlalchemy import text

from core.models import START_FEN
from fixture_helpers import FEN_AFTER_E4, OPENING


def new_game(client):
    resp = client.post("/api/games")
    assert resp.status_code == 200
    return resp.json()


def test_health_check(client):
    assert client.get("/").json()["status"] == "healthy"


def test_create_and_fetch_game(client):
    game = new_game(client)

    assert game["status"] == "active"
    assert game["fen"] == START_FEN
    assert game["currentPlayer"] == "white"
    assert game["moveCount"] == 0

    fetched = client.get(f"/api/games/{game['id']}").json()
    assert fetched["id"] == game["id"]
    assert fetched["moves"] == []


def test_post_move_then_complete(client):
    game = new_game(client)

    resp = client.post(f"/api/games/{game['id']}/moves", json={
        "moveNumber": 1,
        "player": "white",
        "moveNotation": "e4",
        "fenBefore": START_FEN,
        "fenAfter": FEN_AFTER_E4,
        "pgn": "1. e4",
    })
    assert resp.status_code == 200
    assert resp.json()["moveNotation"] == "e4"

    fetched = client.get(f"/api/games/{game['id']}").json()
    assert fetched["currentPlayer"] == "black"
    assert len(fetched["moves"]) == 1

    resp = client.post(f"/api/games/{game['id']}/complete", json={"status": "checkmate", "winner": "white"})
    assert resp.status_code == 200
    assert resp.json()["winner"] == "white"

    stats = client.get("/api/stats").json()
    assert stats["totals"]["whiteWins"] == 1
    assert stats["games"]["totalGames"] == 1
    assert stats["games"]["averageMoves"] == 1


def test_list_and_active_games(client):
    a = new_game(client)
    b = new_game(client)
    client.post(f"/api/games/{b['id']}/complete", json={"status": "abandoned"})

    listed = client.get("/api/games").json()
    assert [g["id"] for g in listed] == [b["id"], a["id"]]
    assert all(g["totalMoves"] == 0 for g in listed)

    active = client.get("/api/games/active").json()
    assert [g["id"] for g in active] == [a["id"]]


def test_unknown_game_is_404(client):
    resp = client.get("/api/games/999")

    assert resp.status_code == 404
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "GAME_NOT_FOUND"


def test_move_on_unknown_game_is_404(client):
    resp = client.post("/api/games/999/moves", json=OPENING[0])
    assert resp.status_code == 404


def test_complete_unknown_game_is_404(client):
    resp = client.post("/api/games/999/complete", json={"status": "draw", "winner": "draw"})
    assert resp.status_code == 404


def test_invalid_move_payload_is_400(client):
    game = new_game(client)

    resp = client.post(f"/api/games/{game['id']}/moves", json=dict(OPENING[0], fen_after="x" * 150))

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_INPUT"


def test_invalid_enum_is_400(client):
    game = new_game(client)

    resp = client.post(f"/api/games/{game['id']}/complete", json={"status": "won"})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_ENUM_VALUE"


def test_storage_failure_is_500(client, session_factory):
    db = session_factory()
    db.execute(text("DELETE FROM game_statistics"))
    db.commit()
    db.close()

    resp = client.post("/api/games")

    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "STATS_NOT_INITIALIZED"


def test_move_number_going_backwards_is_400(client):
    game = new_game(client)
    for move in OPENING:
        assert client.post(f"/api/games/{game['id']}/moves", json=move).status_code == 200

    resp = client.post(f"/api/games/{game['id']}/moves", json=OPENING[0])

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "MOVE_NUMBER_REGRESSION"
