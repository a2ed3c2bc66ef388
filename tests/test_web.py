import pytest
from fastapi.testclient import TestClient

import chesscore.session as session
import web.app as web_app
from chesscore.constants import MAX_SEARCH_DEPTH
from web.app import BestMoveRequest, NewGameRequest, app

START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w - - 0 1"
FOOLS_MATE = (((6, 5), (5, 5)), ((1, 4), (3, 4)), ((6, 6), (4, 6)), ((0, 3), (4, 7)))


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _new_game(client: TestClient, mode: str = "normal", depth: int = 1) -> dict:
    response = client.post("/api/games", json={"mode": mode, "depth": depth})
    assert response.status_code == 201
    return response.json()


def _move(client: TestClient, game_id: str, source: tuple, target: tuple):
    return client.post(
        f"/api/games/{game_id}/move",
        json={
            "source": {"x": source[0], "y": source[1]},
            "target": {"x": target[0], "y": target[1]},
        },
    )


def test_new_game_snapshot(client: TestClient) -> None:
    game = _new_game(client)
    assert game["fen"] == START_FEN
    assert game["turn"] == "white"
    assert game["phase"] == "selecting"
    assert game["status"] == "ongoing"
    assert game["winner"] is None
    assert game["check"] is None

    fetched = client.get(f"/api/games/{game['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == game


def test_select_lists_legal_targets(client: TestClient) -> None:
    game = _new_game(client)
    response = client.post(f"/api/games/{game['id']}/select", json={"x": 7, "y": 1})
    assert response.status_code == 200
    moves = sorted((m["x"], m["y"]) for m in response.json()["moves"])
    assert moves == [(5, 0), (5, 2)]


def test_select_empty_square_lists_nothing(client: TestClient) -> None:
    game = _new_game(client)
    response = client.post(f"/api/games/{game['id']}/select", json={"x": 4, "y": 4})
    assert response.status_code == 200
    assert response.json()["moves"] == []


def test_select_rejects_off_board_square(client: TestClient) -> None:
    game = _new_game(client)
    response = client.post(f"/api/games/{game['id']}/select", json={"x": 8, "y": 0})
    assert response.status_code == 422


def test_move_flips_turn(client: TestClient) -> None:
    game = _new_game(client)
    response = _move(client, game["id"], (6, 4), (4, 4))
    assert response.status_code == 200
    body = response.json()
    assert body["turn"] == "black"
    assert body["fen"].startswith("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b")
    assert body["engine_move"] is None


def test_illegal_move_is_rejected(client: TestClient) -> None:
    game = _new_game(client)
    response = _move(client, game["id"], (6, 4), (3, 4))
    assert response.status_code == 400

    # Moving the opponent's piece is just as illegal.
    response = _move(client, game["id"], (1, 4), (3, 4))
    assert response.status_code == 400
    assert client.get(f"/api/games/{game['id']}").json()["fen"] == START_FEN


def test_checkmate_ends_game(client: TestClient) -> None:
    game_id = _new_game(client)["id"]
    for source, target in FOOLS_MATE:
        assert _move(client, game_id, source, target).status_code == 200

    body = client.get(f"/api/games/{game_id}").json()
    assert body["phase"] == "game_over"
    assert body["status"] == "checkmate"
    assert body["winner"] == "black"
    assert body["check"] == {"x": 7, "y": 4}

    assert _move(client, game_id, (6, 0), (5, 0)).status_code == 409


def test_ai_mode_answers_with_black(client: TestClient) -> None:
    game = _new_game(client, mode="ai", depth=1)
    response = _move(client, game["id"], (6, 4), (4, 4))
    assert response.status_code == 200
    body = response.json()
    assert body["mode"] == "ai"
    assert body["turn"] == "white"
    engine_move = body["engine_move"]
    assert engine_move is not None
    assert engine_move["source"]["x"] in (0, 1)
    assert len(engine_move["move"]) == 4


def test_unknown_and_deleted_games(client: TestClient) -> None:
    assert client.get("/api/games/nope").status_code == 404
    assert _move(client, "nope", (6, 4), (4, 4)).status_code == 404

    game_id = _new_game(client)["id"]
    assert client.delete(f"/api/games/{game_id}").status_code == 204
    assert client.get(f"/api/games/{game_id}").status_code == 404
    assert client.delete(f"/api/games/{game_id}").status_code == 404


def test_best_move_finds_mate(client: TestClient) -> None:
    response = client.post("/api/move", json={"fen": "6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1", "depth": 2})
    assert response.status_code == 200
    body = response.json()
    assert body["move"] == "a1a8"
    assert body["fen"] == "R5k1/5ppp/8/8/8/8/8/6K1 b - - 0 1"
    assert body["nodes"] > 0


def test_best_move_rejects_bad_fen(client: TestClient) -> None:
    response = client.post("/api/move", json={"fen": "garbage", "depth": 1})
    assert response.status_code == 400


def test_best_move_rejects_finished_game(client: TestClient) -> None:
    response = client.post("/api/move", json={"fen": "k7/8/1Q6/8/8/8/8/7K b - - 0 1", "depth": 1})
    assert response.status_code == 400
    assert "stalemate" in response.json()["detail"]


def test_depth_is_clamped() -> None:
    assert NewGameRequest(depth=99).depth == MAX_SEARCH_DEPTH
    assert NewGameRequest(depth=0).depth == 1
    assert BestMoveRequest(fen="8/8/8/8/8/8/8/8", depth=-3).depth == 1


def test_best_move_rejects_side_not_to_move_in_check(client: TestClient) -> None:
    # White to move while the queen already attacks the black king.
    response = client.post("/api/move", json={"fen": "4k3/8/8/8/1r2Q3/8/8/4K3 w - - 0 1", "depth": 1})
    assert response.status_code == 400
    assert "Invalid position" in response.json()["detail"]


def test_engine_failure_rolls_back_human_move(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_search(*args, **kwargs):
        raise RuntimeError("search exploded")

    game_id = _new_game(client, mode="ai")["id"]
    monkeypatch.setattr(session, "generate_ai_move", broken_search)
    response = _move(client, game_id, (6, 4), (4, 4))
    assert response.status_code == 500

    body = client.get(f"/api/games/{game_id}").json()
    assert body["fen"] == START_FEN
    assert body["turn"] == "white"
    assert body["engine_move"] is None

    # Black stays the engine's side: the client cannot move it.
    assert _move(client, game_id, (1, 4), (3, 4)).status_code == 400

    monkeypatch.undo()
    response = _move(client, game_id, (6, 4), (4, 4))
    assert response.status_code == 200
    assert response.json()["turn"] == "white"
    assert response.json()["engine_move"] is not None


def test_registry_evicts_finished_games_first(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(web_app, "_games", {})
    monkeypatch.setattr(web_app, "MAX_GAMES", 2)

    oldest = _new_game(client)["id"]
    finished = _new_game(client)["id"]
    for source, target in FOOLS_MATE:
        assert _move(client, finished, source, target).status_code == 200

    newer = _new_game(client)["id"]
    assert client.get(f"/api/games/{finished}").status_code == 404
    assert client.get(f"/api/games/{oldest}").status_code == 200

    _new_game(client)
    assert client.get(f"/api/games/{oldest}").status_code == 404
    assert client.get(f"/api/games/{newer}").status_code == 200
    assert len(web_app._games) == 2
