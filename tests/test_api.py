"""Tests for the FastAPI Tic-Tac-Toe interface."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tictactoe_minimax.ui import app


client = TestClient(app)


def _new_game(**payload):
    response = client.post("/api/game", json=payload)
    assert response.status_code == 200
    return response.json()


def _move(game_id, cell_index):
    return client.post(f"/api/game/{game_id}/move", json={"cellIndex": cell_index})


def test_create_game_defaults():
    state = _new_game()
    assert state["board"] == [""] * 9
    assert state["currentPlayer"] == "X"
    assert state["difficulty"] == "hard"
    assert state["computerEnabled"] is True
    assert state["status"] == "Next player: X"
    assert state["validMoves"] == list(range(9))
    assert state["moveLog"] == []


def test_move_gets_computer_reply():
    game_id = _new_game()["id"]
    response = _move(game_id, 4)
    assert response.status_code == 200
    state = response.json()
    assert state["board"][4] == "X"
    assert [entry["player"] for entry in state["moveLog"]] == ["X", "O"]
    # Against the centre only a corner holds the draw
    assert state["lastMove"]["cellIndex"] in (0, 2, 6, 8)
    assert state["currentPlayer"] == "X"

    follow_up = client.get(f"/api/game/{game_id}")
    assert follow_up.status_code == 200
    assert follow_up.json()["moveLog"] == state["moveLog"]


def test_occupied_cell_rejected():
    game_id = _new_game(computerEnabled=False)["id"]
    assert _move(game_id, 0).status_code == 200

    duplicate = _move(game_id, 0)
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"]


def test_out_of_range_cell_rejected():
    game_id = _new_game()["id"]
    assert _move(game_id, 9).status_code == 422


def test_rejects_unknown_difficulty():
    response = client.post("/api/game", json={"difficulty": "medium"})
    assert response.status_code == 422


def test_impossible_is_hard():
    assert _new_game(difficulty="Impossible")["difficulty"] == "hard"


def test_two_player_game_until_win():
    game_id = _new_game(computerEnabled=False)["id"]
    for cell in (0, 3, 1, 4):
        assert _move(game_id, cell).status_code == 200
    state = _move(game_id, 2).json()
    assert state["isWin"] is True
    assert state["isDraw"] is False
    assert state["winner"] == "X"
    assert state["status"] == "Winner: X"
    assert state["validMoves"] == []

    late = _move(game_id, 8)
    assert late.status_code == 400


def test_enabling_computer_on_its_turn_moves_immediately():
    game_id = _new_game(computerEnabled=False)["id"]
    state = _move(game_id, 0).json()
    assert state["currentPlayer"] == "O"

    response = client.patch(
        f"/api/game/{game_id}/settings", json={"computerEnabled": True}
    )
    assert response.status_code == 200
    state = response.json()
    assert state["computerEnabled"] is True
    assert len(state["moveLog"]) == 2
    assert state["currentPlayer"] == "X"


def test_difficulty_update_and_restart():
    game_id = _new_game()["id"]
    response = client.patch(
        f"/api/game/{game_id}/settings", json={"difficulty": "easy"}
    )
    assert response.status_code == 200
    assert response.json()["difficulty"] == "easy"

    _move(game_id, 4)
    restarted = client.post(f"/api/game/{game_id}/restart")
    assert restarted.status_code == 200
    state = restarted.json()
    assert state["board"] == [""] * 9
    assert state["moveLog"] == []
    assert state["difficulty"] == "easy"
    assert state["currentPlayer"] == "X"


def test_missing_game_returns_404():
    assert client.get("/api/game/INVALID").status_code == 404
    assert _move("INVALID", 0).status_code == 404


def test_index_serves_page():
    response = client.get("/")
    assert response.status_code == 200
    assert "Tic-Tac-Toe" in response.text
