"""FastAPI-powered web UI for playing Tic-Tac-Toe in the browser."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .ai import ComputerPlayer
from .game import Difficulty, Marker, TicTacToe

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for an active game, its settings and the computer seat."""

    game: TicTacToe
    computer: ComputerPlayer = field(default_factory=ComputerPlayer)
    computer_enabled: bool = True
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(
    title="Tic-Tac-Toe", description="Tic-Tac-Toe against a minimax opponent"
)

# Label on the hard button of the page.
DIFFICULTY_ALIASES: Dict[str, Difficulty] = {"impossible": Difficulty.HARD}


def _coerce_difficulty(value: object) -> object:
    if isinstance(value, str):
        normalized = value.strip().lower()
        return DIFFICULTY_ALIASES.get(normalized, normalized)
    return value


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    difficulty: Difficulty = Field(
        default=Difficulty.HARD, description="Computer strength"
    )
    computer_enabled: bool = Field(default=True, alias="computerEnabled")

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, value: object) -> object:
        return _coerce_difficulty(value)


class SettingsRequest(BaseModel):
    """Partial update of a running game's settings."""

    model_config = ConfigDict(populate_by_name=True)

    difficulty: Optional[Difficulty] = None
    computer_enabled: Optional[bool] = Field(default=None, alias="computerEnabled")

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, value: object) -> object:
        return _coerce_difficulty(value)


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_session(
    difficulty: Difficulty, computer_enabled: bool
) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(
        game=TicTacToe(difficulty=difficulty), computer_enabled=computer_enabled
    )
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info(
        "created game %s (difficulty=%s, computer=%s)",
        session_id,
        difficulty.value,
        computer_enabled,
    )
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _status_text(game: TicTacToe) -> str:
    if game.winner is not None:
        return f"Winner: {game.winner.symbol}"
    if game.is_draw:
        return "Draw!"
    return f"Next player: {game.turn.symbol}"


def _log_move(session: GameSession, player: Marker, cell_index: int) -> None:
    session.move_log.append({"player": player.symbol, "cellIndex": cell_index})
    game = session.game
    if game.is_over:
        logger.info("game finished: %s", _status_text(game))


def _run_computer_turn(session: GameSession) -> None:
    """Let the computer reply while the caller holds ``session.lock``."""

    game = session.game
    if not session.computer_enabled or game.is_over:
        return
    if game.turn != session.computer.player:
        return
    cell_index = session.computer.choose(game)
    game.play(cell_index)
    _log_move(session, session.computer.player, cell_index)


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        state: Dict[str, object] = {
            "id": game_id,
            "board": [marker.symbol for marker in game.board],
            "currentPlayer": game.turn.symbol,
            "isWin": game.is_win,
            "isDraw": game.is_draw,
            "winner": game.winner.symbol if game.winner is not None else None,
            "status": _status_text(game),
            "validMoves": [] if game.is_over else game.valid_moves(),
            "moveLog": list(session.move_log),
            "difficulty": game.difficulty.value,
            "computerEnabled": session.computer_enabled,
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(session: GameSession, cell_index: int) -> None:
    with session.lock:
        game = session.game
        if game.is_over:
            raise HTTPException(status_code=400, detail="Game already finished")

        player = game.turn
        if session.computer_enabled and player == session.computer.player:
            raise HTTPException(status_code=400, detail="It is the computer's turn")
        if not game.play(cell_index):
            raise HTTPException(status_code=400, detail="Cell is already occupied")
        _log_move(session, player, cell_index)

        _run_computer_turn(session)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.difficulty, request.computer_enabled)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(session, request.cell_index)
    return _serialize_session(game_id, session)


@app.patch("/api/game/{game_id}/settings")
def update_settings(game_id: str, request: SettingsRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        if request.difficulty is not None:
            session.game.difficulty = request.difficulty
        if request.computer_enabled is not None:
            session.computer_enabled = request.computer_enabled
        # Enabling the computer on its own turn makes it move straight away.
        _run_computer_turn(session)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/restart")
def restart_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.game = TicTacToe(difficulty=session.game.difficulty)
        session.move_log.clear()
    logger.info("restarted game %s", game_id)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-Tac-Toe</title>
    <style>
      :root {
        color-scheme: light dark;
        font-family: system-ui, -apple-system, \"Segoe UI\", sans-serif;
      }
      body {
        display: flex;
        justify-content: center;
        gap: 3rem;
        margin: 3rem auto;
        max-width: 48rem;
      }
      .status {
        font-size: 1.25rem;
        margin-bottom: 1rem;
        text-align: center;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 5rem);
        grid-template-rows: repeat(3, 5rem);
        gap: 0.25rem;
      }
      .square {
        font-size: 2.5rem;
        font-weight: 700;
        border: 1px solid #888;
        background: transparent;
        cursor: pointer;
      }
      .square:disabled {
        cursor: default;
      }
      .settings {
        display: flex;
        flex-direction: column;
        gap: 1.5rem;
        align-items: center;
      }
      .settings button {
        padding: 0.5rem 1rem;
        border-radius: 0.4rem;
        border: none;
        cursor: pointer;
      }
      .difficulty button.active {
        outline: 3px solid #333;
      }
      #easy { background: #198754; color: #fff; }
      #hard { background: #dc3545; color: #fff; }
      #toggle-computer { background: #ffc107; }
      #restart { background: #0d6efd; color: #fff; }
      .error {
        color: #dc3545;
        min-height: 1.5rem;
        text-align: center;
      }
    </style>
  </head>
  <body>
    <main>
      <div class=\"status\" id=\"status\">Loading...</div>
      <div class=\"board\" id=\"board\"></div>
      <div class=\"error\" id=\"error\"></div>
    </main>
    <aside class=\"settings\">
      <button id=\"restart\">Restart</button>
      <div>
        <h4>Computer Strength</h4>
        <div class=\"difficulty\">
          <button id=\"easy\">Easy</button>
          <button id=\"hard\">Impossible</button>
        </div>
      </div>
      <button id=\"toggle-computer\">Disable Computer</button>
    </aside>
    <script>
      const boardEl = document.getElementById(\"board\");
      const statusEl = document.getElementById(\"status\");
      const errorEl = document.getElementById(\"error\");
      const toggleEl = document.getElementById(\"toggle-computer\");
      let state = null;

      const squares = [];
      for (let i = 0; i < 9; i += 1) {
        const square = document.createElement(\"button\");
        square.className = \"square\";
        square.addEventListener(\"click\", () => play(i));
        boardEl.appendChild(square);
        squares.push(square);
      }

      async function request(path, options = {}) {
        const response = await fetch(path, {
          headers: { \"Content-Type\": \"application/json\" },
          ...options,
        });
        const payload = await response.json();
        if (!response.ok) {
          const detail = payload.detail;
          throw new Error(typeof detail === \"string\" ? detail : \"Request failed\");
        }
        return payload;
      }

      function render(next) {
        state = next;
        errorEl.textContent = \"\";
        statusEl.textContent = state.status;
        state.board.forEach((symbol, index) => {
          squares[index].textContent = symbol;
          squares[index].disabled = !state.validMoves.includes(index);
        });
        document.getElementById(\"easy\").classList.toggle(\"active\", state.difficulty === \"easy\");
        document.getElementById(\"hard\").classList.toggle(\"active\", state.difficulty === \"hard\");
        toggleEl.textContent = state.computerEnabled ? \"Disable Computer\" : \"Enable Computer\";
      }

      async function run(action) {
        try {
          render(await action());
        } catch (error) {
          errorEl.textContent = error.message;
        }
      }

      function play(index) {
        run(() => request(`/api/game/${state.id}/move`, {
          method: \"POST\",
          body: JSON.stringify({ cellIndex: index }),
        }));
      }

      function updateSettings(settings) {
        run(() => request(`/api/game/${state.id}/settings`, {
          method: \"PATCH\",
          body: JSON.stringify(settings),
        }));
      }

      document.getElementById(\"restart\").addEventListener(\"click\", () =>
        run(() => request(`/api/game/${state.id}/restart`, { method: \"POST\" }))
      );
      document.getElementById(\"easy\").addEventListener(\"click\", () =>
        updateSettings({ difficulty: \"easy\" })
      );
      document.getElementById(\"hard\").addEventListener(\"click\", () =>
        updateSettings({ difficulty: \"hard\" })
      );
      toggleEl.addEventListener(\"click\", () =>
        updateSettings({ computerEnabled: !state.computerEnabled })
      );

      run(() => request(\"/api/game\", { method: \"POST\", body: JSON.stringify({}) }));
    </script>
  </body>
</html>
"""
