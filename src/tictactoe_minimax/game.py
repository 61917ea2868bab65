"""Core rules and exhaustive minimax search for Tic-Tac-Toe."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional, Tuple
import logging
import random

logger = logging.getLogger(__name__)

BOARD_SIZE = 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

# Score of a position whose side to move has already lost.
LOSS_VALUE = -10


class Marker(IntEnum):
    EMPTY = 0
    PLAYER_ONE = 1
    PLAYER_TWO = 2

    @property
    def symbol(self) -> str:
        return {Marker.PLAYER_ONE: "X", Marker.PLAYER_TWO: "O"}.get(self, "")


class Difficulty(str, Enum):
    EASY = "easy"
    HARD = "hard"


@dataclass(frozen=True)
class SearchResult:
    value: int
    best_moves: Tuple[int, ...] = ()


# ---------- Game ----------


@dataclass
class TicTacToe:
    """A single game of Tic-Tac-Toe.

    The engine is mutated in place for the life of one game and replaced by a
    fresh instance on restart. It is not thread-safe: callers must own it
    exclusively while ``play``, ``take_back`` or ``good_move`` run.
    """

    difficulty: Difficulty = Difficulty.HARD
    rng: random.Random = field(default_factory=random.Random, repr=False)
    is_win: bool = field(default=False, init=False)
    is_draw: bool = field(default=False, init=False)

    _board: List[Marker] = field(
        default_factory=lambda: [Marker.EMPTY] * BOARD_SIZE, init=False, repr=False
    )
    _moves: List[int] = field(default_factory=list, init=False, repr=False)

    # ---- observation ----

    @property
    def board(self) -> Tuple[Marker, ...]:
        return tuple(self._board)

    @property
    def moves(self) -> Tuple[int, ...]:
        return tuple(self._moves)

    @property
    def turn(self) -> Marker:
        """Player to move, derived from the parity of the move history."""
        return Marker(1 + len(self._moves) % 2)

    @property
    def winner(self) -> Optional[Marker]:
        # The last mover completed the line.
        if not self.is_win:
            return None
        return Marker(2 - len(self._moves) % 2)

    @property
    def is_over(self) -> bool:
        return self.is_win or self.is_draw

    def valid_moves(self) -> List[int]:
        """Empty cell indices in ascending order."""
        return [i for i, c in enumerate(self._board) if c == Marker.EMPTY]

    # ---- mutation ----

    def play(self, cell: int) -> bool:
        """Place the current player's marker on ``cell``.

        Returns ``False`` without touching the position when the cell is taken
        or the game is already decided.
        """
        if not 0 <= cell < BOARD_SIZE:
            raise ValueError(f"Cell index {cell} is outside the board")
        if self._board[cell] != Marker.EMPTY or self.is_over:
            return False

        self._board[cell] = self.turn
        self._moves.append(cell)
        self._update_state()
        return True

    def take_back(self) -> bool:
        """Undo the most recent move.

        Both flags are cleared: ``play`` never moves from a decided position,
        so the position before the last move is always undecided.
        """
        if not self._moves:
            return False
        self._board[self._moves.pop()] = Marker.EMPTY
        self.is_win = self.is_draw = False
        return True

    # ---- move selection ----

    def minimax(self) -> SearchResult:
        """Score the position for the side to move and list every best move.

        Wins close to the root score higher than distant ones and forced
        losses are deferred as long as possible: each ply shrinks a non-zero
        child score by one and flips its sign.
        """
        if self.is_win:
            return SearchResult(LOSS_VALUE)
        if self.is_draw:
            return SearchResult(0)

        best_value: Optional[int] = None
        best_moves: List[int] = []
        for move in self.valid_moves():
            self.play(move)
            value = self.minimax().value
            self.take_back()

            if value:
                value = (abs(value) - 1) * (-1 if value > 0 else 1)
            if best_value is None or value > best_value:
                best_value, best_moves = value, [move]
            elif value == best_value:
                best_moves.append(move)

        assert best_value is not None  # a non-terminal board has an empty cell
        return SearchResult(best_value, tuple(best_moves))

    def good_move(self) -> Optional[int]:
        """Pick a move for the side to move according to ``difficulty``."""
        if self.difficulty == Difficulty.EASY:
            candidates = self.valid_moves()
        else:
            result = self.minimax()
            logger.debug(
                "minimax after %s: value=%d best=%s",
                self._moves,
                result.value,
                result.best_moves,
            )
            candidates = list(result.best_moves)
        if not candidates:
            return None
        return self.rng.choice(candidates)

    # ---- helpers ----

    def _update_state(self) -> None:
        b = self._board
        self.is_win = any(
            b[x] != Marker.EMPTY and b[x] == b[y] == b[z] for x, y, z in WINNING_LINES
        )
        self.is_draw = not self.is_win and len(self._moves) == BOARD_SIZE
