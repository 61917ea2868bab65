"""Computer opponent seat for Tic-Tac-Toe."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from .game import Marker, TicTacToe

logger = logging.getLogger(__name__)


@dataclass
class ComputerPlayer:
    """Seat that lets the engine pick moves for one marker.

    Strength is not stored here; it follows ``game.difficulty`` so a settings
    change applies to the very next move.
    """

    player: Marker = Marker.PLAYER_TWO

    def choose(self, game: TicTacToe) -> int:
        if game.is_over:
            raise RuntimeError("Game already finished")
        if game.turn != self.player:
            raise ValueError("It is not this computer player's turn")
        move = game.good_move()
        if move is None:
            raise RuntimeError("No valid moves available")
        logger.debug(
            "%s (%s) chooses cell %d", self.player.symbol, game.difficulty.value, move
        )
        return move
