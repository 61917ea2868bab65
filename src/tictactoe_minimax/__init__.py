"""Tic-Tac-Toe package exposing game logic, the computer seat, and the web application."""

from .ai import ComputerPlayer
from .game import Difficulty, Marker, SearchResult, TicTacToe
from .ui import app

__all__ = [
    "ComputerPlayer",
    "Difficulty",
    "Marker",
    "SearchResult",
    "TicTacToe",
    "app",
]
