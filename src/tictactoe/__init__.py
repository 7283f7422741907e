"""Tic-tac-toe against a minimax computer opponent, served in the browser."""

from .ai import Difficulty, MoveSelector, NoMoveAvailableError, select_move
from .game import Board, Cell, InvalidMoveError, Outcome, apply_move, evaluate
from .scores import ScoreRecord
from .session import GameSession
from .ui import app

__all__ = [
    "Board",
    "Cell",
    "Difficulty",
    "GameSession",
    "InvalidMoveError",
    "MoveSelector",
    "NoMoveAvailableError",
    "Outcome",
    "ScoreRecord",
    "app",
    "apply_move",
    "evaluate",
    "select_move",
]
