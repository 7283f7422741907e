"""Caller-owned state for one human-versus-computer match."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .ai import Difficulty, MoveSelector
from .game import Board, Cell, InvalidMoveError, Outcome, apply_move, evaluate
from .scores import ScoreRecord

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Board, turn, difficulty and running score for a single player.

    The human is always X and moves first; the selector plays O.
    """

    difficulty: Difficulty = Difficulty.MEDIUM
    scores: ScoreRecord = field(default_factory=ScoreRecord)
    selector: MoveSelector = field(default_factory=MoveSelector)
    board: Board = field(default_factory=Board.empty)
    current_side: Cell = Cell.PLAYER
    outcome: Outcome = Outcome.IN_PROGRESS
    move_log: List[Dict[str, object]] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.outcome.is_terminal

    def play(self, index: int, side: Cell) -> Outcome:
        if self.finished:
            raise InvalidMoveError("Game already finished")
        if side is not self.current_side:
            raise InvalidMoveError(f"It is not {side.value}'s turn")

        self.board = apply_move(self.board, index, side)
        self.move_log.append({"player": side.value, "cellIndex": index})
        self.outcome = evaluate(self.board)

        if self.outcome.is_terminal:
            self.scores.record(self.outcome)
            logger.info("Game over: %s", self.outcome.value)
        else:
            self.current_side = side.other
        return self.outcome

    def play_human(self, index: int) -> Outcome:
        return self.play(index, Cell.PLAYER)

    def play_computer(self) -> int:
        """Let the selector move at the difficulty in force right now."""
        index = self.selector.select_move(self.board, self.difficulty)
        self.play(index, self.selector.player)
        return index

    def reset_game(self) -> None:
        self.board = Board.empty()
        self.current_side = Cell.PLAYER
        self.outcome = Outcome.IN_PROGRESS
        self.move_log = []

    def reset_score(self) -> None:
        self.scores.clear()
        self.reset_game()

    def set_difficulty(self, difficulty: Difficulty) -> None:
        self.difficulty = difficulty
        self.reset_game()

    @property
    def last_move(self) -> Optional[Dict[str, object]]:
        return self.move_log[-1] if self.move_log else None
