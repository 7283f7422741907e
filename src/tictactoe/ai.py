"""Exhaustive minimax move selection with difficulty-blended randomness."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, Sequence, Tuple

from .game import Board, Cell, empty_cells, evaluate, line_winner

logger = logging.getLogger(__name__)

WIN_SCORE = 10


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class NoMoveAvailableError(RuntimeError):
    """Raised when asked for a move on a finished or full board."""


class RandomSource(Protocol):
    def random(self) -> float: ...

    def choice(self, seq: Sequence[int]) -> int: ...


@dataclass
class MoveSelector:
    """Computer player for a single board.

    - MoveSelector(player=Cell.OPPONENT, rng=random.Random(seed))
    - select_move(board, difficulty) -> cell index
    """

    player: Cell = Cell.OPPONENT
    rng: RandomSource = field(default_factory=random.Random, repr=False)

    # ---- public API ----

    def select_move(self, board: Board, difficulty: Difficulty) -> int:
        if evaluate(board).is_terminal:
            raise NoMoveAvailableError("No valid moves available")

        difficulty = Difficulty(difficulty)
        if difficulty is Difficulty.HARD:
            move, _ = self.search(board)
        elif difficulty is Difficulty.MEDIUM:
            # Coin is flipped per move, not per game.
            if self.rng.random() < 0.5:
                move, _ = self.search(board)
            else:
                move = self._random_move(board)
        else:
            move = self._random_move(board)

        logger.debug("%s (%s) plays %d", self.player.value, difficulty.value, move)
        return move

    def search(self, board: Board) -> Tuple[int, int]:
        """Return the best move and its game-tree value for ``self.player``.

        Ties resolve to the lowest cell index.
        """
        if evaluate(board).is_terminal:
            raise NoMoveAvailableError("No valid moves available")

        cells = list(board.cells)
        best_score = -math.inf
        best_move: Optional[int] = None
        for i in range(len(cells)):
            if cells[i] is not Cell.EMPTY:
                continue
            cells[i] = self.player
            score = self._minimax(cells, 0, False)
            cells[i] = Cell.EMPTY
            if score > best_score:
                best_score, best_move = score, i

        if best_move is None:
            raise NoMoveAvailableError("No valid moves available")
        return best_move, int(best_score)

    # ---- core search ----

    def _minimax(self, cells: List[Cell], depth: int, maximizing: bool) -> int:
        line = line_winner(cells)
        if line is not None:
            if cells[line[0]] is self.player:
                return WIN_SCORE - depth
            return depth - WIN_SCORE
        if Cell.EMPTY not in cells:
            return 0

        me = self.player
        opp = me.other
        if maximizing:
            value = -math.inf
            for i in range(len(cells)):
                if cells[i] is Cell.EMPTY:
                    cells[i] = me
                    value = max(value, self._minimax(cells, depth + 1, False))
                    cells[i] = Cell.EMPTY
        else:
            value = math.inf
            for i in range(len(cells)):
                if cells[i] is Cell.EMPTY:
                    cells[i] = opp
                    value = min(value, self._minimax(cells, depth + 1, True))
                    cells[i] = Cell.EMPTY
        return int(value)

    # ---- randomness ----

    def _random_move(self, board: Board) -> int:
        return self.rng.choice(empty_cells(board))


def select_move(
    board: Board,
    difficulty: Difficulty,
    rng: Optional[RandomSource] = None,
    player: Cell = Cell.OPPONENT,
) -> int:
    """Convenience wrapper around :class:`MoveSelector`."""
    selector = MoveSelector(player=player, rng=rng if rng is not None else random.Random())
    return selector.select_move(board, difficulty)
