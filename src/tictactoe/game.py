"""Core rules for a single 3x3 tic-tac-toe board."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple


class Cell(str, Enum):
    EMPTY = ""
    PLAYER = "X"
    OPPONENT = "O"

    @property
    def other(self) -> "Cell":
        if self is Cell.PLAYER:
            return Cell.OPPONENT
        if self is Cell.OPPONENT:
            return Cell.PLAYER
        raise ValueError("Empty cell has no opposing side")


WinLine = Tuple[int, int, int]

WINNING_LINES: Tuple[WinLine, ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

BOARD_SIZE = 9


class InvalidMoveError(ValueError):
    """Raised when a move targets an occupied cell, a bad index or a finished game."""


class Outcome(str, Enum):
    IN_PROGRESS = "in_progress"
    PLAYER_WIN = "player_win"
    OPPONENT_WIN = "opponent_win"
    DRAW = "draw"

    @property
    def is_terminal(self) -> bool:
        return self is not Outcome.IN_PROGRESS

    @property
    def winner(self) -> Optional[Cell]:
        if self is Outcome.PLAYER_WIN:
            return Cell.PLAYER
        if self is Outcome.OPPONENT_WIN:
            return Cell.OPPONENT
        return None

    @classmethod
    def win_for(cls, side: Cell) -> "Outcome":
        if side is Cell.PLAYER:
            return cls.PLAYER_WIN
        if side is Cell.OPPONENT:
            return cls.OPPONENT_WIN
        raise ValueError("Empty cell cannot win")


# ---------- Board ----------


@dataclass(frozen=True)
class Board:
    """Immutable board value; moves produce a new Board."""

    cells: Tuple[Cell, ...] = field(default=(Cell.EMPTY,) * BOARD_SIZE)

    def __post_init__(self) -> None:
        if len(self.cells) != BOARD_SIZE:
            raise ValueError(f"A board has exactly {BOARD_SIZE} cells")

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def from_cells(cls, cells: Iterable[str]) -> "Board":
        """Build a board from 'X', 'O' and '' (or ' ') markers."""
        return cls(tuple(Cell(c.strip()) for c in cells))

    def __getitem__(self, index: int) -> Cell:
        return self.cells[index]

    def is_full(self) -> bool:
        return all(c is not Cell.EMPTY for c in self.cells)

    def to_list(self) -> List[str]:
        return [c.value for c in self.cells]


# ---------- Rules ----------


def line_winner(cells: Sequence[Cell]) -> Optional[WinLine]:
    """Return the first win line fully held by one side, if any.

    Works on any nine-cell sequence so the search can reuse it on its
    scratch list.
    """
    for a, b, c in WINNING_LINES:
        v = cells[a]
        if v is not Cell.EMPTY and v is cells[b] and v is cells[c]:
            return a, b, c
    return None


def winning_line(board: Board) -> Optional[WinLine]:
    return line_winner(board.cells)


def evaluate(board: Board) -> Outcome:
    line = line_winner(board.cells)
    if line is not None:
        return Outcome.win_for(board.cells[line[0]])
    if board.is_full():
        return Outcome.DRAW
    return Outcome.IN_PROGRESS


def empty_cells(board: Board) -> List[int]:
    return [i for i, c in enumerate(board.cells) if c is Cell.EMPTY]


def apply_move(board: Board, index: int, side: Cell) -> Board:
    """Return a new board with ``side`` placed at ``index``."""
    if side is Cell.EMPTY:
        raise InvalidMoveError("A move must place X or O")
    if not 0 <= index < BOARD_SIZE:
        raise InvalidMoveError(f"Cell index {index} is out of range")
    if evaluate(board).is_terminal:
        raise InvalidMoveError("Game already finished")
    if board.cells[index] is not Cell.EMPTY:
        raise InvalidMoveError("Cell already occupied")
    cells = list(board.cells)
    cells[index] = side
    return Board(tuple(cells))
