"""Unit tests for the tic-tac-toe rules engine."""

import pytest

from tictactoe.game import (
    Board,
    Cell,
    InvalidMoveError,
    Outcome,
    apply_move,
    empty_cells,
    evaluate,
    line_winner,
    winning_line,
)


def test_empty_board_in_progress():
    board = Board.empty()
    assert evaluate(board) is Outcome.IN_PROGRESS
    assert empty_cells(board) == list(range(9))


def test_full_board_without_line_is_draw():
    board = Board.from_cells(["X", "O", "X", "X", "O", "O", "O", "X", "X"])
    assert evaluate(board) is Outcome.DRAW
    assert winning_line(board) is None


def test_row_and_diagonal_wins():
    row = Board.from_cells(["X", "X", "X", "O", "O", "", "", "", ""])
    diag = Board.from_cells(["O", "X", "", "X", "O", "", "X", "", "O"])
    assert evaluate(row) is Outcome.PLAYER_WIN
    assert winning_line(row) == (0, 1, 2)
    assert evaluate(diag) is Outcome.OPPONENT_WIN
    assert winning_line(diag) == (0, 4, 8)
    assert Outcome.OPPONENT_WIN.winner is Cell.OPPONENT


def test_win_on_last_cell_is_not_a_draw():
    board = Board.from_cells(["X", "O", "X", "O", "X", "O", "O", "X", "X"])
    assert evaluate(board) is Outcome.PLAYER_WIN


def test_apply_move_returns_new_board():
    board = Board.empty()
    after = apply_move(board, 4, Cell.PLAYER)
    assert after[4] is Cell.PLAYER
    assert board[4] is Cell.EMPTY


def test_occupied_cell_is_rejected_not_overwritten():
    board = apply_move(Board.empty(), 0, Cell.PLAYER)
    with pytest.raises(InvalidMoveError):
        apply_move(board, 0, Cell.OPPONENT)
    assert board[0] is Cell.PLAYER


@pytest.mark.parametrize("index", [-1, 9, 42])
def test_out_of_range_index_rejected(index):
    with pytest.raises(InvalidMoveError):
        apply_move(Board.empty(), index, Cell.PLAYER)


def test_terminal_board_rejects_moves():
    board = Board.from_cells(["X", "X", "X", "O", "O", "", "", "", ""])
    with pytest.raises(InvalidMoveError, match="finished"):
        apply_move(board, 5, Cell.OPPONENT)


def test_empty_side_rejected():
    with pytest.raises(InvalidMoveError):
        apply_move(Board.empty(), 0, Cell.EMPTY)


def test_board_requires_nine_cells():
    with pytest.raises(ValueError):
        Board.from_cells(["X", "O"])


def test_win_detection_is_exclusive_on_reachable_boards():
    seen = set()
    stack = [(Board.empty(), Cell.PLAYER)]
    while stack:
        board, side = stack.pop()
        if board.cells in seen:
            continue
        seen.add(board.cells)

        winners = set()
        for a, b, c in [(0, 1, 2), (3, 4, 5), (6, 7, 8), (0, 3, 6),
                        (1, 4, 7), (2, 5, 8), (0, 4, 8), (2, 4, 6)]:
            if board[a] is not Cell.EMPTY and board[a] is board[b] is board[c]:
                winners.add(board[a])
        assert len(winners) <= 1

        outcome = evaluate(board)
        if outcome.is_terminal:
            assert line_winner(board.cells) is None or outcome.winner in winners
            continue
        for index in empty_cells(board):
            stack.append((apply_move(board, index, side), side.other))

    assert len(seen) == 5478
