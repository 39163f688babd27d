"""Unit tests for capture resolution and legal-move enumeration."""

import pytest

from othello.board import BLACK, WHITE, Board
from othello.errors import IllegalMove
from othello.rules import (
    Move,
    all_legal_moves,
    apply_move,
    captured_discs,
    has_legal_move,
    is_legal,
)


def test_opening_moves_for_black_are_row_major():
    board = Board.create_initial(8, 8)
    moves = all_legal_moves(board, BLACK)
    assert moves == [
        Move(2, 3, 1),
        Move(3, 2, 1),
        Move(4, 5, 1),
        Move(5, 4, 1),
    ]


def test_standard_first_capture():
    board = Board.create_initial(8, 8)
    assert captured_discs(board, 2, 3, BLACK) == [(3, 3)]


def test_occupied_cell_captures_nothing():
    board = Board.create_initial(8, 8)
    assert captured_discs(board, 3, 3, BLACK) == []
    assert not is_legal(board, 3, 4, WHITE)


def test_captures_across_several_directions(board_from):
    board = board_from(
        ".WB...",
        "WW....",
        "B.B...",
        "......",
        "......",
        "......",
    )
    assert captured_discs(board, 0, 0, BLACK) == [(0, 1), (1, 1), (1, 0)]


def test_run_reaching_the_edge_captures_nothing(board_from):
    board = board_from(
        ".WWWWW",
        "......",
        "......",
        "......",
        "......",
        "......",
    )
    assert captured_discs(board, 0, 0, BLACK) == []


def test_run_ending_on_empty_captures_nothing(board_from):
    board = board_from(
        ".W.B..",
        "......",
        "......",
        "......",
        "......",
        "......",
    )
    assert captured_discs(board, 0, 0, BLACK) == []


def test_long_run_captured_in_order(board_from):
    board = board_from(
        "W.....",
        "B.....",
        "B.....",
        "B.....",
        "B.....",
        "......",
    )
    assert captured_discs(board, 5, 0, WHITE) == [(4, 0), (3, 0), (2, 0), (1, 0)]


@pytest.mark.parametrize("player", [BLACK, WHITE])
def test_legal_moves_are_exactly_capturing_cells(player):
    board = Board.create_initial(8, 8)
    apply_move(board, 2, 3, BLACK)
    apply_move(board, 2, 2, WHITE)

    legal = {move.coord: move for move in all_legal_moves(board, player)}
    for row in range(board.height):
        for col in range(board.width):
            captured = captured_discs(board, row, col, player)
            if (row, col) in legal:
                assert len(captured) == legal[(row, col)].capture_count > 0
            else:
                assert captured == []


def test_apply_move_flips_every_captured_disc(board_from):
    board = board_from(
        ".WB...",
        "WW....",
        "B.B...",
        "......",
        "......",
        "......",
    )
    captured = apply_move(board, 0, 0, BLACK)

    assert board.get(0, 0) == BLACK
    for row, col in captured:
        assert board.get(row, col) == BLACK
    assert board.count(WHITE) == 0


def test_apply_illegal_move_leaves_board_untouched():
    board = Board.create_initial(8, 8)
    before = board.snapshot()
    with pytest.raises(IllegalMove):
        apply_move(board, 0, 0, BLACK)
    assert board.snapshot() == before


def test_has_legal_move(board_from):
    board = board_from(
        "BBB...",
        "......",
        "......",
        "......",
        "......",
        "......",
    )
    assert not has_legal_move(board, BLACK)
    assert not has_legal_move(board, WHITE)
    assert has_legal_move(Board.create_initial(6, 6), WHITE)
