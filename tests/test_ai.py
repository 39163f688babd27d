"""Tests for the heuristic Othello AI."""

import random

import pytest

from othello.ai import Difficulty, HeuristicAI, POLICIES, select_move
from othello.board import BLACK, WHITE, Board
from othello.errors import NotYourTurn
from othello.rules import Move, all_legal_moves, apply_move


def test_normal_takes_largest_capture():
    board = Board.create_initial(8, 8)
    moves = [Move(0, 1, 2), Move(1, 0, 3), Move(2, 2, 1)]
    assert select_move(board, moves, Difficulty.NORMAL) == Move(1, 0, 3)


def test_normal_breaks_ties_by_enumeration_order():
    board = Board.create_initial(8, 8)
    moves = [Move(0, 1, 2), Move(1, 0, 3), Move(2, 2, 3)]
    assert select_move(board, moves, Difficulty.NORMAL) == Move(1, 0, 3)


def test_hard_prefers_corner_over_bigger_capture(board_from):
    board = board_from(
        ".BW...",
        "......",
        "......",
        "WBBB..",
        "......",
        "......",
    )
    moves = all_legal_moves(board, WHITE)
    assert moves == [Move(0, 0, 1), Move(3, 4, 3)]

    assert select_move(board, moves, Difficulty.NORMAL) == Move(3, 4, 3)
    assert select_move(board, moves, Difficulty.HARD) == Move(0, 0, 1)


def test_hard_uses_corner_list_order():
    board = Board.create_initial(8, 8)
    moves = [Move(2, 2, 6), Move(7, 7, 1), Move(7, 0, 1), Move(0, 7, 1)]
    assert select_move(board, moves, Difficulty.HARD) == Move(0, 7, 1)


def test_hard_without_corner_falls_back_to_greedy():
    board = Board.create_initial(8, 8)
    moves = [Move(0, 3, 1), Move(2, 2, 4), Move(5, 5, 4)]
    assert select_move(board, moves, Difficulty.HARD) == Move(2, 2, 4)


def test_easy_is_a_seeded_uniform_choice():
    board = Board.create_initial(8, 8)
    moves = [Move(0, 3, 1), Move(2, 2, 4), Move(5, 5, 4), Move(6, 1, 2)]

    picked = select_move(board, moves, Difficulty.EASY, random.Random(42))

    assert picked == random.Random(42).choice(moves)
    seen = {
        select_move(board, moves, Difficulty.EASY, random.Random(seed))
        for seed in range(50)
    }
    assert seen <= set(moves)
    assert len(seen) > 1


def test_every_difficulty_has_a_policy():
    assert set(POLICIES) == set(Difficulty)


def test_difficulty_accepts_plain_strings():
    board = Board.create_initial(8, 8)
    moves = [Move(0, 3, 1), Move(2, 2, 4)]
    assert select_move(board, moves, "normal") == Move(2, 2, 4)


def test_empty_move_list_is_rejected():
    board = Board.create_initial(8, 8)
    with pytest.raises(ValueError):
        select_move(board, [], Difficulty.HARD)


def test_heuristic_ai_plays_a_legal_move_for_its_side():
    board = Board.create_initial(8, 8)
    apply_move(board, 2, 3, BLACK)

    ai = HeuristicAI(player=WHITE, difficulty=Difficulty.HARD)
    move = ai.choose(board, to_move=WHITE)

    assert move in all_legal_moves(board, WHITE)


def test_heuristic_ai_refuses_out_of_turn():
    ai = HeuristicAI(player=WHITE)
    with pytest.raises(NotYourTurn):
        ai.choose(Board.create_initial(8, 8), to_move=BLACK)
