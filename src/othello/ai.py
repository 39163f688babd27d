"""Heuristic computer opponent with three difficulty tiers.

Each tier is a plain function ``(board, legal_moves, rng) -> Move`` looked up
in ``POLICIES``. None of them searches ahead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional, Sequence
import random

from .board import WHITE, Board, Player
from .errors import NotYourTurn
from .rules import Move, all_legal_moves


class Difficulty(str, Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


DEFAULT_DIFFICULTY = Difficulty.NORMAL

Policy = Callable[[Board, Sequence[Move], random.Random], Move]


def choose_random(
    board: Board, legal_moves: Sequence[Move], rng: random.Random
) -> Move:
    return rng.choice(list(legal_moves))


def choose_greedy(
    board: Board, legal_moves: Sequence[Move], rng: random.Random
) -> Move:
    # max() keeps the first maximal element, i.e. the row-major tie-break
    return max(legal_moves, key=lambda move: move.capture_count)


def choose_corner_first(
    board: Board, legal_moves: Sequence[Move], rng: random.Random
) -> Move:
    by_coord = {move.coord: move for move in legal_moves}
    for corner in board.corners():
        if corner in by_coord:
            return by_coord[corner]
    return choose_greedy(board, legal_moves, rng)


POLICIES: Dict[Difficulty, Policy] = {
    Difficulty.EASY: choose_random,
    Difficulty.NORMAL: choose_greedy,
    Difficulty.HARD: choose_corner_first,
}


def select_move(
    board: Board,
    legal_moves: Sequence[Move],
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> Move:
    """Pick one of ``legal_moves`` according to ``difficulty``."""
    if not legal_moves:
        raise ValueError("No legal moves to choose from")
    policy = POLICIES[Difficulty(difficulty)]
    return policy(board, legal_moves, rng or random.Random())


@dataclass
class HeuristicAI:
    """Computer player bound to a side and a difficulty tier.

    - HeuristicAI(player=WHITE, difficulty=Difficulty.HARD)
    - choose(board) -> Move
    """

    player: Player = WHITE
    difficulty: Difficulty = DEFAULT_DIFFICULTY
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def choose(self, board: Board, to_move: Optional[Player] = None) -> Move:
        if to_move is not None and to_move != self.player:
            raise NotYourTurn("It is not this AI player's turn")
        moves = all_legal_moves(board, self.player)
        if not moves:
            raise ValueError("No legal moves available")
        return select_move(board, moves, self.difficulty, self.rng)
