"""Capture resolution and legal-move enumeration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .board import EMPTY, Board, Coord, Player, opponent
from .errors import IllegalMove

# N, NE, E, SE, S, SW, W, NW
DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (-1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, -1),
)


@dataclass(frozen=True)
class Move:
    row: int
    col: int
    capture_count: int

    @property
    def coord(self) -> Coord:
        return (self.row, self.col)


def captured_discs(board: Board, row: int, col: int, player: Player) -> List[Coord]:
    """Opponent discs that placing ``player`` at (row, col) would flip.

    Empty when the cell is occupied or no line is bracketed. A run only
    counts when it ends on one of the player's own discs.
    """
    if board.get(row, col) != EMPTY:
        return []
    opp = opponent(player)
    captured: List[Coord] = []
    for dr, dc in DIRECTIONS:
        run: List[Coord] = []
        r, c = row + dr, col + dc
        while board.in_bounds(r, c) and board.cells[r][c] == opp:
            run.append((r, c))
            r += dr
            c += dc
        if run and board.in_bounds(r, c) and board.cells[r][c] == player:
            captured.extend(run)
    return captured


def all_legal_moves(board: Board, player: Player) -> List[Move]:
    """Every capturing placement for ``player`` in row-major order."""
    moves: List[Move] = []
    for row in range(board.height):
        for col in range(board.width):
            if board.cells[row][col] != EMPTY:
                continue
            count = len(captured_discs(board, row, col, player))
            if count:
                moves.append(Move(row=row, col=col, capture_count=count))
    return moves


def is_legal(board: Board, row: int, col: int, player: Player) -> bool:
    return bool(captured_discs(board, row, col, player))


def has_legal_move(board: Board, player: Player) -> bool:
    for row in range(board.height):
        for col in range(board.width):
            if board.cells[row][col] == EMPTY and captured_discs(
                board, row, col, player
            ):
                return True
    return False


def apply_move(board: Board, row: int, col: int, player: Player) -> List[Coord]:
    """Place a disc and flip its captures; returns the flipped coordinates.

    The board is left untouched when the placement captures nothing.
    """
    captured = captured_discs(board, row, col, player)
    if not captured:
        raise IllegalMove(f"No discs to capture at ({row}, {col})")
    board.set(row, col, player)
    for r, c in captured:
        board.cells[r][c] = player
    return captured
