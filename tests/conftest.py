"""Shared fixtures for the Othello test-suite."""

from typing import Callable

import pytest

from othello.board import BLACK, EMPTY, WHITE, Board

_SYMBOLS = {".": EMPTY, "B": BLACK, "W": WHITE}


def _board_from(*rows: str) -> Board:
    cells = [[_SYMBOLS[ch] for ch in row] for row in rows]
    return Board(width=len(cells[0]), height=len(cells), cells=cells)


@pytest.fixture
def board_from() -> Callable[..., Board]:
    """Build a board from rows of '.', 'B' and 'W'."""
    return _board_from
