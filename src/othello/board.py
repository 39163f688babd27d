"""Grid state for Othello: cell values, dimensions and the standard opening."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .errors import InvalidDimensions, OutOfBounds

Player = str  # BLACK or WHITE
Coord = Tuple[int, int]  # (row, col)

EMPTY = " "
BLACK = "B"  # human
WHITE = "W"  # computer
CELL_VALUES = (EMPTY, BLACK, WHITE)

MIN_SIZE = 6
MAX_SIZE = 16
DEFAULT_WIDTH = 8
DEFAULT_HEIGHT = 8


def opponent(player: Player) -> Player:
    if player == BLACK:
        return WHITE
    if player == WHITE:
        return BLACK
    raise ValueError(f"Not a player: {player!r}")


def validate_dimensions(width: int, height: int) -> None:
    """Raise InvalidDimensions unless both sides are even ints in [6, 16]."""
    for value in (width, height):
        if (
            not isinstance(value, int)
            or isinstance(value, bool)
            or value % 2 != 0
            or not MIN_SIZE <= value <= MAX_SIZE
        ):
            raise InvalidDimensions(
                f"Width and height must be even numbers between "
                f"{MIN_SIZE} and {MAX_SIZE} (got {width}x{height})."
            )


@dataclass
class Board:
    width: int
    height: int
    # cells[row][col], each one of CELL_VALUES
    cells: List[List[str]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [[EMPTY] * self.width for _ in range(self.height)]

    @classmethod
    def create_initial(cls, width: int, height: int) -> "Board":
        """Empty board with the four-disc opening in the centre.

        White holds the top-left/bottom-right centre cells, Black the other
        diagonal.
        """
        validate_dimensions(width, height)
        board = cls(width=width, height=height)
        top, left = height // 2 - 1, width // 2 - 1
        board.cells[top][left] = WHITE
        board.cells[top][left + 1] = BLACK
        board.cells[top + 1][left] = BLACK
        board.cells[top + 1][left + 1] = WHITE
        return board

    # ---- access ----

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def get(self, row: int, col: int) -> str:
        self._check(row, col)
        return self.cells[row][col]

    def set(self, row: int, col: int, value: str) -> None:
        self._check(row, col)
        if value not in CELL_VALUES:
            raise ValueError(f"Not a cell value: {value!r}")
        self.cells[row][col] = value

    # ---- summaries ----

    def count(self, value: str) -> int:
        return sum(row.count(value) for row in self.cells)

    def empty_count(self) -> int:
        return self.count(EMPTY)

    def is_full(self) -> bool:
        return self.empty_count() == 0

    def corners(self) -> Tuple[Coord, Coord, Coord, Coord]:
        """Corner cells in top-left, top-right, bottom-left, bottom-right order."""
        last_row, last_col = self.height - 1, self.width - 1
        return ((0, 0), (0, last_col), (last_row, 0), (last_row, last_col))

    def snapshot(self) -> List[List[str]]:
        return [row.copy() for row in self.cells]

    def copy(self) -> "Board":
        return Board(width=self.width, height=self.height, cells=self.snapshot())

    # ---- helpers ----

    def _check(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise OutOfBounds(
                f"({row}, {col}) is outside the {self.width}x{self.height} board"
            )
