"""Turn sequencing and the game session that owns the board."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union
import logging
import random

from .ai import DEFAULT_DIFFICULTY, Difficulty, HeuristicAI
from .board import (
    BLACK,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    EMPTY,
    WHITE,
    Board,
    Coord,
    Player,
    opponent,
    validate_dimensions,
)
from .errors import GameAlreadyOver, IllegalMove, NotYourTurn
from .rules import Move, all_legal_moves, apply_move, has_legal_move

logger = logging.getLogger(__name__)

DRAW = "draw"
PLAYER_NAMES = {BLACK: "black", WHITE: "white"}


class TurnState(str, Enum):
    HUMAN_TO_MOVE = "human_to_move"
    COMPUTER_TO_MOVE = "computer_to_move"
    GAME_OVER = "game_over"


# ---------- Notifications ----------


@dataclass(frozen=True)
class Score:
    black: int
    white: int

    @classmethod
    def of(cls, board: Board) -> "Score":
        return cls(black=board.count(BLACK), white=board.count(WHITE))

    def leader(self) -> str:
        """BLACK, WHITE or DRAW purely by disc count."""
        if self.black > self.white:
            return BLACK
        if self.white > self.black:
            return WHITE
        return DRAW

    def to_dict(self) -> Dict[str, int]:
        return {"black": self.black, "white": self.white}


@dataclass(frozen=True)
class TurnChanged:
    active: Player

    def to_dict(self) -> Dict[str, object]:
        return {"type": "turn", "active": self.active}


@dataclass(frozen=True)
class Passed:
    by: Player

    def to_dict(self) -> Dict[str, object]:
        return {"type": "pass", "by": self.by}


@dataclass(frozen=True)
class GameEnded:
    winner: str  # BLACK, WHITE or DRAW
    final_score: Score

    def to_dict(self) -> Dict[str, object]:
        return {
            "type": "end",
            "winner": self.winner,
            "score": self.final_score.to_dict(),
        }


Event = Union[TurnChanged, Passed, GameEnded]


@dataclass
class TurnResult:
    """Everything a presentation layer needs after one engine call."""

    board: List[List[str]]
    score: Score
    active: Player
    state: TurnState
    captured: List[Coord] = field(default_factory=list)
    placed: Optional[Coord] = None
    player: Optional[Player] = None
    events: List[Event] = field(default_factory=list)

    @property
    def result(self) -> Optional[GameEnded]:
        for event in self.events:
            if isinstance(event, GameEnded):
                return event
        return None

    @property
    def passes(self) -> List[Passed]:
        return [event for event in self.events if isinstance(event, Passed)]

    @property
    def running(self) -> bool:
        return self.state is not TurnState.GAME_OVER

    def to_dict(self) -> Dict[str, object]:
        result = self.result
        return {
            "board": [[c if c != EMPTY else "" for c in row] for row in self.board],
            "score": self.score.to_dict(),
            "active": self.active,
            "state": self.state.value,
            "captured": [list(coord) for coord in self.captured],
            "placed": list(self.placed) if self.placed else None,
            "player": self.player,
            "events": [event.to_dict() for event in self.events],
            "result": result.to_dict() if result else None,
        }


# ---------- Turn controller ----------


@dataclass
class TurnController:
    """State machine deciding who moves next, passes and when the game ends.

    The board is passed in on every call; the controller only tracks whose
    turn it is.
    """

    human: Player = BLACK
    computer: Player = WHITE
    active: Player = BLACK
    state: TurnState = TurnState.HUMAN_TO_MOVE

    def begin(self, board: Board, first: Player = BLACK) -> List[Event]:
        self.active = first
        return self._enter_turn(board, first)

    def play(
        self, board: Board, row: int, col: int, player: Player
    ) -> Tuple[List[Coord], List[Event]]:
        """Apply a placement for ``player`` and advance the turn.

        Raises without touching the board or the controller when the game is
        over, it is not ``player``'s turn, or the placement captures nothing.
        """
        self.ensure_turn(player)
        captured = apply_move(board, row, col, player)
        return captured, self._enter_turn(board, opponent(player))

    def ensure_turn(self, player: Player) -> None:
        if self.state is TurnState.GAME_OVER:
            raise GameAlreadyOver("Game already finished")
        if player != self.active:
            raise NotYourTurn(f"It is {PLAYER_NAMES[self.active]}'s turn")

    def _enter_turn(self, board: Board, player: Player) -> List[Event]:
        if board.is_full():
            return [self._finish(board)]
        if has_legal_move(board, player):
            self._hand_to(player)
            return [TurnChanged(active=player)]

        # Forced pass: the turn goes straight back to the other side.
        events: List[Event] = [Passed(by=player)]
        other = opponent(player)
        if has_legal_move(board, other):
            self._hand_to(other)
            events.append(TurnChanged(active=other))
        else:
            events.append(self._finish(board))
        return events

    def _hand_to(self, player: Player) -> None:
        self.active = player
        self.state = (
            TurnState.HUMAN_TO_MOVE
            if player == self.human
            else TurnState.COMPUTER_TO_MOVE
        )

    def _finish(self, board: Board) -> GameEnded:
        self.state = TurnState.GAME_OVER
        score = Score.of(board)
        return GameEnded(winner=score.leader(), final_score=score)


# ---------- Session ----------


@dataclass
class GameSession:
    """A single human-vs-computer game: owns the board and drives every change.

    ``configure`` stores settings for the next ``start``/``reset``; the board
    in play keeps its dimensions until then.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    difficulty: Difficulty = DEFAULT_DIFFICULTY
    rng: random.Random = field(default_factory=random.Random, repr=False)

    board: Board = field(init=False, repr=False)
    controller: TurnController = field(init=False, repr=False)
    ai: HeuristicAI = field(init=False, repr=False)
    last_result: Optional[TurnResult] = field(default=None, init=False, repr=False)
    result: Optional[GameEnded] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.configure(self.width, self.height, self.difficulty)
        self.start()

    # ---- inbound operations ----

    def configure(self, width: int, height: int, difficulty: Difficulty) -> None:
        validate_dimensions(width, height)
        self.difficulty = Difficulty(difficulty)
        self.width = width
        self.height = height
        logger.info(
            "Configured %dx%d board, %s difficulty",
            width,
            height,
            self.difficulty.value,
        )

    def start(self) -> TurnResult:
        self.board = Board.create_initial(self.width, self.height)
        self.controller = TurnController(human=BLACK, computer=WHITE)
        self.ai = HeuristicAI(player=WHITE, difficulty=self.difficulty, rng=self.rng)
        self.result = None
        logger.info(
            "New game on %dx%d board (%s)",
            self.width,
            self.height,
            self.difficulty.value,
        )
        events = self.controller.begin(self.board, first=BLACK)
        return self._publish(events)

    def reset(self) -> TurnResult:
        return self.start()

    def place_disc(self, row: int, col: int) -> TurnResult:
        """Human placement; raises if it is not legal right now."""
        self.controller.ensure_turn(self.controller.human)
        if not self.board.in_bounds(row, col):
            raise IllegalMove(f"({row}, {col}) is outside the board")
        if self.board.cells[row][col] != EMPTY:
            raise IllegalMove("Cell already occupied")
        return self._play(row, col, self.controller.human)

    def computer_turn(self) -> TurnResult:
        self.controller.ensure_turn(self.controller.computer)
        move = self.ai.choose(self.board, to_move=self.controller.active)
        return self._play(move.row, move.col, self.controller.computer)

    # ---- read access ----

    @property
    def current_player(self) -> Player:
        return self.controller.active

    @property
    def state(self) -> TurnState:
        return self.controller.state

    @property
    def running(self) -> bool:
        return self.controller.state is not TurnState.GAME_OVER

    @property
    def winner(self) -> Optional[str]:
        return self.result.winner if self.result else None

    def score(self) -> Score:
        return Score.of(self.board)

    def legal_moves(self, player: Optional[Player] = None) -> List[Move]:
        if not self.running:
            return []
        return all_legal_moves(self.board, player or self.controller.active)

    # ---- helpers ----

    def _play(self, row: int, col: int, player: Player) -> TurnResult:
        captured, events = self.controller.play(self.board, row, col, player)
        logger.debug(
            "%s placed at (%d, %d), captured %d",
            PLAYER_NAMES[player],
            row,
            col,
            len(captured),
        )
        return self._publish(
            events, captured=captured, placed=(row, col), player=player
        )

    def _publish(
        self,
        events: List[Event],
        captured: Optional[List[Coord]] = None,
        placed: Optional[Coord] = None,
        player: Optional[Player] = None,
    ) -> TurnResult:
        for event in events:
            if isinstance(event, Passed):
                logger.info("%s has no legal move and passes", PLAYER_NAMES[event.by])
            elif isinstance(event, GameEnded):
                self.result = event
                logger.info(
                    "Game over: %s (black %d, white %d)",
                    PLAYER_NAMES.get(event.winner, event.winner),
                    event.final_score.black,
                    event.final_score.white,
                )
        self.last_result = TurnResult(
            board=self.board.snapshot(),
            score=self.score(),
            active=self.controller.active,
            state=self.controller.state,
            captured=list(captured or []),
            placed=placed,
            player=player,
            events=list(events),
        )
        return self.last_result
