"""FastAPI-powered web UI for playing Othello against the computer."""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field, model_validator

from .ai import DEFAULT_DIFFICULTY, Difficulty
from .board import (
    BLACK,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    Player,
    validate_dimensions,
)
from .errors import OthelloError
from .game import DRAW, GameSession, TurnResult, TurnState

logger = logging.getLogger(__name__)


@dataclass
class ActiveGame:
    """Container for a running session plus the bookkeeping the browser needs."""

    session: GameSession
    move_log: List[Dict[str, object]] = field(default_factory=list)
    ai_pending: bool = False
    # Bumped on reset so a sleeping AI task from the old game gives up.
    generation: int = 0
    touched_at: float = field(default_factory=lambda: time.time())
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


GAMES: Dict[str, ActiveGame] = {}
GAMES_LOCK = threading.Lock()
app = FastAPI(
    title="Othello", description="Othello against the computer in the browser"
)


AI_THINK_DELAY: Tuple[float, float] = (1.2, 1.7)
GAME_TTL_SECONDS = 60 * 60  # 1 hour without requests


def sound_cues(result: Optional[TurnResult], human: Player = BLACK) -> List[str]:
    """Names of the sounds a client should play for ``result``.

    One of each at most: place, flip, pass, then win/lose/draw from the
    human's side.
    """
    if result is None:
        return []
    cues: List[str] = []
    if result.placed is not None:
        cues.append("place")
        if result.captured:
            cues.append("flip")
    if result.passes:
        cues.append("pass")
    ended = result.result
    if ended is not None:
        if ended.winner == DRAW:
            cues.append("draw")
        elif ended.winner == human:
            cues.append("win")
        else:
            cues.append("lose")
    return cues


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    width: int = Field(default=DEFAULT_WIDTH, description="Board columns")
    height: int = Field(default=DEFAULT_HEIGHT, description="Board rows")
    difficulty: Difficulty = Field(
        default=DEFAULT_DIFFICULTY,
        description="Computer strength: easy, normal or hard",
    )

    @model_validator(mode="after")
    def ensure_supported_size(self) -> "NewGameRequest":
        validate_dimensions(self.width, self.height)
        return self


class MoveRequest(BaseModel):
    """Request payload for placing a disc on an existing game."""

    row: int = Field(ge=0)
    col: int = Field(ge=0)


def _cleanup_games() -> None:
    """Drop games nobody has touched for GAME_TTL_SECONDS."""

    now = time.time()
    expired = [
        game_id
        for game_id, game in list(GAMES.items())
        if not game.ai_pending and now - game.touched_at >= GAME_TTL_SECONDS
    ]
    for game_id in expired:
        GAMES.pop(game_id, None)
    if expired:
        logger.debug("Evicted %d idle games", len(expired))


def _create_game(request: NewGameRequest) -> Tuple[str, ActiveGame]:
    """Create a new game and register it for later access."""

    session = GameSession(
        width=request.width, height=request.height, difficulty=request.difficulty
    )
    game_id = uuid.uuid4().hex
    game = ActiveGame(session=session)
    with GAMES_LOCK:
        _cleanup_games()
        GAMES[game_id] = game
    return game_id, game


def _get_game(game_id: str) -> ActiveGame:
    with GAMES_LOCK:
        _cleanup_games()
        try:
            game = GAMES[game_id]
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Game not found") from exc
        game.touched_at = time.time()
        return game


def _log_move(game: ActiveGame, result: TurnResult) -> None:
    if result.placed is None:
        return
    row, col = result.placed
    game.move_log.append(
        {
            "player": result.player,
            "row": row,
            "col": col,
            "captured": len(result.captured),
        }
    )


def _run_ai_turn(game_id: str, generation: int) -> None:
    game = GAMES.get(game_id)
    if not game:
        return

    try:
        # Loops while the human keeps passing back to the computer.
        while True:
            time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))
            with game.lock:
                if game.generation != generation:
                    return
                session = game.session
                if session.state is not TurnState.COMPUTER_TO_MOVE:
                    return
                result = session.computer_turn()
                _log_move(game, result)
                if result.state is not TurnState.COMPUTER_TO_MOVE:
                    return
    finally:
        with game.lock:
            if game.generation == generation:
                game.ai_pending = False


def _serialize_game(game_id: str, game: ActiveGame) -> Dict[str, object]:
    with game.lock:
        session = game.session
        result = session.last_result
        turn = result.to_dict()
        human_turn = session.state is TurnState.HUMAN_TO_MOVE

        legal_moves = [
            {"row": move.row, "col": move.col, "count": move.capture_count}
            for move in (session.legal_moves() if human_turn else [])
        ]

        state: Dict[str, object] = {
            "id": game_id,
            "width": session.board.width,
            "height": session.board.height,
            "difficulty": session.difficulty.value,
            "board": turn["board"],
            "currentPlayer": turn["active"],
            "state": turn["state"],
            "running": result.running,
            "score": turn["score"],
            "legalMoves": legal_moves,
            "captured": turn["captured"],
            "events": turn["events"],
            "sounds": sound_cues(result),
            "result": session.result.to_dict() if session.result else None,
            "moveLog": list(game.move_log),
            "aiPending": game.ai_pending,
        }
        if game.move_log:
            state["lastMove"] = game.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    game: ActiveGame,
    row: int,
    col: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with game.lock:
        if game.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        try:
            result = game.session.place_disc(row, col)
        except OthelloError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        _log_move(game, result)

        should_schedule_ai = result.state is TurnState.COMPUTER_TO_MOVE
        if should_schedule_ai:
            game.ai_pending = True
        generation = game.generation

    if should_schedule_ai and background_tasks is not None:
        logger.debug("Scheduling computer turn for game %s", game_id)
        background_tasks.add_task(_run_ai_turn, game_id, generation)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, game = _create_game(request)
    return _serialize_game(game_id, game)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    game = _get_game(game_id)
    return _serialize_game(game_id, game)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    game = _get_game(game_id)
    _apply_player_move(game_id, game, request.row, request.col, background_tasks)
    return _serialize_game(game_id, game)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    game = _get_game(game_id)
    with game.lock:
        game.generation += 1
        game.ai_pending = False
        game.move_log.clear()
        game.session.reset()
    return _serialize_game(game_id, game)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Othello</title>
    <style>
      :root {
        --felt: #1f7a4d;
        --felt-dark: #145c39;
        --ink: #f4f1e8;
        --accent: #f2c14e;
      }
      * { box-sizing: border-box; }
      body {
        margin: 0;
        min-height: 100vh;
        font-family: system-ui, -apple-system, \"Segoe UI\", sans-serif;
        background: #0f2a1d;
        color: var(--ink);
        display: flex;
        align-items: center;
        justify-content: center;
      }
      .screen {
        display: none;
        flex-direction: column;
        align-items: center;
        gap: 1rem;
        padding: 1.5rem;
      }
      .screen.active { display: flex; }
      h1 { margin: 0; letter-spacing: 0.08em; }
      .size-inputs { display: flex; gap: 0.75rem; align-items: center; }
      .size-inputs input { width: 4rem; padding: 0.35rem; font-size: 1rem; }
      .error { color: #ff8a80; min-height: 1.2em; }
      button {
        font: inherit;
        padding: 0.45rem 1rem;
        border-radius: 999px;
        border: 1px solid var(--ink);
        background: transparent;
        color: var(--ink);
        cursor: pointer;
      }
      button.selected, button:hover { background: var(--accent); color: #1b1b1b; }
      .toolbar { display: flex; gap: 0.5rem; flex-wrap: wrap; justify-content: center; }
      .scores { display: flex; gap: 2rem; font-size: 1.1rem; }
      #board {
        display: grid;
        gap: 2px;
        background: var(--felt-dark);
        padding: 4px;
        border-radius: 6px;
        width: min(90vw, 560px);
        aspect-ratio: var(--aspect, 1);
      }
      .cell {
        background: var(--felt);
        display: flex;
        align-items: center;
        justify-content: center;
        cursor: default;
      }
      .cell.playable { cursor: pointer; box-shadow: inset 0 0 0 3px rgba(242, 193, 78, 0.55); }
      .disc { width: 80%; height: 80%; border-radius: 50%; transition: transform 0.5s; }
      .disc.B { background: #111; }
      .disc.W { background: #f8f8f8; }
      .disc.flipped { animation: flip 0.5s ease-in-out; }
      @keyframes flip { 0% { transform: rotateY(180deg); } 100% { transform: rotateY(0deg); } }
      #message { min-height: 1.4em; color: var(--accent); }
    </style>
  </head>
  <body>
    <section id=\"title-screen\" class=\"screen active\">
      <h1>OTHELLO</h1>
      <div class=\"size-inputs\">
        <label>Width <input id=\"width-input\" type=\"number\" value=\"8\" min=\"6\" max=\"16\" step=\"2\" /></label>
        <label>Height <input id=\"height-input\" type=\"number\" value=\"8\" min=\"6\" max=\"16\" step=\"2\" /></label>
      </div>
      <div class=\"error\" id=\"size-error\"></div>
      <div class=\"toolbar\" id=\"difficulty-buttons\">
        <button data-difficulty=\"easy\">Easy</button>
        <button data-difficulty=\"normal\" class=\"selected\">Normal</button>
        <button data-difficulty=\"hard\">Hard</button>
      </div>
      <button id=\"start-button\">Start game</button>
    </section>

    <section id=\"game-screen\" class=\"screen\">
      <div id=\"game-info\"></div>
      <div class=\"scores\">
        <span>You (black): <strong id=\"black-score\">2</strong></span>
        <span>AI (white): <strong id=\"white-score\">2</strong></span>
      </div>
      <div id=\"turn\"></div>
      <div id=\"board\"></div>
      <div id=\"message\"></div>
      <div class=\"toolbar\">
        <button id=\"reset-button\">Reset</button>
        <button id=\"title-button\">Back to title</button>
        <button id=\"mute-button\">Mute</button>
      </div>
    </section>

    <script>
      const titleScreen = document.getElementById('title-screen');
      const gameScreen = document.getElementById('game-screen');
      const widthInput = document.getElementById('width-input');
      const heightInput = document.getElementById('height-input');
      const sizeError = document.getElementById('size-error');
      const difficultyButtons = document.querySelectorAll('#difficulty-buttons button');
      const boardEl = document.getElementById('board');
      const messageEl = document.getElementById('message');
      const turnEl = document.getElementById('turn');
      const muteButton = document.getElementById('mute-button');

      let difficulty = 'normal';
      let gameId = null;
      let muted = false;
      let pollTimer = null;
      let lastMoveCount = -1;

      const TONES = {
        place: [440, 0.08], flip: [660, 0.12], pass: [220, 0.25],
        win: [880, 0.6], lose: [160, 0.6], draw: [330, 0.5], click: [520, 0.04],
      };
      let audioCtx = null;

      function playSound(name) {
        if (muted || !TONES[name]) return;
        try {
          audioCtx = audioCtx || new (window.AudioContext || window.webkitAudioContext)();
          const [freq, length] = TONES[name];
          const osc = audioCtx.createOscillator();
          const gain = audioCtx.createGain();
          osc.frequency.value = freq;
          gain.gain.setValueAtTime(0.15, audioCtx.currentTime);
          gain.gain.exponentialRampToValueAtTime(0.001, audioCtx.currentTime + length);
          osc.connect(gain).connect(audioCtx.destination);
          osc.start();
          osc.stop(audioCtx.currentTime + length);
        } catch (error) {
          console.error('Error playing sound:', name, error);
        }
      }

      difficultyButtons.forEach((button) => {
        button.addEventListener('click', () => {
          playSound('click');
          difficultyButtons.forEach((b) => b.classList.remove('selected'));
          button.classList.add('selected');
          difficulty = button.dataset.difficulty;
        });
      });

      function errorText(payload) {
        if (!payload || payload.detail === undefined) return 'Request failed.';
        if (typeof payload.detail === 'string') return payload.detail;
        return payload.detail.map((d) => String(d.msg).replace(/^Value error, /, '')).join(' ');
      }

      async function api(path, body) {
        const response = await fetch(path, {
          method: body === undefined ? 'GET' : 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        const payload = await response.json();
        if (!response.ok) throw new Error(errorText(payload));
        return payload;
      }

      document.getElementById('start-button').addEventListener('click', async () => {
        playSound('click');
        try {
          const state = await api('/api/game', {
            width: Number(widthInput.value),
            height: Number(heightInput.value),
            difficulty,
          });
          sizeError.textContent = '';
          gameId = state.id;
          lastMoveCount = -1;
          titleScreen.classList.remove('active');
          gameScreen.classList.add('active');
          document.getElementById('game-info').textContent =
            `Board: ${state.width}x${state.height}, difficulty: ${state.difficulty}`;
          render(state);
        } catch (error) {
          sizeError.textContent = error.message;
        }
      });

      document.getElementById('title-button').addEventListener('click', () => {
        playSound('click');
        clearTimeout(pollTimer);
        gameScreen.classList.remove('active');
        titleScreen.classList.add('active');
      });

      document.getElementById('reset-button').addEventListener('click', async () => {
        playSound('click');
        if (!gameId) return;
        clearTimeout(pollTimer);
        lastMoveCount = -1;
        messageEl.textContent = '';
        render(await api(`/api/game/${gameId}/reset`, {}));
      });

      muteButton.addEventListener('click', () => {
        muted = !muted;
        muteButton.textContent = muted ? 'Unmute' : 'Mute';
        muteButton.classList.toggle('selected', muted);
      });

      async function onCellClick(row, col) {
        try {
          render(await api(`/api/game/${gameId}/move`, { row, col }));
        } catch (error) {
          messageEl.textContent = error.message;
        }
      }

      function describeEvents(state) {
        const lines = [];
        for (const event of state.events) {
          if (event.type === 'pass') {
            lines.push(event.by === 'B' ? 'You have no move and pass.' : 'AI has no move and passes.');
          }
        }
        const last = state.lastMove;
        if (last && last.player === 'W') {
          lines.push(`AI placed at (${last.row + 1}, ${last.col + 1}).`);
        }
        if (state.result) {
          const { black, white } = state.result.score;
          if (state.result.winner === 'B') lines.push(`Game over! You win (${black} to ${white}).`);
          else if (state.result.winner === 'W') lines.push(`Game over! AI wins (${white} to ${black}).`);
          else lines.push(`Game over! Draw (${black} to ${white}).`);
        }
        return lines.join(' ');
      }

      function render(state) {
        const fresh = state.moveLog.length !== lastMoveCount;
        boardEl.style.setProperty('--aspect', `${state.width} / ${state.height}`);
        boardEl.style.gridTemplateColumns = `repeat(${state.width}, 1fr)`;
        boardEl.style.gridTemplateRows = `repeat(${state.height}, 1fr)`;
        boardEl.innerHTML = '';

        const playable = new Set(state.legalMoves.map((m) => `${m.row},${m.col}`));
        const flipped = new Set(fresh ? state.captured.map(([r, c]) => `${r},${c}`) : []);

        state.board.forEach((cells, row) => {
          cells.forEach((value, col) => {
            const cell = document.createElement('div');
            cell.className = 'cell';
            const key = `${row},${col}`;
            if (value) {
              const disc = document.createElement('div');
              disc.className = `disc ${value}`;
              if (flipped.has(key)) disc.classList.add('flipped');
              cell.appendChild(disc);
            } else if (playable.has(key)) {
              cell.classList.add('playable');
              cell.addEventListener('click', () => onCellClick(row, col));
            }
            boardEl.appendChild(cell);
          });
        });

        document.getElementById('black-score').textContent = state.score.black;
        document.getElementById('white-score').textContent = state.score.white;

        if (!state.running) turnEl.textContent = 'Game over';
        else if (state.aiPending || state.currentPlayer === 'W') turnEl.textContent = 'AI is thinking...';
        else turnEl.textContent = 'Your turn';

        if (fresh) {
          lastMoveCount = state.moveLog.length;
          const text = describeEvents(state);
          if (text) messageEl.textContent = text;
          state.sounds.forEach(playSound);
        }

        clearTimeout(pollTimer);
        if (state.aiPending) {
          pollTimer = setTimeout(async () => render(await api(`/api/game/${gameId}`)), 400);
        }
      }
    </script>
  </body>
</html>
"""
