"""Othello package exposing the game engine, AI helpers, and the web application."""

from .ai import Difficulty, HeuristicAI
from .board import Board
from .game import GameSession
from .ui import app

__all__ = ["Board", "Difficulty", "GameSession", "HeuristicAI", "app"]
