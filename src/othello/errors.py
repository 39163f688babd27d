"""Exceptions raised by the Othello engine."""

from __future__ import annotations


class OthelloError(ValueError):
    """Base class for every rejection the engine reports to its caller."""


class InvalidDimensions(OthelloError):
    pass


class IllegalMove(OthelloError):
    pass


class NotYourTurn(OthelloError):
    pass


class GameAlreadyOver(OthelloError):
    pass


class OutOfBounds(OthelloError, IndexError):
    # Internal misuse; the public session API never lets this escape.
    pass
