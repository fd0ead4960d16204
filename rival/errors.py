"""Exceptions raised by the rival engine."""


class RivalError(Exception):
    """Base class for all engine errors."""


class GameOverError(RivalError, ValueError):
    """A move was requested for a position where the game has already ended."""

    def __init__(self, fen: str, reason: str):
        super().__init__(f"No move to select, game is over ({reason}): {fen}")
        self.fen = fen
        self.reason = reason


class SearchTimeout(RivalError):
    """Raised inside the tree when the time budget runs out mid-depth.

    Only the search controller catches this; the interrupted depth is thrown
    away and the previous completed depth supplies the move.
    """
