"""
Exceptions raised by the Ultimate Tic-Tac-Toe core.
All of them signal a caller bug, never a transient condition.
"""


class GameError(Exception):
    """Base class for game errors."""


class IllegalMoveError(GameError):
    """A move broke the rules, or the game was already over."""

    def __init__(self, move, reason: str):
        self.move = move
        self.reason = reason
        super().__init__(f"Illegal move {move}: {reason}")


class NoLegalMovesError(GameError):
    """The computer was asked to move in a position with no legal moves."""


class SearchCancelledError(GameError):
    """A move search was cancelled before it finished."""
