"""
Rules module for Ultimate Tic-Tac-Toe.
Handles game state, move validation and win detection.
"""

__version__ = "1.0.0"

from .errors import GameError, IllegalMoveError, NoLegalMovesError, SearchCancelledError
from .game_state import GameState, Move, MoveRecord, Outcome, Phase, Player, new_game
from .move_validator import MoveValidator, ValidationResult
from .win_checker import WinChecker
from .rule_engine import RuleEngine, apply_move, is_legal, legal_moves
