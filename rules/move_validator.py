"""
Move validator for Ultimate Tic-Tac-Toe.
Validates that moves follow the rules.
"""

from typing import Optional, List
from dataclasses import dataclass
from .game_state import BOARD_SIZE, GameState, Move


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


class MoveValidator:
    """
    Validates Ultimate Tic-Tac-Toe moves.

    Rules:
    1. Game must not be over
    2. Target sub-board must still be undecided
    3. Must play in the active sub-board, unless it is free choice
    4. Can only place on empty cells
    """

    def validate_move(self, game_state: GameState, move: Move) -> ValidationResult:
        """
        Validate a move.

        Args:
            game_state: Current game state.
            move: The move to check.

        Returns:
            ValidationResult with is_valid and error_message.
        """
        if game_state.is_game_over:
            return ValidationResult(
                is_valid=False,
                error_message="Game is already over!"
            )

        if not (0 <= move.sub_board < BOARD_SIZE and 0 <= move.cell < BOARD_SIZE):
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid position {move}. Must be 0-8."
            )

        if game_state.outcomes[move.sub_board].is_decided:
            return ValidationResult(
                is_valid=False,
                error_message=f"Sub-board {move.sub_board} is already decided"
            )

        if (game_state.active_board is not None
                and game_state.active_board != move.sub_board):
            return ValidationResult(
                is_valid=False,
                error_message=f"Must play in sub-board {game_state.active_board}"
            )

        occupant = game_state.get_cell(move)
        if occupant is not None:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell {move} is already occupied by {occupant.value}"
            )

        return ValidationResult(is_valid=True)

    def is_legal(self, game_state: GameState, move: Move) -> bool:
        return self.validate_move(game_state, move).is_valid

    def get_valid_moves(self, game_state: GameState) -> List[Move]:
        """
        Get all valid moves for the current player.

        Moves are listed by sub-board, then by cell, both ascending.

        Args:
            game_state: Current game state.

        Returns:
            List of valid moves.
        """
        if game_state.is_game_over:
            return []

        if game_state.active_board is None:
            boards = range(BOARD_SIZE)
        else:
            boards = [game_state.active_board]

        return [
            Move(sub_board, cell)
            for sub_board in boards
            if not game_state.outcomes[sub_board].is_decided
            for cell in game_state.get_empty_cells(sub_board)
        ]
