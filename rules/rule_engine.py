"""
Rule engine for Ultimate Tic-Tac-Toe.
The only place where a game state changes.
"""

from typing import Optional, List
from .errors import IllegalMoveError
from .game_state import GameState, Move, MoveRecord, Player, new_game
from .move_validator import MoveValidator
from .win_checker import WinChecker


class RuleEngine:
    """
    Applies moves and keeps the derived parts of the state in sync:
    sub-board outcomes, game phase, active sub-board and turn.
    """

    def __init__(self):
        self.validator = MoveValidator()
        self.win_checker = WinChecker()

    def is_legal(self, game_state: GameState, move: Move) -> bool:
        return self.validator.is_legal(game_state, move)

    def legal_moves(self, game_state: GameState) -> List[Move]:
        return self.validator.get_valid_moves(game_state)

    def apply_move(
        self,
        game_state: GameState,
        move: Move,
        player: Optional[Player] = None
    ) -> GameState:
        """
        Play a move and return the resulting state.

        Args:
            game_state: State to play on. Never modified.
            move: The move to play.
            player: Who plays it. Defaults to the player to move.

        Returns:
            The new game state.

        Raises:
            IllegalMoveError: If the move is not legal for `player`.
        """
        self._check(game_state, move, player)
        new_state = game_state.copy()
        self.play_unchecked(new_state, move)
        return new_state

    def apply_move_in_place(
        self,
        game_state: GameState,
        move: Move,
        player: Optional[Player] = None
    ) -> GameState:
        """Same as apply_move, but updates `game_state` itself."""
        self._check(game_state, move, player)
        self.play_unchecked(game_state, move)
        return game_state

    def play_unchecked(self, game_state: GameState, move: Move):
        """
        Play a move known to be legal, in place.
        Used by playouts, which only pick from legal_moves().
        """
        player = game_state.current_player
        board = game_state.boards[move.sub_board]
        board[move.cell] = player
        game_state.moves.append(MoveRecord(player, move, len(game_state.moves)))

        outcome = self.win_checker.sub_board_outcome(board)
        if outcome.is_decided:
            game_state.outcomes[move.sub_board] = outcome
            # The phase can only change when a sub-board gets decided
            game_state.phase = self.win_checker.master_phase(game_state.outcomes)

        if game_state.outcomes[move.cell].is_decided:
            game_state.active_board = None
        else:
            game_state.active_board = move.cell

        if not game_state.phase.is_terminal:
            game_state.current_player = player.opposite()

    def _check(self, game_state: GameState, move: Move, player: Optional[Player]):
        result = self.validator.validate_move(game_state, move)
        if not result.is_valid:
            raise IllegalMoveError(move, result.error_message)
        if player is not None and player != game_state.current_player:
            raise IllegalMoveError(
                move, f"It's not {player.value}'s turn"
            )


_engine = RuleEngine()


def is_legal(game_state: GameState, move: Move) -> bool:
    """True if `move` can be played by the player to move."""
    return _engine.is_legal(game_state, move)


def legal_moves(game_state: GameState) -> List[Move]:
    """All legal moves, by sub-board then cell."""
    return _engine.legal_moves(game_state)


def apply_move(
    game_state: GameState,
    move: Move,
    player: Optional[Player] = None
) -> GameState:
    """Play a move and return the new state; raises IllegalMoveError."""
    return _engine.apply_move(game_state, move, player)


__all__ = ["RuleEngine", "new_game", "is_legal", "legal_moves", "apply_move"]
