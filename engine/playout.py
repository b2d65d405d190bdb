"""
Random playouts for the computer opponent.
A playout finishes a game with uniformly random legal moves.
"""

import logging
import random
from typing import Optional

from rules.game_state import GameState, Move, Phase, Player
from rules.rule_engine import RuleEngine
from .config import EngineConfig

logger = logging.getLogger(__name__)


class PlayoutSimulator:
    """
    Plays random games to the end on private copies of a state.

    The caller's state is never modified: every call makes exactly one
    working copy and plays on it.
    """

    def __init__(self, rng: Optional[random.Random] = None, engine: Optional[RuleEngine] = None):
        self.rng = rng if rng is not None else random.Random()
        self.engine = engine if engine is not None else RuleEngine()

        # Playouts that ran into the move cap; stays 0 unless the rules are broken
        self.cap_hits = 0

    def simulate(self, game_state: GameState, first_move: Move, first_player: Player) -> Phase:
        """
        Play `first_move` as `first_player`, then random moves until the game ends.

        Args:
            game_state: Position to start from.
            first_move: Move to play first. Must be legal.
            first_player: Player making the first move.

        Returns:
            The final phase: X_WON, O_WON or DRAW.

        Raises:
            IllegalMoveError: If `first_move` is not legal.
        """
        sim = game_state.copy(with_history=False)
        sim.current_player = first_player
        self.engine.apply_move_in_place(sim, first_move)

        moves_played = 1
        while not sim.phase.is_terminal and moves_played < EngineConfig.PLAYOUT_MOVE_CAP:
            moves = self.engine.legal_moves(sim)
            if not moves:
                break
            self.engine.play_unchecked(sim, self.rng.choice(moves))
            moves_played += 1

        if not sim.phase.is_terminal:
            self.cap_hits += 1
            logger.warning(
                "Playout stopped after %d moves without a result; counting it as a draw",
                moves_played,
            )
            return Phase.DRAW

        return sim.phase


def simulate_playout(
    game_state: GameState,
    first_move: Move,
    first_player: Player,
    rng: Optional[random.Random] = None
) -> Phase:
    """Run a single playout; see PlayoutSimulator.simulate."""
    return PlayoutSimulator(rng).simulate(game_state, first_move, first_player)
