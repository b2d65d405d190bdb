"""
AI player for Ultimate Tic-Tac-Toe.
Scores every legal move with tactical checks, random playouts and
positional bonuses, and plays the best one.
"""

import logging
import random
import threading
import time
from concurrent.futures import FIRST_COMPLETED, ProcessPoolExecutor, wait
from dataclasses import dataclass
from typing import Optional, List, Tuple

from rules.errors import NoLegalMovesError, SearchCancelledError
from rules.game_state import CENTER, CORNERS, GameState, Move, Outcome, Phase, Player
from rules.rule_engine import RuleEngine
from .config import AIConfig, EngineConfig
from .playout import PlayoutSimulator

logger = logging.getLogger(__name__)


@dataclass
class DecisionStats:
    """What the last call to choose_move did."""
    move: Move
    score: Optional[int]        # None when the move was not scored
    simulations: int            # Playouts run
    elapsed_ms: float
    randomized: bool = False    # Picked by the exploration branch


class AIPlayer:
    """
    The computer opponent. Plays for whoever is to move.

    Priority order:
    1. Only one legal move: play it
    2. With probability `randomness`: play a random legal move
    3. A move that wins the whole game: play it
    4. Otherwise the highest score, first move wins ties
    """

    def __init__(
        self,
        config: Optional[AIConfig] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize the AI player.

        Args:
            config: Simulation count, randomness and worker processes.
            rng: Random source for every random choice. Overrides `seed`.
            seed: Seed for a private random source.
        """
        self.config = config if config is not None else AIConfig()
        self.rng = rng if rng is not None else random.Random(seed)
        self.engine = RuleEngine()
        self.win_checker = self.engine.win_checker

        self.last_decision: Optional[DecisionStats] = None
        self.playout_cap_hits = 0

    def get_move(self, game_state: GameState) -> Move:
        """Mover interface used by the game session."""
        return self.choose_move(game_state)

    def choose_move(
        self,
        game_state: GameState,
        cancel_event: Optional[threading.Event] = None
    ) -> Move:
        """
        Pick a move for the player to move.

        Args:
            game_state: Current game state, not finished.
            cancel_event: When set, the search stops.

        Returns:
            The chosen move.

        Raises:
            NoLegalMovesError: If there is nothing to play.
            SearchCancelledError: If `cancel_event` was set during the search.
        """
        start = time.perf_counter()
        _check_cancelled(cancel_event)
        moves = self.engine.legal_moves(game_state)

        if not moves:
            raise NoLegalMovesError("No legal moves: the game should already be over")

        if len(moves) == 1:
            return self._decide(moves[0], None, 0, start)

        if self.rng.random() < self.config.randomness:
            move = self.rng.choice(moves)
            logger.debug("Exploration branch: random move %s", move)
            return self._decide(move, None, 0, start, randomized=True)

        ai = game_state.current_player
        opponent = ai.opposite()

        scores = [0] * len(moves)
        for i, move in enumerate(moves):
            bonus, wins_game = self._tactical_score(game_state, move, ai)
            if wins_game:
                return self._decide(move, None, 0, start)
            scores[i] += bonus

        playout_scores = self._playout_scores(game_state, moves, ai, cancel_event)

        for i, move in enumerate(moves):
            scores[i] += playout_scores[i]
            scores[i] += self._positional_score(game_state, move, opponent)

        best_index = 0
        for i in range(1, len(moves)):
            if scores[i] > scores[best_index]:
                best_index = i

        simulations = self.config.simulations_per_move * len(moves)
        return self._decide(moves[best_index], scores[best_index], simulations, start)

    def _tactical_score(
        self,
        game_state: GameState,
        move: Move,
        ai: Player
    ) -> Tuple[int, bool]:
        """
        Immediate sub-board wins and blocks.

        Returns:
            (bonus, wins_game). `wins_game` means the move ends the game in our favour.
        """
        cells = game_state.boards[move.sub_board]
        bonus = 0

        if self.win_checker.would_win(cells, move.cell, ai):
            outcomes = list(game_state.outcomes)
            outcomes[move.sub_board] = Outcome.won_by(ai)
            if self.win_checker.check_master_winner(outcomes) == ai:
                return 0, True
            bonus += EngineConfig.WIN_SUB_BOARD_BONUS

        if self.win_checker.would_win(cells, move.cell, ai.opposite()):
            bonus += EngineConfig.BLOCK_SUB_BOARD_BONUS

        return bonus, False

    def _playout_scores(
        self,
        game_state: GameState,
        moves: List[Move],
        ai: Player,
        cancel_event: Optional[threading.Event]
    ) -> List[int]:
        """
        Playout reward for every move, in the order of `moves`.

        Each move gets its own random source, seeded from self.rng in move
        order, so the result does not depend on the number of workers.
        """
        simulations = self.config.simulations_per_move
        seeds = [self.rng.getrandbits(64) for _ in moves]

        if self.config.max_workers > 1 and len(moves) > 1:
            results = self._playout_scores_parallel(game_state, moves, ai, seeds, cancel_event)
        else:
            results = [
                _playout_reward(game_state, move, ai, seed, simulations, cancel_event)
                for move, seed in zip(moves, seeds)
            ]

        self.playout_cap_hits += sum(cap_hits for _, cap_hits in results)
        return [reward for reward, _ in results]

    def _playout_scores_parallel(
        self,
        game_state: GameState,
        moves: List[Move],
        ai: Player,
        seeds: List[int],
        cancel_event: Optional[threading.Event]
    ) -> List[Tuple[int, int]]:
        """
        Run each move's playouts in a worker process.
        Results are stored by move index, never by completion order.
        """
        simulations = self.config.simulations_per_move
        executor = ProcessPoolExecutor(max_workers=self.config.max_workers)
        cancelled = False
        try:
            futures = {
                executor.submit(_playout_reward, game_state, move, ai, seed, simulations): index
                for index, (move, seed) in enumerate(zip(moves, seeds))
            }
            results: List[Optional[Tuple[int, int]]] = [None] * len(moves)
            pending = set(futures)
            while pending:
                if cancel_event is not None and cancel_event.is_set():
                    cancelled = True
                    raise SearchCancelledError("Move search cancelled")
                done, pending = wait(pending, timeout=0.05, return_when=FIRST_COMPLETED)
                for future in done:
                    results[futures[future]] = future.result()
            return results
        finally:
            # A cancelled search does not wait for playouts already running
            executor.shutdown(wait=not cancelled, cancel_futures=True)

    def _positional_score(self, game_state: GameState, move: Move, opponent: Player) -> int:
        score = 0

        if move.cell == CENTER:
            score += EngineConfig.CENTER_CELL_BONUS
        elif move.cell in CORNERS:
            score += EngineConfig.CORNER_CELL_BONUS

        if move.sub_board == CENTER and not game_state.outcomes[CENTER].is_decided:
            score += EngineConfig.CENTER_BOARD_BONUS

        # Don't send the opponent to a sub-board they can win right away.
        # Free choice (target already decided) is not penalised.
        after = game_state.copy(with_history=False)
        self.engine.play_unchecked(after, move)
        target = after.active_board
        if target is not None and not after.phase.is_terminal:
            threats = self.win_checker.count_winning_moves(after.boards[target], opponent)
            score -= threats * EngineConfig.OPPONENT_THREAT_PENALTY

        return score

    def _decide(
        self,
        move: Move,
        score: Optional[int],
        simulations: int,
        start: float,
        randomized: bool = False
    ) -> Move:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        self.last_decision = DecisionStats(
            move=move,
            score=score,
            simulations=simulations,
            elapsed_ms=elapsed_ms,
            randomized=randomized,
        )
        logger.debug(
            "AI ran %d playouts in %.1f ms. Move: %s (score: %s)",
            simulations, elapsed_ms, move, score,
        )
        return move


def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise SearchCancelledError("Move search cancelled")


def _playout_reward(
    game_state: GameState,
    move: Move,
    ai: Player,
    seed: int,
    simulations: int,
    cancel_event: Optional[threading.Event] = None
) -> Tuple[int, int]:
    """
    Run `simulations` playouts starting with `move`.
    Module level so worker processes can unpickle it.

    Returns:
        (reward, cap_hits)
    """
    simulator = PlayoutSimulator(random.Random(seed))
    reward = 0
    for _ in range(simulations):
        _check_cancelled(cancel_event)
        result = simulator.simulate(game_state, move, ai)
        if result.winner == ai:
            reward += EngineConfig.PLAYOUT_WIN_REWARD
        elif result == Phase.DRAW:
            reward += EngineConfig.PLAYOUT_DRAW_REWARD
    return reward, simulator.cap_hits


def choose_move(
    game_state: GameState,
    config: Optional[AIConfig] = None,
    rng: Optional[random.Random] = None,
    cancel_event: Optional[threading.Event] = None
) -> Move:
    """Pick a move for the player to move; see AIPlayer.choose_move."""
    return AIPlayer(config, rng=rng).choose_move(game_state, cancel_event)
