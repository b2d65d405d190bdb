"""
Engine configuration for Ultimate Tic-Tac-Toe.
Scoring weights and difficulty settings for the computer opponent.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Difficulty(Enum):
    """AI difficulty levels."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class EngineConfig:
    """
    Policy constants for move scoring.
    Change these values to tune how the computer plays!
    """

    # ==================== TACTICS ====================
    WIN_SUB_BOARD_BONUS = 500     # Move wins its sub-board
    BLOCK_SUB_BOARD_BONUS = 300   # Opponent would win the sub-board on this cell

    # ==================== PLAYOUTS ====================
    PLAYOUT_WIN_REWARD = 3
    PLAYOUT_DRAW_REWARD = 1
    # Each of the 81 cells is played at most once
    PLAYOUT_MOVE_CAP = 81

    # ==================== POSITION ====================
    CENTER_CELL_BONUS = 50
    CORNER_CELL_BONUS = 25
    CENTER_BOARD_BONUS = 30
    # Per winning completion the opponent gets in the sub-board we send them to
    OPPONENT_THREAT_PENALTY = 20

    # ==================== DIFFICULTY ====================
    # (simulations per move, randomness)
    DIFFICULTY_SETTINGS = {
        Difficulty.EASY: (50, 0.40),
        Difficulty.MEDIUM: (150, 0.15),
        Difficulty.HARD: (400, 0.05),
    }

    # ==================== PARALLELISM ====================
    # Worker processes for playouts, 1 = run in the calling process
    DEFAULT_WORKERS = int(os.getenv("UTTT_AI_WORKERS", "1"))


@dataclass(frozen=True)
class AIConfig:
    """Settings for one computer player."""
    simulations_per_move: int = 150
    randomness: float = 0.15
    max_workers: int = EngineConfig.DEFAULT_WORKERS

    def __post_init__(self):
        if self.simulations_per_move < 0:
            raise ValueError("simulations_per_move must be >= 0")
        if not 0.0 <= self.randomness <= 1.0:
            raise ValueError("randomness must be between 0 and 1")
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")

    @classmethod
    def for_difficulty(cls, difficulty, max_workers: Optional[int] = None) -> "AIConfig":
        """
        Build the config for a difficulty level.

        Args:
            difficulty: A Difficulty, or its name ("easy", "medium", "hard").
            max_workers: Worker processes; defaults to EngineConfig.DEFAULT_WORKERS.
        """
        difficulty = Difficulty(difficulty)
        simulations, randomness = EngineConfig.DIFFICULTY_SETTINGS[difficulty]
        if max_workers is None:
            max_workers = EngineConfig.DEFAULT_WORKERS
        return cls(
            simulations_per_move=simulations,
            randomness=randomness,
            max_workers=max_workers,
        )
