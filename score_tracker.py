"""
Cumulative score tallies for Ultimate Tic-Tac-Toe.
Counts X wins, O wins and draws across games, stored as JSON.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from rules.game_state import Phase

logger = logging.getLogger(__name__)


class ScoreTracker:
    """
    Win / draw counters kept between sessions.

    Only finished games are counted; the games themselves are not saved.
    """

    KEYS = ("X", "O", "draws")

    def __init__(self, path: Optional[Path] = None):
        """
        Args:
            path: JSON file to load from and save to. None keeps scores in memory.
        """
        self.path = Path(path) if path is not None else None
        self.scores: Dict[str, int] = {key: 0 for key in self.KEYS}
        if self.path is not None and self.path.exists():
            self.load()

    def load(self):
        """Read the tallies from disk. A corrupt file counts as no scores."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            scores = {key: int(data.get(key, 0)) for key in self.KEYS}
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable score file %s: %s", self.path, e)
            scores = {key: 0 for key in self.KEYS}
        self.scores = scores

    def save(self):
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.scores, indent=2), encoding="utf-8")

    def record(self, phase: Phase) -> str:
        """
        Count a finished game.

        Args:
            phase: Final phase of the game.

        Returns:
            The key that was incremented.

        Raises:
            ValueError: If the game is still in progress.
        """
        if not phase.is_terminal:
            raise ValueError("Cannot record a game that is still in progress")

        key = phase.winner.value if phase.winner is not None else "draws"
        self.scores[key] += 1
        self.save()
        return key

    def reset(self):
        self.scores = {key: 0 for key in self.KEYS}
        self.save()

    def summary(self) -> str:
        return f"X: {self.scores['X']}  O: {self.scores['O']}  Draws: {self.scores['draws']}"
