"""
Engine module for Ultimate Tic-Tac-Toe.
Random playouts and the computer opponent.
"""

from .config import AIConfig, Difficulty, EngineConfig
from .playout import PlayoutSimulator, simulate_playout
from .ai_player import AIPlayer, DecisionStats, choose_move
