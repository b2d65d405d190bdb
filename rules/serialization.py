"""
Conversion of game states to and from plain data.

Two forms are supported:
- a JSON friendly dict (cells, active sub-board, current player, phase)
- a numpy int8 array of shape (9, 9): row = sub-board, column = cell,
  1 for X, -1 for O, 0 for empty

Sub-board outcomes are never stored: they are recomputed from the cells
when a state is loaded. Move history is not kept.
"""

from typing import Any, Dict, Optional

import numpy as np

from .game_state import BOARD_SIZE, GameState, Phase, Player
from .win_checker import WinChecker

_MARK_TO_INT = {None: 0, Player.X: 1, Player.O: -1}
_INT_TO_MARK = {value: mark for mark, value in _MARK_TO_INT.items()}

_checker = WinChecker()


def state_to_dict(game_state: GameState) -> Dict[str, Any]:
    return {
        "cells": [
            [cell.value if cell is not None else None for cell in board]
            for board in game_state.boards
        ],
        "active_board": game_state.active_board,
        "current_player": game_state.current_player.value,
        "phase": game_state.phase.value,
    }


def state_from_dict(data: Dict[str, Any]) -> GameState:
    """
    Rebuild a state from state_to_dict() output.

    Raises:
        ValueError: If the data is malformed or inconsistent.
    """
    try:
        cells = data["cells"]
        boards = [
            [Player(value) if value is not None else None for value in board]
            for board in cells
        ]
        current_player = Player(data["current_player"])
        phase = Phase(data["phase"])
    except KeyError as e:
        raise ValueError(f"Missing field: {e}") from e

    game_state = _build(boards, data.get("active_board"), current_player)
    if game_state.phase != phase:
        raise ValueError(
            f"Stored phase {phase.value} does not match the board ({game_state.phase.value})"
        )
    return game_state


def state_to_array(game_state: GameState) -> np.ndarray:
    array = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
    for sub_board, board in enumerate(game_state.boards):
        for cell, mark in enumerate(board):
            array[sub_board, cell] = _MARK_TO_INT[mark]
    return array


def state_from_array(
    array: np.ndarray,
    active_board: Optional[int] = None,
    current_player: Player = Player.X
) -> GameState:
    """
    Rebuild a state from a (9, 9) array of 1 / -1 / 0.

    Raises:
        ValueError: If the array has the wrong shape or values.
    """
    array = np.asarray(array)
    if array.shape != (BOARD_SIZE, BOARD_SIZE):
        raise ValueError(f"Expected shape (9, 9), got {array.shape}")
    if not np.isin(array, (-1, 0, 1)).all():
        raise ValueError("Array values must be 1 (X), -1 (O) or 0 (empty)")

    boards = [[_INT_TO_MARK[int(value)] for value in row] for row in array]
    return _build(boards, active_board, current_player)


def _build(boards, active_board: Optional[int], current_player: Player) -> GameState:
    if len(boards) != BOARD_SIZE or any(len(board) != BOARD_SIZE for board in boards):
        raise ValueError("Expected 9 sub-boards of 9 cells")

    outcomes = [_checker.sub_board_outcome(board) for board in boards]

    if active_board is not None:
        if not 0 <= active_board < BOARD_SIZE:
            raise ValueError(f"Invalid active sub-board: {active_board}")
        if outcomes[active_board].is_decided:
            raise ValueError(f"Active sub-board {active_board} is already decided")

    return GameState(
        boards=boards,
        outcomes=outcomes,
        active_board=active_board,
        current_player=current_player,
        phase=_checker.master_phase(outcomes),
    )
