"""
Tests for converting game states to dicts and numpy arrays.
"""

import json
import random
import unittest

import numpy as np

from rules import Move, Phase, Player, RuleEngine, new_game
from rules.serialization import (
    state_from_array,
    state_from_dict,
    state_to_array,
    state_to_dict,
)

ALL_MOVES = [Move(s, c) for s in range(9) for c in range(9)]


def random_position(seed: int, plies: int):
    engine = RuleEngine()
    rng = random.Random(seed)
    state = new_game()
    for _ in range(plies):
        if state.is_game_over:
            break
        state = engine.apply_move(state, rng.choice(engine.legal_moves(state)))
    return state


class DictTests(unittest.TestCase):
    def test_round_trip_keeps_legality(self):
        engine = RuleEngine()
        for seed in range(10):
            state = random_position(seed, plies=30)
            data = json.loads(json.dumps(state_to_dict(state)))
            restored = state_from_dict(data)

            self.assertEqual(restored.boards, state.boards)
            self.assertEqual(restored.outcomes, state.outcomes)
            self.assertEqual(restored.active_board, state.active_board)
            self.assertEqual(restored.current_player, state.current_player)
            self.assertEqual(restored.phase, state.phase)
            for move in ALL_MOVES:
                self.assertEqual(engine.is_legal(restored, move), engine.is_legal(state, move))

    def test_finished_game_round_trip(self):
        state = random_position(3, plies=200)
        self.assertTrue(state.is_game_over)
        restored = state_from_dict(state_to_dict(state))
        self.assertEqual(restored.phase, state.phase)

    def test_format(self):
        state = RuleEngine().apply_move(new_game(), Move(4, 0))
        data = state_to_dict(state)
        self.assertEqual(data["cells"][4][0], "X")
        self.assertIsNone(data["cells"][4][1])
        self.assertEqual(data["active_board"], 0)
        self.assertEqual(data["current_player"], "O")
        self.assertEqual(data["phase"], "in_progress")

    def test_phase_mismatch_is_rejected(self):
        data = state_to_dict(new_game())
        data["phase"] = Phase.X_WON.value
        with self.assertRaises(ValueError):
            state_from_dict(data)

    def test_bad_values_are_rejected(self):
        data = state_to_dict(new_game())
        data["cells"][0][0] = "Z"
        with self.assertRaises(ValueError):
            state_from_dict(data)

        with self.assertRaises(ValueError):
            state_from_dict({"cells": []})

    def test_active_board_must_be_undecided(self):
        data = state_to_dict(new_game())
        data["cells"][2][:3] = ["O", "O", "O"]
        data["active_board"] = 2
        with self.assertRaises(ValueError):
            state_from_dict(data)


class ArrayTests(unittest.TestCase):
    def test_encoding(self):
        state = RuleEngine().apply_move(new_game(), Move(7, 5))
        array = state_to_array(state)
        self.assertEqual(array.shape, (9, 9))
        self.assertEqual(array.dtype, np.int8)
        self.assertEqual(array[7, 5], 1)
        self.assertEqual(int(np.abs(array).sum()), 1)

    def test_round_trip_keeps_legality(self):
        engine = RuleEngine()
        state = random_position(11, plies=40)
        restored = state_from_array(
            state_to_array(state), state.active_board, state.current_player
        )
        self.assertEqual(restored.outcomes, state.outcomes)
        for move in ALL_MOVES:
            self.assertEqual(engine.is_legal(restored, move), engine.is_legal(state, move))

    def test_bad_arrays_are_rejected(self):
        with self.assertRaises(ValueError):
            state_from_array(np.zeros((3, 3), dtype=np.int8))
        bad = np.zeros((9, 9), dtype=np.int8)
        bad[0, 0] = 2
        with self.assertRaises(ValueError):
            state_from_array(bad)

    def test_default_side_and_free_choice(self):
        restored = state_from_array(np.zeros((9, 9), dtype=np.int8))
        self.assertEqual(restored.current_player, Player.X)
        self.assertTrue(restored.is_free_choice)


if __name__ == "__main__":
    unittest.main()
