"""
End-to-end tests: whole games through the console session.
"""

import random
import sys
import tempfile
import unittest
from contextlib import redirect_stdout
from io import StringIO
from pathlib import Path
from unittest import mock

from engine import AIConfig, AIPlayer
import main
from main import ConsoleHuman, GameSession
from rules import IllegalMoveError, Move, NoLegalMovesError, Phase, Player, new_game
from score_tracker import ScoreTracker
from test_ai_player import master_win_position


def scripted_input(lines):
    """input() replacement returning `lines` one by one."""
    answers = iter(lines)
    return lambda prompt="": next(answers)


class ScriptedMover:
    """Plays a fixed list of moves, then quits."""

    is_human = True

    def __init__(self, moves):
        self.moves = iter(moves)

    def get_move(self, game_state):
        return next(self.moves, None)


class SessionTests(unittest.TestCase):
    def test_computer_vs_computer(self):
        config = AIConfig(simulations_per_move=1, randomness=0.5)
        tracker = ScoreTracker()
        session = GameSession(
            {
                Player.X: AIPlayer(config, rng=random.Random(1)),
                Player.O: AIPlayer(config, rng=random.Random(2)),
            },
            score_tracker=tracker,
            verbose=False,
        )
        phase = session.play()

        self.assertTrue(phase.is_terminal)
        self.assertEqual(session.game_state.phase, phase)
        self.assertEqual(sum(tracker.scores.values()), 1)

    def test_human_is_asked_again_after_illegal_move(self):
        human = ConsoleHuman(scripted_input(["4 4", "4 1", "hello", "q"]))
        other = ScriptedMover([Move(4, 0)])
        session = GameSession({Player.X: human, Player.O: other}, verbose=False)

        output = StringIO()
        with redirect_stdout(output):
            result = session.play()

        self.assertIsNone(result)
        self.assertEqual(session.game_state.boards[4][4], Player.X)
        self.assertEqual(session.game_state.boards[4][0], Player.O)
        # X was sent to sub-board 0, so "4 1" was refused
        self.assertIsNone(session.game_state.boards[4][1])
        self.assertIn("Illegal move: Must play in sub-board 0", output.getvalue())
        self.assertIn("Enter two numbers", output.getvalue())

    def test_quit_returns_none(self):
        human = ConsoleHuman(scripted_input(["3 3", "q"]))
        computer = AIPlayer(AIConfig(simulations_per_move=1, randomness=0.0), seed=5)
        session = GameSession({Player.X: human, Player.O: computer}, verbose=False)

        with redirect_stdout(StringIO()):
            result = session.play()

        self.assertIsNone(result)
        self.assertEqual(session.game_state.boards[3][3], Player.X)
        # The computer answered inside sub-board 3
        self.assertEqual(session.game_state.moves[1].move.sub_board, 3)
        self.assertEqual(session.game_state.current_player, Player.X)

    def test_computer_illegal_move_is_not_swallowed(self):
        class BrokenMover:
            def get_move(self, game_state):
                return Move(0, 0)

        session = GameSession(
            {Player.X: BrokenMover(), Player.O: BrokenMover()}, verbose=False
        )
        with self.assertRaises(IllegalMoveError):
            session.play()

    def test_reset(self):
        session = GameSession({Player.X: ScriptedMover([Move(0, 0)]),
                               Player.O: ScriptedMover([])}, verbose=False)
        with redirect_stdout(StringIO()):
            session.play()
        self.assertEqual(session.game_state.boards[0][0], Player.X)

        session.reset()
        self.assertEqual(session.game_state.moves, [])
        self.assertTrue(session.game_state.is_free_choice)

    def test_verbose_output_names_moves_and_winning_lines(self):
        tracker = ScoreTracker()
        session = GameSession(
            {Player.X: ScriptedMover([Move(2, 2)]), Player.O: ScriptedMover([])},
            score_tracker=tracker,
        )
        session.game_state = master_win_position()

        output = StringIO()
        with redirect_stdout(output):
            phase = session.play()

        text = output.getvalue()
        self.assertEqual(phase, Phase.X_WON)
        self.assertIn("Move 1: X plays sub-board 2, cell 2", text)
        self.assertIn("X takes sub-board 2 (cells 0-1-2)", text)
        self.assertIn("X wins! (You)", text)
        self.assertIn("Winning sub-boards: 0-1-2", text)
        self.assertIn("Scores  X: 1  O: 0  Draws: 0", text)

    def test_move_numbers_count_from_one(self):
        session = GameSession({Player.X: ScriptedMover([Move(4, 4)]),
                               Player.O: ScriptedMover([Move(4, 0)])})
        output = StringIO()
        with redirect_stdout(output):
            session.play()

        self.assertIn("Move 1: X plays sub-board 4, cell 4", output.getvalue())
        self.assertIn("Move 2: O plays sub-board 4, cell 0", output.getvalue())
        self.assertEqual([r.move_number for r in session.game_state.moves], [0, 1])


class ConsoleHumanTests(unittest.TestCase):
    def test_non_ascii_digits_are_rejected(self):
        human = ConsoleHuman(scripted_input(["² 1", "1 ³", "q"]))
        output = StringIO()
        with redirect_stdout(output):
            move = human.get_move(new_game())

        self.assertIsNone(move)
        self.assertEqual(output.getvalue().count("Enter two numbers"), 2)

    def test_comma_separated_move(self):
        human = ConsoleHuman(scripted_input(["3,5"]))
        self.assertEqual(human.get_move(new_game()), Move(3, 5))


class MainTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.scores = str(Path(self.tmp.name) / "scores.json")

    def tearDown(self):
        self.tmp.cleanup()

    def test_game_error_exits_with_status_1(self):
        argv = ["uttt", "--scores", self.scores, "--seed", "1"]
        output = StringIO()
        with mock.patch.object(sys, "argv", argv), \
                mock.patch.object(GameSession, "play",
                                  side_effect=NoLegalMovesError("nothing to play")), \
                redirect_stdout(output):
            with self.assertRaises(SystemExit) as cm:
                main.main()

        self.assertEqual(cm.exception.code, 1)
        self.assertIn("Error: nothing to play", output.getvalue())
        self.assertIn("Goodbye!", output.getvalue())


if __name__ == "__main__":
    unittest.main()
