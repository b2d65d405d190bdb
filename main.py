"""
Console game for Ultimate Tic-Tac-Toe.

This script ties together:
- Rules (game state, move validation, win detection)
- Engine (the computer opponent)
- Score tracking between games

Run this script to play against the computer, or against a friend!
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, Optional

from rules.errors import GameError, IllegalMoveError
from rules.game_state import GameState, Move, Phase, Player, new_game
from rules.rule_engine import RuleEngine
from engine.config import AIConfig, Difficulty
from engine.ai_player import AIPlayer
from score_tracker import ScoreTracker


class ConsoleHuman:
    """
    A human player typing moves as "sub-board cell", e.g. "4 0".
    Typing "q" quits.
    """

    is_human = True

    def __init__(self, input_fn: Callable[[str], str] = input):
        self.input_fn = input_fn

    def get_move(self, game_state: GameState) -> Optional[Move]:
        """
        Ask until a well-formed move is typed.

        Returns:
            The move, or None if the player quit.
        """
        while True:
            target = "any" if game_state.is_free_choice else str(game_state.active_board)
            text = self.input_fn(
                f"{game_state.current_player.value} to move (sub-board {target}) > "
            ).strip().lower()

            if text in ("q", "quit"):
                return None

            parts = text.replace(",", " ").split()
            if len(parts) != 2 or not all(p.isdecimal() for p in parts):
                print("Enter two numbers 0-8: sub-board and cell (or q to quit).")
                continue

            return Move(int(parts[0]), int(parts[1]))


class GameSession:
    """
    One game between two movers.

    A mover is anything with get_move(state) -> Move: a ConsoleHuman or
    an AIPlayer. The same rules apply whoever is playing.

    Game flow:
    1. Ask the player to move for a move
    2. Apply it (humans are asked again after an illegal move)
    3. Repeat until someone wins or it's a draw
    """

    def __init__(
        self,
        movers: Dict[Player, object],
        score_tracker: Optional[ScoreTracker] = None,
        verbose: bool = True
    ):
        self.movers = movers
        self.score_tracker = score_tracker
        self.verbose = verbose
        self.engine = RuleEngine()
        self.game_state = new_game()

    def play(self) -> Optional[Phase]:
        """
        Play until the game ends.

        Returns:
            The final phase, or None if a player quit.
        """
        if self.verbose:
            self.game_state.print_board()

        while not self.game_state.is_game_over:
            player = self.game_state.current_player
            mover = self.movers[player]
            is_human = getattr(mover, "is_human", False)

            if self.verbose and not is_human:
                print(f"\n>>> {player.value} is thinking...")

            move = mover.get_move(self.game_state)
            if move is None:
                print("\nGame quit by user.")
                return None

            try:
                self.game_state = self.engine.apply_move(self.game_state, move, player)
            except IllegalMoveError as e:
                if not is_human:
                    raise
                print(f"Illegal move: {e.reason}")
                continue

            if self.verbose:
                self._show_move()

        self._show_game_result()
        return self.game_state.phase

    def reset(self):
        """Start a new game with the same players."""
        self.game_state = new_game()

    def _show_move(self):
        record = self.game_state.moves[-1]
        move = record.move
        print(f"\n>>> Move {record.move_number + 1}: {record.player.value} plays "
              f"sub-board {move.sub_board}, cell {move.cell}")

        outcome = self.game_state.outcomes[move.sub_board]
        if outcome.is_decided:
            line = self.engine.win_checker.get_winning_line(self.game_state.boards[move.sub_board])
            if outcome.winner is not None:
                print(f">>> {outcome.winner.value} takes sub-board {move.sub_board} "
                      f"(cells {line[0]}-{line[1]}-{line[2]})")
            else:
                print(f">>> Sub-board {move.sub_board} is drawn")

        self.game_state.print_board()

    def _show_game_result(self):
        phase = self.game_state.phase
        if self.score_tracker is not None:
            self.score_tracker.record(phase)

        if not self.verbose:
            return

        print("\n" + "=" * 60)
        print("   GAME OVER!")
        print("=" * 60)

        if phase.winner is not None:
            mover = self.movers[phase.winner]
            who = "You" if getattr(mover, "is_human", False) else "Computer"
            print(f"\n{phase.winner.value} wins! ({who})")
            line = self.engine.win_checker.get_master_winning_line(self.game_state.outcomes)
            print(f"Winning sub-boards: {line[0]}-{line[1]}-{line[2]}")
        else:
            print("\nIt's a draw! Good game!")

        if self.score_tracker is not None:
            print(f"\nScores  {self.score_tracker.summary()}")

        print("\n" + "=" * 60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Ultimate Tic-Tac-Toe")
    parser.add_argument(
        "--mode",
        choices=["ai", "pvp"],
        default="ai",
        help="Play against the computer (ai) or another human (pvp)"
    )
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.MEDIUM.value,
        help="Computer difficulty"
    )
    parser.add_argument(
        "--computer",
        choices=["X", "O"],
        default="O",
        help="Which side the computer plays (X moves first)"
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the computer")
    parser.add_argument("--workers", type=int, default=None, help="Playout worker processes")
    parser.add_argument(
        "--scores",
        type=Path,
        default=Path.home() / ".uttt_scores.json",
        help="File for cumulative scores"
    )
    parser.add_argument("--verbose", action="store_true", help="Log AI decisions")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    human = ConsoleHuman()
    if args.mode == "pvp":
        movers = {Player.X: human, Player.O: human}
    else:
        config = AIConfig.for_difficulty(args.difficulty, max_workers=args.workers)
        computer = AIPlayer(config, seed=args.seed)
        computer_side = Player(args.computer)
        movers = {computer_side: computer, computer_side.opposite(): human}

    print("\n" + "=" * 60)
    print("   Ultimate Tic-Tac-Toe")
    print("   Moves are 'sub-board cell', both 0-8, row by row")
    print("=" * 60)

    session = GameSession(movers, ScoreTracker(args.scores))

    try:
        while session.play() is not None:
            again = input("\nPlay again? [y/N] ").strip().lower()
            if again != "y":
                break
            session.reset()
    except (KeyboardInterrupt, EOFError):
        print("\n\nGame interrupted by user.")
    except GameError as e:
        print(f"\nError: {e}")
        sys.exit(1)
    finally:
        print("Goodbye!")


if __name__ == "__main__":
    main()
