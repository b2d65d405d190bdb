"""
Win checker for Ultimate Tic-Tac-Toe.
Decides sub-board outcomes and the phase of the whole game.
"""

from typing import Optional, List, Sequence, Tuple
from .game_state import Outcome, Phase, Player


class WinChecker:
    """
    Checks for win conditions at both levels of the board.

    A sub-board is won with 3 equal marks in a row (horizontally, vertically,
    or diagonally) and drawn when full without a line.
    The master board applies the same lines to the sub-board outcomes;
    drawn sub-boards never count towards a line.
    """

    # All possible winning lines (cell indices, row-major)
    WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
        # Rows
        (0, 1, 2),
        (3, 4, 5),
        (6, 7, 8),
        # Columns
        (0, 3, 6),
        (1, 4, 7),
        (2, 5, 8),
        # Diagonals
        (0, 4, 8),
        (2, 4, 6),
    )

    def check_winner(self, cells: Sequence[Optional[Player]]) -> Optional[Player]:
        """
        Check if a sub-board has a winner.

        Args:
            cells: The 9 cells of a sub-board.

        Returns:
            The winning Player, or None if no winner yet.
        """
        for a, b, c in self.WINNING_LINES:
            mark = cells[a]
            if mark is not None and mark == cells[b] == cells[c]:
                return mark
        return None

    def sub_board_outcome(self, cells: Sequence[Optional[Player]]) -> Outcome:
        """Outcome of a sub-board from its cells alone."""
        winner = self.check_winner(cells)
        if winner is not None:
            return Outcome.won_by(winner)
        if all(cell is not None for cell in cells):
            return Outcome.DRAW
        return Outcome.UNDECIDED

    def check_master_winner(self, outcomes: Sequence[Outcome]) -> Optional[Player]:
        """
        Check if a player owns three sub-boards in a line.

        Args:
            outcomes: The 9 sub-board outcomes.

        Returns:
            The winning Player, or None.
        """
        for a, b, c in self.WINNING_LINES:
            winner = outcomes[a].winner
            if winner is not None and outcomes[a] == outcomes[b] == outcomes[c]:
                return winner
        return None

    def master_phase(self, outcomes: Sequence[Outcome]) -> Phase:
        """Phase of the game from the sub-board outcomes."""
        winner = self.check_master_winner(outcomes)
        if winner is not None:
            return Phase.won_by(winner)
        if all(outcome.is_decided for outcome in outcomes):
            return Phase.DRAW
        return Phase.IN_PROGRESS

    def would_win(
        self,
        cells: Sequence[Optional[Player]],
        index: int,
        player: Player
    ) -> bool:
        """
        Check if placing `player` at an empty `index` wins the sub-board.
        Only lines through `index` can change, so only those are checked.
        """
        if cells[index] is not None:
            return False
        for line in self.WINNING_LINES:
            if index not in line:
                continue
            if all(i == index or cells[i] == player for i in line):
                return True
        return False

    def count_winning_moves(
        self,
        cells: Sequence[Optional[Player]],
        player: Player
    ) -> int:
        """Number of empty cells that would immediately win the sub-board for `player`."""
        return sum(
            1 for index in range(len(cells))
            if self.would_win(cells, index, player)
        )

    def get_winning_line(
        self,
        cells: Sequence[Optional[Player]]
    ) -> Optional[Tuple[int, int, int]]:
        """
        Get the winning line of a sub-board if there is one.

        Returns:
            The winning line as a tuple of cell indices, or None.
        """
        for line in self.WINNING_LINES:
            a, b, c = line
            if cells[a] is not None and cells[a] == cells[b] == cells[c]:
                return line
        return None

    def get_master_winning_line(
        self,
        outcomes: List[Outcome]
    ) -> Optional[Tuple[int, int, int]]:
        """The three sub-boards forming the game win, or None."""
        for line in self.WINNING_LINES:
            a, b, c = line
            if outcomes[a].winner is not None and outcomes[a] == outcomes[b] == outcomes[c]:
                return line
        return None
