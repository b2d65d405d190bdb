"""
Game state for Ultimate Tic-Tac-Toe.
Tracks the nine sub-boards, their outcomes, the active sub-board and the
current player.
"""

from enum import Enum
from typing import Optional, List
from dataclasses import dataclass, field


class Player(Enum):
    """The two players in the game."""
    X = "X"
    O = "O"

    def opposite(self) -> "Player":
        """Get the opposite player."""
        return Player.O if self == Player.X else Player.X


class Outcome(Enum):
    """Outcome of a single sub-board. Decided exactly once."""
    UNDECIDED = "undecided"
    X_WON = "x_won"
    O_WON = "o_won"
    DRAW = "draw"

    @classmethod
    def won_by(cls, player: Player) -> "Outcome":
        return cls.X_WON if player == Player.X else cls.O_WON

    @property
    def winner(self) -> Optional[Player]:
        if self == Outcome.X_WON:
            return Player.X
        if self == Outcome.O_WON:
            return Player.O
        return None

    @property
    def is_decided(self) -> bool:
        return self != Outcome.UNDECIDED


class Phase(Enum):
    """Phase of the whole game. Terminal once it leaves IN_PROGRESS."""
    IN_PROGRESS = "in_progress"
    X_WON = "x_won"
    O_WON = "o_won"
    DRAW = "draw"

    @classmethod
    def won_by(cls, player: Player) -> "Phase":
        return cls.X_WON if player == Player.X else cls.O_WON

    @property
    def winner(self) -> Optional[Player]:
        if self == Phase.X_WON:
            return Player.X
        if self == Phase.O_WON:
            return Player.O
        return None

    @property
    def is_terminal(self) -> bool:
        return self != Phase.IN_PROGRESS


# Board geometry: 9 sub-boards of 9 cells, both indexed 0-8 row-major
BOARD_SIZE = 9
CENTER = 4
CORNERS = (0, 2, 6, 8)


@dataclass(frozen=True)
class Move:
    """
    A move: which sub-board, and which cell inside it.
    The cell index also names the sub-board the opponent is sent to.
    """
    sub_board: int      # Sub-board index (0-8)
    cell: int           # Cell index inside the sub-board (0-8)

    def __str__(self) -> str:
        return f"({self.sub_board}, {self.cell})"


@dataclass(frozen=True)
class MoveRecord:
    """An entry in the move history."""
    player: Player
    move: Move
    move_number: int


@dataclass
class GameState:
    """
    The complete state of an Ultimate Tic-Tac-Toe game.

    Tracks:
    - The nine sub-boards (None means an empty cell)
    - The outcome of every sub-board
    - The active sub-board (None means free choice)
    - Current player and game phase
    - Move history
    """

    boards: List[List[Optional[Player]]] = field(
        default_factory=lambda: [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    )

    # Cached outcome of each sub-board, kept in sync with `boards`
    outcomes: List[Outcome] = field(
        default_factory=lambda: [Outcome.UNDECIDED] * BOARD_SIZE
    )

    # Sub-board the next move must be played in, or None for free choice
    active_board: Optional[int] = None

    current_player: Player = Player.X
    phase: Phase = Phase.IN_PROGRESS

    moves: List[MoveRecord] = field(default_factory=list)

    @property
    def is_free_choice(self) -> bool:
        return self.active_board is None

    @property
    def is_game_over(self) -> bool:
        return self.phase.is_terminal

    @property
    def winner(self) -> Optional[Player]:
        return self.phase.winner

    @property
    def last_move(self) -> Optional[Move]:
        return self.moves[-1].move if self.moves else None

    def get_cell(self, move: Move) -> Optional[Player]:
        return self.boards[move.sub_board][move.cell]

    def get_empty_cells(self, sub_board: int) -> List[int]:
        """
        Get the empty cells of one sub-board.

        Args:
            sub_board: Sub-board index (0-8).

        Returns:
            List of cell indices.
        """
        return [c for c, value in enumerate(self.boards[sub_board]) if value is None]

    def copy(self, with_history: bool = True) -> "GameState":
        """
        Create a deep copy of the game state.

        Args:
            with_history: Also copy the move history. Playouts skip it.
        """
        return GameState(
            boards=[list(board) for board in self.boards],
            outcomes=list(self.outcomes),
            active_board=self.active_board,
            current_player=self.current_player,
            phase=self.phase,
            moves=list(self.moves) if with_history else [],
        )

    def render(self) -> str:
        """Render the board as text, one sub-board per 3x3 block."""
        symbols = {None: ".", Player.X: "X", Player.O: "O"}
        lines = []
        for big_row in range(3):
            for small_row in range(3):
                chunks = []
                for big_col in range(3):
                    board = self.boards[big_row * 3 + big_col]
                    cells = board[small_row * 3:small_row * 3 + 3]
                    chunks.append(" ".join(symbols[c] for c in cells))
                lines.append(" | ".join(chunks))
            if big_row < 2:
                lines.append("------+-------+------")
        return "\n".join(lines)

    def print_board(self):
        """Print the board to console."""
        print()
        print(self.render())

        finished = [
            f"{i}:{outcome.winner.value if outcome.winner else 'draw'}"
            for i, outcome in enumerate(self.outcomes) if outcome.is_decided
        ]
        if finished:
            print(f"\nDecided sub-boards: {', '.join(finished)}")

        if self.is_game_over:
            if self.winner:
                print(f"\n{self.winner.value} WINS!")
            else:
                print("\nIt's a DRAW!")
        else:
            target = "any" if self.is_free_choice else str(self.active_board)
            print(f"\nCurrent turn: {self.current_player.value} (sub-board: {target})")


def new_game() -> GameState:
    """A fresh game: empty boards, free choice, X to move."""
    return GameState()
