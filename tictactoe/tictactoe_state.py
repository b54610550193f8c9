"""State and constants for Tic-Tac-Toe."""

from __future__ import annotations

from dataclasses import dataclass

from engine.state import GameState

ROLE_X = "Xs"
ROLE_O = "Os"
ROLES: tuple[str, str] = (ROLE_X, ROLE_O)
MARKS: dict[str, str] = {ROLE_X: "X", ROLE_O: "O"}
EMPTY = "_"
EMPTY_BOARD = EMPTY * 9

LINES: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


@dataclass(frozen=True)
class TicTacToeState(GameState):
    """Immutable board, read row by row; `_` marks an empty square."""

    board: str = EMPTY_BOARD

    def __post_init__(self) -> None:
        if len(self.board) != 9 or any(square not in "XO_" for square in self.board):
            raise ValueError(f"Invalid Tic-Tac-Toe board {self.board!r}.")

    def empty_squares(self) -> list[int]:
        return [index for index, square in enumerate(self.board) if square == EMPTY]

    def winner(self) -> str | None:
        """Role with three marks in line, if any."""
        for role, mark in MARKS.items():
            if any(all(self.board[i] == mark for i in line) for line in LINES):
                return role
        return None

    def active_role(self) -> str:
        balance = self.board.count("X") - self.board.count("O")
        return ROLE_O if balance > 0 else ROLE_X

    def ascii(self) -> str:
        rows = ["|".join(self.board[i : i + 3]) for i in (0, 3, 6)]
        return "\n-+-+-\n".join(rows)
