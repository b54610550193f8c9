"""Tic-Tac-Toe rules."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from engine.game import Game

from .tictactoe_state import EMPTY, MARKS, ROLES, TicTacToeState

DEFAULT_WEIGHTS: tuple[float, ...] = (2, 1, 2, 1, 5, 1, 2, 1, 2)


class TicTacToeGame(Game[TicTacToeState]):
    """Two roles alternate placing marks; three in line wins, a full board is a tie."""

    game_name = "tictactoe"

    def initial_state(self, config: Mapping[str, Any] | None = None) -> TicTacToeState:
        cfg = dict(config or {})
        return TicTacToeState(board=str(cfg.get("board", EMPTY * 9)))

    def roles(self) -> Sequence[str]:
        return list(ROLES)

    def active_roles(self, state: TicTacToeState) -> Sequence[str]:
        if self.result(state) is not None:
            return []
        return [state.active_role()]

    def actions(self, state: TicTacToeState) -> dict[str, list[int]] | None:
        if self.result(state) is not None:
            return None
        return {state.active_role(): state.empty_squares()}

    def result(self, state: TicTacToeState) -> dict[str, float] | None:
        winner = state.winner()
        if winner is not None:
            return self.victory(winner)
        if EMPTY not in state.board:
            return self.tied()
        return None

    def next_state(
        self,
        state: TicTacToeState,
        actions: Mapping[str, Any] | None,
        haps: Mapping[str, Any] | None,
    ) -> TicTacToeState:
        role = state.active_role()
        position = (actions or {}).get(role)
        if not isinstance(position, int) or not 0 <= position < 9 or state.board[position] != EMPTY:
            raise ValueError(f"Invalid actions {actions!r} for board {state.board!r}.")
        board = state.board[:position] + MARKS[role] + state.board[position + 1 :]
        return TicTacToeState(board=board)

    def features(self, state: TicTacToeState, role: str) -> tuple[float, ...]:
        """One value per square: 1 for `role`'s marks, -1 for the opponent's, 0 when empty."""
        mark = MARKS[role]
        return tuple(0.0 if square == EMPTY else (1.0 if square == mark else -1.0) for square in state.board)

    def render(self, state: TicTacToeState) -> str:
        return state.ascii()


def heuristic_from_weights(weights: Sequence[float] = DEFAULT_WEIGHTS) -> Callable[[Any, Any, str], float]:
    """
    Build a heuristic from one weight per square.

    The value is the weighted sum of the role's marks minus the opponent's,
    divided by the sum of absolute weights so it stays within [-1, +1].
    """
    if len(weights) != 9:
        raise ValueError("Tic-Tac-Toe heuristics need exactly nine weights.")
    weight_sum = sum(abs(weight) for weight in weights)

    def heuristic(game: Any, state: TicTacToeState, role: str) -> float:
        mark = MARKS[role]
        total = 0.0
        for weight, square in zip(weights, state.board, strict=True):
            if square != EMPTY:
                total += weight if square == mark else -weight
        return total / weight_sum

    return heuristic

