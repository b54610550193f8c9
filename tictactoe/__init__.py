"""Tic-Tac-Toe package exports."""

from .tictactoe_game import DEFAULT_WEIGHTS, TicTacToeGame, heuristic_from_weights
from .tictactoe_state import EMPTY_BOARD, ROLE_O, ROLE_X, TicTacToeState

__all__ = [
    "DEFAULT_WEIGHTS",
    "EMPTY_BOARD",
    "ROLE_O",
    "ROLE_X",
    "TicTacToeGame",
    "TicTacToeState",
    "heuristic_from_weights",
]
