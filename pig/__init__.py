"""Pig package exports."""

from .pig_game import PigGame
from .pig_state import DEFAULT_GOAL, HOLD, ROLE_ONE, ROLE_TWO, ROLL, PigState

__all__ = [
    "DEFAULT_GOAL",
    "HOLD",
    "PigGame",
    "PigState",
    "ROLE_ONE",
    "ROLE_TWO",
    "ROLL",
]
