"""State and constants for the Pig dice game."""

from __future__ import annotations

from dataclasses import dataclass, field

from engine.state import GameState

ROLE_ONE = "One"
ROLE_TWO = "Two"
ROLES: tuple[str, str] = (ROLE_ONE, ROLE_TWO)
ROLL = "roll"
HOLD = "hold"
DEFAULT_GOAL = 100


@dataclass(frozen=True)
class PigState(GameState):
    """Immutable Pig state: banked scores plus the rolls of the current turn."""

    active_role: str = ROLE_ONE
    goal: int = DEFAULT_GOAL
    scores: dict[str, int] = field(default_factory=lambda: {ROLE_ONE: 0, ROLE_TWO: 0})
    rolls: tuple[int, ...] = ()

    def tentative_score(self) -> int:
        """Score of the active role if it held now."""
        return self.scores[self.active_role] + sum(self.rolls)
