"""State and constants for Odds and Evens."""

from __future__ import annotations

from dataclasses import dataclass, field

from engine.state import GameState

ROLE_EVENS = "Evens"
ROLE_ODDS = "Odds"
ROLES: tuple[str, str] = (ROLE_EVENS, ROLE_ODDS)
DEFAULT_OPTIONS: tuple[int, ...] = (1, 2)


@dataclass(frozen=True)
class OddsAndEvensState(GameState):
    """Points won by each role over a fixed number of turns."""

    turns: int = 1
    points: dict[str, int] = field(default_factory=lambda: {ROLE_EVENS: 0, ROLE_ODDS: 0})
    options: tuple[int, ...] = DEFAULT_OPTIONS

    def remaining_turns(self) -> int:
        return self.turns - self.points[ROLE_EVENS] - self.points[ROLE_ODDS]
