"""MaxN search for deterministic games with any number of alternating roles."""

from __future__ import annotations

from typing import Any

from ..contingent import ContingentState
from ..errors import InvariantViolation
from ..randomness import Randomness
from .heuristic import Heuristic, HeuristicPlayer


class MaxNPlayer(HeuristicPlayer):
    """
    Backs up a whole evaluation vector (one value per role). At each node the
    active role picks the child that maximizes its own coordinate.
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        horizon: float = 4,
        heuristic: Heuristic | None = None,
        rng: Randomness | None = None,
    ):
        super().__init__(name=name, heuristic=heuristic, rng=rng)
        if horizon < 1:
            raise ValueError(f"horizon must be at least 1, got {horizon!r}.")
        self.horizon = horizon

    def can_play(self, game: Any) -> bool:
        return not game.is_simultaneous and game.is_deterministic

    def action_evaluation(self, game: Any, state: Any, role: str, action: Any) -> float:
        return self.maxn(game, game.transition(state, {role: action}), 1)[role]

    def heuristics(self, game: Any, state: Any) -> dict[str, float]:
        return {role: self.heuristic(game, state, role) for role in game.roles()}

    def maxn(self, game: Any, state: Any, depth: int) -> dict[str, float]:
        if isinstance(state, ContingentState):
            raise InvariantViolation(f"{self.name} does not support chance in {game.game_name}.")
        result = game.result(state)
        if result is not None:
            return {role: float(value) for role, value in result.items()}
        if depth >= self.horizon:
            return self.heuristics(game, state)
        active = game.active_role(state)
        best: dict[str, float] | None = None
        for action in game.actions_for(state, active):
            values = self.maxn(game, game.transition(state, {active: action}), depth + 1)
            if best is None or values[active] > best[active]:
                best = values
        assert best is not None
        return best
