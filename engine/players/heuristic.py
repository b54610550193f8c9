"""Base class for players that rank actions by evaluating the states they lead to."""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Sequence

from ..contingent import ContingentState
from ..player import Player
from ..randomness import Randomness

logger = logging.getLogger(__name__)

Heuristic = Callable[[Any, Any, str], float]

TIE_TOLERANCE = 1e-15


class HeuristicPlayer(Player):
    """
    Chooses among the actions with the best evaluation.

    Subclasses refine `state_evaluation` or `action_evaluation`; ties between
    equally evaluated actions are broken uniformly at random with `self.rng`.
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        heuristic: Heuristic | None = None,
        rng: Randomness | None = None,
    ):
        super().__init__(name=name, rng=rng)
        self._heuristic = heuristic

    def heuristic(self, game: Any, state: Any, role: str) -> float:
        """Estimate the value of a non-terminal state for `role`."""
        if self._heuristic is not None:
            return float(self._heuristic(game, state, role))
        return self.rng.random(-0.5, 0.5)

    def state_evaluation(self, game: Any, state: Any, role: str) -> float:
        if isinstance(state, ContingentState):
            return state.expected_evaluation(game, lambda resolved: self.state_evaluation(game, resolved, role))
        result = game.result(state)
        if result is not None:
            return float(result[role])
        return self.heuristic(game, state, role)

    def action_evaluation(self, game: Any, state: Any, role: str, action: Any) -> float:
        """Average evaluation of `action` over every combination of the other active roles' actions."""
        joint_actions = game.possible_actions(state, override={role: [action]})
        return math.fsum(
            self.state_evaluation(game, game.transition(state, actions), role) for actions in joint_actions
        ) / len(joint_actions)

    def evaluated_actions(self, game: Any, state: Any, role: str) -> list[tuple[Any, float]]:
        return [
            (action, self.action_evaluation(game, state, role, action))
            for action in game.actions_for(state, role)
        ]

    @staticmethod
    def best_actions(evaluated: Sequence[tuple[Any, float]]) -> list[Any]:
        """Actions whose evaluation is within `TIE_TOLERANCE` of the best one."""
        if not evaluated:
            return []
        best = max(value for _, value in evaluated)
        return [action for action, value in evaluated if value >= best - TIE_TOLERANCE]

    def decision(self, game: Any, state: Any, role: str) -> Any:
        evaluated = self.evaluated_actions(game, state, role)
        logger.debug("%s evaluated actions for %s: %r", self.name, role, evaluated)
        return self.rng.choice(self.best_actions(evaluated))

    @staticmethod
    def composite(*weighted: tuple[float, Heuristic]) -> Heuristic:
        """Combine heuristics as a weighted sum: `composite((0.7, h1), (0.3, h2))`."""
        if not weighted:
            raise ValueError("composite() needs at least one (weight, heuristic) pair.")

        def combined(game: Any, state: Any, role: str) -> float:
            return math.fsum(weight * heuristic(game, state, role) for weight, heuristic in weighted)

        return combined
