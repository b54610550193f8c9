"""MiniMax search, extended with chance nodes (expectiminimax)."""

from __future__ import annotations

import logging
import math
from typing import Any, Callable

from ..contingent import ContingentState
from ..randomness import Randomness
from ..serialize import state_digest
from .heuristic import Heuristic, HeuristicPlayer

logger = logging.getLogger(__name__)

Hook = Callable[[Any, float], Any]


def is_replacement(value: Any) -> bool:
    """A hook's return value replaces the computed one unless it is `None` or NaN."""
    return value is not None and not (isinstance(value, float) and math.isnan(value))


class MiniMaxPlayer(HeuristicPlayer):
    """
    Depth-limited MiniMax for two-role, alternating games.

    Contingent states are valued by the probability-weighted sum of their
    resolutions, and count as one level of depth.
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        horizon: float = 4,
        heuristic: Heuristic | None = None,
        hook: Hook | None = None,
        rng: Randomness | None = None,
    ):
        super().__init__(name=name, heuristic=heuristic, rng=rng)
        if horizon < 1:
            raise ValueError(f"horizon must be at least 1, got {horizon!r}.")
        self.horizon = horizon
        self.hook = hook

    def can_play(self, game: Any) -> bool:
        return game.is_zero_sum and not game.is_simultaneous and len(game.roles()) == 2

    def quiescence(self, game: Any, state: Any, role: str, depth: int) -> float | None:
        """Value of `state` when the search stops there, `None` if it must go on."""
        if isinstance(state, ContingentState):
            return None
        result = game.result(state)
        if result is not None:
            return float(result[role])
        if depth >= self.horizon:
            return self.heuristic(game, state, role)
        return None

    def action_evaluation(self, game: Any, state: Any, role: str, action: Any) -> float:
        return self.minimax(game, game.transition(state, {role: action}), role, 1)

    def minimax(self, game: Any, state: Any, role: str, depth: int) -> float:
        value = self.quiescence(game, state, role, depth)
        if value is None:
            if isinstance(state, ContingentState):
                value = state.expected_evaluation(game, lambda next_state: self.minimax(game, next_state, role, depth + 1))
            else:
                active = game.active_role(state)
                values = [
                    self.minimax(game, game.transition(state, {active: action}), role, depth + 1)
                    for action in game.actions_for(state, active)
                ]
                value = max(values) if active == role else min(values)
        return self._apply_hook(state, value)

    def _apply_hook(self, state: Any, value: float) -> float:
        if self.hook is None:
            return value
        replacement = self.hook(state, value)
        return float(replacement) if is_replacement(replacement) else value

    @classmethod
    def solution(cls, game: Any, state: Any = None, role: str | None = None) -> dict[str, float]:
        """
        Solve a small game exhaustively.

        Returns a table from state digest to the exact value of that state for
        `role` (the first role by default).
        """
        start = state if state is not None else game.initial_state()
        perspective = role or game.roles()[0]
        table: dict[str, float] = {}

        def memo(visited: Any, value: float) -> float:
            return table.setdefault(state_digest(visited), value)

        player = cls(horizon=math.inf, hook=memo)
        player.minimax(game, start, perspective, 0)
        logger.info("Solved %s: %d states", game.game_name, len(table))
        return table
