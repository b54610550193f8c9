"""MiniMax with alpha-beta pruning."""

from __future__ import annotations

import math
from typing import Any

from ..contingent import ContingentState
from .minimax import MiniMaxPlayer


class AlphaBetaPlayer(MiniMaxPlayer):
    """
    Computes the same values as `MiniMaxPlayer` at the same horizon while
    skipping branches that cannot change the outcome.

    Chance nodes are evaluated with a full window for every resolution.
    """

    def action_evaluation(self, game: Any, state: Any, role: str, action: Any) -> float:
        return self.alphabeta(game, game.transition(state, {role: action}), role, 1, -math.inf, math.inf)

    def alphabeta(self, game: Any, state: Any, role: str, depth: int, alpha: float, beta: float) -> float:
        value = self.quiescence(game, state, role, depth)
        if value is None:
            if isinstance(state, ContingentState):
                value = state.expected_evaluation(
                    game,
                    lambda next_state: self.alphabeta(game, next_state, role, depth + 1, -math.inf, math.inf),
                )
            else:
                active = game.active_role(state)
                maximizing = active == role
                value = -math.inf if maximizing else math.inf
                for action in game.actions_for(state, active):
                    child = self.alphabeta(game, game.transition(state, {active: action}), role, depth + 1, alpha, beta)
                    if maximizing:
                        value = max(value, child)
                        alpha = max(alpha, value)
                    else:
                        value = min(value, child)
                        beta = min(beta, value)
                    if beta <= alpha:
                        break
        return self._apply_hook(state, value)
