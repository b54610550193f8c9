"""Flat Monte Carlo player: ranks actions by the mean result of random playouts."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from time import perf_counter
from typing import Any

from ..contingent import ContingentState
from ..player import Player
from ..randomness import Randomness
from .heuristic import Heuristic, HeuristicPlayer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationResult:
    """Where a playout stopped, how many plies it took and its value for the role."""

    state: Any
    plies: int
    value: float


class SimulationBudget:
    """Tracks a simulation count and/or a wall-clock cap, checked between simulations."""

    def __init__(self, simulation_count: int | None, time_cap: float | None):
        self.simulation_count = simulation_count
        self.deadline = perf_counter() + time_cap if time_cap is not None else math.inf
        self.used = 0

    def out_of_time(self) -> bool:
        return perf_counter() >= self.deadline

    def exhausted(self) -> bool:
        if self.simulation_count is not None and self.used >= self.simulation_count:
            return True
        return self.out_of_time()


def validate_budget(simulation_count: int | None, time_cap: float | None) -> None:
    if simulation_count is None and time_cap is None:
        raise ValueError("Set simulation_count, time_cap or both.")
    if simulation_count is not None and simulation_count < 1:
        raise ValueError(f"simulation_count must be positive, got {simulation_count!r}.")
    if time_cap is not None and time_cap <= 0:
        raise ValueError(f"time_cap must be positive, got {time_cap!r}.")


class MonteCarloPlayer(HeuristicPlayer):
    """
    For every candidate action, repeatedly combines it with random actions of
    the other active roles and plays the game out randomly (or with `agent`).

    `simulation_count` is the number of playouts per action. Playouts longer
    than `horizon` plies are scored with the heuristic.
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        simulation_count: int | None = 30,
        time_cap: float | None = 1.0,
        horizon: int = 500,
        agent: Player | None = None,
        heuristic: Heuristic | None = None,
        rng: Randomness | None = None,
    ):
        super().__init__(name=name, heuristic=heuristic, rng=rng)
        validate_budget(simulation_count, time_cap)
        self.simulation_count = simulation_count
        self.time_cap = time_cap
        self.horizon = horizon
        self.agent = agent

    def playout_actions(self, game: Any, state: Any) -> dict[str, Any]:
        if self.agent is None:
            return game.random_actions(state, self.rng)
        return {
            active: self.agent.decision(game, game.view(state, active), active)
            for active in game.active_roles(state)
        }

    def simulation(self, game: Any, state: Any, role: str) -> SimulationResult:
        """Play `state` out until the game ends or the horizon is reached."""
        plies = 0
        while True:
            if isinstance(state, ContingentState):
                state, _ = state.random_next(game, self.rng)
                continue
            result = game.result(state)
            if result is not None:
                return SimulationResult(state=state, plies=plies, value=float(result[role]))
            if plies >= self.horizon:
                return SimulationResult(state=state, plies=plies, value=self.heuristic(game, state, role))
            state = game.transition(state, self.playout_actions(game, state))
            plies += 1

    def evaluated_actions(self, game: Any, state: Any, role: str) -> list[tuple[Any, float]]:
        options = game.actions_for(state, role)
        totals = [0.0] * len(options)
        counts = [0] * len(options)
        budget = SimulationBudget(self.simulation_count, self.time_cap)
        while not budget.exhausted():
            for index, action in enumerate(options):
                if budget.out_of_time():
                    break
                actions = game.random_actions(state, self.rng, override={role: [action]})
                totals[index] += self.simulation(game, game.transition(state, actions), role).value
                counts[index] += 1
            budget.used += 1
        logger.debug("%s ran %d playouts per action for %s", self.name, budget.used, role)
        return [
            (action, totals[index] / counts[index] if counts[index] else 0.0)
            for index, action in enumerate(options)
        ]
