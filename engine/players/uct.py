"""UCT: Monte Carlo tree search guided by the UCB1 bandit formula."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from ..contingent import ContingentState
from ..player import Player
from ..randomness import Randomness
from ..serialize import json_dumps
from .heuristic import Heuristic
from .montecarlo import MonteCarloPlayer, SimulationBudget

logger = logging.getLogger(__name__)


@dataclass
class SearchNode:
    """
    One node of the search arena. Nodes refer to each other by index.

    `untried` holds the joint actions not expanded yet; chance nodes have no
    untried actions and get children on demand, one per sampled haps.
    """

    state: Any
    parent: int | None
    actions: dict[str, Any] | None = None
    haps: dict[str, Any] | None = None
    children: list[int] = field(default_factory=list)
    untried: list[dict[str, Any]] = field(default_factory=list)
    visits: int = 0
    rewards: dict[str, float] = field(default_factory=dict)

    def mean(self, role: str) -> float:
        return self.rewards.get(role, 0.0) / self.visits if self.visits else 0.0


class UCTPlayer(MonteCarloPlayer):
    """
    Builds a search tree from the current state, one iteration per simulation.

    Each iteration selects a path with UCB1, expands one unvisited child, plays
    out randomly and backs up the per-role result, normalized to [-1, +1].
    `simulation_count` is the total number of iterations.
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        simulation_count: int | None = 30,
        time_cap: float | None = 1.0,
        exploration: float = math.sqrt(2),
        horizon: int = 500,
        agent: Player | None = None,
        heuristic: Heuristic | None = None,
        rng: Randomness | None = None,
    ):
        super().__init__(
            name=name,
            simulation_count=simulation_count,
            time_cap=time_cap,
            horizon=horizon,
            agent=agent,
            heuristic=heuristic,
            rng=rng,
        )
        if exploration < 0:
            raise ValueError(f"exploration must be non-negative, got {exploration!r}.")
        self.exploration = exploration

    def new_node(self, game: Any, nodes: list[SearchNode], state: Any, parent: int | None, **links: Any) -> int:
        untried: list[dict[str, Any]] = []
        if not isinstance(state, ContingentState) and not game.is_finished(state):
            untried = self.rng.shuffle(game.possible_actions(state))
        nodes.append(SearchNode(state=state, parent=parent, untried=untried, **links))
        index = len(nodes) - 1
        if parent is not None:
            nodes[parent].children.append(index)
        return index

    def perspective(self, game: Any, state: Any, role: str) -> str:
        """Role whose rewards drive selection at `state`."""
        active = list(game.active_roles(state))
        return active[0] if len(active) == 1 else role

    def ucb1(self, node: SearchNode, parent_visits: int, role: str) -> float:
        if node.visits == 0:
            return math.inf
        exploration = self.exploration * math.sqrt(math.log(parent_visits) / node.visits)
        return node.mean(role) + exploration

    def select_child(self, game: Any, nodes: list[SearchNode], index: int, role: str) -> int:
        node = nodes[index]
        viewpoint = self.perspective(game, node.state, role)
        scored = [(child, self.ucb1(nodes[child], node.visits, viewpoint)) for child in node.children]
        best = max(score for _, score in scored)
        return self.rng.choice([child for child, score in scored if score == best])

    def chance_child(self, game: Any, nodes: list[SearchNode], index: int) -> int:
        """Sample haps at a chance node and return the matching child, creating it if needed."""
        node = nodes[index]
        haps = node.state.random_haps(self.rng)
        key = json_dumps(haps)
        for child in node.children:
            if json_dumps(nodes[child].haps) == key:
                return child
        return self.new_node(game, nodes, node.state.resolve(game, haps), index, haps=haps)

    def tree_policy(self, game: Any, nodes: list[SearchNode], role: str) -> int:
        """Walk down from the root, returning the node to simulate from."""
        index = 0
        while True:
            node = nodes[index]
            if isinstance(node.state, ContingentState):
                index = self.chance_child(game, nodes, index)
                continue
            if game.is_finished(node.state):
                return index
            if node.untried:
                actions = node.untried.pop()
                return self.new_node(game, nodes, game.transition(node.state, actions), index, actions=actions)
            index = self.select_child(game, nodes, index, role)

    def rewards(self, game: Any, state: Any) -> dict[str, float]:
        """
        Per-role value of a playout's final state, always within [-1, 1].

        Results are normalized with `result_bounds`; heuristic estimates at the
        horizon are clamped to the same range.
        """
        result = game.result(state)
        if result is not None:
            return {role: game.normalized_result(float(value)) for role, value in result.items()}
        return {role: max(-1.0, min(1.0, self.heuristic(game, state, role))) for role in game.roles()}

    def backpropagate(self, nodes: list[SearchNode], index: int | None, rewards: dict[str, float]) -> None:
        while index is not None:
            node = nodes[index]
            node.visits += 1
            for role, value in rewards.items():
                node.rewards[role] = node.rewards.get(role, 0.0) + value
            index = node.parent

    def search(self, game: Any, state: Any, role: str) -> list[SearchNode]:
        """Run the iterations allowed by the budget and return the node arena."""
        nodes: list[SearchNode] = []
        self.new_node(game, nodes, state, None)
        budget = SimulationBudget(self.simulation_count, self.time_cap)
        while not budget.exhausted():
            leaf = self.tree_policy(game, nodes, role)
            playout = self.simulation(game, nodes[leaf].state, role)
            self.backpropagate(nodes, leaf, self.rewards(game, playout.state))
            budget.used += 1
        logger.debug("%s ran %d iterations (%d nodes) for %s", self.name, budget.used, len(nodes), role)
        return nodes

    def evaluated_actions(self, game: Any, state: Any, role: str) -> list[tuple[Any, float]]:
        """Mean reward of each of `role`'s actions, pooled over the root children that use it."""
        nodes = self.search(game, state, role)
        options = game.actions_for(state, role)
        totals = [0.0] * len(options)
        visits = [0] * len(options)
        for child in nodes[0].children:
            node = nodes[child]
            index = options.index(node.actions[role])
            totals[index] += node.rewards.get(role, 0.0)
            visits[index] += node.visits
        return [
            (action, totals[index] / visits[index] if visits[index] else 0.0)
            for index, action in enumerate(options)
        ]
