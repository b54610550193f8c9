"""Tests for the simulation players: flat Monte Carlo and UCT."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest

from engine.game import Game
from engine.players import MonteCarloPlayer, RandomPlayer, UCTPlayer
from engine.players.montecarlo import SimulationBudget
from engine.randomness import Randomness
from engine.state import GameState
from oddsandevens.oddsandevens_game import OddsAndEvensGame
from oddsandevens.oddsandevens_state import ROLE_EVENS
from pig.pig_game import PigGame
from pig.pig_state import HOLD, ROLE_ONE, ROLL, PigState
from tictactoe.tictactoe_game import TicTacToeGame
from tictactoe.tictactoe_state import ROLE_X, TicTacToeState


@dataclass(frozen=True)
class _EndlessState(GameState):
    active: str = "P1"


class _EndlessGame(Game[_EndlessState]):
    """Roles take turns waiting; the game never ends."""

    game_name = "endless"

    def initial_state(self, config: Any = None) -> _EndlessState:
        return _EndlessState()

    def roles(self) -> list[str]:
        return ["P1", "P2"]

    def active_roles(self, state: _EndlessState) -> list[str]:
        return [state.active]

    def actions(self, state: _EndlessState) -> dict[str, list[str]] | None:
        return {state.active: ["wait"]}

    def result(self, state: _EndlessState) -> dict[str, float] | None:
        return None

    def next_state(self, state: _EndlessState, actions: Any, haps: Any) -> _EndlessState:
        return _EndlessState(active=self.opponent(state.active))


def test_budget_requires_a_limit() -> None:
    with pytest.raises(ValueError):
        MonteCarloPlayer(simulation_count=None, time_cap=None)
    with pytest.raises(ValueError):
        UCTPlayer(simulation_count=0)
    with pytest.raises(ValueError):
        UCTPlayer(exploration=-1.0)

    budget = SimulationBudget(simulation_count=2, time_cap=None)
    assert not budget.exhausted()
    budget.used = 2
    assert budget.exhausted()


def test_monte_carlo_takes_an_immediate_win() -> None:
    game = TicTacToeGame()
    state = TicTacToeState(board="XX_OO____")
    player = MonteCarloPlayer(simulation_count=20, time_cap=None, rng=Randomness(1))

    evaluated = dict(player.evaluated_actions(game, state, ROLE_X))

    assert evaluated[2] == 1.0
    assert player.decision(game, state, ROLE_X) == 2


def test_playouts_past_the_horizon_use_the_heuristic() -> None:
    game = _EndlessGame()
    player = MonteCarloPlayer(simulation_count=1, time_cap=None, horizon=10, heuristic=lambda g, s, r: 0.25)

    simulation = player.simulation(game, game.initial_state(), "P1")

    assert simulation.plies == 10
    assert simulation.value == 0.25
    assert not game.is_finished(simulation.state)


def test_monte_carlo_with_a_playout_agent() -> None:
    game = TicTacToeGame()
    player = MonteCarloPlayer(simulation_count=3, time_cap=None, agent=RandomPlayer(rng=Randomness(2)), rng=Randomness(3))

    assert player.decision(game, game.initial_state(), ROLE_X) in range(9)


def test_time_cap_alone_bounds_the_search() -> None:
    game = TicTacToeGame()
    player = MonteCarloPlayer(simulation_count=None, time_cap=0.05, rng=Randomness(4))

    evaluated = player.evaluated_actions(game, game.initial_state(), ROLE_X)

    assert [action for action, _ in evaluated] == list(range(9))
    assert all(-1.0 <= value <= 1.0 for _, value in evaluated)


def test_uct_converges_to_the_winning_move() -> None:
    game = TicTacToeGame()
    state = TicTacToeState(board="XX_OO____")
    player = UCTPlayer(simulation_count=400, time_cap=None, rng=Randomness(5))

    nodes = player.search(game, state, ROLE_X)
    root = nodes[0]

    assert root.visits == 400
    assert len(root.children) == len(state.empty_squares())
    assert player.decision(game, state, ROLE_X) == 2


def test_uct_handles_chance_nodes() -> None:
    game = PigGame()
    state = PigState(scores={ROLE_ONE: 10, "Two": 0}, rolls=(6, 6))
    player = UCTPlayer(simulation_count=60, time_cap=None, horizon=50, heuristic=lambda g, s, r: 0.0, rng=Randomness(6))

    nodes = player.search(game, state, ROLE_ONE)

    assert any(node.haps is not None for node in nodes)
    assert player.decision(game, state, ROLE_ONE) in (ROLL, HOLD)


def test_uct_handles_simultaneous_games() -> None:
    game = OddsAndEvensGame(turns=3)
    player = UCTPlayer(simulation_count=50, time_cap=None, rng=Randomness(7))

    evaluated = player.evaluated_actions(game, game.initial_state(), ROLE_EVENS)

    assert [action for action, _ in evaluated] == [1, 2]
    assert player.decision(game, game.initial_state(), ROLE_EVENS) in (1, 2)


def test_uct_keeps_heuristic_rewards_in_the_result_range() -> None:
    game = _EndlessGame()
    player = UCTPlayer(
        simulation_count=5,
        time_cap=None,
        horizon=2,
        heuristic=lambda g, s, r: 5.0 if r == "P1" else -3.0,
        rng=Randomness(8),
    )

    assert player.rewards(game, game.initial_state()) == {"P1": 1.0, "P2": -1.0}
    nodes = player.search(game, game.initial_state(), "P1")
    assert all(-1.0 <= node.mean(role) <= 1.0 for node in nodes for role in game.roles())
