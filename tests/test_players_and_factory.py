"""Tests for simple players, heuristics and the player/game factory."""

from __future__ import annotations

import pytest

from engine.factory import build_game, create_player, normalize_player_config, player_label
from engine.players import (
    AlphaBetaPlayer,
    EnsemblePlayer,
    HeuristicPlayer,
    MaxNPlayer,
    MiniMaxPlayer,
    MonteCarloPlayer,
    RandomPlayer,
    RuleBasedPlayer,
    TracePlayer,
    UCTPlayer,
)
from engine.randomness import Randomness
from oddsandevens.oddsandevens_game import OddsAndEvensGame
from oddsandevens.oddsandevens_state import ROLE_EVENS
from pig.pig_game import PigGame
from pig.pig_state import HOLD, ROLE_ONE, ROLE_TWO, ROLL, PigState
from tictactoe.tictactoe_game import TicTacToeGame, heuristic_from_weights
from tictactoe.tictactoe_state import ROLE_O, ROLE_X, TicTacToeState


def test_random_player_only_picks_legal_actions() -> None:
    game = PigGame()
    state = game.initial_state()
    player = RandomPlayer(rng=Randomness(1))

    assert {player.decision(game, state, "One") for _ in range(10)} == {"roll"}


def test_trace_player_repeats_its_last_action() -> None:
    game = OddsAndEvensGame()
    player = TracePlayer([2, 1])
    state = game.initial_state()

    assert [player.decision(game, state, ROLE_EVENS) for _ in range(4)] == [2, 1, 1, 1]
    with pytest.raises(ValueError):
        TracePlayer([])


def test_ensemble_player_delegates_to_members() -> None:
    game = TicTacToeGame()
    members = [TracePlayer([0]), TracePlayer([8])]
    player = EnsemblePlayer(members, rng=Randomness(2))

    picks = {player.decision(game, game.initial_state(), ROLE_X) for _ in range(30)}

    assert picks == {0, 8}
    assert player.can_play(game)
    assert not EnsemblePlayer([MiniMaxPlayer()]).can_play(OddsAndEvensGame())


def test_heuristic_player_uses_its_heuristic_and_composite() -> None:
    game = TicTacToeGame()
    weights = heuristic_from_weights()
    centre_only = heuristic_from_weights([0, 0, 0, 0, 1, 0, 0, 0, 0])
    combined = HeuristicPlayer.composite((0.5, weights), (0.5, centre_only))
    state = game.initial_state()

    assert HeuristicPlayer(heuristic=weights, rng=Randomness(3)).decision(game, state, ROLE_X) == 4
    assert HeuristicPlayer(heuristic=combined, rng=Randomness(3)).decision(game, state, ROLE_X) == 4
    assert HeuristicPlayer.best_actions([("a", 1.0), ("b", 1.0), ("c", 0.5)]) == ["a", "b"]
    with pytest.raises(ValueError):
        HeuristicPlayer.composite()


def test_default_heuristic_stays_in_range() -> None:
    game = TicTacToeGame()
    player = HeuristicPlayer(rng=Randomness(4))

    values = [player.heuristic(game, game.initial_state(), ROLE_X) for _ in range(100)]

    assert all(-0.5 <= value < 0.5 for value in values)


def test_heuristic_player_averages_over_simultaneous_opponents() -> None:
    game = OddsAndEvensGame()
    player = HeuristicPlayer(rng=Randomness(5))

    evaluated = player.evaluated_actions(game, game.initial_state(), ROLE_EVENS)

    assert evaluated == [(1, 0.0), (2, 0.0)]


def test_factory_builds_every_player_type() -> None:
    expected = {
        "random": RandomPlayer,
        "rulebased": RuleBasedPlayer,
        "minimax": MiniMaxPlayer,
        "alphabeta": AlphaBetaPlayer,
        "maxn": MaxNPlayer,
        "montecarlo": MonteCarloPlayer,
        "uct": UCTPlayer,
    }
    for player_type, player_cls in expected.items():
        player = create_player(normalize_player_config(player_type), role="One", seed=1)
        assert type(player) is player_cls

    uct = create_player({"type": "uct", "simulation_count": 10, "time_cap": None, "exploration": 0.5}, role="Xs")
    assert uct.simulation_count == 10
    assert uct.time_cap is None
    assert uct.exploration == 0.5
    assert create_player({"type": "minimax", "horizon": 6}, role="Xs").horizon == 6

    with pytest.raises(ValueError):
        create_player({"type": "oracle"}, role="Xs")


def test_factory_config_helpers() -> None:
    assert normalize_player_config(" UCT ") == {"type": "uct"}
    assert normalize_player_config({"type": "MiniMax", "horizon": 3}) == {"type": "minimax", "horizon": 3}
    assert normalize_player_config(None) == {"type": "random"}
    assert player_label({"type": "alphabeta", "horizon": 5}) == "alphabeta:h5"
    assert player_label({"type": "montecarlo", "simulation_count": 50}) == "montecarlo:n50"
    assert player_label({"type": "random"}) == "random"


def test_build_game() -> None:
    assert isinstance(build_game("TicTacToe"), TicTacToeGame)
    assert isinstance(build_game("pig"), PigGame)
    assert isinstance(build_game("oddsandevens"), OddsAndEvensGame)
    with pytest.raises(ValueError):
        build_game("chess")


def test_game_features() -> None:
    ttt = TicTacToeGame()
    board = TicTacToeState(board="XX_OO____")
    assert ttt.features(board, ROLE_X) == (1.0, 1.0, 0.0, -1.0, -1.0, 0.0, 0.0, 0.0, 0.0)
    assert ttt.features(board, ROLE_O)[:5] == (-1.0, -1.0, 0.0, 1.0, 1.0)

    pig = PigGame()
    state = PigState(scores={ROLE_ONE: 10, ROLE_TWO: 5}, rolls=(3, 4))
    assert pig.features(state, ROLE_ONE) == (10.0, 5.0, 7.0)
    assert pig.features(state, ROLE_TWO) == (5.0, 10.0, 7.0)

    assert OddsAndEvensGame(turns=3).features(OddsAndEvensGame(turns=3).initial_state(), ROLE_EVENS) == (3.0, 0.0, 0.0)


def test_rule_based_player_follows_its_first_fitting_rule() -> None:
    game = TicTacToeGame()
    state = TicTacToeState(board="XX_OO____")
    complete_top_row = ((1, 1, 0), 2)
    take_centre = ((None, None, None, None, 0), 4)

    assert RuleBasedPlayer(rules=[complete_top_row, take_centre]).decision(game, state, ROLE_X) == 2
    assert RuleBasedPlayer(rules=[take_centre, complete_top_row]).decision(game, state, ROLE_X) == 2
    assert RuleBasedPlayer(rules=[take_centre]).decision(game, game.initial_state(), ROLE_X) == 4
    assert RuleBasedPlayer(rules=[((float("nan"),) * 9, 8)]).decision(game, state, ROLE_X) == 8


def test_rule_based_player_skips_illegal_proposals_and_falls_back() -> None:
    game = TicTacToeGame()
    state = TicTacToeState(board="XXOO_____")
    player = RuleBasedPlayer(rules=[((1, 1), 2)], rng=Randomness(6))

    picks = {player.decision(game, state, ROLE_X) for _ in range(20)}
    assert picks <= set(state.empty_squares())
    assert len(picks) > 1

    guided = RuleBasedPlayer(rules=[((1, 1), 2)], heuristic=heuristic_from_weights(), rng=Randomness(6))
    assert guided.decision(game, state, ROLE_X) == 4


def test_rule_based_player_with_function_and_regex_rules() -> None:
    pig = PigGame()
    bank_at_twenty = RuleBasedPlayer(rules=[lambda features, game, role: HOLD if features[2] >= 20 else None])
    assert bank_at_twenty.decision(pig, PigState(rolls=(6, 6, 6, 2)), ROLE_ONE) == HOLD
    assert bank_at_twenty.decision(pig, PigState(rolls=(6,)), ROLE_ONE) in (ROLL, HOLD)

    ttt = TicTacToeGame()
    on_board = RuleBasedPlayer(features=lambda game, state, role: state.board).regex_rule(r"^_{9}$", 0)
    assert on_board.decision(ttt, ttt.initial_state(), ROLE_X) == 0
    assert len(on_board.rules) == 1

    with pytest.raises(ValueError):
        RuleBasedPlayer(rules=["take the centre"])


def test_factory_builds_rule_based_players_from_json_rules() -> None:
    player = create_player({"type": "rulebased", "rules": [[[1, 1, 0], 2]]}, role="Xs", seed=3)

    assert isinstance(player, RuleBasedPlayer)
    assert player.decision(TicTacToeGame(), TicTacToeState(board="XX_OO____"), ROLE_X) == 2
