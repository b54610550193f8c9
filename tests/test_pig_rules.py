"""Rule-level tests for Pig and its chance transitions."""

from __future__ import annotations

import math

import pytest

from engine.contingent import ContingentState
from pig.pig_game import PigGame
from pig.pig_state import HOLD, ROLE_ONE, ROLE_TWO, ROLL, PigState


def test_initial_state_only_allows_rolling() -> None:
    game = PigGame()
    state = game.initial_state()

    assert state.scores == {ROLE_ONE: 0, ROLE_TWO: 0}
    assert state.goal == 100
    assert game.active_roles(state) == [ROLE_ONE]
    assert game.actions(state) == {ROLE_ONE: [ROLL]}
    assert game.result(state) is None
    assert not game.is_deterministic


def test_rolling_is_a_chance_transition() -> None:
    game = PigGame()
    contingent = game.transition(game.initial_state(), {ROLE_ONE: ROLL})

    assert isinstance(contingent, ContingentState)
    assert list(contingent.aleatories) == ["die"]
    assert contingent.actions == {ROLE_ONE: ROLL}


def test_rolling_a_one_resets_rolls_and_passes_the_turn() -> None:
    game = PigGame()
    state = PigState(active_role=ROLE_ONE, scores={ROLE_ONE: 10, ROLE_TWO: 5}, rolls=(3, 4))

    next_state = game.transition(state, {ROLE_ONE: ROLL}, {"die": 1})

    assert next_state.rolls == ()
    assert game.active_roles(next_state) == [ROLE_TWO]
    assert next_state.scores == {ROLE_ONE: 10, ROLE_TWO: 5}


def test_rolling_more_than_one_keeps_the_turn() -> None:
    game = PigGame()
    state = PigState(rolls=(3,))

    next_state = game.transition(state, {ROLE_ONE: ROLL}, {"die": 5})

    assert next_state.rolls == (3, 5)
    assert game.actions(next_state) == {ROLE_ONE: [ROLL, HOLD]}


def test_holding_banks_the_rolls() -> None:
    game = PigGame()
    state = PigState(scores={ROLE_ONE: 10, ROLE_TWO: 0}, rolls=(3, 4))

    next_state = game.transition(state, {ROLE_ONE: HOLD})

    assert next_state.scores == {ROLE_ONE: 17, ROLE_TWO: 0}
    assert next_state.rolls == ()
    assert game.active_roles(next_state) == [ROLE_TWO]


def test_reaching_the_goal_only_allows_holding() -> None:
    game = PigGame()
    state = PigState(scores={ROLE_ONE: 98, ROLE_TWO: 0}, rolls=(3,))

    assert game.actions(state) == {ROLE_ONE: [HOLD]}


def test_result_is_the_capped_score_difference() -> None:
    game = PigGame()
    state = PigState(active_role=ROLE_TWO, scores={ROLE_ONE: 104, ROLE_TWO: 40})

    assert game.result(state) == {ROLE_ONE: 60.0, ROLE_TWO: -60.0}
    assert game.actions(state) is None
    assert game.active_roles(state) == []
    assert game.result_bounds() == (-100.0, 100.0)
    assert math.isclose(game.normalized_result(60), 0.6)


def test_invalid_roll_values_are_rejected() -> None:
    game = PigGame()
    with pytest.raises(ValueError):
        game.next_state(game.initial_state(), {ROLE_ONE: ROLL}, {"die": 7})
    with pytest.raises(ValueError):
        game.next_state(game.initial_state(), {ROLE_ONE: "pass"}, None)
