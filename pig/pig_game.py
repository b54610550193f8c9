"""Pig rules: roll a die as long as you dare, a 1 loses the turn's points."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from engine.aleatory import D6, Distribution
from engine.game import Game

from .pig_state import DEFAULT_GOAL, HOLD, ROLE_ONE, ROLE_TWO, ROLES, ROLL, PigState


class PigGame(Game[PigState]):
    """
    Two roles take turns rolling a die. Holding banks the sum of the turn's
    rolls; rolling a 1 discards them and passes the turn. The first role to
    reach the goal wins.

    The result is the difference between both (goal-capped) scores.
    """

    game_name = "pig"
    is_deterministic = False

    def __init__(self, goal: int = DEFAULT_GOAL):
        if goal < 1:
            raise ValueError(f"goal must be positive, got {goal!r}.")
        self.goal = goal

    def initial_state(self, config: Mapping[str, Any] | None = None) -> PigState:
        cfg = dict(config or {})
        return PigState(
            active_role=str(cfg.get("active_role", ROLE_ONE)),
            goal=int(cfg.get("goal", self.goal)),
            scores=dict(cfg.get("scores", {ROLE_ONE: 0, ROLE_TWO: 0})),
            rolls=tuple(cfg.get("rolls", ())),
        )

    def roles(self) -> Sequence[str]:
        return list(ROLES)

    def active_roles(self, state: PigState) -> Sequence[str]:
        if self.result(state) is not None:
            return []
        return [state.active_role]

    def actions(self, state: PigState) -> dict[str, list[str]] | None:
        if self.result(state) is not None:
            return None
        options = []
        if state.tentative_score() < state.goal:
            options.append(ROLL)
        if state.rolls:
            options.append(HOLD)
        return {state.active_role: options}

    def aleatories(self, state: PigState, actions: Mapping[str, Any] | None = None) -> dict[str, Distribution] | None:
        if actions and actions.get(state.active_role) == ROLL:
            return {"die": D6}
        return None

    def result(self, state: PigState) -> dict[str, float] | None:
        score_one = state.scores[ROLE_ONE]
        score_two = state.scores[ROLE_TWO]
        if score_one < state.goal and score_two < state.goal:
            return None
        difference = min(state.goal, score_one) - min(state.goal, score_two)
        return {ROLE_ONE: float(difference), ROLE_TWO: float(-difference)}

    def result_bounds(self) -> tuple[float, float]:
        return (-float(self.goal), float(self.goal))

    def next_state(
        self,
        state: PigState,
        actions: Mapping[str, Any] | None,
        haps: Mapping[str, Any] | None,
    ) -> PigState:
        action = (actions or {}).get(state.active_role)
        opponent = self.opponent(state.active_role)
        if action == HOLD:
            scores = {**state.scores, state.active_role: state.tentative_score()}
            return PigState(active_role=opponent, goal=state.goal, scores=scores, rolls=())
        if action == ROLL:
            die = (haps or {}).get("die")
            if die not in D6.values():
                raise ValueError(f"Rolling needs a die value in 1..6, got haps {haps!r}.")
            if die == 1:
                return PigState(active_role=opponent, goal=state.goal, scores=dict(state.scores), rolls=())
            return PigState(
                active_role=state.active_role,
                goal=state.goal,
                scores=dict(state.scores),
                rolls=(*state.rolls, die),
            )
        raise ValueError(f"Invalid action {action!r} for role {state.active_role} at {state!r}.")

    def render(self, state: PigState) -> str:
        rolls = ",".join(str(roll) for roll in state.rolls) or "-"
        return f"{state.active_role} to move | scores {state.scores} | rolls {rolls} | goal {state.goal}"

    def features(self, state: PigState, role: str) -> tuple[float, ...]:
        """`role`'s banked score, the opponent's, and the points at stake this turn."""
        return (
            float(state.scores[role]),
            float(state.scores[self.opponent(role)]),
            float(sum(state.rolls)),
        )
