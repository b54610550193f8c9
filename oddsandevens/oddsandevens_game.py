"""Odds and Evens: both roles show a number at the same time."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from engine.game import Game

from .oddsandevens_state import DEFAULT_OPTIONS, ROLE_EVENS, ROLE_ODDS, ROLES, OddsAndEvensState


class OddsAndEvensGame(Game[OddsAndEvensState]):
    """
    Simultaneous game. If both numbers shown have the same parity Evens
    scores a point, otherwise Odds does. The result is the point difference.
    """

    game_name = "oddsandevens"
    is_simultaneous = True

    def __init__(self, turns: int = 1, options: Sequence[int] = DEFAULT_OPTIONS):
        if turns < 1:
            raise ValueError(f"turns must be positive, got {turns!r}.")
        if not options:
            raise ValueError("Odds and Evens needs at least one option.")
        self.turns = turns
        self.options = tuple(options)

    def initial_state(self, config: Mapping[str, Any] | None = None) -> OddsAndEvensState:
        cfg = dict(config or {})
        return OddsAndEvensState(
            turns=int(cfg.get("turns", self.turns)),
            points=dict(cfg.get("points", {ROLE_EVENS: 0, ROLE_ODDS: 0})),
            options=tuple(cfg.get("options", self.options)),
        )

    def roles(self) -> Sequence[str]:
        return list(ROLES)

    def active_roles(self, state: OddsAndEvensState) -> Sequence[str]:
        return list(ROLES) if state.remaining_turns() > 0 else []

    def actions(self, state: OddsAndEvensState) -> dict[str, list[int]] | None:
        if state.remaining_turns() <= 0:
            return None
        return {role: list(state.options) for role in ROLES}

    def result(self, state: OddsAndEvensState) -> dict[str, float] | None:
        if state.remaining_turns() > 0:
            return None
        difference = state.points[ROLE_EVENS] - state.points[ROLE_ODDS]
        return {ROLE_EVENS: float(difference), ROLE_ODDS: float(-difference)}

    def result_bounds(self) -> tuple[float, float]:
        return (-float(self.turns), float(self.turns))

    def next_state(
        self,
        state: OddsAndEvensState,
        actions: Mapping[str, Any] | None,
        haps: Mapping[str, Any] | None,
    ) -> OddsAndEvensState:
        chosen = dict(actions or {})
        evens, odds = chosen.get(ROLE_EVENS), chosen.get(ROLE_ODDS)
        if evens not in state.options or odds not in state.options:
            raise ValueError(f"Invalid actions {chosen!r}, expecting one of {list(state.options)} per role.")
        if haps:
            raise ValueError(f"Odds and Evens has no chance, got haps {haps!r}.")
        winner = ROLE_EVENS if evens % 2 == odds % 2 else ROLE_ODDS
        points = {**state.points, winner: state.points[winner] + 1}
        return OddsAndEvensState(turns=state.turns, points=points, options=state.options)

    def features(self, state: OddsAndEvensState, role: str) -> tuple[float, ...]:
        return (
            float(state.remaining_turns()),
            float(state.points[role]),
            float(state.points[self.opponent(role)]),
        )
