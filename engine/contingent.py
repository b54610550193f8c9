"""Contingent states: transitions waiting for chance variables to be resolved."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping

from .aleatory import Distribution, Haps, possible_haps, random_haps
from .randomness import Randomness
from .serialize import digest, to_serializable

if TYPE_CHECKING:
    from .game import Game


@dataclass(frozen=True)
class ContingentState:
    """
    A pending transition from `state` with `actions` that depends on `aleatories`.

    It is not actionable: nobody can move here. Supplying concrete haps through
    `resolve` yields the next game state, which may be another contingent state
    when chance happens in several steps (two dice thrown one after the other).
    """

    state: Any
    actions: Mapping[str, Any] | None
    aleatories: Mapping[str, Distribution]

    is_contingent = True

    def possible_haps(self) -> list[tuple[Haps, float]]:
        return possible_haps(self.aleatories)

    def random_haps(self, rng: Randomness) -> Haps:
        return random_haps(self.aleatories, rng)

    def resolve(self, game: "Game[Any]", haps: Mapping[str, Any]) -> Any:
        """Apply the pending actions with the given hap values."""
        missing = [name for name in self.aleatories if name not in haps]
        if missing:
            raise ValueError(f"Missing values for chance variables {missing}.")
        return game.next_state(self.state, self.actions, dict(haps))

    def random_next(self, game: "Game[Any]", rng: Randomness) -> tuple[Any, Haps]:
        """Resolve with sampled haps; returns the next state and the haps used."""
        haps = self.random_haps(rng)
        return self.resolve(game, haps), haps

    def expected_evaluation(
        self,
        game: "Game[Any]",
        evaluation: Callable[[Any], float],
    ) -> float:
        """Probability-weighted sum of `evaluation` over every resolution of this state."""
        return math.fsum(
            probability * evaluation(self.resolve(game, haps))
            for haps, probability in self.possible_haps()
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "contingent": True,
            "state": to_serializable(self.state),
            "actions": to_serializable(self.actions),
            "aleatories": {
                name: [[to_serializable(value), probability] for value, probability in distribution]
                for name, distribution in self.aleatories.items()
            },
        }

    def state_digest(self) -> str:
        return digest(self.to_dict())


def is_contingent(state: Any) -> bool:
    return isinstance(state, ContingentState)
