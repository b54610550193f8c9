"""Random baseline player."""

from __future__ import annotations

from typing import Any

from ..player import Player


class RandomPlayer(Player):
    """Chooses uniformly from the legal actions of its role."""

    def decision(self, game: Any, state: Any, role: str) -> Any:
        """Pick a random legal action."""
        return self.rng.choice(game.actions_for(state, role))
