"""Player delegating each decision to a random member of a group."""

from __future__ import annotations

from typing import Any, Sequence

from ..player import Player


class EnsemblePlayer(Player):
    """Asks one randomly chosen member player for every decision."""

    def __init__(self, players: Sequence[Player], name: str | None = None, **kwargs: Any):
        super().__init__(name=name, **kwargs)
        if not players:
            raise ValueError("EnsemblePlayer needs at least one member.")
        self.players = list(players)

    def can_play(self, game: Any) -> bool:
        return all(player.can_play(game) for player in self.players)

    def decision(self, game: Any, state: Any, role: str) -> Any:
        return self.rng.choice(self.players).decision(game, state, role)
