"""Player interface used by the match engine and search algorithms."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .randomness import Randomness

if TYPE_CHECKING:
    from .game import Game
    from .match import Match


class _Quit:
    """Sentinel returned by a player instead of an action to abandon the match."""

    _instance: "_Quit | None" = None

    def __new__(cls) -> "_Quit":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "QUIT"

    def to_dict(self) -> dict[str, Any]:
        return {"quit": True}


QUIT = _Quit()


class Player(ABC):
    """
    Base interface for automated players.

    A player holds configuration only (name, heuristic, limits, injected RNG)
    and keeps no state between decisions.
    """

    def __init__(self, name: str | None = None, *, rng: Randomness | None = None):
        self.name = name or self.__class__.__name__
        self.rng = rng or Randomness()

    @abstractmethod
    def decision(self, game: "Game[Any]", state: Any, role: str) -> Any:
        """Return the action `role` takes at `state`, or `QUIT` to abandon the match."""

    async def async_decision(self, game: "Game[Any]", state: Any, role: str) -> Any:
        """Coroutine form of `decision`. Blocking searches run in a worker thread."""
        return await asyncio.to_thread(self.decision, game, state, role)

    def can_play(self, game: "Game[Any]") -> bool:
        """Return whether this player supports `game`."""
        return True

    def participate(self, match: "Match", role: str) -> "Player":
        """Called by a match before it starts; returns the player that will act for `role`."""
        return self

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
