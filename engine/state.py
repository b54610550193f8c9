"""Base class for immutable, serializable game states."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .serialize import digest, to_serializable


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of one point in a game. Games subclass it as frozen dataclasses."""

    is_contingent = False

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            key: to_serializable(value)
            for key, value in vars(self).items()
            if not key.startswith("_")
        }

    def state_digest(self) -> str:
        """Return a deterministic digest, used as a key in memo tables and logs."""
        return digest({"type": self.__class__.__name__, "state": self.to_dict()})
