"""Structured exceptions used across the game engine."""

from __future__ import annotations

from typing import Any

from .serialize import to_serializable


class EngineError(Exception):
    """Base class for engine-level exceptions."""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {"type": self.__class__.__name__, "message": str(self)}


class InvariantViolation(EngineError):
    """Raised when a game implementation breaks the state contract."""


class MatchConfigurationError(EngineError):
    """Raised when a match is configured incorrectly."""


class IncompatiblePlayerError(MatchConfigurationError):
    """Raised when a player declares it cannot play the given game."""

    def __init__(self, role: str, player: Any, game_name: str):
        self.role = role
        self.player = player
        self.game_name = game_name
        super().__init__(f"Player {player!r} cannot play role {role!r} in game {game_name!r}.")

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update({"role": self.role, "game_name": self.game_name})
        return payload


class IllegalActionError(EngineError):
    """Raised when a player returns an action outside its legal actions."""

    def __init__(self, role: str, action: Any, legal_actions: Any = None):
        self.role = role
        self.action = action
        self.legal_actions = legal_actions
        super().__init__(f"Illegal action {action!r} by {role}")

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update({"role": self.role, "action": to_serializable(self.action)})
        return payload


class PlayerExecutionError(EngineError):
    """Raised when a player fails to produce a decision."""

    def __init__(self, role: str, message: str):
        self.role = role
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["role"] = self.role
        return payload


class PlayerTimeoutError(PlayerExecutionError):
    """Raised when a player exceeds the configured decision time limit."""
