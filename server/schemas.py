"""Pydantic request schemas for the match API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

GameName = Literal["tictactoe", "pig", "oddsandevens"]
PlayerType = Literal["random", "rulebased", "minimax", "alphabeta", "maxn", "montecarlo", "uct"]


class CreateMatchRequest(BaseModel):
    """Request body for creating and playing a new match."""

    game: GameName = "tictactoe"
    seed: int | None = None
    config: dict[str, Any] = Field(default_factory=dict)
    players: dict[str, PlayerType | dict[str, Any]] = Field(default_factory=dict)
    max_plies: int | None = Field(default=None, ge=0)
    decision_timeout_sec: float | None = Field(default=None, gt=0)
