"""Factories building games and players from JSON-style configuration."""

from __future__ import annotations

from typing import Any, Mapping

from .game import Game
from .player import Player
from .players import (
    AlphaBetaPlayer,
    MaxNPlayer,
    MiniMaxPlayer,
    MonteCarloPlayer,
    RandomPlayer,
    RuleBasedPlayer,
    UCTPlayer,
)
from .randomness import Randomness

GAME_NAMES = ("tictactoe", "pig", "oddsandevens")
PLAYER_TYPES = ("random", "rulebased", "minimax", "alphabeta", "maxn", "montecarlo", "uct")


def build_game(name: str) -> Game[Any]:
    """Instantiate a bundled game by name."""
    key = name.strip().lower()
    if key == "tictactoe":
        from tictactoe.tictactoe_game import TicTacToeGame

        return TicTacToeGame()
    if key == "pig":
        from pig.pig_game import PigGame

        return PigGame()
    if key == "oddsandevens":
        from oddsandevens.oddsandevens_game import OddsAndEvensGame

        return OddsAndEvensGame()
    raise ValueError(f"Unsupported game '{name}'. Supported games: {', '.join(GAME_NAMES)}.")


def normalize_player_config(raw: Any) -> dict[str, Any]:
    """Normalize a player configuration into a typed dictionary."""
    if isinstance(raw, str):
        return {"type": raw.strip().lower()}
    if isinstance(raw, Mapping):
        data = dict(raw)
        data["type"] = str(data.get("type", "random")).strip().lower()
        return data
    return {"type": "random"}


def player_label(config: Mapping[str, Any]) -> str:
    """Return a short stable label such as `minimax:h4` or `uct:n200`."""
    player_type = str(config.get("type", "random")).lower()
    if "horizon" in config and player_type in ("minimax", "alphabeta", "maxn"):
        return f"{player_type}:h{config['horizon']}"
    if "simulation_count" in config and player_type in ("montecarlo", "uct"):
        return f"{player_type}:n{config['simulation_count']}"
    return player_type


def _optional_float(config: Mapping[str, Any], key: str, default: float | None) -> float | None:
    if key not in config:
        return default
    return float(config[key]) if config[key] is not None else None


def _optional_int(config: Mapping[str, Any], key: str, default: int | None) -> int | None:
    if key not in config:
        return default
    return int(config[key]) if config[key] is not None else None


def create_player(config: Mapping[str, Any], *, role: str, seed: int | str | None = None) -> Player:
    """Instantiate a concrete player for one role."""
    player_type = str(config.get("type", "random")).lower()
    name = str(config.get("name") or f"{player_label(config)}-{role.lower()}")
    rng = Randomness.derived(seed, role, player_type) if seed is not None else Randomness()

    if player_type == "random":
        return RandomPlayer(name=name, rng=rng)

    if player_type == "rulebased":
        # Rules come as [pattern, action] pairs matched against `game.features`.
        rules = [tuple(rule) for rule in config.get("rules", [])]
        return RuleBasedPlayer(name=name, rules=rules, rng=rng)

    if player_type in ("minimax", "alphabeta"):
        cls = MiniMaxPlayer if player_type == "minimax" else AlphaBetaPlayer
        return cls(name=name, horizon=int(config.get("horizon", 4)), rng=rng)

    if player_type == "maxn":
        return MaxNPlayer(name=name, horizon=int(config.get("horizon", 4)), rng=rng)

    if player_type == "montecarlo":
        return MonteCarloPlayer(
            name=name,
            simulation_count=_optional_int(config, "simulation_count", 30),
            time_cap=_optional_float(config, "time_cap", 1.0),
            horizon=int(config.get("horizon", 500)),
            rng=rng,
        )

    if player_type == "uct":
        return UCTPlayer(
            name=name,
            simulation_count=_optional_int(config, "simulation_count", 30),
            time_cap=_optional_float(config, "time_cap", 1.0),
            exploration=float(config.get("exploration", 2**0.5)),
            horizon=int(config.get("horizon", 500)),
            rng=rng,
        )

    raise ValueError(f"Unsupported player type '{player_type}'. Supported types: {', '.join(PLAYER_TYPES)}.")
