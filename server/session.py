"""In-memory match sessions backing the HTTP API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from engine.errors import IllegalActionError, PlayerExecutionError
from engine.factory import build_game, create_player, normalize_player_config, player_label
from engine.match import Match, MatchConfig
from engine.serialize import to_serializable

logger = logging.getLogger(__name__)


@dataclass
class MatchSession:
    """One match created through the API, with the configuration it was built from."""

    match: Match
    player_configs: dict[str, dict[str, Any]]
    config: dict[str, Any] = field(default_factory=dict)
    error: dict[str, Any] | None = None

    @property
    def match_id(self) -> str:
        return self.match.match_id

    @classmethod
    def create(
        cls,
        *,
        game: str,
        seed: int,
        config: dict[str, Any] | None,
        players: dict[str, Any] | None,
        max_plies: int | None = None,
        decision_timeout_sec: float | None = None,
    ) -> "MatchSession":
        game_obj = build_game(game)
        roles = list(game_obj.roles())
        raw_players = dict(players or {})
        unknown = [role for role in raw_players if role not in roles]
        if unknown:
            raise ValueError(f"Unknown roles for {game}: {unknown}. Roles are {roles}.")
        player_configs = {role: normalize_player_config(raw_players.get(role, "random")) for role in roles}
        match_id = f"{game}-{seed}-{uuid4().hex[:8]}"
        match = Match(
            game_obj,
            {role: create_player(player_configs[role], role=role, seed=seed) for role in roles},
            seed=seed,
            config=MatchConfig(max_plies=max_plies, decision_timeout_sec=decision_timeout_sec),
            initial_state=game_obj.initial_state(config),
            match_id=match_id,
        )
        return cls(match=match, player_configs=player_configs, config=dict(config or {}))

    async def play(self) -> None:
        """Run the match to its end, recording player failures instead of raising them."""
        try:
            await self.match.run()
        except (PlayerExecutionError, IllegalActionError) as exc:
            logger.warning("Match %s aborted by a player failure: %s", self.match_id, exc)
            self.error = exc.to_dict()

    def view(self, ply: int | None = None) -> dict[str, Any]:
        """JSON payload describing the match, optionally at an earlier ply."""
        match = self.match
        if ply is not None and not 0 <= ply <= match.ply:
            raise ValueError(f"ply must be within 0..{match.ply}, got {ply}.")
        state = match.state(ply)
        payload: dict[str, Any] = {
            "match_id": match.match_id,
            "game": match.game.game_name,
            "roles": list(match.game.roles()),
            "players": {role: player_label(cfg) for role, cfg in self.player_configs.items()},
            "ply": match.ply if ply is None else ply,
            "state": to_serializable(state),
            "rendered": match.game.render(state),
            "history": [to_serializable(entry) for entry in match.history],
            "result": match.result(),
            "summary": match.summary().to_dict() if match.is_over else None,
            "error": self.error,
        }
        return payload


class SessionStore:
    """In-memory session dictionary keyed by match ID."""

    def __init__(self) -> None:
        self._sessions: dict[str, MatchSession] = {}

    def create_match(self, **kwargs: Any) -> MatchSession:
        session = MatchSession.create(**kwargs)
        self._sessions[session.match_id] = session
        return session

    def get(self, match_id: str) -> MatchSession:
        if match_id not in self._sessions:
            raise KeyError(match_id)
        return self._sessions[match_id]

    def all_events(self, match_id: str) -> list[dict[str, Any]]:
        session = self.get(match_id)
        return [event.to_dict() for event in session.match.events]

    def __len__(self) -> int:
        return len(self._sessions)

