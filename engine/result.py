"""Match summary models and termination metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from .serialize import to_serializable


class TerminationReason(str, Enum):
    """Why a match stopped."""

    FINISHED = "finished"
    QUIT = "quit"
    MAX_PLIES = "max_plies"
    PLAYER_ERROR = "player_error"
    GAME_ERROR = "game_error"


@dataclass(frozen=True)
class MatchResult:
    """Structured outcome for a completed or aborted match."""

    match_id: str
    game_name: str
    seed: int | str | None
    winners: list[str]
    termination_reason: TerminationReason
    scores: dict[str, float] = field(default_factory=dict)
    plies: int = 0
    stats: dict[str, Any] = field(default_factory=dict)
    details: str | None = None
    final_state_digest: str | None = None
    event_count: int = 0
    log_path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable result object."""
        return {
            "match_id": self.match_id,
            "game_name": self.game_name,
            "seed": self.seed,
            "winners": list(self.winners),
            "termination_reason": self.termination_reason.value,
            "scores": to_serializable(self.scores),
            "plies": self.plies,
            "stats": to_serializable(self.stats),
            "details": self.details,
            "final_state_digest": self.final_state_digest,
            "event_count": self.event_count,
            "log_path": self.log_path,
        }


def winners_from_scores(scores: Mapping[str, float]) -> list[str]:
    """Roles sharing the best score, or nobody if every role tied."""
    if not scores:
        return []
    best = max(scores.values())
    winners = [role for role, score in scores.items() if score == best]
    return [] if len(winners) == len(scores) else winners
