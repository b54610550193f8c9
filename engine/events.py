"""Match event schema and JSONL logging utilities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from time import time
from typing import Any, Iterable

from .serialize import json_dumps, state_digest, to_serializable


class EventType(str, Enum):
    """Events emitted by a match."""

    BEGIN = "begin"
    NEXT = "next"
    END = "end"
    QUIT = "quit"


@dataclass(frozen=True)
class MatchEvent:
    """
    Single replay event emitted during a match.

    Every event carries the state before the step, the actions and haps applied
    (either may be `None`) and the state after the step. `begin` has no prior
    state; `end` and `quit` repeat the last state as both prior and next.
    """

    event_type: EventType
    match_id: str
    ply: int
    timestamp_ms: int
    prior_state: Any = None
    actions: dict[str, Any] | None = None
    haps: dict[str, Any] | None = None
    next_state: Any = None
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return JSON-serializable event data."""
        return {
            "event_type": self.event_type.value,
            "match_id": self.match_id,
            "ply": self.ply,
            "timestamp_ms": self.timestamp_ms,
            "prior_state": to_serializable(self.prior_state),
            "prior_state_digest": state_digest(self.prior_state) if self.prior_state is not None else None,
            "actions": to_serializable(self.actions),
            "haps": to_serializable(self.haps),
            "next_state": to_serializable(self.next_state),
            "next_state_digest": state_digest(self.next_state) if self.next_state is not None else None,
            "details": to_serializable(self.details or {}),
        }

    @classmethod
    def create(
        cls,
        event_type: EventType,
        match_id: str,
        ply: int,
        *,
        prior_state: Any = None,
        actions: dict[str, Any] | None = None,
        haps: dict[str, Any] | None = None,
        next_state: Any = None,
        details: dict[str, Any] | None = None,
    ) -> "MatchEvent":
        """Construct an event with the current wall-clock timestamp."""
        return cls(
            event_type=event_type,
            match_id=match_id,
            ply=ply,
            timestamp_ms=int(time() * 1000),
            prior_state=prior_state,
            actions=actions,
            haps=haps,
            next_state=next_state,
            details=details,
        )


def write_jsonl(path: str | Path, events: Iterable[MatchEvent]) -> None:
    """Persist events as JSONL to disk."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as handle:
        for event in events:
            handle.write(json_dumps(event.to_dict()))
            handle.write("\n")
