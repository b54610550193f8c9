"""Scripted player replaying a fixed sequence of actions."""

from __future__ import annotations

from typing import Any, Sequence

from ..player import Player


class TracePlayer(Player):
    """
    Plays the actions in `trace` one after the other, repeating the last one
    once the trace is exhausted.

    Unlike other players it advances a cursor, so one instance should not be
    shared between matches.
    """

    def __init__(self, trace: Sequence[Any], name: str | None = None, **kwargs: Any):
        super().__init__(name=name, **kwargs)
        if not trace:
            raise ValueError("TracePlayer needs at least one action.")
        self.trace = list(trace)
        self.cursor = 0

    def decision(self, game: Any, state: Any, role: str) -> Any:
        """Return the next action from the trace."""
        action = self.trace[min(self.cursor, len(self.trace) - 1)]
        self.cursor += 1
        return action
