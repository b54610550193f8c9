"""Match engine: drives one game instance from its initial state to the end."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter
from typing import Any, Callable, Mapping, Sequence
from uuid import uuid4

from .contingent import ContingentState
from .errors import (
    EngineError,
    IllegalActionError,
    IncompatiblePlayerError,
    MatchConfigurationError,
    PlayerExecutionError,
    PlayerTimeoutError,
)
from .events import EventType, MatchEvent, write_jsonl
from .game import Game
from .player import QUIT, Player
from .randomness import Randomness
from .result import MatchResult, TerminationReason, winners_from_scores
from .serialize import state_digest

logger = logging.getLogger(__name__)

EventListener = Callable[[MatchEvent], Any]


@dataclass(frozen=True)
class MatchConfig:
    """Runtime configuration for match execution."""

    max_plies: int | None = None
    decision_timeout_sec: float | None = None
    validate_actions: bool = True
    event_log_dir: str | Path | None = None


@dataclass(frozen=True)
class HistoryEntry:
    """A state, with the actions and haps that produced it (`None` for the initial state)."""

    state: Any
    actions: dict[str, Any] | None = None
    haps: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state,
            "state_digest": state_digest(self.state),
            "actions": self.actions,
            "haps": self.haps,
        }


class Match:
    """
    One game played between one player per role.

    Every ply resolves pending chance with the match RNG or asks all active
    roles for their actions concurrently, joins them, and appends the new
    state to `history`. A player answering `QUIT` aborts the match.
    """

    def __init__(
        self,
        game: Game[Any],
        players: Mapping[str, Player] | Sequence[Player],
        *,
        seed: int | str | None = None,
        rng: Randomness | None = None,
        config: MatchConfig | None = None,
        initial_state: Any = None,
        match_id: str | None = None,
    ):
        self.game = game
        self.config = config or MatchConfig()
        self.seed = seed
        self.match_id = match_id or f"{game.game_name}-{seed}-{uuid4().hex[:8]}"
        if rng is not None:
            self.rng = rng
        elif seed is not None:
            self.rng = Randomness.derived(seed, self.match_id)
        else:
            self.rng = Randomness()

        roles = list(game.roles())
        normalized = self._normalize_players(roles=roles, players=players)
        self._validate_players(roles=roles, players=normalized)
        for role in roles:
            if not normalized[role].can_play(game):
                raise IncompatiblePlayerError(role, normalized[role], game.game_name)
        self.players: dict[str, Player] = {role: normalized[role].participate(self, role) for role in roles}

        state = initial_state if initial_state is not None else game.initial_state()
        game.check_state(state)
        self._history: list[HistoryEntry] = [HistoryEntry(state)]
        self._events: list[MatchEvent] = []
        self._listeners: list[EventListener] = []
        self._termination: TerminationReason | None = None
        self._details: str | None = None
        self._decision_rounds = 0
        self._durations_ms: dict[str, list[float]] = defaultdict(list)
        self._log_path: Path | None = None

    # Inspection

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)

    @property
    def ply(self) -> int:
        return len(self._history) - 1

    @property
    def decision_rounds(self) -> int:
        return self._decision_rounds

    @property
    def events(self) -> tuple[MatchEvent, ...]:
        return tuple(self._events)

    @property
    def termination_reason(self) -> TerminationReason | None:
        return self._termination

    def state(self, ply: int | None = None) -> Any:
        """State at `ply` (the current one by default). Negative plies count from the end."""
        if ply is None:
            return self._history[-1].state
        return self._history[ply].state

    def result(self) -> dict[str, float] | None:
        state = self.state()
        if isinstance(state, ContingentState):
            return None
        result = self.game.result(state)
        return dict(result) if result is not None else None

    @property
    def is_finished(self) -> bool:
        return self.game.is_finished(self.state())

    @property
    def is_over(self) -> bool:
        return self._termination is not None

    def subscribe(self, listener: EventListener) -> None:
        """Register a callable receiving every `MatchEvent` as it is emitted."""
        self._listeners.append(listener)

    # Flow

    async def next(self) -> HistoryEntry | None:
        """Advance one ply. Returns the appended entry, or `None` once the match is over."""
        if self._termination is not None:
            return None
        self._begin()

        state = self.state()
        if self.game.is_finished(state):
            self._end(TerminationReason.FINISHED)
            return None

        if isinstance(state, ContingentState):
            haps = state.random_haps(self.rng)
            return self._advance(state, None, haps)

        try:
            actions = await self._decisions(state)
        except (PlayerExecutionError, IllegalActionError) as exc:
            self._end(TerminationReason.PLAYER_ERROR, details=str(exc), error=exc)
            raise
        if actions is None:
            return None
        self._decision_rounds += 1
        return self._advance(state, actions, None)

    async def run(self, max_plies: int | None = None) -> "Match":
        """Play until the game finishes, a player quits or `max_plies` decision rounds are played."""
        limit = max_plies if max_plies is not None else self.config.max_plies
        if self._termination is None:
            self._begin()
        while self._termination is None:
            if (
                limit is not None
                and self._decision_rounds >= limit
                and not isinstance(self.state(), ContingentState)
                and not self.is_finished
            ):
                self._end(TerminationReason.MAX_PLIES, details=f"Reached max_plies={limit}.")
                break
            await self.next()
        return self

    def run_sync(self, max_plies: int | None = None) -> "Match":
        """Blocking wrapper around `run` for callers without an event loop."""
        return asyncio.run(self.run(max_plies=max_plies))

    def summary(self) -> MatchResult:
        """Structured outcome of a match that is over."""
        if self._termination is None:
            raise EngineError(f"Match {self.match_id} is not over yet.")
        scores = self.result() or {}
        return MatchResult(
            match_id=self.match_id,
            game_name=self.game.game_name,
            seed=self.seed,
            winners=winners_from_scores(scores),
            termination_reason=self._termination,
            scores=scores,
            plies=self.ply,
            stats={
                "decision_rounds": self._decision_rounds,
                "decision_durations_ms": {role: list(values) for role, values in self._durations_ms.items()},
            },
            details=self._details,
            final_state_digest=state_digest(self.state()),
            event_count=len(self._events),
            log_path=str(self._log_path) if self._log_path is not None else None,
        )

    # Internals

    async def _decisions(self, state: Any) -> dict[str, Any] | None:
        """Ask every active role concurrently; `None` means a role quit."""
        tasks = {
            asyncio.create_task(self._decide(role, state), name=f"{self.match_id}:{role}"): role
            for role in self.game.active_roles(state)
        }
        actions: dict[str, Any] = {}
        pending = set(tasks)
        try:
            while pending:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    role = tasks[task]
                    action = task.result()
                    if action is QUIT:
                        self._quit(role, state)
                        return None
                    actions[role] = action
        finally:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
        return {role: actions[role] for role in tasks.values()}

    async def _decide(self, role: str, state: Any) -> Any:
        player = self.players[role]
        view = self.game.view(state, role)
        timeout = self.config.decision_timeout_sec
        start = perf_counter()
        try:
            if timeout is None:
                action = await player.async_decision(self.game, view, role)
            else:
                action = await asyncio.wait_for(player.async_decision(self.game, view, role), timeout)
        except TimeoutError as exc:
            raise PlayerTimeoutError(role, f"Decision of {role} exceeded {timeout}s.") from exc
        except Exception as exc:
            raise PlayerExecutionError(role, f"Decision of {role} failed: {exc}") from exc
        finally:
            self._durations_ms[role].append((perf_counter() - start) * 1000.0)

        if action is not QUIT and self.config.validate_actions:
            legal = self.game.actions_for(state, role)
            if action not in legal:
                raise IllegalActionError(role, action, legal)
        return action

    def _begin(self) -> None:
        if self._events:
            return
        self._emit(EventType.BEGIN, next_state=self.state(), details={"roles": list(self.players)})
        logger.info("Match %s begins: %s", self.match_id, {r: p.name for r, p in self.players.items()})

    def _advance(self, prior: Any, actions: dict[str, Any] | None, haps: dict[str, Any] | None) -> HistoryEntry:
        """Apply a transition or a chance resolution. Any game failure ends the match for good."""
        try:
            if isinstance(prior, ContingentState):
                next_state = prior.resolve(self.game, haps or {})
            else:
                next_state = self.game.transition(prior, actions)
            return self._append(prior, next_state, actions, haps)
        except Exception as exc:
            logger.error("Match %s failed in the game rules at ply %d: %s", self.match_id, self.ply, exc)
            self._end(
                TerminationReason.GAME_ERROR,
                details=f"{type(exc).__name__}: {exc}",
                error=exc if isinstance(exc, EngineError) else None,
            )
            raise

    def _append(self, prior: Any, next_state: Any, actions: dict[str, Any] | None, haps: dict[str, Any] | None) -> HistoryEntry:
        self.game.check_state(next_state)
        entry = HistoryEntry(state=next_state, actions=actions, haps=haps)
        self._history.append(entry)
        self._emit(EventType.NEXT, prior_state=prior, actions=actions, haps=haps, next_state=next_state)
        logger.debug("Match %s ply %d: actions=%r haps=%r", self.match_id, self.ply, actions, haps)
        return entry

    def _quit(self, role: str, state: Any) -> None:
        self._termination = TerminationReason.QUIT
        self._details = f"{role} quit."
        self._emit(EventType.QUIT, prior_state=state, next_state=state, details={"role": role})
        logger.info("Match %s aborted: %s quit at ply %d", self.match_id, role, self.ply)
        self._write_log()

    def _end(self, reason: TerminationReason, *, details: str | None = None, error: EngineError | None = None) -> None:
        self._termination = reason
        self._details = details
        state = self.state()
        payload: dict[str, Any] = {"reason": reason.value, "result": self.result()}
        if error is not None:
            payload["error"] = error.to_dict()
        self._emit(EventType.END, prior_state=state, next_state=state, details=payload)
        logger.info("Match %s ended (%s) after %d plies: %r", self.match_id, reason.value, self.ply, self.result())
        self._write_log()

    def _emit(self, event_type: EventType, **fields: Any) -> None:
        event = MatchEvent.create(event_type, self.match_id, self.ply, **fields)
        self._events.append(event)
        for listener in self._listeners:
            listener(event)

    def _write_log(self) -> None:
        if self.config.event_log_dir is None:
            return
        self._log_path = Path(self.config.event_log_dir) / f"{self.match_id}.jsonl"
        write_jsonl(self._log_path, self._events)

    def _validate_players(self, *, roles: Sequence[str], players: Mapping[str, Player]) -> None:
        missing = [role for role in roles if role not in players]
        if missing:
            raise MatchConfigurationError(f"Missing players for roles: {missing}")
        extra = [role for role in players if role not in roles]
        if extra:
            raise MatchConfigurationError(f"Players given for unknown roles: {extra}")

    def _normalize_players(
        self,
        *,
        roles: Sequence[str],
        players: Mapping[str, Player] | Sequence[Player],
    ) -> dict[str, Player]:
        if isinstance(players, Mapping):
            return dict(players)
        player_list = list(players)
        if len(player_list) != len(roles):
            raise MatchConfigurationError(
                f"Expected {len(roles)} players for sequence input, received {len(player_list)}."
            )
        return {role: player for role, player in zip(roles, player_list, strict=True)}
