"""Core game interface for turn-based, simultaneous and stochastic games."""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from typing import Any, Generic, Mapping, Sequence, TypeVar

from .aleatory import Distribution, Haps, possible_haps, random_haps
from .contingent import ContingentState
from .errors import InvariantViolation
from .randomness import Randomness

Role = str
Action = Any
Actions = dict[Role, Action]
Result = dict[Role, float]
StateT = TypeVar("StateT")


class Game(ABC, Generic[StateT]):
    """
    Abstract interface that every game implementation must satisfy.

    A `Game` holds the rules; states are immutable values passed in and out.
    `transition` is pure: it never mutates the given state.
    """

    game_name: str = "game"
    is_simultaneous: bool = False
    is_deterministic: bool = True
    is_zero_sum: bool = True

    @abstractmethod
    def initial_state(self, config: Mapping[str, Any] | None = None) -> StateT:
        """Create the starting state for a match."""

    @abstractmethod
    def roles(self) -> Sequence[Role]:
        """Return every role of the game, in a fixed order."""

    @abstractmethod
    def active_roles(self, state: StateT) -> Sequence[Role]:
        """Return the roles that must act at `state` (empty when it is terminal)."""

    @abstractmethod
    def actions(self, state: StateT) -> Mapping[Role, Sequence[Action]] | None:
        """Return the legal actions per active role, or `None` at a terminal state."""

    @abstractmethod
    def result(self, state: StateT) -> Mapping[Role, float] | None:
        """Return the outcome per role at a terminal state, `None` otherwise."""

    @abstractmethod
    def next_state(self, state: StateT, actions: Mapping[Role, Action] | None, haps: Haps | None) -> Any:
        """Apply actions and resolved chance values, returning a new state."""

    def aleatories(
        self, state: StateT, actions: Mapping[Role, Action] | None = None
    ) -> Mapping[str, Distribution] | None:
        """Chance variables that must be resolved before `actions` can be applied."""
        return None

    def result_bounds(self) -> tuple[float, float]:
        """Minimum and maximum possible result."""
        return (-1.0, 1.0)

    def view(self, state: StateT, role: Role) -> StateT:
        """Return the state as seen by `role`. Hidden-information games override this."""
        return state

    def features(self, state: StateT, role: Role) -> tuple[float, ...]:
        """Numeric description of `state` from `role`'s side, matched by rule-based players."""
        raise NotImplementedError(f"{self.game_name} does not define state features.")

    # Flow

    def transition(
        self,
        state: StateT,
        actions: Mapping[Role, Action] | None,
        haps: Haps | None = None,
    ) -> Any:
        """
        Advance `state` with the given `actions`.

        If chance variables are pending and no `haps` were supplied, the result
        is a `ContingentState` to be resolved later; otherwise the next state.
        """
        if isinstance(state, ContingentState):
            raise InvariantViolation("Contingent states are resolved with haps, not actions.")
        if haps is None:
            aleatories = self.aleatories(state, actions)
            if aleatories:
                return ContingentState(state=state, actions=dict(actions or {}), aleatories=dict(aleatories))
        return self.next_state(state, actions, haps)

    def contingent(
        self,
        state: StateT,
        aleatories: Mapping[str, Distribution],
        actions: Mapping[Role, Action] | None = None,
    ) -> ContingentState:
        """Shortcut for games whose `next_state` chains further chance steps."""
        return ContingentState(state=state, actions=actions, aleatories=dict(aleatories))

    def is_finished(self, state: Any) -> bool:
        if isinstance(state, ContingentState):
            return False
        return self.result(state) is not None

    def check_state(self, state: Any) -> None:
        """Fail fast if `state` breaks the actions/result contract."""
        if isinstance(state, ContingentState):
            return
        actions = self.actions(state)
        result = self.result(state)
        if (actions is None) == (result is None):
            which = "both" if actions is not None else "neither"
            raise InvariantViolation(f"{self.game_name}: {which} of actions/result defined at {state!r}.")
        if actions is not None:
            if not actions:
                raise InvariantViolation(f"{self.game_name}: no active roles at non-terminal {state!r}.")
            for role, role_actions in actions.items():
                if not role_actions:
                    raise InvariantViolation(f"{self.game_name}: role {role!r} has no actions at {state!r}.")

    # Roles

    def active_role(self, state: StateT) -> Role:
        """Return the single active role, or raise if there is not exactly one."""
        active = list(self.active_roles(state))
        if len(active) != 1:
            raise InvariantViolation(f"Expected one active role, found {active!r}.")
        return active[0]

    def opponents(self, *roles: Role) -> list[Role]:
        excluded = set(roles)
        return [role for role in self.roles() if role not in excluded]

    def opponent(self, role: Role) -> Role:
        all_roles = list(self.roles())
        if len(all_roles) != 2:
            raise InvariantViolation("Can only get the opponent in a two-role game.")
        return all_roles[(all_roles.index(role) + 1) % 2]

    def actions_for(self, state: StateT, role: Role) -> list[Action]:
        """Legal actions of `role`, raising `InvariantViolation` when there are none."""
        actions = self.actions(state) or {}
        role_actions = list(actions.get(role) or [])
        if not role_actions:
            raise InvariantViolation(f"Role {role!r} has no actions at {state!r}.")
        return role_actions

    # Enumeration and sampling

    def possible_actions(
        self, state: StateT, override: Mapping[Role, Sequence[Action]] | None = None
    ) -> list[Actions]:
        """Every joint actions map for the active roles; `override` pins some roles' options."""
        options = dict(self.actions(state) or {})
        options.update(override or {})
        roles = list(options)
        return [dict(zip(roles, combo, strict=True)) for combo in itertools.product(*(options[r] for r in roles))]

    def random_actions(
        self,
        state: StateT,
        rng: Randomness,
        override: Mapping[Role, Sequence[Action]] | None = None,
    ) -> Actions:
        options = dict(self.actions(state) or {})
        options.update(override or {})
        return {role: rng.choice(list(role_actions)) for role, role_actions in options.items()}

    def possible_haps(self, state: Any) -> list[tuple[Haps, float]]:
        """Every hap combination (with joint probability) pending at a contingent state."""
        if isinstance(state, ContingentState):
            return state.possible_haps()
        aleatories = self.aleatories(state)
        return possible_haps(aleatories) if aleatories else [({}, 1.0)]

    def random_haps(self, state: Any, rng: Randomness) -> Haps:
        if isinstance(state, ContingentState):
            return state.random_haps(rng)
        aleatories = self.aleatories(state)
        return random_haps(aleatories, rng) if aleatories else {}

    def random_next(self, state: Any, rng: Randomness) -> Any:
        """One step of a random playout: sample chance, or random actions for all active roles."""
        if isinstance(state, ContingentState):
            return state.resolve(self, state.random_haps(rng))
        return self.transition(state, self.random_actions(state, rng))

    # Results

    def normalized_result(self, value: float) -> float:
        """Map a result value into [-1, +1] using `result_bounds`."""
        low, high = self.result_bounds()
        if high == low:
            return 0.0
        return (value - low) / (high - low) * 2 - 1

    def zerosum_result(self, score: float, *roles: Role) -> Result:
        """Split `score` among `roles` and `-score` among their opponents."""
        winners = set(roles)
        share = score / max(len(winners), 1)
        opponent_share = -share * len(winners) / max(len(self.roles()) - len(winners), 1)
        return {role: (share if role in winners else opponent_share) for role in self.roles()}

    def victory(self, *roles: Role, score: float = 1.0) -> Result:
        return self.zerosum_result(score, *roles)

    def defeat(self, *roles: Role, score: float = -1.0) -> Result:
        return self.zerosum_result(score, *roles)

    def tied(self, score: float = 0.0) -> Result:
        return {role: score for role in self.roles()}

    def render(self, state: StateT) -> str:
        """Text rendering for debugging and replay tooling."""
        return repr(state)
