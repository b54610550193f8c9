"""Rule-based players: an ordered list of rules decides, chance decides the rest."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Callable, Sequence

from ..randomness import Randomness
from .heuristic import Heuristic, HeuristicPlayer

logger = logging.getLogger(__name__)

FEATURE_TOLERANCE = 1e-15

Features = Callable[[Any, Any, str], Any]
RuleFunction = Callable[[Any, Any, str], Any]
# A rule is either a callable `(features, game, role) -> action | None`, or a
# `(pattern, action)` pair matched against numeric features.
Rule = RuleFunction | tuple[Sequence[Any], Any]


class RuleBasedPlayer(HeuristicPlayer):
    """
    Checks its rules in order; the first one that fits with a legal action
    decides the move. Rules proposing illegal actions are skipped.

    When no rule fits, the player falls back to its heuristic if it was given
    one, or to a uniformly random legal action.

    Features default to `game.features(state, role)`. Pattern rules compare
    them position by position; a pattern entry that is not a number (or is
    NaN) matches anything.
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        rules: Sequence[Rule] = (),
        features: Features | None = None,
        heuristic: Heuristic | None = None,
        rng: Randomness | None = None,
    ):
        super().__init__(name=name, heuristic=heuristic, rng=rng)
        self.rules: list[Rule] = []
        for rule in rules:
            self.rule(rule)
        self._features = features

    def rule(self, rule: Rule) -> "RuleBasedPlayer":
        """Append a rule; returns the player so calls can be chained."""
        if not callable(rule) and not (isinstance(rule, (tuple, list)) and len(rule) == 2):
            raise ValueError(f"A rule must be a callable or a (pattern, action) pair, got {rule!r}.")
        self.rules.append(rule if callable(rule) else (tuple(rule[0]), rule[1]))
        return self

    def regex_rule(self, pattern: str, action: Any) -> "RuleBasedPlayer":
        """Append a rule firing `action` when the features, as text, match `pattern`."""
        return self.rule(self.regex(pattern, action))

    @staticmethod
    def regex(pattern: str, action: Any) -> RuleFunction:
        compiled = re.compile(pattern)

        def rule(features: Any, game: Any, role: str) -> Any:
            return action if compiled.search(str(features)) else None

        return rule

    def features(self, game: Any, state: Any, role: str) -> Any:
        if self._features is not None:
            return self._features(game, state, role)
        return game.features(state, role)

    @staticmethod
    def matches(pattern: Sequence[Any], features: Sequence[Any]) -> bool:
        if len(pattern) > len(features):
            return False
        for expected, actual in zip(pattern, features):
            if not isinstance(expected, (int, float)) or isinstance(expected, bool) or math.isnan(expected):
                continue
            if abs(expected - actual) >= FEATURE_TOLERANCE:
                return False
        return True

    def match(self, rule: Rule, features: Any, game: Any, role: str) -> Any:
        """Action proposed by `rule`, or `None` if it does not apply."""
        if callable(rule):
            return rule(features, game, role)
        pattern, action = rule
        return action if self.matches(pattern, features) else None

    def decision(self, game: Any, state: Any, role: str) -> Any:
        actions = game.actions_for(state, role)
        features = self.features(game, state, role)
        for index, rule in enumerate(self.rules):
            action = self.match(rule, features, game, role)
            if action is None:
                continue
            if action in actions:
                logger.debug("%s: rule %d chose %r for %s", self.name, index, action, role)
                return action
            logger.debug("%s: rule %d proposed illegal action %r, skipped", self.name, index, action)
        if self._heuristic is not None:
            return super().decision(game, state, role)
        return self.rng.choice(actions)
