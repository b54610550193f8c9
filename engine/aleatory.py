"""Discrete distributions for chance ("aleatory") variables such as dice or decks."""

from __future__ import annotations

import itertools
import math
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Self

from .errors import InvariantViolation
from .randomness import Randomness

PROBABILITY_TOLERANCE = 1e-9

Haps = dict[str, Any]


@dataclass(frozen=True)
class Distribution:
    """Finite list of `(value, probability)` pairs whose probabilities add up to one."""

    outcomes: tuple[tuple[Any, float], ...]

    def __post_init__(self) -> None:
        outcomes = tuple((value, float(probability)) for value, probability in self.outcomes)
        if not outcomes:
            raise InvariantViolation("A distribution needs at least one outcome.")
        if any(probability < 0 for _, probability in outcomes):
            raise InvariantViolation(f"Negative probability in distribution {outcomes!r}.")
        total = math.fsum(probability for _, probability in outcomes)
        if abs(total - 1.0) > PROBABILITY_TOLERANCE:
            raise InvariantViolation(f"Distribution probabilities add up to {total!r}, not 1.")
        object.__setattr__(self, "outcomes", outcomes)

    @classmethod
    def uniform(cls, values: Iterable[Any]) -> Self:
        """All `values` with the same probability."""
        items = list(values)
        if not items:
            raise InvariantViolation("A uniform distribution needs at least one value.")
        probability = 1.0 / len(items)
        return cls(tuple((value, probability) for value in items))

    @classmethod
    def from_range(cls, low: int, high: int) -> Self:
        """Uniform distribution over the integers in [low, high]."""
        return cls.uniform(range(low, high + 1))

    @classmethod
    def from_weights(cls, weighted_values: Iterable[tuple[Any, float]]) -> Self:
        """Normalize arbitrary non-negative weights, merging repeated values."""
        merged: dict[Any, float] = {}
        for value, weight in weighted_values:
            if weight < 0:
                raise InvariantViolation(f"Weights cannot be negative ({weight!r}).")
            merged[value] = merged.get(value, 0.0) + float(weight)
        total = math.fsum(merged.values())
        if total <= 0:
            raise InvariantViolation("Weights must add up to a positive number.")
        return cls(tuple((value, weight / total) for value, weight in merged.items()))

    def values(self) -> list[Any]:
        return [value for value, _ in self.outcomes]

    def probability(self, value: Any) -> float:
        return math.fsum(p for v, p in self.outcomes if v == value)

    def sample(self, rng: Randomness) -> Any:
        """Draw one value respecting the probabilities."""
        return rng.weighted_choice(self.outcomes)

    def expectation(self) -> float:
        """Expected value, for numeric distributions."""
        return math.fsum(value * probability for value, probability in self.outcomes)

    def __iter__(self) -> Iterator[tuple[Any, float]]:
        return iter(self.outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)


def possible_haps(aleatories: Mapping[str, Distribution]) -> list[tuple[Haps, float]]:
    """Every combination of values for the named variables, with its joint probability."""
    names = list(aleatories)
    combinations = []
    for outcome in itertools.product(*(aleatories[name].outcomes for name in names)):
        probability = 1.0
        haps: Haps = {}
        for name, (value, value_probability) in zip(names, outcome, strict=True):
            haps[name] = value
            probability *= value_probability
        combinations.append((haps, probability))
    return combinations


def random_haps(aleatories: Mapping[str, Distribution], rng: Randomness) -> Haps:
    """Sample one value for each named variable."""
    return {name: distribution.sample(rng) for name, distribution in aleatories.items()}


def dice_sum_probability(total: int, dice: int, sides: int) -> float:
    """Probability that `dice` dice of `sides` faces add up to `total`."""
    if dice < 1 or sides < 2:
        raise ValueError("Need at least one die with two or more sides.")
    if total < dice or total > dice * sides:
        return 0.0
    ways = sum(
        (-1) ** k * math.comb(dice, k) * math.comb(total - sides * k - 1, dice - 1)
        for k in range((total - dice) // sides + 1)
    )
    return ways / sides**dice


D4 = Distribution.from_range(1, 4)
D6 = Distribution.from_range(1, 6)
D8 = Distribution.from_range(1, 8)
D10 = Distribution.from_range(1, 10)
D12 = Distribution.from_range(1, 12)
D20 = Distribution.from_range(1, 20)
D100 = Distribution.from_range(1, 100)
