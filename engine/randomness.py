"""Injectable pseudo-random number generation for players and matches."""

from __future__ import annotations

import hashlib
import random as _random
from typing import Any, Iterable, Sequence, TypeVar

T = TypeVar("T")


def derive_seed(seed: int | str, *labels: Any) -> int:
    """Derive a stable 64-bit seed from a base seed and labels (match id, role, ...)."""
    material = ":".join(str(part) for part in (seed, *labels)).encode("utf-8")
    return int.from_bytes(hashlib.sha256(material).digest()[:8], byteorder="big", signed=False)


class Randomness:
    """Thin wrapper over `random.Random` exposing the operations search code needs."""

    def __init__(self, seed: int | str | None = None):
        self.seed = seed
        self._rng = _random.Random(seed)

    @classmethod
    def derived(cls, seed: int | str, *labels: Any) -> "Randomness":
        """Build a generator seeded from `seed` and the given labels."""
        return cls(derive_seed(seed, *labels))

    def random(self, low: float = 0.0, high: float = 1.0) -> float:
        """Return a float in [low, high)."""
        n = self._rng.random()
        return (1 - n) * low + n * high

    def randint(self, low: int, high: int) -> int:
        """Return an integer in [low, high)."""
        return self._rng.randrange(low, high)

    def choice(self, values: Sequence[T]) -> T:
        """Pick one value uniformly at random."""
        if not values:
            raise ValueError("Cannot choose from an empty sequence.")
        return values[self._rng.randrange(len(values))]

    def weighted_choice(self, weighted_values: Iterable[tuple[T, float]]) -> T:
        """Pick a value with chance proportional to its weight; zero weights are skipped, negative ones raise `ValueError`."""
        pairs = [(value, float(weight)) for value, weight in weighted_values]
        if any(weight < 0 for _, weight in pairs):
            raise ValueError("Weights cannot be negative.")
        total = sum(weight for _, weight in pairs if weight > 0)
        if total <= 0:
            raise ValueError("Cannot choose from values without positive weight.")
        n = self._rng.random() * total
        chosen = None
        for value, weight in pairs:
            if weight <= 0:
                continue
            chosen = value
            n -= weight
            if n < 0:
                break
        return chosen  # type: ignore[return-value]

    def shuffle(self, values: Iterable[T]) -> list[T]:
        """Return a shuffled copy of `values`."""
        result = list(values)
        self._rng.shuffle(result)
        return result

    def __repr__(self) -> str:
        return f"Randomness(seed={self.seed!r})"
