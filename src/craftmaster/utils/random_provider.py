from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class RandomProvider:
    """
    Injectable random source used by combat and crafting rolls.

    Wraps random.Random so a seed gives reproducible sessions.
    """

    seed: Optional[int] = None

    def __post_init__(self):
        self._rng = random.Random(self.seed)

    def random(self) -> float:
        return self._rng.random()

    def choice(self, seq: Sequence[T]) -> T:
        return self._rng.choice(seq)


@dataclass
class SequenceRandom:
    """Replays a fixed list of floats in [0, 1).

    choice() consumes one value as well and maps it onto the sequence index,
    so tests can pick a specific element. Running out of values raises.
    """

    values: Iterable[float] = field(default_factory=list)

    def __post_init__(self):
        self._values: List[float] = list(self.values)
        self._pos = 0

    def random(self) -> float:
        if self._pos >= len(self._values):
            raise IndexError("SequenceRandom exhausted")
        value = self._values[self._pos]
        self._pos += 1
        return value

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        idx = min(int(self.random() * len(seq)), len(seq) - 1)
        return seq[idx]

    @property
    def consumed(self) -> int:
        return self._pos
