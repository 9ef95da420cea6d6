"""
Random sources for the simulator.

Anything with a ``random()`` method returning a float in [0, 1) can drive a
simulation, so a plain ``random.Random`` works as-is. Each run (or each
parallel trial) gets its own generator.
"""

import random
from typing import Iterable, List, Optional, Protocol


class RandomSource(Protocol):
    """A source of uniform floats in [0, 1)."""

    def random(self) -> float:
        ...


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Create an isolated generator, seeded for replay when ``seed`` is given."""
    return random.Random(seed)


class FixedRandom:
    """Always returns the same value."""

    def __init__(self, value: float):
        if not 0.0 <= value < 1.0:
            raise ValueError(f"value must be in [0, 1), got {value}")
        self.value = value
        self.draws = 0

    def random(self) -> float:
        self.draws += 1
        return self.value


class SequenceRandom:
    """Replays a fixed sequence of values, cycling when exhausted."""

    def __init__(self, values: Iterable[float]):
        self.values: List[float] = list(values)
        if not self.values:
            raise ValueError("SequenceRandom needs at least one value")
        for value in self.values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"values must be in [0, 1), got {value}")
        self.draws = 0

    def random(self) -> float:
        value = self.values[self.draws % len(self.values)]
        self.draws += 1
        return value
