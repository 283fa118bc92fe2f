"""
Injectable randomness for the stochastic processes.
"""

import random
from collections.abc import Sequence
from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """
    The slice of `random.Random` the engine draws from.
    Tests substitute scripted sequences to force outcomes.
    """

    def random(self) -> float:
        """Uniform draw in [0.0, 1.0)."""
        ...

    def choice(self, seq: Sequence[T]) -> T:
        """Uniform pick from a non-empty sequence."""
        ...


def make_random_source(seed: int | None = None) -> RandomSource:
    """Default source: a seeded `random.Random` instance."""
    return random.Random(seed)
