"""
backend/app/services/random_source.py

Purpose:
    Uniform random draws for the mini-game evaluators. Evaluators take a
    RandomOutcomeSource so tests can script the draw.

Dependencies:
    - random
"""

import random
from typing import MutableSequence, Optional


class RandomOutcomeSource:
    """Uniform integers in an inclusive range plus an unbiased shuffle."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.SystemRandom()

    def randint(self, low: int, high: int) -> int:
        """Return an integer uniformly drawn from [low, high]."""
        return self._rng.randint(low, high)

    def shuffle(self, items: MutableSequence) -> MutableSequence:
        """Fisher-Yates shuffle in place; every permutation is equally likely."""
        for i in range(len(items) - 1, 0, -1):
            j = self.randint(0, i)
            items[i], items[j] = items[j], items[i]
        return items


_default_source: Optional[RandomOutcomeSource] = None


def get_random_source() -> RandomOutcomeSource:
    global _default_source
    if _default_source is None:
        _default_source = RandomOutcomeSource()
    return _default_source
