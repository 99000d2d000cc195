"""
Session batch selection.

Pure sampling helpers. Randomness only comes from the ``random.Random``
passed in (a fresh one when omitted), so selection is reproducible in tests
and never shares hidden RNG state between callers.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def shuffled(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a new random permutation of ``items``."""
    rng = rng or random.Random()
    result = list(items)
    rng.shuffle(result)
    return result


def pick_batch(pool: Sequence[T], size: int, rng: random.Random | None = None) -> list[T]:
    """
    Draw a training batch.

    Returns a uniform sample without replacement of ``min(size, len(pool))``
    items in random order. ``pool`` is not modified.
    """
    if size < 0:
        raise ValueError(f"Batch size must be non-negative, got {size}")
    rng = rng or random.Random()
    return rng.sample(list(pool), min(size, len(pool)))
