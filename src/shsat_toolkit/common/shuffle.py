"""
Module: common.shuffle

Purpose:
    Uniform random permutation (Fisher-Yates) and shuffle-then-slice
    sampling. Randomness is always drawn from an injectable random.Random
    so callers can seed it.

Key Functions:
    - shuffle(): Non-mutating Fisher-Yates shuffle
    - pick_n(): Take n random items, returning picked and remaining

Dependencies:
    - random (std)
"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")


def shuffle(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Return a uniformly shuffled copy of items.

    The caller's sequence is never modified.

    Args:
        items: Items to permute
        rng: Random source (a fresh unseeded Random if None)

    Returns:
        New list containing the same items in random order

    Example:
        >>> sorted(shuffle([3, 1, 2], random.Random(7)))
        [1, 2, 3]
    """
    rng = rng or random.Random()
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randrange(i + 1)
        out[i], out[j] = out[j], out[i]
    return out


def pick_n(
    pool: Sequence[T],
    n: int,
    rng: Optional[random.Random] = None,
) -> Tuple[List[T], List[T]]:
    """
    Pick n random items from pool.

    Args:
        pool: Items to draw from
        n: Number to pick (clipped to pool size; negative treated as 0)
        rng: Random source

    Returns:
        Tuple of (picked, rest)
    """
    s = shuffle(pool, rng)
    n = max(0, n)
    return s[:n], s[n:]
