"""
Module: builder.selection.picker

Purpose:
    Plain (unstratified) question picking: a random or first-N sample of
    the bank, used for custom-length quizzes and quick random sets.

Key Functions:
    - pick_questions(): Random or first-N sample, re-indexed
    - pick_random_ids(): Ids of a random sample
    - reindex(): Assign display indices 1..N
"""

from __future__ import annotations

import logging
import random
from typing import Iterable, List, Optional, Sequence

from shsat_toolkit.common.shuffle import shuffle
from shsat_toolkit.core.models import Question

logger = logging.getLogger(__name__)

DEFAULT_RANDOM_SET_SIZE = 57


def reindex(questions: Iterable[Question]) -> List[Question]:
    """Return copies with index set to position + 1."""
    return [q.with_index(i) for i, q in enumerate(questions, 1)]


def pick_questions(
    bank: Sequence[Question],
    count: int,
    *,
    randomize: bool = True,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """
    Pick a sample of questions.

    At least one question is returned whenever the bank is non-empty,
    even for count <= 0.

    Args:
        bank: Questions to pick from (not modified)
        count: Number wanted; clipped to [1, len(bank)]
        randomize: Random sample if True, else the first N in bank order
        rng: Random source

    Returns:
        Picked questions re-indexed 1..N (empty if bank is empty)
    """
    if not bank:
        return []
    n = max(1, min(count, len(bank)))
    base = shuffle(bank, rng) if randomize else list(bank)
    logger.debug(f"Picked {n} of {len(bank)} questions (randomize={randomize})")
    return reindex(base[:n])


def pick_random_ids(
    bank: Sequence[Question],
    count: int = DEFAULT_RANDOM_SET_SIZE,
    rng: Optional[random.Random] = None,
) -> List[str]:
    """Ids of up to count randomly chosen questions."""
    return [q.id for q in shuffle(bank, rng)[: max(0, count)]]
