"""
Module: composition

Purpose:
    Provides ComposedExam - the result of composing a practice exam.
    Holds the re-indexed question sequence together with what was
    requested and how the slots were allocated, so callers can report
    on degraded results without re-running the composer.

Key Functions:
    - ComposedExam.grid_in_count: Number of GRID_IN questions
    - ComposedExam.bucket_counts: Questions per topic bucket
    - ComposedExam.to_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - .questions.Question
    - shsat_toolkit.common.buckets: Bucket classification

Used By:
    - builder.selection.composer
    - builder.controller
    - builder.output
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING, Dict, Iterator, Tuple

from .questions import Question

if TYPE_CHECKING:
    from shsat_toolkit.common.buckets import Bucket


@dataclass(frozen=True)
class ComposedExam:
    """
    A composed exam (immutable).

    Attributes:
        questions: Selected questions, re-indexed 1..N in display order
        requested_total: The configured total
        requested_grid_ins: The configured grid-in count
        targets: Per-bucket slot allocations after clamping
        shortfall: Slots the bucket sub-pools could not supply before backfill

    Invariants:
        - len(questions) <= requested_total
        - question ids are unique
        - question indices are exactly 1..len(questions)

    Example:
        >>> exam = compose_exam(pool, CompositionConfig())
        >>> len(exam), exam.grid_in_count
        (57, 5)
    """

    questions: Tuple[Question, ...]
    requested_total: int
    requested_grid_ins: int
    targets: Dict[Bucket, int] = field(default_factory=dict, compare=False, hash=False)
    shortfall: int = 0

    def __post_init__(self) -> None:
        """Validate result on construction."""
        ids = [q.id for q in self.questions]
        if len(ids) != len(set(ids)):
            raise ValueError("ComposedExam contains duplicate question ids")
        if len(self.questions) > self.requested_total:
            raise ValueError(
                f"ComposedExam has {len(self.questions)} questions, "
                f"more than requested_total={self.requested_total}"
            )

    # ─────────────────────────────────────────────────────────────────────────
    # Calculated Properties (NEVER stored)
    # ─────────────────────────────────────────────────────────────────────────

    @cached_property
    def grid_in_count(self) -> int:
        return sum(1 for q in self.questions if q.is_grid_in)

    @cached_property
    def bucket_counts(self) -> Dict[Bucket, int]:
        # common.buckets imports this package
        from shsat_toolkit.common.buckets import count_by_bucket
        return count_by_bucket(self.questions)

    @cached_property
    def question_ids(self) -> Tuple[str, ...]:
        return tuple(q.id for q in self.questions)

    @property
    def is_complete(self) -> bool:
        """True when the exam reached the requested size."""
        return len(self.questions) == self.requested_total

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self.questions)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """Serialize for JSON transport."""
        return {
            "total": len(self.questions),
            "requested_total": self.requested_total,
            "requested_grid_ins": self.requested_grid_ins,
            "grid_ins": self.grid_in_count,
            "bucket_counts": {b.value: n for b, n in self.bucket_counts.items()},
            "targets": {b.value: n for b, n in self.targets.items()},
            "shortfall": self.shortfall,
            "questions": [q.to_dict() for q in self.questions],
        }

    def __repr__(self) -> str:
        return (
            f"ComposedExam(questions={len(self.questions)}/{self.requested_total}, "
            f"grid_ins={self.grid_in_count})"
        )
