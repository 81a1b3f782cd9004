"""
Module: builder.scoring

Purpose:
    Score a submitted attempt against an exam. Produces the totals shown
    on results screens plus accuracy per free-text category and per topic
    bucket.

Key Functions:
    - score_attempt(): Grade responses and aggregate

Key Classes:
    - QuestionResult: Outcome for one question
    - CategoryScore: Correct/total tally
    - ScoreReport: Complete attempt report

Dependencies:
    - shsat_toolkit.common.grading: Answer checking
    - shsat_toolkit.common.buckets: Bucket classification
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple

from shsat_toolkit.common.buckets import Bucket, bucket_of
from shsat_toolkit.common.grading import is_answer_correct
from shsat_toolkit.core.models import Question

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class QuestionResult:
    """Outcome for a single question."""
    question_id: str
    index: int
    given: Optional[str]
    correct: bool

    @property
    def answered(self) -> bool:
        return self.given is not None and str(self.given).strip() != ""


@dataclass(frozen=True)
class CategoryScore:
    """Correct out of total for one group of questions."""
    correct: int
    total: int

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0


@dataclass(frozen=True)
class ScoreReport:
    """
    Graded attempt (immutable).

    Attributes:
        results: Per-question outcomes in exam order
        by_category: Tallies keyed by category label
        by_bucket: Tallies keyed by topic bucket
    """
    results: Tuple[QuestionResult, ...]
    by_category: Dict[str, CategoryScore]
    by_bucket: Dict[Bucket, CategoryScore]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def correct(self) -> int:
        return sum(1 for r in self.results if r.correct)

    @property
    def answered(self) -> int:
        return sum(1 for r in self.results if r.answered)

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0

    @property
    def pct(self) -> int:
        """Accuracy as a whole percentage, rounded half-up."""
        return int(self.accuracy * 100 + 0.5)

    def to_dict(self) -> dict:
        return {
            "correct": self.correct,
            "answered": self.answered,
            "total": self.total,
            "pct": self.pct,
            "by_category": {
                k: {"correct": v.correct, "total": v.total}
                for k, v in self.by_category.items()
            },
            "by_bucket": {
                b.value: {"correct": v.correct, "total": v.total}
                for b, v in self.by_bucket.items()
            },
            "questions": [
                {
                    "id": r.question_id,
                    "index": r.index,
                    "given": r.given,
                    "correct": r.correct,
                }
                for r in self.results
            ],
        }


def score_attempt(
    questions: Iterable[Question],
    responses: Mapping[str, Optional[str]],
) -> ScoreReport:
    """
    Grade responses against the questions of an exam.

    Args:
        questions: The exam's questions, in display order
        responses: Question id -> given answer (missing = unanswered)

    Returns:
        ScoreReport with totals and per-group tallies

    Example:
        >>> report = score_attempt(exam.questions, {"shsat_2018:Q1": "B"})
        >>> report.correct, report.total
        (1, 57)
    """
    questions = list(questions)
    known_ids = {q.id for q in questions}
    unknown = [qid for qid in responses if qid not in known_ids]
    if unknown:
        logger.warning(f"Ignoring {len(unknown)} responses for questions not in the exam")

    results = []
    category_tally: Dict[str, list] = {}
    bucket_tally: Dict[Bucket, list] = {}
    for q in questions:
        given = responses.get(q.id)
        correct = is_answer_correct(q, given)
        results.append(QuestionResult(q.id, q.index, given, correct))

        label = q.category or UNCATEGORIZED
        for tally, key in ((category_tally, label), (bucket_tally, bucket_of(q))):
            entry = tally.setdefault(key, [0, 0])
            entry[0] += int(correct)
            entry[1] += 1

    return ScoreReport(
        results=tuple(results),
        by_category={k: CategoryScore(*v) for k, v in category_tally.items()},
        by_bucket={k: CategoryScore(*v) for k, v in bucket_tally.items()},
    )
