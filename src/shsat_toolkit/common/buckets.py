"""
Module: common.buckets

Purpose:
    Map free-text question categories onto the four coarse topic buckets
    used when composing an exam: algebra, geometry, statsprob and other.

Key Functions:
    - bucket_of(): Classify a question (or raw category) into a Bucket
    - count_by_bucket(): Tally questions per bucket

Key Constants:
    - BUCKET_PRIORITY: Fixed order in which buckets win scarce slots

Dependencies:
    - enum (std)

Used By:
    - builder.selection.composer: Stratified sampling
    - builder.scoring: Per-bucket accuracy
    - builder.output.answer_key: Bucket column
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, Optional, Union

from shsat_toolkit.core.models.questions import Question


__all__ = [
    "Bucket",
    "BUCKET_PRIORITY",
    "ALGEBRA_KEYWORDS",
    "GEOMETRY_KEYWORDS",
    "STATSPROB_KEYWORDS",
    "bucket_of",
    "count_by_bucket",
]


class Bucket(str, Enum):
    """Coarse topic group derived from a question category."""

    ALGEBRA = "algebra"
    GEOMETRY = "geometry"
    STATSPROB = "statsprob"
    OTHER = "other"


# Algebra also covers proportional reasoning.
ALGEBRA_KEYWORDS = (
    "algebra",
    "ratio",
    "ratios",
    "rate",
    "rates",
    "percent",
    "percents",
    "proportion",
    "proportional",
    "order of operations",
    "simplifying",
    "expressions",
    "equations",
    "inequalities",
    "number line",
    "absolute value",
)

# Geometry includes volume and surface area.
GEOMETRY_KEYWORDS = ("geometry", "volume", "surface")

STATSPROB_KEYWORDS = (
    "statistics",
    "mmmr",
    "probability",
    "combination",
    "combinations",
)

# Checked in this order; a category matching two lists lands in the first.
_KEYWORD_TABLE = (
    (Bucket.ALGEBRA, ALGEBRA_KEYWORDS),
    (Bucket.GEOMETRY, GEOMETRY_KEYWORDS),
    (Bucket.STATSPROB, STATSPROB_KEYWORDS),
)

# Earlier buckets keep their slots when the three together overflow.
BUCKET_PRIORITY = (Bucket.ALGEBRA, Bucket.GEOMETRY, Bucket.STATSPROB)


def bucket_of(item: Union[Question, str, None]) -> Bucket:
    """
    Classify a question into a topic bucket by its category text.

    Lower-cases the category and tests it for keyword substrings; the
    first matching bucket wins, OTHER is the fallback.

    Args:
        item: A Question, or a raw category string (None treated as "")

    Returns:
        Exactly one Bucket

    Example:
        >>> bucket_of("Ratios & Rates")
        <Bucket.ALGEBRA: 'algebra'>
        >>> bucket_of("Surface Area")
        <Bucket.GEOMETRY: 'geometry'>
        >>> bucket_of(None)
        <Bucket.OTHER: 'other'>
    """
    category: Optional[str]
    if isinstance(item, Question):
        category = item.category
    else:
        category = item
    text = (category or "").lower()

    for bucket, keywords in _KEYWORD_TABLE:
        if any(keyword in text for keyword in keywords):
            return bucket
    return Bucket.OTHER


def count_by_bucket(questions: Iterable[Question]) -> Dict[Bucket, int]:
    """Count questions per bucket; every bucket is present in the result."""
    counts = {bucket: 0 for bucket in Bucket}
    for q in questions:
        counts[bucket_of(q)] += 1
    return counts
