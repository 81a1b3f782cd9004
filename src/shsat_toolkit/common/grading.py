"""
Module: common.grading

Purpose:
    Answer checking. Grid-in responses are compared numerically so that
    "0.5", "1/2" and " 2/4 " are all accepted for an answer of "1/2";
    multiple-choice responses compare choice keys.

Key Functions:
    - parse_to_number(): Parse an integer fraction or decimal string
    - is_grid_correct(): Numeric comparison for grid-in answers
    - is_answer_correct(): Dispatch on question type
"""

from __future__ import annotations

import math
import re
from typing import Optional

from shsat_toolkit.core.models.questions import Question

_FRACTION_RE = re.compile(r"^-?\d+/-?\d+$")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_WHITESPACE_RE = re.compile(r"\s+")

GRID_TOLERANCE = 1e-9


def parse_to_number(value: Optional[str]) -> Optional[float]:
    """
    Parse a grid-in entry to a float.

    Accepts integer fractions ("3/4", "-4/2") and plain numbers
    ("-4", "0.75", ".5"). Whitespace anywhere is ignored.

    Returns:
        The value, or None for empty, malformed, zero-denominator or
        non-finite input

    Example:
        >>> parse_to_number(" 3 / 4 ")
        0.75
        >>> parse_to_number("1/0") is None
        True
    """
    if value is None:
        return None
    v = _WHITESPACE_RE.sub("", str(value))
    if not v:
        return None

    if _FRACTION_RE.match(v):
        n_str, d_str = v.split("/")
        n, d = int(n_str), int(d_str)
        if d == 0:
            return None
        return n / d

    if not _DECIMAL_RE.match(v):
        return None
    num = float(v)
    return num if math.isfinite(num) else None


def is_grid_correct(given: Optional[str], answer: Optional[str]) -> bool:
    """True when both parse and differ by less than GRID_TOLERANCE."""
    a = parse_to_number(given)
    b = parse_to_number(answer)
    if a is None or b is None:
        return False
    return abs(a - b) < GRID_TOLERANCE


def is_answer_correct(question: Question, given: Optional[str]) -> bool:
    """
    Check a response against the question's answer.

    Grid-ins compare numerically; multiple choice compares keys
    case-insensitively after trimming. An empty response is never correct.
    """
    if given is None or not str(given).strip():
        return False
    if question.is_grid_in:
        return is_grid_correct(given, question.answer)
    return str(given).strip().upper() == (question.answer or "").strip().upper()
