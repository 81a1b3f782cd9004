import json
import sys
from pathlib import Path

import pytest

# Add src to sys.path so we can import shsat_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from shsat_toolkit.core.models import Choice, Question, QuestionType  # noqa: E402


def _make_question(
    qid,
    *,
    category=None,
    grid=False,
    index=0,
    answer=None,
    stem=None,
):
    if answer is None:
        answer = "4" if grid else "A"
    return Question(
        id=qid,
        index=index,
        question_type=QuestionType.GRID_IN if grid else QuestionType.MULTIPLE_CHOICE,
        stem=stem or f"Question {qid}",
        answer=answer,
        category=category,
        choices=() if grid else (Choice("A", "1"), Choice("B", "2")),
    )


@pytest.fixture
def make_question():
    """Factory for Question instances with sensible defaults."""
    return _make_question


@pytest.fixture
def make_pool():
    """
    Factory building a pool from (category, type, count) specs.

    Ids are "<prefix><n>" with n running across the whole pool.
    """
    def _make_pool(specs, prefix="q"):
        pool = []
        n = 0
        for category, grid, count in specs:
            for _ in range(count):
                n += 1
                pool.append(_make_question(f"{prefix}{n}", category=category, grid=grid, index=n))
        return pool
    return _make_pool


@pytest.fixture
def scenario_pool(make_pool):
    """100 questions: 10 grid-ins (5 algebra, 5 geometry), 90 MC split evenly."""
    return make_pool([
        ("Algebra", True, 5),
        ("Geometry", True, 5),
        ("Algebra", False, 30),
        ("Geometry", False, 30),
        ("Statistics", False, 30),
    ])


@pytest.fixture
def write_json():
    """Write a JSON payload to a path, creating parent folders."""
    def _write(path: Path, payload) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path
    return _write
