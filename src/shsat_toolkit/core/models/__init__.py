"""
Core Models Package

Immutable data models shared by loading, composition, scoring and output.

All models in this package are frozen dataclasses. This ensures:
1. No accidental mutation of a caller's question pool
2. Safe to share a pool snapshot between concurrent compositions
3. Can be used as dict keys or in sets
"""

from .questions import Choice, GraphShape, Media, Question, QuestionType
from .composition import ComposedExam

__all__ = [
    "Choice",
    "GraphShape",
    "Media",
    "Question",
    "QuestionType",
    "ComposedExam",
]
