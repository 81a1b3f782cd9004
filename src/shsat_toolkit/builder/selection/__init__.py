"""
Module: builder.selection

Purpose:
    Question selection for building exams. Composes fixed-size practice
    exams under grid-in and topic-band constraints, and picks plain
    random samples.

Key Functions:
    - compose_exam(): Stratified composition (main entry point)
    - pick_questions(): Random or first-N sample

Key Classes:
    - CompositionConfig: Configuration for the composer
    - ExamComposer: Composition orchestrator
    - ConfigurationError: Strict grid-in shortage

Dependencies:
    - shsat_toolkit.core.models: Question, ComposedExam
    - shsat_toolkit.common: bucket_of, shuffle

Used By:
    - builder.controller: Main build controller
    - shsat_toolkit.cli
"""

from .config import CompositionConfig
from .composer import compose_exam, ExamComposer, SelectionError, ConfigurationError
from .picker import pick_questions, pick_random_ids, reindex

__all__ = [
    "CompositionConfig",
    "compose_exam",
    "ExamComposer",
    "SelectionError",
    "ConfigurationError",
    "pick_questions",
    "pick_random_ids",
    "reindex",
]
