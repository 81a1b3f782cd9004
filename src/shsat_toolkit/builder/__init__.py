"""
Module: builder

Purpose:
    Exam building pipeline. Loads question banks, composes a stratified
    57-question exam (or serves a single stored exam), and writes JSON
    and PDF outputs.

Key Functions:
    - load_questions(): Load a question bank directory
    - compose_exam(): Stratified composition
    - build_exam(): Main entry point for exam generation
    - score_attempt(): Grade a set of responses

Key Classes:
    - BuilderConfig: Configuration for building
    - CompositionConfig: Configuration for the composer

Dependencies:
    - reportlab, PIL: PDF output
    - shsat_toolkit.core.models: Question, ComposedExam

Used By:
    - shsat_toolkit.cli
"""

from .config import BuilderConfig
from .loading import LoaderError, load_exam_by_key, load_questions
from .selection import CompositionConfig, ConfigurationError, compose_exam, pick_questions
from .scoring import ScoreReport, score_attempt
from .controller import build_exam, BuildResult, BuildError

__all__ = [
    # Config
    "BuilderConfig",
    "CompositionConfig",
    # Loading
    "load_questions",
    "load_exam_by_key",
    "LoaderError",
    # Selection
    "compose_exam",
    "pick_questions",
    "ConfigurationError",
    # Scoring
    "score_attempt",
    "ScoreReport",
    # Controller
    "build_exam",
    "BuildResult",
    "BuildError",
]
