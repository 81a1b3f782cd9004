"""
Module: builder.loading

Purpose:
    Load question banks and single exams from JSON files on disk.

Key Functions:
    - load_questions(): All questions from a bank directory
    - load_exam_by_key(): One exam with merged answers
    - resolve_database_dir(): Locate the bank directory

Dependencies:
    - shsat_toolkit.core.models: Question
    - shsat_toolkit.core.schemas.validator: Schema validation
"""

from .loader import (
    ExamFile,
    LoaderError,
    load_answers_for_exam,
    load_exam_by_key,
    load_questions,
    resolve_database_dir,
)
from .parser import ParseError, parse_question_record

__all__ = [
    "ExamFile",
    "LoaderError",
    "ParseError",
    "load_answers_for_exam",
    "load_exam_by_key",
    "load_questions",
    "parse_question_record",
    "resolve_database_dir",
]
