"""JSON schema validation for question bank files."""

from .validator import ValidationError, validate_answer_entry, validate_question_record

__all__ = ["ValidationError", "validate_answer_entry", "validate_question_record"]
