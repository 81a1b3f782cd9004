"""
Unit tests for record validation.
"""

import pytest

from shsat_toolkit.core.schemas import ValidationError, validate_answer_entry, validate_question_record


class TestValidateQuestionRecord:

    def test_validate_when_minimal_record_then_passes(self):
        validate_question_record({"id": "q1", "type": "GRID_IN", "stem": "2+2"})

    def test_validate_when_not_object_then_raises(self):
        with pytest.raises(ValidationError, match="must be an object"):
            validate_question_record(["q1"])

    def test_validate_when_missing_fields_then_lists_them(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_question_record({"id": "q1"})
        assert exc_info.value.errors == ["Missing field: type", "Missing field: stem"]

    def test_validate_when_id_not_string_then_raises(self):
        with pytest.raises(ValidationError, match="'id' must be a string"):
            validate_question_record({"id": 5, "type": "GRID_IN", "stem": ""})

    def test_validate_when_empty_id_then_raises(self):
        with pytest.raises(ValidationError, match="non-empty"):
            validate_question_record({"id": "", "type": "GRID_IN", "stem": ""})

    def test_validate_when_strict_and_bad_choices_then_raises(self):
        # Arrange
        record = {"id": "q1", "type": "MC", "stem": "s", "choices": 5}

        # Act & Assert
        validate_question_record(record)  # lenient mode ignores choices
        with pytest.raises(ValidationError, match="Schema validation failed"):
            validate_question_record(record, strict=True)

    def test_validate_when_strict_and_numeric_answer_then_passes(self):
        validate_question_record(
            {"id": "q1", "type": "GRID_IN", "stem": "s", "answer": 12, "category": None},
            strict=True,
        )


class TestValidateAnswerEntry:

    def test_validate_when_valid_then_passes(self):
        validate_answer_entry({"index": 3, "answer": "B"})
        validate_answer_entry({"index": 4, "answer": 0.5})

    @pytest.mark.parametrize("entry", [
        "B",
        {"index": "3", "answer": "B"},
        {"index": True, "answer": "B"},
        {"index": 3},
        {"index": 3, "answer": False},
    ])
    def test_validate_when_malformed_then_raises(self, entry):
        with pytest.raises(ValidationError):
            validate_answer_entry(entry)
