"""
Unit tests for bank record normalization.
"""

import json

import pytest

from shsat_toolkit.builder.loading import ParseError, parse_question_record
from shsat_toolkit.builder.loading.parser import coerce_choices, coerce_media, normalize_question_type
from shsat_toolkit.core.models import Choice, QuestionType


class TestNormalizeQuestionType:

    @pytest.mark.parametrize("raw", ["GRID_IN", "grid-in", "Grid In", "gridin", "FREE_RESPONSE"])
    def test_normalize_when_grid_spelling_then_grid_in(self, raw):
        assert normalize_question_type(raw) is QuestionType.GRID_IN

    @pytest.mark.parametrize("raw", ["MULTIPLE_CHOICE", "multiple-choice", "mc", " MCQ "])
    def test_normalize_when_mc_spelling_then_multiple_choice(self, raw):
        assert normalize_question_type(raw) is QuestionType.MULTIPLE_CHOICE

    def test_normalize_when_unknown_then_raises(self):
        with pytest.raises(ParseError, match="Unknown question type"):
            normalize_question_type("essay")


class TestCoercion:

    def test_choices_when_json_string_then_decoded(self):
        raw = json.dumps([{"key": "A", "text": "1"}, {"key": "B", "text": 2}])
        assert coerce_choices(raw) == (Choice("A", "1"), Choice("B", "2"))

    def test_choices_when_malformed_entries_then_dropped(self):
        assert coerce_choices([{"text": "no key"}, "x", {"key": "C"}]) == (Choice("C", ""),)

    @pytest.mark.parametrize("raw", [None, "not json", 5])
    def test_choices_when_not_a_list_then_empty(self, raw):
        assert coerce_choices(raw) == ()

    def test_media_when_json_string_then_decoded(self):
        media = coerce_media('{"type": "image", "url": "a.png"}')
        assert media is not None
        assert media.url == "a.png"

    def test_media_when_missing_type_then_none(self):
        assert coerce_media({"url": "a.png"}) is None
        assert coerce_media(None) is None


class TestParseQuestionRecord:

    def test_parse_when_messy_record_then_normalized(self):
        # Arrange
        record = {
            "id": "shsat_2019:Q3",
            "index": 3,
            "type": "grid-in",
            "stem": "<p>Solve 2x = 8</p>",
            "answer": 4,
            "category": "  Equations  ",
            "choices": None,
            "source": "import-v2",
        }

        # Act
        q = parse_question_record(record)

        # Assert
        assert q.id == "shsat_2019:Q3"
        assert q.index == 3
        assert q.is_grid_in
        assert q.answer == "4"
        assert q.category == "Equations"
        assert q.choices == ()
        assert q.extra == {"source": "import-v2"}

    def test_parse_when_blank_category_and_no_answer_then_defaults(self):
        q = parse_question_record({"id": "q1", "type": "MC", "stem": "s", "category": "  "})
        assert q.category is None
        assert q.answer == ""
        assert q.index == 0

    def test_parse_when_missing_stem_then_parse_error_names_source(self):
        with pytest.raises(ParseError, match="in bank.json"):
            parse_question_record({"id": "q1", "type": "MC"}, source="bank.json")

    def test_parse_when_index_not_int_then_raises(self):
        with pytest.raises(ParseError, match="Invalid index"):
            parse_question_record({"id": "q1", "type": "MC", "stem": "s", "index": "3"})
