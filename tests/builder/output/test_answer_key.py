"""
Tests for the answer key PDF.
"""

import logging

from pypdf import PdfReader

from shsat_toolkit.builder.output import render_answer_key
from shsat_toolkit.core.models import ComposedExam


class TestRenderAnswerKey:

    def test_render_when_called_then_rows_listed(self, tmp_path, make_question):
        # Arrange
        questions = (
            make_question("shsat_2018:Q1", category="Ratios", index=1, answer="C"),
            make_question("shsat_2018:Q2", category="Volume", grid=True, index=2, answer="3/4"),
        )
        exam = ComposedExam(questions=questions, requested_total=2, requested_grid_ins=1)
        path = tmp_path / "key.pdf"

        # Act
        pages = render_answer_key(exam, path)

        # Assert
        text = PdfReader(str(path)).pages[0].extract_text()
        assert pages == 1
        assert "Answer Key" in text
        assert "shsat_2018:Q2" in text
        assert "Grid-in" in text
        assert "geometry" in text
        assert "3/4" in text

    def test_render_when_answer_missing_then_question_mark_and_warning(self, tmp_path, make_question, caplog):
        exam = ComposedExam(
            questions=(make_question("q1", index=1, answer=""),),
            requested_total=1,
            requested_grid_ins=0,
        )

        with caplog.at_level(logging.WARNING):
            render_answer_key(exam, tmp_path / "key.pdf")

        assert "1 questions have no answer" in caplog.text

    def test_render_when_many_rows_then_paginates(self, tmp_path, make_pool):
        pool = make_pool([("Algebra", False, 100)])
        exam = ComposedExam(
            questions=tuple(q.with_index(i) for i, q in enumerate(pool, 1)),
            requested_total=100,
            requested_grid_ins=0,
        )
        path = tmp_path / "key.pdf"

        pages = render_answer_key(exam, path)

        assert pages >= 2
        assert len(PdfReader(str(path)).pages) == pages
