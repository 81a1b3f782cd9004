"""
Tests for the PDF practice sheet renderer.

Uses pypdf to inspect generated PDFs.
"""

import base64
import io

from PIL import Image
from pypdf import PdfReader

from shsat_toolkit.builder.output import render_exam_pdf
from shsat_toolkit.core.models import ComposedExam, GraphShape, Media, Question, QuestionType


A4_WIDTH_PT = 595.276
A4_HEIGHT_PT = 841.890


def _png_base64() -> str:
    img = Image.new("RGB", (200, 100), color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("ascii")


def _exam(questions):
    return ComposedExam(
        questions=tuple(q.with_index(i) for i, q in enumerate(questions, 1)),
        requested_total=len(questions),
        requested_grid_ins=sum(1 for q in questions if q.is_grid_in),
    )


class TestRenderExamPdf:

    def test_render_when_small_exam_then_single_a4_page(self, tmp_path, make_pool):
        # Arrange
        exam = _exam(make_pool([("Algebra", True, 1), ("Geometry", False, 2)]))
        path = tmp_path / "exam.pdf"

        # Act
        pages = render_exam_pdf(exam, path)

        # Assert
        reader = PdfReader(str(path))
        assert pages == 1
        assert len(reader.pages) == 1
        box = reader.pages[0].mediabox
        assert abs(float(box.width) - A4_WIDTH_PT) < 1.0
        assert abs(float(box.height) - A4_HEIGHT_PT) < 1.0

    def test_render_when_text_then_numbered_stems_and_choices(self, tmp_path, make_question):
        # Arrange
        q = make_question("q1", stem="<b>What is 6 x 7?</b>")
        path = tmp_path / "exam.pdf"

        # Act
        render_exam_pdf(_exam([q]), path, title="Drill")

        # Assert
        text = PdfReader(str(path)).pages[0].extract_text()
        assert "Drill (1 questions)" in text
        assert "1. What is 6 x 7?" in text
        assert "(A) 1" in text
        assert "<b>" not in text

    def test_render_when_many_questions_then_multiple_pages(self, tmp_path, make_pool):
        exam = _exam(make_pool([("Algebra", False, 57)]))
        path = tmp_path / "exam.pdf"

        pages = render_exam_pdf(exam, path)

        assert pages > 1
        assert len(PdfReader(str(path)).pages) == pages

    def test_render_when_footer_enabled_then_page_numbers(self, tmp_path, make_pool):
        exam = _exam(make_pool([("Algebra", False, 2)]))
        path = tmp_path / "exam.pdf"
        render_exam_pdf(exam, path)
        assert "Page 1" in PdfReader(str(path)).pages[0].extract_text()

    def test_render_when_media_attached_then_renders(self, tmp_path):
        # Arrange
        image_q = Question(
            "img", 0, QuestionType.MULTIPLE_CHOICE, "Look at the figure",
            media=Media(kind="image", base64="data:image/png;base64," + _png_base64()),
        )
        graph_q = Question(
            "graph", 0, QuestionType.GRID_IN, "Find the shaded area",
            media=Media(
                kind="graph", x_max=10, y_max=10,
                shapes=(
                    GraphShape("polygon", ((0, 0), (4, 0), (4, 3)), "shaded"),
                    GraphShape("line", ((0, 0), (10, 10))),
                ),
            ),
        )
        broken_q = Question(
            "broken", 0, QuestionType.GRID_IN, "Bad image",
            media=Media(kind="image", base64="!!!not-base64!!!"),
        )
        path = tmp_path / "exam.pdf"

        # Act
        pages = render_exam_pdf(_exam([image_q, graph_q, broken_q]), path)

        # Assert
        assert pages >= 1
        assert len(PdfReader(str(path)).pages) == pages

    def test_render_when_empty_exam_then_title_page(self, tmp_path):
        exam = ComposedExam(questions=(), requested_total=57, requested_grid_ins=5)
        path = tmp_path / "nested" / "exam.pdf"
        assert render_exam_pdf(exam, path) == 1
        assert path.exists()
