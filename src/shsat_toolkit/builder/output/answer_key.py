"""
Module: builder.output.answer_key

Purpose:
    Generate an answer key PDF listing each question's number, id,
    topic bucket and correct answer.

Key Functions:
    - render_answer_key(): Create answer key PDF

Dependencies:
    - reportlab: PDF generation
    - shsat_toolkit.common.buckets: Bucket column
"""

from __future__ import annotations

import logging
from pathlib import Path

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from shsat_toolkit.common.buckets import bucket_of
from shsat_toolkit.core.models import ComposedExam

logger = logging.getLogger(__name__)

# Constants
A4_WIDTH, A4_HEIGHT = A4
MARGIN = 50
LINE_HEIGHT = 18
COLUMNS = (("#", 0), ("Question", 40), ("Type", 250), ("Bucket", 330), ("Answer", 420))


def render_answer_key(
    exam: ComposedExam,
    output_path: Path,
    *,
    title: str = "Answer Key",
) -> int:
    """
    Write an answer key table for an exam.

    Questions without a known answer are listed with "?".

    Args:
        exam: Composed exam
        output_path: Path to write PDF
        title: Heading on each page

    Returns:
        Number of pages written
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    c = canvas.Canvas(str(output_path), pagesize=A4)

    pages = 1
    y = _draw_header(c, title)
    missing = 0

    for q in exam.questions:
        if y < MARGIN + LINE_HEIGHT:
            c.showPage()
            pages += 1
            y = _draw_header(c, title)

        answer = q.answer or "?"
        if not q.answer:
            missing += 1
        row = (
            str(q.index),
            q.id,
            "Grid-in" if q.is_grid_in else "MC",
            bucket_of(q).value,
            answer,
        )
        c.setFont("Helvetica", 10)
        for (_, offset), value in zip(COLUMNS, row):
            c.drawString(MARGIN + offset, y, value)
        y -= LINE_HEIGHT

    c.showPage()
    c.save()

    if missing:
        logger.warning(f"{missing} questions have no answer in the key")
    logger.info(f"Compiled answer key with {pages} pages to {output_path}")
    return pages


def _draw_header(c: canvas.Canvas, title: str) -> float:
    """Draw title and column headings; return the first row's y."""
    y = A4_HEIGHT - MARGIN
    c.setFont("Helvetica-Bold", 14)
    c.drawString(MARGIN, y, title)
    y -= LINE_HEIGHT * 1.5
    c.setFont("Helvetica-Bold", 10)
    for label, offset in COLUMNS:
        c.drawString(MARGIN + offset, y, label)
    return y - LINE_HEIGHT
