"""
Module: builder.output.renderer

Purpose:
    Render a composed exam to a printable A4 practice sheet using
    ReportLab. Questions flow top to bottom with wrapped stems, lettered
    choices, an answer box for grid-ins, and any attached media (images
    via Pillow, graphs drawn as vector lines and polygons).

Key Functions:
    - render_exam_pdf(): Main rendering function

Dependencies:
    - reportlab: PDF generation
    - PIL: Image decoding for embedded media
    - shsat_toolkit.core.models: ComposedExam, Question, Media

Used By:
    - builder.controller: Pipeline orchestration
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import re
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from shsat_toolkit.core.models import ComposedExam, Media, Question

logger = logging.getLogger(__name__)

# Constants
A4_WIDTH_PT, A4_HEIGHT_PT = A4
MARGIN_PT = 50
BODY_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
BODY_SIZE = 11
LINE_HEIGHT = 15
QUESTION_GAP = 14
MEDIA_MAX_HEIGHT = 180
GRID_BOX_WIDTH = 120
GRID_BOX_HEIGHT = 26
FOOTER_FONT_SIZE = 7

_TAG_RE = re.compile(r"<[^>]+>")


def _get_footer_text(page_number: int) -> str:
    """Footer text with version and page number."""
    from shsat_toolkit import __version__
    return f"SHSAT Practice Toolkit v{__version__} | Page {page_number}"


def _plain_text(stem: str) -> str:
    """Strip simple HTML tags from a stem."""
    return _TAG_RE.sub("", stem or "").strip()


class _PageWriter:
    """Tracks the cursor and starts new pages as content flows down."""

    def __init__(self, c: canvas.Canvas, show_footer: bool):
        self.c = c
        self.show_footer = show_footer
        self.page_number = 1
        self.y = A4_HEIGHT_PT - MARGIN_PT
        self.width = A4_WIDTH_PT - 2 * MARGIN_PT

    def ensure_space(self, height: float) -> None:
        if self.y - height < MARGIN_PT:
            self.new_page()

    def new_page(self) -> None:
        self.finish_page()
        self.c.showPage()
        self.page_number += 1
        self.y = A4_HEIGHT_PT - MARGIN_PT

    def finish_page(self) -> None:
        if not self.show_footer:
            return
        text = _get_footer_text(self.page_number)
        self.c.saveState()
        self.c.setFont(BODY_FONT, FOOTER_FONT_SIZE)
        self.c.setFillColorRGB(0.4, 0.4, 0.4)
        text_width = self.c.stringWidth(text, BODY_FONT, FOOTER_FONT_SIZE)
        self.c.drawString((A4_WIDTH_PT - text_width) / 2, 15, text)
        self.c.restoreState()

    def write_lines(self, text: str, *, font: str = BODY_FONT, indent: float = 0) -> None:
        lines = simpleSplit(text, font, BODY_SIZE, self.width - indent) or [""]
        self.c.setFont(font, BODY_SIZE)
        for line in lines:
            self.ensure_space(LINE_HEIGHT)
            self.c.drawString(MARGIN_PT + indent, self.y - BODY_SIZE, line)
            self.y -= LINE_HEIGHT


def render_exam_pdf(
    exam: ComposedExam,
    output_path: Path,
    *,
    title: str = "SHSAT Math Practice",
    show_footer: bool = True,
) -> int:
    """
    Render a composed exam to a PDF practice sheet.

    Args:
        exam: Composed exam to render
        output_path: Path to write PDF
        title: Heading on the first page
        show_footer: Draw version/page footer on each page

    Returns:
        Number of pages written

    Example:
        >>> render_exam_pdf(exam, Path("output/exam.pdf"))
        9
    """
    if len(exam) == 0:
        logger.warning("Empty exam, creating PDF with title only")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    c = canvas.Canvas(str(output_path), pagesize=A4)
    c.setTitle(title)
    writer = _PageWriter(c, show_footer)

    writer.write_lines(f"{title} ({len(exam)} questions)", font=BOLD_FONT)
    writer.y -= QUESTION_GAP

    for question in exam.questions:
        _draw_question(writer, question)
        writer.y -= QUESTION_GAP

    writer.finish_page()
    c.save()

    logger.info(f"Rendered {writer.page_number} pages to {output_path}")
    return writer.page_number


def _draw_question(writer: _PageWriter, question: Question) -> None:
    """Draw one question: number, stem, media, then choices or answer box."""
    writer.ensure_space(LINE_HEIGHT * 3)
    writer.write_lines(f"{question.index}. {_plain_text(question.stem)}")

    if question.media is not None:
        _draw_media(writer, question.media, question.id)

    if question.is_grid_in:
        writer.ensure_space(GRID_BOX_HEIGHT + 6)
        c = writer.c
        c.setFont(BODY_FONT, BODY_SIZE)
        c.drawString(MARGIN_PT + 20, writer.y - 17, "Answer:")
        c.rect(MARGIN_PT + 70, writer.y - GRID_BOX_HEIGHT, GRID_BOX_WIDTH, GRID_BOX_HEIGHT)
        writer.y -= GRID_BOX_HEIGHT + 6
    else:
        for choice in question.choices:
            writer.write_lines(f"({choice.key}) {_plain_text(choice.text)}", indent=20)


def _draw_media(writer: _PageWriter, media: Media, question_id: str) -> None:
    if media.is_image:
        image = _load_image(media, question_id)
        if image is not None:
            _draw_image(writer, image)
    elif media.is_graph:
        _draw_graph(writer, media)


def _load_image(media: Media, question_id: str) -> Optional[Image.Image]:
    """Decode inline base64 data or open a local file; remote URLs are skipped."""
    try:
        if media.base64:
            data = media.base64.split(",", 1)[1] if media.base64.startswith("data:") else media.base64
            return Image.open(io.BytesIO(base64.b64decode(data)))
        if media.url and Path(media.url).exists():
            return Image.open(media.url)
    except (binascii.Error, OSError, UnidentifiedImageError) as e:
        logger.warning(f"Could not load image for {question_id}: {e}")
        return None

    logger.debug(f"No local image data for {question_id} (url={media.url!r})")
    return None


def _draw_image(writer: _PageWriter, image: Image.Image) -> None:
    img_width, img_height = image.size
    scale = min(writer.width / img_width, MEDIA_MAX_HEIGHT / img_height, 1.0)
    final_width = img_width * scale
    final_height = img_height * scale

    writer.ensure_space(final_height + 6)
    x = MARGIN_PT + (writer.width - final_width) / 2
    writer.c.drawImage(
        ImageReader(image),
        x, writer.y - final_height,
        width=final_width,
        height=final_height,
        preserveAspectRatio=True,
    )
    writer.y -= final_height + 6


def _draw_graph(writer: _PageWriter, media: Media) -> None:
    """Draw graph shapes in a bordered box, origin at bottom left."""
    x_max = media.x_max or 10
    y_max = media.y_max or 10
    box_height = MEDIA_MAX_HEIGHT
    box_width = min(writer.width, box_height * x_max / y_max)
    sx = box_width / x_max
    sy = box_height / y_max

    writer.ensure_space(box_height + 6)
    c = writer.c
    left = MARGIN_PT + (writer.width - box_width) / 2
    bottom = writer.y - box_height

    c.saveState()
    c.setStrokeColorRGB(0.6, 0.6, 0.6)
    c.rect(left, bottom, box_width, box_height)
    c.setStrokeColorRGB(0, 0, 0)
    for shape in media.shapes:
        points = [(left + x * sx, bottom + y * sy) for x, y in shape.points]
        if len(points) < 2:
            continue
        if shape.kind == "line":
            (x1, y1), (x2, y2) = points[0], points[1]
            c.line(x1, y1, x2, y2)
        elif shape.kind == "polygon":
            path = c.beginPath()
            path.moveTo(*points[0])
            for point in points[1:]:
                path.lineTo(*point)
            path.close()
            shaded = shape.fill == "shaded"
            if shaded:
                c.setFillColorRGB(0.83, 0.83, 0.83)
            c.drawPath(path, stroke=1, fill=1 if shaded else 0)
    c.restoreState()
    writer.y -= box_height + 6
