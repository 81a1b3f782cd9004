"""
Module: builder.output

Purpose:
    Output writers for composed exams.

Key Functions:
    - write_exam_json(): Exam as JSON
    - append_history(): Locked append to the build history log
    - render_exam_pdf(): Printable practice sheet
    - render_answer_key(): Answer key PDF

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - portalocker: History log locking
"""

from .json_writer import append_history, read_exam_json, write_exam_json
from .renderer import render_exam_pdf
from .answer_key import render_answer_key

__all__ = [
    "append_history",
    "read_exam_json",
    "write_exam_json",
    "render_exam_pdf",
    "render_answer_key",
]
