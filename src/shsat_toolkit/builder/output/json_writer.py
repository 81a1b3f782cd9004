"""
Module: builder.output.json_writer

Purpose:
    Write composed exams to JSON and keep an append-only history of
    builds. The history file is shared between concurrent builds, so
    appends go through an exclusive file lock.

Key Functions:
    - write_exam_json(): Write one composed exam
    - read_exam_json(): Read a written exam back into questions
    - append_history(): Append a build record to the history log

Dependencies:
    - shsat_toolkit.common.file_locking: Locked JSONL append
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from shsat_toolkit.common.file_locking import locked_append_jsonl
from shsat_toolkit.builder.loading.parser import parse_question_record
from shsat_toolkit.core.models import ComposedExam, Question

logger = logging.getLogger(__name__)


def write_exam_json(
    exam: ComposedExam,
    output_path: Path,
    *,
    metadata: Optional[Dict[str, Any]] = None,
) -> Path:
    """
    Write a composed exam as JSON.

    The file holds the exam summary (see ComposedExam.to_dict) plus a
    generated_at timestamp and any extra metadata under "meta".

    Returns:
        output_path
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = exam.to_dict()
    payload["generated_at"] = datetime.now(timezone.utc).isoformat()
    if metadata:
        payload["meta"] = metadata

    with output_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)

    logger.info(f"Wrote {len(exam)} questions to {output_path}")
    return output_path


def read_exam_json(path: Path) -> List[Question]:
    """
    Read the questions of an exam file written by write_exam_json.

    A bare JSON array of question records is accepted too.

    Raises:
        ParseError: If a record is unusable
    """
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    records = payload.get("questions", []) if isinstance(payload, dict) else payload
    return [parse_question_record(r, source=path.name) for r in records]


def append_history(history_path: Path, record: Dict[str, Any]) -> None:
    """Append one build record to the JSONL history log under a lock."""
    locked_append_jsonl(history_path, record)
