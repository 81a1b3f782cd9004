"""
Module: builder.loading.loader

Purpose:
    Load question banks from a directory of JSON files. Every *.json file
    in the bank directory is a bank: either a bare array of question
    records or an object {"meta": {...}, "questions": [...]}. Single exams
    can also be loaded by key (e.g. "shsat_2018"), with answers merged in
    from a separate answers file.

Key Functions:
    - resolve_database_dir(): Locate the bank directory
    - load_questions(): Load and deduplicate all bank files
    - load_exam_by_key(): Load one exam file and merge its answers
    - load_answers_for_exam(): Read {index: answer} for an exam key

Key Classes:
    - LoaderError: Exception for loading failures
    - ExamFile: One loaded exam (meta + questions)

Dependencies:
    - pathlib (std)
    - builder.loading.parser: Record normalization

Used By:
    - builder.controller: Build pipeline
    - shsat_toolkit.cli
"""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from shsat_toolkit.core.models import Question, QuestionType
from shsat_toolkit.core.schemas.validator import ValidationError, validate_answer_entry

from .parser import ParseError, parse_question_record

logger = logging.getLogger(__name__)

DATABASE_DIR_ENV = "SHSAT_DATABASE_DIR"
DEFAULT_FALLBACK_EXAM = "shsat_2018"
ANSWERS_PREFIX = "answers_"

_EXAM_KEY_RE = re.compile(r"^shsat_(\d{4})(?:_(\w+))?$", re.IGNORECASE)


class LoaderError(Exception):
    """Error loading questions from a bank directory."""
    pass


@dataclass(frozen=True)
class ExamFile:
    """
    A single exam loaded by key.

    Attributes:
        key: Exam key the file was found under (may be the fallback key)
        meta: Optional metadata object from the file
        questions: Questions re-indexed 1..N in file order
    """
    key: str
    questions: Tuple[Question, ...]
    meta: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


def resolve_database_dir(explicit: Optional[Path] = None) -> Path:
    """
    Find the question bank directory.

    Order: explicit argument, $SHSAT_DATABASE_DIR, then ./data,
    ./database and ./src/lib/database under the working directory.

    Raises:
        LoaderError: If no candidate is an existing directory
    """
    candidates: List[Path] = []
    if explicit is not None:
        candidates.append(Path(explicit))
    env_dir = os.environ.get(DATABASE_DIR_ENV)
    if env_dir:
        candidates.append(Path(env_dir))
    cwd = Path.cwd()
    candidates.extend([
        cwd / "data",
        cwd / "database",
        cwd / "src" / "lib" / "database",
    ])

    for candidate in candidates:
        if candidate.is_dir():
            return candidate

    tried = "\n".join(str(c) for c in candidates)
    raise LoaderError(f"Question bank directory not found. Tried:\n{tried}")


def _records_from_payload(payload: Any) -> Tuple[List[Any], Dict[str, Any]]:
    """Split a decoded bank file into (records, meta) for either file shape."""
    if isinstance(payload, list):
        return payload, {}
    if isinstance(payload, dict) and isinstance(payload.get("questions"), list):
        meta = payload.get("meta")
        return payload["questions"], meta if isinstance(meta, dict) else {}
    return [], {}


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _parse_records(records: Iterable[Any], *, source: str, strict: bool) -> List[Question]:
    questions = []
    for i, record in enumerate(records):
        try:
            questions.append(parse_question_record(record, strict=strict, source=source))
        except (ParseError, ValueError) as e:
            logger.warning(f"Skipping record {i} in {source}: {e}")
    return questions


def load_questions(
    bank_dir: Path,
    *,
    categories: Optional[List[str]] = None,
    types: Optional[List[QuestionType]] = None,
    strict: bool = False,
) -> List[Question]:
    """
    Load every question bank file in a directory.

    Process:
    1. List *.json files directly inside bank_dir (sorted by name),
       skipping answers_*.json files
    2. Parse each file; unreadable files are skipped with a warning
    3. Normalize each record; invalid records are skipped with a warning
    4. Deduplicate by id across all files, first occurrence wins
    5. Filter by category labels / question types if given

    Args:
        bank_dir: Directory holding bank files
        categories: Optional category labels to keep (case-insensitive)
        types: Optional question types to keep
        strict: Validate records against the full JSON schema

    Returns:
        List of questions in file order

    Raises:
        LoaderError: If bank_dir doesn't exist

    Example:
        >>> questions = load_questions(Path("data"))
        >>> len(questions)
        342
    """
    if not bank_dir.is_dir():
        raise LoaderError(f"Bank directory does not exist: {bank_dir}")

    files = sorted(
        p for p in bank_dir.iterdir()
        if p.is_file() and p.suffix == ".json" and not p.name.startswith(ANSWERS_PREFIX)
    )
    if not files:
        logger.warning(f"No bank files found in {bank_dir}")
        return []

    seen: set[str] = set()
    questions: List[Question] = []
    for path in files:
        try:
            payload = _read_json(path)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Skipping invalid JSON {path.name}: {e}")
            continue

        records, _ = _records_from_payload(payload)
        if not records:
            logger.debug(f"No question records in {path.name}")
            continue

        for q in _parse_records(records, source=path.name, strict=strict):
            if q.id in seen:
                continue
            seen.add(q.id)
            questions.append(q)

    if categories:
        wanted = {c.strip().lower() for c in categories}
        questions = [q for q in questions if (q.category or "").lower() in wanted]

    if types:
        type_set = set(types)
        questions = [q for q in questions if q.question_type in type_set]

    logger.info(f"Loaded {len(questions)} questions from {len(files)} bank files in {bank_dir}")
    return questions


def answers_filename_for_exam_key(exam_key: str) -> Optional[str]:
    """
    Derive the answers file name for an exam key.

    Example:
        >>> answers_filename_for_exam_key("shsat_2018_form_b")
        'answers_2018_form_b.json'
        >>> answers_filename_for_exam_key("custom") is None
        True
    """
    m = _EXAM_KEY_RE.match(exam_key)
    if not m:
        return None
    suffix = f"_{m.group(2)}" if m.group(2) else ""
    return f"{ANSWERS_PREFIX}{m.group(1)}{suffix}.json"


def load_answers_for_exam(exam_key: str, bank_dir: Path) -> Dict[int, str]:
    """
    Load the answers file for an exam key.

    Looks in bank_dir/answers/ first, then bank_dir itself. The file is
    an array of {"index", "answer"} rows or {"answers": [...]}.
    Malformed rows are ignored.

    Returns:
        Mapping of display index to answer string (empty if no file)
    """
    file_name = answers_filename_for_exam_key(exam_key)
    if not file_name:
        return {}

    for path in (bank_dir / "answers" / file_name, bank_dir / file_name):
        if not path.exists():
            continue
        try:
            payload = _read_json(path)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Skipping invalid answers file {path}: {e}")
            continue

        rows = payload.get("answers") if isinstance(payload, dict) else payload
        if not isinstance(rows, list):
            return {}

        answers: Dict[int, str] = {}
        for row in rows:
            try:
                validate_answer_entry(row)
            except ValidationError:
                continue
            answers[row["index"]] = str(row["answer"])
        logger.debug(f"Loaded {len(answers)} answers for {exam_key} from {path.name}")
        return answers

    return {}


def _find_exam_file(bank_dir: Path, exam_key: str) -> Optional[Path]:
    for path in (bank_dir / "exams" / f"{exam_key}.json", bank_dir / f"{exam_key}.json"):
        if path.exists():
            return path
    return None


def load_exam_by_key(
    exam_key: str,
    bank_dir: Path,
    *,
    fallback_key: Optional[str] = DEFAULT_FALLBACK_EXAM,
) -> ExamFile:
    """
    Load one exam file by key and merge in its answers.

    Looks for exams/<key>.json then <key>.json. When missing, falls back
    to fallback_key with a warning. Questions are re-indexed 1..N in file
    order, and questions with an empty answer take the answers-file value
    for their index.

    Raises:
        LoaderError: If neither the exam nor the fallback exists
    """
    used_key = exam_key
    path = _find_exam_file(bank_dir, exam_key)
    if path is None and fallback_key and fallback_key != exam_key:
        logger.warning(f"Exam file not found for {exam_key!r}. Falling back to {fallback_key}")
        used_key = fallback_key
        path = _find_exam_file(bank_dir, fallback_key)

    if path is None:
        raise LoaderError(
            f"Neither exam {exam_key!r} nor fallback {fallback_key!r} found in {bank_dir}"
        )

    try:
        payload = _read_json(path)
    except (OSError, json.JSONDecodeError) as e:
        raise LoaderError(f"Failed to read exam file {path}: {e}") from e

    records, meta = _records_from_payload(payload)
    parsed = _parse_records(records, source=path.name, strict=False)
    answers = load_answers_for_exam(used_key, bank_dir)

    questions = []
    for position, q in enumerate(parsed, 1):
        q = q.with_index(position)
        if not q.answer and position in answers:
            q = replace(q, answer=answers[position])
        questions.append(q)

    logger.info(f"Loaded exam {used_key} with {len(questions)} questions")
    return ExamFile(key=used_key, questions=tuple(questions), meta=meta)
