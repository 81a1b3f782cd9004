"""
Module: builder.loading.parser

Purpose:
    Turn raw question-bank records into Question models. Bank files come
    from several import scripts and disagree on details: type spellings,
    choices stored as JSON strings, numeric answers, padded categories.
    Everything is normalized here so downstream code sees one shape.

Key Functions:
    - parse_question_record(): Validate and normalize one record
    - normalize_question_type(): Map type spellings onto QuestionType
    - coerce_choices(): Accept list-of-dicts or JSON-string choices
    - coerce_media(): Accept dict or JSON-string media

Key Classes:
    - ParseError: Exception for unusable records

Dependencies:
    - shsat_toolkit.core.models: Question, Choice, Media
    - shsat_toolkit.core.schemas.validator: Record validation
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Tuple

from shsat_toolkit.core.models import Choice, Media, Question, QuestionType
from shsat_toolkit.core.schemas.validator import ValidationError, validate_question_record

logger = logging.getLogger(__name__)


class ParseError(Exception):
    """Error parsing a question record."""
    pass


_TYPE_ALIASES = {
    "GRID_IN": QuestionType.GRID_IN,
    "GRIDIN": QuestionType.GRID_IN,
    "GRID": QuestionType.GRID_IN,
    "FREE_RESPONSE": QuestionType.GRID_IN,
    "MULTIPLE_CHOICE": QuestionType.MULTIPLE_CHOICE,
    "MULTIPLECHOICE": QuestionType.MULTIPLE_CHOICE,
    "MC": QuestionType.MULTIPLE_CHOICE,
    "MCQ": QuestionType.MULTIPLE_CHOICE,
}


def normalize_question_type(value: Any) -> QuestionType:
    """
    Map a raw type string onto QuestionType.

    Case, surrounding whitespace, hyphens and spaces are ignored, so
    "grid-in", "Grid In" and "GRID_IN" are equivalent.

    Raises:
        ParseError: If the type is not recognised
    """
    if isinstance(value, QuestionType):
        return value
    key = str(value or "").strip().upper().replace("-", "_").replace(" ", "_")
    if key in _TYPE_ALIASES:
        return _TYPE_ALIASES[key]
    if key.replace("_", "") in _TYPE_ALIASES:
        return _TYPE_ALIASES[key.replace("_", "")]
    raise ParseError(f"Unknown question type: {value!r}")


def _maybe_json(value: Any) -> Any:
    """Decode strings that hold JSON; leave anything else untouched."""
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def coerce_choices(value: Any) -> Tuple[Choice, ...]:
    """
    Coerce raw choices into Choice tuples.

    Accepts None, a list of {"key", "text"} dicts, or a JSON string
    holding such a list. Malformed entries are dropped.
    """
    value = _maybe_json(value)
    if not isinstance(value, list):
        return ()
    out = []
    for entry in value:
        if isinstance(entry, dict) and entry.get("key") is not None:
            out.append(Choice(key=str(entry["key"]), text=str(entry.get("text", ""))))
    return tuple(out)


def coerce_media(value: Any) -> Optional[Media]:
    """Coerce raw media (dict or JSON string) into Media, or None."""
    value = _maybe_json(value)
    if not isinstance(value, dict) or not value.get("type"):
        return None
    try:
        return Media.from_dict(value)
    except (TypeError, ValueError, IndexError) as e:
        logger.debug(f"Dropping malformed media: {e}")
        return None


def parse_question_record(
    data: Any,
    *,
    strict: bool = False,
    source: str = "",
) -> Question:
    """
    Validate and normalize one bank record into a Question.

    Args:
        data: Decoded JSON object for one question
        strict: Run full JSON Schema validation
        source: File name for error messages

    Returns:
        Question instance

    Raises:
        ParseError: If the record cannot be used
    """
    where = f" in {source}" if source else ""
    try:
        validate_question_record(data, strict=strict)
    except ValidationError as e:
        raise ParseError(f"Invalid question record{where}: {e}") from e

    category = data.get("category")
    if isinstance(category, str):
        category = category.strip() or None

    answer = data.get("answer")
    index = data.get("index", 0)
    if not isinstance(index, int) or isinstance(index, bool):
        raise ParseError(f"Invalid index {index!r} for {data['id']}{where}")

    known = {"id", "index", "type", "stem", "answer", "category", "choices", "media"}
    return Question(
        id=data["id"],
        index=index,
        question_type=normalize_question_type(data["type"]),
        stem=data["stem"],
        answer="" if answer is None else str(answer).strip(),
        category=category,
        choices=coerce_choices(data.get("choices")),
        media=coerce_media(data.get("media")),
        extra={k: v for k, v in data.items() if k not in known},
    )
