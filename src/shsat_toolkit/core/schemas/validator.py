"""
Schema Validation Utilities

Validates question bank records and answer files before they are turned
into models.

- `validate_question_record()` runs cheap required-field checks, and a
  full JSON Schema check (jsonschema) when strict=True
- `validate_answer_entry()` checks one {index, answer} row
- Fail fast on any schema violation; the loader decides whether to skip
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Schemas are loaded lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_question_record(data: Any, *, strict: bool = False) -> None:
    """
    Validate a raw question record from a bank file.

    Args:
        data: Decoded JSON value for one question
        strict: If True, also validate against question.schema.json

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Question record must be an object, got {type(data).__name__}")

    required = ["id", "type", "stem"]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path="",
            errors=[f"Missing field: {f}" for f in missing]
        )

    for name in required:
        if not isinstance(data[name], str):
            raise ValidationError(
                f"Field {name!r} must be a string, got {type(data[name]).__name__}",
                path=name
            )

    if not data["id"]:
        raise ValidationError("Field 'id' must be non-empty", path="id")

    if strict:
        schema = _load_schema("question")
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise ValidationError(
                f"Schema validation failed: {e.message}",
                path=".".join(str(p) for p in e.absolute_path),
                errors=[e.message]
            ) from e


def validate_answer_entry(data: Any) -> None:
    """
    Validate one answers-file row of the form {"index": 3, "answer": "B"}.

    Raises:
        ValidationError: If the row is malformed
    """
    if not isinstance(data, dict):
        raise ValidationError("Answer entry must be an object")
    index = data.get("index")
    if not isinstance(index, int) or isinstance(index, bool):
        raise ValidationError(f"Invalid answer index: {index!r}", path="index")
    answer = data.get("answer")
    if not isinstance(answer, (str, int, float)) or isinstance(answer, bool):
        raise ValidationError(f"Invalid answer value: {answer!r}", path="answer")
