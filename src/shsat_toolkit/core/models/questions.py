"""
Module: questions

Purpose:
    Provides the Question dataclass - the main data structure passed between
    the bank loader, the composer and the output writers. Immutable; the
    display index is replaced by building a new instance.

Key Classes:
    - QuestionType: MULTIPLE_CHOICE or GRID_IN
    - Choice: One lettered multiple-choice option
    - Media: Optional image or graph attached to a question
    - Question: Complete question record

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - builder.loading: Bank loading
    - builder.selection: Composer and picker
    - builder.output: JSON and PDF writers
    - builder.scoring: Attempt scoring
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class QuestionType(str, Enum):
    """Question answer format."""

    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    GRID_IN = "GRID_IN"


@dataclass(frozen=True)
class Choice:
    """A single multiple-choice option like ("A", "12")."""

    key: str
    text: str

    def to_dict(self) -> dict:
        return {"key": self.key, "text": self.text}

    @classmethod
    def from_dict(cls, data: dict) -> Choice:
        return cls(key=str(data["key"]), text=str(data.get("text", "")))


@dataclass(frozen=True)
class GraphShape:
    """
    A line or polygon drawn on a graph.

    Points are (x, y) in graph units with the origin at the bottom left.
    """

    kind: str  # "line" or "polygon"
    points: Tuple[Tuple[float, float], ...]
    fill: Optional[str] = None  # "shaded" or None

    def to_dict(self) -> dict:
        d: Dict[str, Any] = {
            "type": self.kind,
            "points": [list(p) for p in self.points],
        }
        if self.fill:
            d["fill"] = self.fill
        return d

    @classmethod
    def from_dict(cls, data: dict) -> GraphShape:
        return cls(
            kind=str(data.get("type", "line")),
            points=tuple(
                (float(p[0]), float(p[1])) for p in data.get("points", [])
            ),
            fill=data.get("fill"),
        )


@dataclass(frozen=True)
class Media:
    """
    Optional media attached to a question.

    Attributes:
        kind: "image" or "graph"
        url: Image URL or local path (image only)
        base64: Inline base64 image data, optionally a data URI (image only)
        x_max: Graph x-axis maximum (graph only)
        y_max: Graph y-axis maximum (graph only)
        shapes: Graph shapes (graph only)
    """

    kind: str
    url: Optional[str] = None
    base64: Optional[str] = None
    x_max: Optional[float] = None
    y_max: Optional[float] = None
    shapes: Tuple[GraphShape, ...] = ()

    @property
    def is_image(self) -> bool:
        return self.kind == "image"

    @property
    def is_graph(self) -> bool:
        return self.kind == "graph"

    def to_dict(self) -> dict:
        d: Dict[str, Any] = {"type": self.kind}
        if self.url:
            d["url"] = self.url
        if self.base64:
            d["base64"] = self.base64
        if self.x_max is not None:
            d["xAxis"] = {"max": self.x_max}
        if self.y_max is not None:
            d["yAxis"] = {"max": self.y_max}
        if self.shapes:
            d["shapes"] = [s.to_dict() for s in self.shapes]
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Media:
        x_axis = data.get("xAxis") or {}
        y_axis = data.get("yAxis") or {}
        return cls(
            kind=str(data.get("type", "image")),
            url=data.get("url"),
            base64=data.get("base64"),
            x_max=x_axis.get("max"),
            y_max=y_axis.get("max"),
            shapes=tuple(GraphShape.from_dict(s) for s in data.get("shapes", [])),
        )


@dataclass(frozen=True)
class Question:
    """
    Complete question representation (immutable).

    Attributes:
        id: Unique identifier like "shsat_2018:Q12"
        index: Display number (1-based)
        question_type: MULTIPLE_CHOICE or GRID_IN
        stem: Question text
        answer: Correct answer ("A".."E" or a numeric/fraction string)
        category: Free-text topic label like "Ratios", may be None
        choices: Options for multiple-choice questions
        media: Optional image or graph
        extra: Any additional payload fields, carried through untouched

    Invariants:
        - id is non-empty
        - index is never mutated in place; use with_index()

    Example:
        >>> q = Question("shsat_2018:Q1", 1, QuestionType.GRID_IN, "2 + 2 = ?", "4")
        >>> q.with_index(7).index
        7
    """

    id: str
    index: int
    question_type: QuestionType
    stem: str
    answer: str = ""
    category: Optional[str] = None
    choices: Tuple[Choice, ...] = ()
    media: Optional[Media] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:
        """Validate question on construction."""
        if not self.id:
            raise ValueError("Question id must be non-empty")
        if not isinstance(self.question_type, QuestionType):
            raise ValueError(f"Invalid question_type: {self.question_type!r}")

    @property
    def is_grid_in(self) -> bool:
        return self.question_type is QuestionType.GRID_IN

    def with_index(self, index: int) -> Question:
        """Return a copy with a new display index."""
        return replace(self, index=index)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """
        Serialize to the wire shape used by question bank files.

        Returns:
            Dict with id/index/type/category/stem/choices/answer/media
        """
        d: Dict[str, Any] = dict(self.extra)
        d.update({
            "id": self.id,
            "index": self.index,
            "type": self.question_type.value,
            "stem": self.stem,
            "answer": self.answer,
        })
        if self.category is not None:
            d["category"] = self.category
        if self.choices:
            d["choices"] = [c.to_dict() for c in self.choices]
        if self.media is not None:
            d["media"] = self.media.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: dict) -> Question:
        """
        Deserialize from an already-normalized dictionary.

        Use builder.loading.parser for raw bank records.
        """
        known = {"id", "index", "type", "stem", "answer", "category", "choices", "media"}
        return cls(
            id=data["id"],
            index=int(data.get("index", 0)),
            question_type=QuestionType(data["type"]),
            stem=data.get("stem", ""),
            answer=str(data.get("answer") or ""),
            category=data.get("category"),
            choices=tuple(Choice.from_dict(c) for c in data.get("choices") or []),
            media=Media.from_dict(data["media"]) if data.get("media") else None,
            extra={k: v for k, v in data.items() if k not in known},
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return (
            f"Question({self.id!r}, index={self.index}, "
            f"type={self.question_type.value}, category={self.category!r})"
        )
