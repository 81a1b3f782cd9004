"""
Module: builder.config

Purpose:
    Configuration dataclass for the build pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - BuilderConfig: Main configuration for building exams

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - builder.controller: Main build controller
    - shsat_toolkit.cli
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from shsat_toolkit.builder.selection.config import CompositionConfig


@dataclass(frozen=True)
class BuilderConfig:
    """
    Configuration for building exams (immutable).

    Attributes:
        bank_path: Directory of question bank JSON files
        output_dir: Base output directory (a timestamped subfolder is created)
        composition: Composer configuration (size, grid-ins, topic bands)
        exam_key: Load this exam file (e.g. "shsat_2018") instead of composing
        randomize: Shuffle question order when loading by exam_key
        render_pdf: Write a printable practice sheet
        include_answer_key: Write an answer key PDF
        record_history: Append a build record to <output_dir>/history.jsonl
        title: Heading printed on the practice sheet

    Example:
        >>> config = BuilderConfig(
        ...     bank_path=Path("data"),
        ...     output_dir=Path("output"),
        ...     composition=CompositionConfig(total=57, grid_ins=5, seed=7),
        ... )
    """

    # Required
    bank_path: Path
    output_dir: Path

    # Selection behavior
    composition: CompositionConfig = field(default_factory=CompositionConfig)
    exam_key: Optional[str] = None
    randomize: bool = True

    # Output
    render_pdf: bool = False
    include_answer_key: bool = False
    record_history: bool = True
    title: str = "SHSAT Math Practice"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not isinstance(self.composition, CompositionConfig):
            raise ValueError(f"composition must be a CompositionConfig: {self.composition!r}")
        if self.exam_key is not None and not self.exam_key.strip():
            raise ValueError("exam_key must be non-empty when given")
