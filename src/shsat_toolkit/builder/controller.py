"""
Module: builder.controller

Purpose:
    Orchestrate the complete exam building pipeline.
    Load → Compose (or load one exam) → Write JSON → Render PDFs

Key Functions:
    - build_exam(): Main entry point for building an exam

Key Classes:
    - BuildResult: Complete build result
    - BuildError: Exception for build failures

Dependencies:
    - builder.loading: Question loading
    - builder.selection: Exam composition
    - builder.output: JSON and PDF writers

Used By:
    - shsat_toolkit.cli
"""

from __future__ import annotations

import json
import logging
import random
import re
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from shsat_toolkit.common.shuffle import shuffle
from shsat_toolkit.core.models import ComposedExam

from .config import BuilderConfig
from .loading import LoaderError, load_exam_by_key, load_questions
from .output import append_history, render_answer_key, render_exam_pdf, write_exam_json
from .selection import compose_exam, reindex

logger = logging.getLogger(__name__)

HISTORY_FILE = "history.jsonl"


class BuildError(Exception):
    """Error during build pipeline."""
    pass


@dataclass(frozen=True)
class BuildResult:
    """
    Complete build result (immutable).

    Attributes:
        exam: The composed exam
        output_dir: Folder holding this build's files
        exam_json: Path to exam.json
        questions_pdf: Path to practice sheet PDF (if rendered)
        answer_key_pdf: Path to answer key PDF (if rendered)
        metadata: Build metadata dictionary
        warnings: Any warnings during build

    Example:
        >>> result = build_exam(config)
        >>> print(f"Built {len(result.exam)} questions in {result.output_dir}")
    """
    exam: ComposedExam
    output_dir: Path
    exam_json: Path
    questions_pdf: Optional[Path]
    answer_key_pdf: Optional[Path]
    metadata: dict
    warnings: tuple[str, ...]


def build_exam(config: BuilderConfig) -> BuildResult:
    """
    Build an exam from start to finish.

    Pipeline:
    1. Load the bank (or a single exam file when exam_key is set)
    2. Compose the exam
    3. Create a timestamped output folder
    4. Write exam.json
    5. (Optional) Render practice sheet and answer key
    6. Write build metadata and append to the history log

    Args:
        config: Build configuration

    Returns:
        BuildResult with paths and metadata

    Raises:
        BuildError: If the bank can't be loaded or is empty
        ConfigurationError: If strict grid-in mode can't be satisfied
    """
    warnings: List[str] = []
    start_time = time.perf_counter()

    # 1-2. Load and compose
    if config.exam_key:
        exam = _load_fixed_exam(config)
    else:
        exam = _compose_from_bank(config)

    if not exam.is_complete:
        warnings.append(
            f"Only {len(exam)} of {exam.requested_total} questions available"
        )
    if exam.grid_in_count < exam.requested_grid_ins and not config.exam_key:
        warnings.append(
            f"Only {exam.grid_in_count} of {exam.requested_grid_ins} grid-ins available"
        )
    for warning in warnings:
        logger.warning(warning)

    # 3. Output folder
    output_dir = _generate_timestamped_subfolder(config.output_dir, config)
    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"Output directory: {output_dir}")

    # 4. Exam JSON
    exam_json = write_exam_json(
        exam,
        output_dir / "exam.json",
        metadata={"source": config.exam_key or "composed", "seed": config.composition.seed},
    )

    # 5. PDFs
    questions_pdf = None
    if config.render_pdf:
        questions_pdf = output_dir / "exam.pdf"
        render_exam_pdf(exam, questions_pdf, title=config.title)

    answer_key_pdf = None
    if config.include_answer_key:
        answer_key_pdf = output_dir / "answer_key.pdf"
        render_answer_key(exam, answer_key_pdf)

    elapsed = time.perf_counter() - start_time
    logger.info(f"Exam build completed in {elapsed:.2f}s")

    # 6. Metadata and history
    metadata = _build_metadata(config, exam, output_dir, elapsed, warnings)
    with (output_dir / "build_metadata.json").open("w", encoding="utf-8") as f:
        json.dump(metadata, f, indent=2)

    if config.record_history:
        append_history(config.output_dir / HISTORY_FILE, metadata)

    return BuildResult(
        exam=exam,
        output_dir=output_dir,
        exam_json=exam_json,
        questions_pdf=questions_pdf,
        answer_key_pdf=answer_key_pdf,
        metadata=metadata,
        warnings=tuple(warnings),
    )


def _compose_from_bank(config: BuilderConfig) -> ComposedExam:
    try:
        questions = load_questions(config.bank_path)
    except LoaderError as e:
        raise BuildError(f"Failed to load questions: {e}") from e

    if not questions:
        raise BuildError(f"No questions found in {config.bank_path}")

    return compose_exam(questions, config.composition)


def _load_fixed_exam(config: BuilderConfig) -> ComposedExam:
    """Serve one exam file: first `total` questions, optionally shuffled."""
    try:
        exam_file = load_exam_by_key(config.exam_key, config.bank_path)
    except LoaderError as e:
        raise BuildError(f"Failed to load exam {config.exam_key!r}: {e}") from e

    if not exam_file.questions:
        raise BuildError(f"Exam {exam_file.key!r} has no questions")

    total = config.composition.total
    questions = list(exam_file.questions[:total])
    if config.randomize:
        questions = shuffle(questions, random.Random(config.composition.seed))

    return ComposedExam(
        questions=tuple(reindex(questions)),
        requested_total=total,
        requested_grid_ins=sum(1 for q in questions if q.is_grid_in),
    )


def _generate_timestamped_subfolder(base_dir: Path, config: BuilderConfig) -> Path:
    """
    Create timestamped subfolder path inside the base directory.

    Returns:
        Path like base/20250116-103045__n57__s42__composed
    """
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    size_segment = f"n{config.composition.total}"
    seed = config.composition.seed
    seed_segment = f"s{seed}" if seed is not None else "srand"
    source_segment = re.sub(r"[^A-Za-z0-9_]+", "_", config.exam_key) if config.exam_key else "composed"

    folder_name = f"{timestamp}__{size_segment}__{seed_segment}__{source_segment}"

    # Handle collisions (unlikely but possible)
    output_path = base_dir / folder_name
    if output_path.exists():
        counter = 1
        while (base_dir / f"{folder_name}({counter})").exists():
            counter += 1
        output_path = base_dir / f"{folder_name}({counter})"

    return output_path


def _build_metadata(
    config: BuilderConfig,
    exam: ComposedExam,
    output_dir: Path,
    elapsed: float,
    warnings: List[str],
) -> dict:
    from shsat_toolkit import __version__

    composition = config.composition
    return {
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "toolkit_version": __version__,
        "output_dir": str(output_dir),
        "source": config.exam_key or "composed",
        "seed": composition.seed,
        "requested_total": exam.requested_total,
        "requested_grid_ins": exam.requested_grid_ins,
        "total": len(exam),
        "grid_ins": exam.grid_in_count,
        "bucket_counts": {b.value: n for b, n in exam.bucket_counts.items()},
        "shortfall": exam.shortfall,
        "question_ids": list(exam.question_ids),
        "duration_sec": round(elapsed, 3),
        "warnings": list(warnings),
    }
