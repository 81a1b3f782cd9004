"""
Command line entry point.

Subcommands:
    compose  Build a stratified practice exam into a timestamped folder
    pick     Print a plain random (or first-N) sample of the bank as JSON
    score    Grade a responses file against a written exam

Examples:
    shsat-toolkit compose --bank data --out output --seed 42 --pdf
    shsat-toolkit pick --bank data --count 10
    shsat-toolkit score --exam output/<run>/exam.json --responses answers.json
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional

from shsat_toolkit import __version__
from shsat_toolkit.builder import (
    BuildError,
    BuilderConfig,
    CompositionConfig,
    ConfigurationError,
    LoaderError,
    build_exam,
    load_questions,
    pick_questions,
    score_attempt,
)
from shsat_toolkit.builder.loading import ParseError, resolve_database_dir
from shsat_toolkit.builder.output import read_exam_json
from shsat_toolkit.builder.selection.config import (
    DEFAULT_ALGEBRA_PCT,
    DEFAULT_GEOMETRY_PCT,
    DEFAULT_GRID_INS,
    DEFAULT_STATS_PCT,
    DEFAULT_TOTAL,
)

logger = logging.getLogger("shsat_toolkit")

EXIT_OK = 0
EXIT_FAILURE = 2

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> logging.Handler:
    """Attach a stderr handler to the package logger."""
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return handler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shsat-toolkit",
        description="Compose, sample and score SHSAT math practice exams",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    compose = sub.add_parser("compose", help="Compose a stratified exam")
    compose.add_argument("--bank", type=Path, help="Question bank directory (default: auto-detect)")
    compose.add_argument("--out", type=Path, default=Path("output"), help="Base output directory")
    compose.add_argument("--exam-key", help="Serve one stored exam (e.g. shsat_2018) instead of composing")
    compose.add_argument("--total", type=int, default=DEFAULT_TOTAL)
    compose.add_argument("--grid-ins", type=int, default=DEFAULT_GRID_INS)
    compose.add_argument("--alg-min", type=float, default=DEFAULT_ALGEBRA_PCT[0])
    compose.add_argument("--alg-max", type=float, default=DEFAULT_ALGEBRA_PCT[1])
    compose.add_argument("--geom-min", type=float, default=DEFAULT_GEOMETRY_PCT[0])
    compose.add_argument("--geom-max", type=float, default=DEFAULT_GEOMETRY_PCT[1])
    compose.add_argument("--stats-min", type=float, default=DEFAULT_STATS_PCT[0])
    compose.add_argument("--stats-max", type=float, default=DEFAULT_STATS_PCT[1])
    compose.add_argument("--strict-grid-ins", action="store_true", help="Fail if grid-ins are short")
    compose.add_argument("--seed", type=int, help="Random seed for reproducible output")
    compose.add_argument("--keep-order", action="store_true", help="Keep grid-ins first instead of shuffling")
    compose.add_argument("--no-randomize", action="store_true", help="Keep stored order with --exam-key")
    compose.add_argument("--pdf", action="store_true", help="Render a practice sheet PDF")
    compose.add_argument("--answer-key", action="store_true", help="Render an answer key PDF")
    compose.add_argument("--no-history", action="store_true", help="Skip the history log")

    pick = sub.add_parser("pick", help="Print a random sample of the bank")
    pick.add_argument("--bank", type=Path, help="Question bank directory (default: auto-detect)")
    pick.add_argument("--count", type=int, required=True)
    pick.add_argument("--no-randomize", action="store_true", help="Take the first N in bank order")
    pick.add_argument("--seed", type=int)

    score = sub.add_parser("score", help="Score a responses file")
    score.add_argument("--exam", type=Path, required=True, help="exam.json written by compose")
    score.add_argument(
        "--responses", type=Path, required=True,
        help="JSON object mapping question id to the given answer",
    )

    return parser


def _cmd_compose(args: argparse.Namespace) -> int:
    composition = CompositionConfig(
        total=args.total,
        grid_ins=args.grid_ins,
        algebra_pct_range=(args.alg_min, args.alg_max),
        geometry_pct_range=(args.geom_min, args.geom_max),
        stats_pct_range=(args.stats_min, args.stats_max),
        strict_grid_ins=args.strict_grid_ins,
        seed=args.seed,
        shuffle_output=not args.keep_order,
    )
    config = BuilderConfig(
        bank_path=resolve_database_dir(args.bank),
        output_dir=args.out,
        composition=composition,
        exam_key=args.exam_key,
        randomize=not args.no_randomize,
        render_pdf=args.pdf,
        include_answer_key=args.answer_key,
        record_history=not args.no_history,
    )
    result = build_exam(config)
    print(json.dumps({
        "output_dir": str(result.output_dir),
        "total": len(result.exam),
        "grid_ins": result.exam.grid_in_count,
        "bucket_counts": result.metadata["bucket_counts"],
        "warnings": list(result.warnings),
    }, indent=2))
    return EXIT_OK


def _cmd_pick(args: argparse.Namespace) -> int:
    bank = load_questions(resolve_database_dir(args.bank))
    picked = pick_questions(
        bank,
        args.count,
        randomize=not args.no_randomize,
        rng=random.Random(args.seed),
    )
    print(json.dumps([q.to_dict() for q in picked], indent=2, ensure_ascii=False))
    return EXIT_OK


def _cmd_score(args: argparse.Namespace) -> int:
    questions = read_exam_json(args.exam)
    with args.responses.open("r", encoding="utf-8") as f:
        responses = json.load(f)
    if not isinstance(responses, dict):
        raise ValueError(f"{args.responses} must hold a JSON object of id -> answer")

    report = score_attempt(
        questions,
        {str(k): (None if v is None else str(v)) for k, v in responses.items()},
    )
    print(json.dumps(report.to_dict(), indent=2))
    return EXIT_OK


_COMMANDS = {
    "compose": _cmd_compose,
    "pick": _cmd_pick,
    "score": _cmd_score,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler = configure_logging(args.verbose)

    try:
        return _COMMANDS[args.command](args)
    except (ConfigurationError, BuildError, LoaderError, ParseError, ValueError) as e:
        logger.error(str(e))
        return EXIT_FAILURE
    finally:
        logger.removeHandler(handler)


if __name__ == "__main__":
    sys.exit(main())
