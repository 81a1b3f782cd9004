"""
Module: builder.selection.composer

Purpose:
    Stratified exam composer. Assembles a fixed-size practice exam from a
    heterogeneous question pool with an exact grid-in count and soft
    percentage bands for the algebra, geometry and stats/probability
    buckets.

Key Functions:
    - compose_exam(): Main entry point for composition

Key Classes:
    - ExamComposer: Orchestrates the composition steps
    - SelectionError: Base error for selection failures
    - ConfigurationError: Strict-mode grid-in shortage

Algorithm:
    1. Deduplicate the pool by id (first occurrence wins)
    2. Partition into grid-in and multiple-choice pools
    3. Check grid-in supply (strict mode raises)
    4. Pick the grid-ins
    5. Draw a random target per bucket from its percentage band
    6. Scale targets down if they oversubscribe the total
    7. Credit grid-ins already picked against their bucket's target
    8. Clamp targets to the remaining slots in priority order
    9. Draw multiple-choice questions per bucket
    10. Backfill bucket shortages from any leftover question
    11. Combine and cap at the total
    12. Re-index 1..N

Dependencies:
    - shsat_toolkit.common.buckets: bucket_of, BUCKET_PRIORITY
    - shsat_toolkit.common.shuffle: shuffle, pick_n
    - builder.selection.config: CompositionConfig

Used By:
    - builder.controller: Main build controller
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from shsat_toolkit.common.buckets import BUCKET_PRIORITY, Bucket, bucket_of
from shsat_toolkit.common.shuffle import pick_n, shuffle
from shsat_toolkit.core.models import ComposedExam, Question

from .config import CompositionConfig, PctRange
from .picker import reindex

logger = logging.getLogger(__name__)


class SelectionError(Exception):
    """Error during question selection."""
    pass


class ConfigurationError(SelectionError):
    """
    Raised when strict grid-in mode cannot be satisfied by the pool.

    Attributes:
        required: Grid-ins requested
        available: Grid-ins in the deduplicated pool
    """

    def __init__(self, required: int, available: int):
        super().__init__(f"Need {required} grid-ins but only found {available}.")
        self.required = required
        self.available = available


def compose_exam(
    pool: Sequence[Question],
    config: Optional[CompositionConfig] = None,
    rng: Optional[random.Random] = None,
) -> ComposedExam:
    """
    Compose a practice exam from a question pool.

    Main entry point for the composer. Bucket percentage bands are soft:
    when a bucket runs short, its slots are backfilled from other buckets
    so the exam still reaches the total whenever the pool allows.

    Args:
        pool: Candidate questions (not modified)
        config: Composition configuration (defaults: 57 questions, 5 grid-ins)
        rng: Random source; if None, random.Random(config.seed) is used

    Returns:
        ComposedExam with questions re-indexed 1..N

    Raises:
        ConfigurationError: If config.strict_grid_ins and the pool has
            fewer grid-ins than config.grid_ins

    Invariants:
        - len(result) == min(config.total, deduplicated pool size)
        - No duplicate ids in result
        - result.grid_in_count == min(config.grid_ins, grid-in supply)
          whenever the rest of the pool can fill the remaining slots

    Example:
        >>> exam = compose_exam(questions, CompositionConfig(total=57, grid_ins=5))
        >>> exam.grid_in_count
        5
    """
    composer = ExamComposer(list(pool), config or CompositionConfig(), rng)
    return composer.run()


@dataclass
class ExamComposer:
    """
    Composition orchestrator.

    A fresh composer (and fresh shuffles) is used for every exam; the
    composer never modifies the pool it was given.

    Attributes:
        pool: Candidate questions
        config: Composition configuration
        rng: Random source (seeded from config.seed when not given)
    """

    pool: List[Question]
    config: CompositionConfig
    rng: Optional[random.Random] = None

    # Internal state
    _bank: List[Question] = field(init=False, default_factory=list)
    _grid_pool: List[Question] = field(init=False, default_factory=list)
    _mc_pool: List[Question] = field(init=False, default_factory=list)
    _grid_picked: List[Question] = field(init=False, default_factory=list)
    _targets: Dict[Bucket, int] = field(init=False, default_factory=dict)
    _allocations: Dict[Bucket, int] = field(init=False, default_factory=dict)
    _shortfall: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        """Initialize the random source."""
        if self.rng is None:
            self.rng = random.Random(self.config.seed)

    def run(self) -> ComposedExam:
        """
        Execute the composition.

        Returns:
            ComposedExam with the selected questions
        """
        # Steps 1-2: Deduplicate and partition
        self._deduplicate()
        self._partition_by_type()

        # Steps 3-4: Grid-ins
        grid_target = self._grid_target()
        self._grid_picked, _ = pick_n(self._grid_pool, grid_target, self.rng)

        # Steps 5-8: Bucket targets and slot allocation
        self._targets = self._rescale(self._draw_targets())
        self._allocations = self._allocate_slots(grid_target)

        # Steps 9-10: Multiple-choice draw with backfill
        mc_picked = self._draw_multiple_choice()

        # Steps 11-12: Combine, cap and re-index
        combined = (self._grid_picked + mc_picked)[: self.config.total]
        if self.config.shuffle_output:
            combined = shuffle(combined, self.rng)

        exam = ComposedExam(
            questions=tuple(reindex(combined)),
            requested_total=self.config.total,
            requested_grid_ins=self.config.grid_ins,
            targets=dict(self._allocations),
            shortfall=self._shortfall,
        )
        self._log_summary(exam)
        return exam

    # ─────────────────────────────────────────────────────────────────────────
    # Steps 1-4: Pool preparation and grid-ins
    # ─────────────────────────────────────────────────────────────────────────

    def _deduplicate(self) -> None:
        """Drop repeated ids, keeping the first occurrence."""
        seen: set[str] = set()
        bank = []
        for q in self.pool:
            if not q.id or q.id in seen:
                continue
            seen.add(q.id)
            bank.append(q)
        if len(bank) < len(self.pool):
            logger.debug(f"Deduplicated pool from {len(self.pool)} to {len(bank)} questions")
        self._bank = bank

    def _partition_by_type(self) -> None:
        self._grid_pool = [q for q in self._bank if q.is_grid_in]
        self._mc_pool = [q for q in self._bank if not q.is_grid_in]

    def _grid_target(self) -> int:
        """Number of grid-ins to pick; raises in strict mode on shortage."""
        available = len(self._grid_pool)
        wanted = self.config.grid_ins
        if available < wanted:
            if self.config.strict_grid_ins:
                raise ConfigurationError(wanted, available)
            logger.warning(
                f"Only {available} grid-ins available, {wanted} requested. "
                f"Delivering {available}."
            )
        return min(wanted, available)

    # ─────────────────────────────────────────────────────────────────────────
    # Steps 5-8: Targets
    # ─────────────────────────────────────────────────────────────────────────

    def _draw_target(self, pct_range: PctRange) -> int:
        """Random slot count for one bucket, rounded half-up and clamped."""
        lo, hi = pct_range
        fraction = self.rng.uniform(lo, hi)
        count = math.floor(fraction * self.config.total + 0.5)
        return max(0, min(self.config.total, count))

    def _draw_targets(self) -> Dict[Bucket, int]:
        ranges = {
            Bucket.ALGEBRA: self.config.algebra_pct_range,
            Bucket.GEOMETRY: self.config.geometry_pct_range,
            Bucket.STATSPROB: self.config.stats_pct_range,
        }
        return {bucket: self._draw_target(ranges[bucket]) for bucket in BUCKET_PRIORITY}

    def _rescale(self, targets: Dict[Bucket, int]) -> Dict[Bucket, int]:
        """
        Scale targets down proportionally when they sum past the total.

        Each target is floored after scaling and the rounding remainder is
        handed out one slot at a time in BUCKET_PRIORITY order, so the
        rescaled targets sum to exactly the total.
        """
        total = self.config.total
        target_sum = sum(targets.values())
        if target_sum <= total:
            return dict(targets)

        scale = total / target_sum
        scaled = {bucket: math.floor(n * scale) for bucket, n in targets.items()}
        leftover = total - sum(scaled.values())
        i = 0
        while leftover > 0:
            scaled[BUCKET_PRIORITY[i % len(BUCKET_PRIORITY)]] += 1
            leftover -= 1
            i += 1

        logger.debug(f"Rescaled bucket targets {_fmt(targets)} -> {_fmt(scaled)}")
        return scaled

    def _allocate_slots(self, grid_target: int) -> Dict[Bucket, int]:
        """
        Turn bucket targets into multiple-choice slot allocations.

        Grid-ins already picked count toward their bucket's target. The
        remaining targets are then clamped against the slots left after
        grid-ins in BUCKET_PRIORITY order; whatever is left goes to OTHER.
        """
        grid_by_bucket = {bucket: 0 for bucket in Bucket}
        for q in self._grid_picked:
            grid_by_bucket[bucket_of(q)] += 1

        remaining = self.config.total - grid_target
        allocations: Dict[Bucket, int] = {}
        for bucket in BUCKET_PRIORITY:
            left = max(0, self._targets[bucket] - grid_by_bucket[bucket])
            left = min(left, remaining)
            allocations[bucket] = left
            remaining -= left
        allocations[Bucket.OTHER] = remaining

        logger.debug(
            f"Bucket targets {_fmt(self._targets)}, grid-ins by bucket "
            f"{_fmt(grid_by_bucket)}, multiple-choice allocations {_fmt(allocations)}"
        )
        return allocations

    # ─────────────────────────────────────────────────────────────────────────
    # Steps 9-10: Multiple-choice draw
    # ─────────────────────────────────────────────────────────────────────────

    def _draw_multiple_choice(self) -> List[Question]:
        """Draw each bucket's allocation, backfilling any shortfall."""
        sub_pools: Dict[Bucket, List[Question]] = {}
        for bucket in Bucket:
            members = [q for q in self._mc_pool if bucket_of(q) == bucket]
            sub_pools[bucket] = shuffle(members, self.rng)

        picked: Dict[Bucket, List[Question]] = {}
        shortfall = 0
        for bucket in Bucket:
            wanted = self._allocations[bucket]
            available = sub_pools[bucket]
            take = min(wanted, len(available))
            picked[bucket] = available[:take]
            sub_pools[bucket] = available[take:]
            if take < wanted:
                logger.debug(f"Bucket {bucket.value} short by {wanted - take}")
            shortfall += wanted - take

        self._shortfall = shortfall
        if shortfall > 0:
            leftovers = [q for bucket in Bucket for q in sub_pools[bucket]]
            fill = leftovers[:shortfall]
            picked[Bucket.OTHER] = picked[Bucket.OTHER] + fill
            if len(fill) < shortfall:
                logger.warning(
                    f"Pool exhausted: {shortfall - len(fill)} slots could not be filled"
                )
            else:
                logger.debug(f"Backfilled {len(fill)} slots from other buckets")

        return [q for bucket in Bucket for q in picked[bucket]]

    def _log_summary(self, exam: ComposedExam) -> None:
        counts = exam.bucket_counts
        logger.info(
            f"Composed {len(exam)}/{self.config.total} questions "
            f"({exam.grid_in_count} grid-ins; "
            + ", ".join(f"{b.value}={counts[b]}" for b in Bucket)
            + ")"
        )


def _fmt(counts: Dict[Bucket, int]) -> str:
    return "{" + ", ".join(f"{b.value}: {n}" for b, n in counts.items()) + "}"
