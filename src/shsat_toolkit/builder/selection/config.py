"""
Module: builder.selection.config

Purpose:
    Configuration dataclass for the exam composer.
    Immutable configuration with validation on construction.

Key Classes:
    - CompositionConfig: Size, grid-in count and topic bands for one exam

Dependencies:
    - dataclasses (std)

Used By:
    - builder.selection.composer: Stratified composer
    - builder.controller: Build controller
    - shsat_toolkit.cli
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

PctRange = Tuple[float, float]

DEFAULT_TOTAL = 57
DEFAULT_GRID_INS = 5
DEFAULT_ALGEBRA_PCT: PctRange = (0.40, 0.45)
DEFAULT_GEOMETRY_PCT: PctRange = (0.30, 0.35)
DEFAULT_STATS_PCT: PctRange = (0.15, 0.20)


def _validate_range(name: str, value: PctRange) -> None:
    if len(value) != 2:
        raise ValueError(f"{name} must be a (min, max) pair: {value!r}")
    lo, hi = value
    if not (0.0 <= lo <= hi <= 1.0):
        raise ValueError(f"{name} must satisfy 0 <= min <= max <= 1: {value!r}")


@dataclass(frozen=True)
class CompositionConfig:
    """
    Configuration for composing one practice exam (immutable).

    The percentage ranges are sampling targets, not guarantees: a random
    fraction is drawn from each range to size that bucket, and bucket
    shortages are backfilled from whatever else the pool has.

    Attributes:
        total: Number of questions wanted
        grid_ins: Exact number of GRID_IN questions wanted
        algebra_pct_range: (min, max) fraction of total for algebra
        geometry_pct_range: (min, max) fraction of total for geometry
        stats_pct_range: (min, max) fraction of total for stats/probability
        strict_grid_ins: Raise instead of delivering fewer grid-ins
        seed: Random seed for reproducible composition (None = fresh entropy)
        shuffle_output: Shuffle the final display order

    Invariants:
        - total >= 0
        - 0 <= grid_ins <= total
        - each range has 0 <= min <= max <= 1

    Example:
        >>> config = CompositionConfig(total=57, grid_ins=5)
        >>> config.algebra_pct_range
        (0.4, 0.45)
    """

    total: int = DEFAULT_TOTAL
    grid_ins: int = DEFAULT_GRID_INS

    # Topic bands
    algebra_pct_range: PctRange = DEFAULT_ALGEBRA_PCT
    geometry_pct_range: PctRange = DEFAULT_GEOMETRY_PCT
    stats_pct_range: PctRange = DEFAULT_STATS_PCT

    # Algorithm behavior
    strict_grid_ins: bool = False
    seed: Optional[int] = None
    shuffle_output: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.total < 0:
            raise ValueError(f"total must be non-negative: {self.total}")
        if self.grid_ins < 0:
            raise ValueError(f"grid_ins must be non-negative: {self.grid_ins}")
        if self.grid_ins > self.total:
            raise ValueError(
                f"grid_ins ({self.grid_ins}) must be <= total ({self.total})"
            )
        _validate_range("algebra_pct_range", self.algebra_pct_range)
        _validate_range("geometry_pct_range", self.geometry_pct_range)
        _validate_range("stats_pct_range", self.stats_pct_range)

    @classmethod
    def from_query_params(cls, params: Mapping[str, str]) -> CompositionConfig:
        """
        Build a config from string request parameters.

        Recognised keys: total, gridIns, algMin, algMax, geomMin, geomMax,
        statsMin, statsMax, strictGridIns, seed. Missing keys take the
        defaults.

        Raises:
            ValueError: If a value doesn't parse or the result is invalid
        """
        def num(key: str, default: float) -> float:
            raw = params.get(key)
            return default if raw in (None, "") else float(raw)

        def integer(key: str, default: int) -> int:
            raw = params.get(key)
            return default if raw in (None, "") else int(raw)

        seed = params.get("seed")
        return cls(
            total=integer("total", DEFAULT_TOTAL),
            grid_ins=integer("gridIns", DEFAULT_GRID_INS),
            algebra_pct_range=(
                num("algMin", DEFAULT_ALGEBRA_PCT[0]),
                num("algMax", DEFAULT_ALGEBRA_PCT[1]),
            ),
            geometry_pct_range=(
                num("geomMin", DEFAULT_GEOMETRY_PCT[0]),
                num("geomMax", DEFAULT_GEOMETRY_PCT[1]),
            ),
            stats_pct_range=(
                num("statsMin", DEFAULT_STATS_PCT[0]),
                num("statsMax", DEFAULT_STATS_PCT[1]),
            ),
            strict_grid_ins=str(params.get("strictGridIns", "")).lower() in ("1", "true", "yes"),
            seed=int(seed) if seed not in (None, "") else None,
        )
