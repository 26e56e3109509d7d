"""
leadrmse.aggregation
====================
Per-lead-time RMSE.

`RmseAggregator` owns one accumulator per bucket ``1..max_lead`` and
turns the scored errors into an `RmseCurve`:

    rmse(b) = sqrt( Σ e² / n )      (0.0 for an empty bucket)

Under ``ErrorPolicy.DISTINCT`` equal-valued errors inside one bucket are
kept once, compared at single precision like the set-based accumulation
of the legacy tool.  Squares are taken after scaling by the bucket's
largest magnitude, so large finite errors cannot overflow, and summed with
``math.fsum`` so the curve does not depend on merge order.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Tuple

import numpy as np
import pandas as pd

from .config import MAX_LEAD, ErrorPolicy
from .scoring import ScoredError


# ======================================================================== #
#  Output curve                                                             #
# ======================================================================== #

@dataclass(frozen=True)
class RmseCurve:
    """Ordered ``(hour, rmse)`` pairs for every bucket, with sample counts."""
    values: Tuple[Tuple[int, float], ...]
    counts: Tuple[int, ...]
    policy: ErrorPolicy = ErrorPolicy.ALL

    def __iter__(self) -> Iterator[Tuple[int, float]]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, hour: int) -> float:
        """RMSE of bucket *hour* (1-based)."""
        if not 1 <= hour <= len(self.values):
            raise KeyError(hour)
        return self.values[hour - 1][1]

    @property
    def hours(self) -> List[int]:
        return [h for h, _ in self.values]

    def count(self, hour: int) -> int:
        return self.counts[hour - 1]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "hour": self.hours,
                "n": list(self.counts),
                "rmse": [v for _, v in self.values],
            }
        )


# ======================================================================== #
#  Aggregator                                                               #
# ======================================================================== #

class RmseAggregator:
    """
    Accumulates errors per lead-hour bucket.

    Parameters
    ----------
    max_lead : int
        Number of buckets (hours ``1..max_lead``).
    policy : ErrorPolicy
        ``ALL`` keeps every error; ``DISTINCT`` keeps each value once
        per bucket.
    """

    def __init__(self, max_lead: int = MAX_LEAD, policy: ErrorPolicy = ErrorPolicy.ALL):
        if max_lead < 1:
            raise ValueError(f"max_lead must be >= 1, got {max_lead}")
        self.max_lead = max_lead
        self.policy = ErrorPolicy(policy)
        # dict keyed by the rounded error; the smallest value per key is kept
        self._buckets: Dict[int, List[float] | Dict[float, float]] = {
            b: ({} if self.policy is ErrorPolicy.DISTINCT else [])
            for b in range(1, max_lead + 1)
        }

    def observe(self, bucket: int, error: float) -> None:
        if bucket not in self._buckets:
            raise ValueError(
                f"Bucket {bucket} outside 1..{self.max_lead}"
            )
        acc = self._buckets[bucket]
        if isinstance(acc, dict):
            # legacy sets compared single-precision values
            with np.errstate(over="ignore"):
                key = float(np.float32(error))
            prev = acc.get(key)
            acc[key] = float(error) if prev is None else min(prev, float(error))
        else:
            acc.append(float(error))

    def observe_all(self, scored: Iterable[ScoredError]) -> "RmseAggregator":
        for s in scored:
            self.observe(s.lead_hours, s.error)
        return self

    def bucket_errors(self, bucket: int) -> np.ndarray:
        acc = self._buckets[bucket]
        values = acc.values() if isinstance(acc, dict) else acc
        return np.fromiter(values, dtype=np.float64)

    def finalize(self) -> RmseCurve:
        values: List[Tuple[int, float]] = []
        counts: List[int] = []
        for b in range(1, self.max_lead + 1):
            errors = self.bucket_errors(b)
            values.append((b, bucket_rmse(errors)))
            counts.append(int(errors.size))
        return RmseCurve(tuple(values), tuple(counts), self.policy)


def bucket_rmse(errors: np.ndarray) -> float:
    """Root of the mean squared error; 0.0 when there are no errors."""
    if errors.size == 0:
        return 0.0
    # scale by the largest magnitude so squaring cannot overflow
    scale = float(np.max(np.abs(errors)))
    if scale == 0.0:
        return 0.0
    mean_sq = math.fsum(np.square(errors / scale).tolist()) / errors.size
    return scale * math.sqrt(mean_sq)


def aggregate(
    scored: Iterable[ScoredError],
    max_lead: int = MAX_LEAD,
    policy: ErrorPolicy = ErrorPolicy.ALL,
) -> RmseCurve:
    """Bucket *scored* errors and return the finished curve."""
    return RmseAggregator(max_lead, policy).observe_all(scored).finalize()
