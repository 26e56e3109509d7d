"""
leadrmse.scoring
================
Match forecasts to the observation at their target time and compute the
signed error ``predicted - observed``.

A forecast without a matching observation is *unscored*: it is expected
(the observation run may stop before the forecast's target) and is only
counted.  Lead times outside ``1..max_lead`` never reach a bucket.

Public API
----------
score_forecasts(forecasts, lead_times, index, max_lead) → ScoringResult
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass, field
from typing import List, Sequence

import pandas as pd

from .config import MAX_LEAD
from .index import ObservationIndex
from .leadtime import LeadTime
from .records import Forecast


@dataclass(frozen=True)
class ScoredError:
    """One forecast/observation pair."""
    lead_hours: int
    error: float
    predicted: float
    observed: float
    target_at: pd.Timestamp


@dataclass
class ScoringResult:
    scored: List[ScoredError] = field(default_factory=list)
    unscored: int = 0
    over_range: int = 0
    under_range: int = 0
    malformed: int = 0
    overflow: int = 0

    @property
    def excluded(self) -> int:
        """Forecasts kept out of every bucket for a bad lead time."""
        return self.over_range + self.under_range + self.malformed

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "lead_hours": [s.lead_hours for s in self.scored],
                "error": [s.error for s in self.scored],
                "predicted": [s.predicted for s in self.scored],
                "observed": [s.observed for s in self.scored],
                "target_at": [s.target_at for s in self.scored],
            },
            columns=["lead_hours", "error", "predicted", "observed", "target_at"],
        )

    def to_dict(self) -> dict:
        return {
            "scored": len(self.scored),
            "unscored": self.unscored,
            "over_range": self.over_range,
            "under_range": self.under_range,
            "malformed": self.malformed,
            "overflow": self.overflow,
        }


def score_forecasts(
    forecasts: Sequence[Forecast],
    lead_times: Sequence[LeadTime],
    index: ObservationIndex,
    max_lead: int = MAX_LEAD,
) -> ScoringResult:
    """
    Compute the error of every forecast with a usable lead time.

    Parameters
    ----------
    forecasts : sequence of Forecast
    lead_times : sequence of LeadTime
        Output of the lead-time audit, aligned with *forecasts*.
    index : ObservationIndex
        Must already hold every observation of the run.
    max_lead : int
        Highest bucket; longer leads are counted and dropped.
    """
    if len(forecasts) != len(lead_times):
        raise ValueError(
            f"{len(forecasts)} forecasts but {len(lead_times)} lead times"
        )

    result = ScoringResult()
    for fc, lt in zip(forecasts, lead_times):
        if lt.negative:
            result.malformed += 1
            continue
        if lt.lead_hours > max_lead:
            result.over_range += 1
            continue
        if lt.lead_hours < 1:
            result.under_range += 1
            continue

        observed = index.lookup(fc.target_at)
        if observed is None:
            result.unscored += 1
            continue

        error = fc.predicted_value - observed
        if not math.isfinite(error):
            result.overflow += 1
            continue

        result.scored.append(
            ScoredError(
                lead_hours=lt.lead_hours,
                error=error,
                predicted=fc.predicted_value,
                observed=observed,
                target_at=fc.target_at,
            )
        )

    if result.over_range:
        print(f"  Lead time greater than {max_lead} hours found: "
              f"{result.over_range} forecast(s) excluded")
    if result.overflow:
        warnings.warn(
            f"{result.overflow} forecast(s) whose error is not a finite number "
            "were left unscored."
        )
    if result.under_range:
        warnings.warn(
            f"{result.under_range} forecast(s) with a lead time under one hour "
            "were excluded."
        )
    return result
