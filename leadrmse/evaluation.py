"""
leadrmse.evaluation
===================
Diagnostic statistics per lead-time bucket, computed from every scored
error (no de-duplication, whatever the curve's policy).

Metrics
-------
* **n**     : number of scored forecasts in the bucket.
* **bias**  : mean signed error (predicted − observed).
* **mae**   : mean absolute error.
* **rmse**  : root mean squared error.

Public API
----------
compute_metrics(observed, predicted)          → dict
summarize_by_lead(scoring_result, max_lead)   → pd.DataFrame
"""

from __future__ import annotations

from typing import Dict

import numpy as np
import pandas as pd

from sklearn.metrics import mean_absolute_error, mean_squared_error

from .config import MAX_LEAD
from .scoring import ScoringResult


def compute_metrics(observed: np.ndarray, predicted: np.ndarray) -> Dict[str, float]:
    """
    Error statistics for one group of forecast/observation pairs.

    Returns NaN for every metric when the group is empty.
    """
    observed = np.asarray(observed, dtype=np.float64)
    predicted = np.asarray(predicted, dtype=np.float64)

    if observed.size == 0:
        return {"n": 0, "bias": float("nan"), "mae": float("nan"), "rmse": float("nan")}

    return {
        "n": int(observed.size),
        "bias": float(np.mean(predicted - observed)),
        "mae": float(mean_absolute_error(observed, predicted)),
        "rmse": float(np.sqrt(mean_squared_error(observed, predicted))),
    }


def summarize_by_lead(result: ScoringResult, max_lead: int = MAX_LEAD) -> pd.DataFrame:
    """
    One row per bucket ``1..max_lead`` with ``hour, n, bias, mae, rmse``.

    Empty buckets get ``n = 0`` and NaN statistics.
    """
    df = result.to_frame()
    rows = []
    groups = dict(tuple(df.groupby("lead_hours"))) if not df.empty else {}

    for hour in range(1, max_lead + 1):
        grp = groups.get(hour)
        if grp is None:
            m = compute_metrics(np.empty(0), np.empty(0))
        else:
            m = compute_metrics(grp["observed"].to_numpy(), grp["predicted"].to_numpy())
        rows.append({"hour": hour, **m})

    return pd.DataFrame(rows, columns=["hour", "n", "bias", "mae", "rmse"])
