"""
leadrmse.checks
===============
Consistency assertions run on the RMSE curve before it is written.
"""

from __future__ import annotations

import math

from .aggregation import RmseCurve
from .scoring import ScoringResult


# ======================================================================== #
#  Curve shape                                                              #
# ======================================================================== #

def assert_curve_complete(curve: RmseCurve, max_lead: int) -> None:
    """Every bucket 1..max_lead is present, once, in order."""
    hours = curve.hours
    assert hours == list(range(1, max_lead + 1)), (
        f"Curve buckets {hours[:3]}…{hours[-3:]} do not cover 1..{max_lead}"
    )


def assert_curve_values(curve: RmseCurve) -> None:
    """RMSE values are finite and non-negative; empty buckets are 0.0."""
    for (hour, value), n in zip(curve, curve.counts):
        assert math.isfinite(value) and value >= 0.0, (
            f"Bucket {hour}: invalid RMSE {value}"
        )
        if n == 0:
            assert value == 0.0, f"Bucket {hour} is empty but RMSE = {value}"


# ======================================================================== #
#  Bookkeeping                                                              #
# ======================================================================== #

def assert_counts_consistent(curve: RmseCurve, scoring: ScoringResult) -> None:
    """Bucket sample sizes never exceed the number of scored forecasts."""
    total = sum(curve.counts)
    assert total <= len(scoring.scored), (
        f"Curve holds {total} errors but only {len(scoring.scored)} were scored"
    )


# ======================================================================== #
#  Run all checks                                                           #
# ======================================================================== #

def run_all_checks(curve: RmseCurve, scoring: ScoringResult, max_lead: int) -> None:
    """Run the full battery of output checks."""
    assert_curve_complete(curve, max_lead)
    assert_curve_values(curve)
    assert_counts_consistent(curve, scoring)
    print("  ✓ RMSE curve checks passed.")
