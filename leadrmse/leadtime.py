"""
leadrmse.leadtime
=================
Derive each forecast's lead time and audit it against the lead id the
producer declared.

The audit runs over the full forecast collection before scoring.  It
never drops or mutates a record; it only reports.  Forecasts whose target
precedes their issuance are flagged so the scorer can skip them.

Public API
----------
resolve_lead_time(forecast)                → LeadTime
audit_lead_times(forecasts, verbose=True)  → LeadTimeAudit
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from .config import SECONDS_PER_HOUR
from .records import Forecast, epoch_seconds, subsecond_nanos


@dataclass(frozen=True)
class LeadTime:
    """Lead time derived from one forecast's timestamps."""
    elapsed_seconds: int
    lead_hours: int
    declared: int
    issued_subsecond: bool
    target_subsecond: bool

    @property
    def negative(self) -> bool:
        return self.elapsed_seconds < 0

    @property
    def whole_hours(self) -> bool:
        return self.elapsed_seconds % SECONDS_PER_HOUR == 0

    @property
    def id_matches(self) -> bool:
        return self.lead_hours == self.declared


def resolve_lead_time(forecast: Forecast) -> LeadTime:
    """
    Whole hours between issuance and target, both reduced to seconds.

    Sub-second remainders and partial hours are recorded on the result;
    the lead time is always the integer-hour quotient.
    """
    issued_s = epoch_seconds(forecast.issued_at)
    target_s = epoch_seconds(forecast.target_at)
    elapsed = target_s - issued_s
    return LeadTime(
        elapsed_seconds=elapsed,
        lead_hours=elapsed // SECONDS_PER_HOUR,
        declared=forecast.declared_lead_id,
        issued_subsecond=subsecond_nanos(forecast.issued_at) > 0,
        target_subsecond=subsecond_nanos(forecast.target_at) > 0,
    )


@dataclass
class LeadTimeAudit:
    """Per-forecast lead times plus the anomaly counters of one audit pass."""
    lead_times: List[LeadTime] = field(default_factory=list)
    bad_ids: int = 0
    subsecond: int = 0
    non_whole_hours: int = 0
    negative: int = 0

    @property
    def lead_hours(self) -> List[int]:
        return [lt.lead_hours for lt in self.lead_times]

    def to_dict(self) -> dict:
        return {
            "forecasts": len(self.lead_times),
            "bad_ids": self.bad_ids,
            "subsecond": self.subsecond,
            "non_whole_hours": self.non_whole_hours,
            "negative": self.negative,
        }


def audit_lead_times(forecasts: Iterable[Forecast], verbose: bool = True) -> LeadTimeAudit:
    """
    Check every forecast's timestamps and declared lead id.

    Per-record messages are printed when *verbose*; the bad-id total is
    always printed.
    """
    print("*** ID Check Started ***")
    audit = LeadTimeAudit()

    for fc in forecasts:
        lt = resolve_lead_time(fc)
        audit.lead_times.append(lt)

        if lt.issued_subsecond or lt.target_subsecond:
            audit.subsecond += 1
            if verbose and lt.issued_subsecond:
                print(f"  issuance time {fc.issued_at} has a sub-second remainder")
            if verbose and lt.target_subsecond:
                print(f"  target time {fc.target_at} has a sub-second remainder")

        if lt.negative:
            audit.negative += 1
            if verbose:
                print(f"  target {fc.target_at} precedes issuance {fc.issued_at}; "
                      "forecast excluded")
            continue

        if not lt.whole_hours:
            audit.non_whole_hours += 1
            if verbose:
                print(f"  elapsed time {lt.elapsed_seconds}s is not whole hours "
                      f"({fc.issued_at} → {fc.target_at})")

        if not lt.id_matches:
            audit.bad_ids += 1
            if verbose:
                print(f"  ID = {lt.declared} expected id = {lt.lead_hours}")

    print(f"Total number of bad IDs = {audit.bad_ids}")
    if audit.subsecond or audit.non_whole_hours or audit.negative:
        print(f"  ⚠  Malformed timestamps: sub-second: {audit.subsecond}, "
              f"partial hours: {audit.non_whole_hours}, "
              f"negative lead: {audit.negative}")
    return audit
