"""
leadrmse.records
================
Plain records for forecasts and observations, plus the running
collections that input batches are merged into.

Timestamps are tz-naive UTC ``pd.Timestamp`` values kept at full
(nanosecond) precision; reduction to whole seconds happens in the index
and the lead-time resolver.

Public API
----------
Observation, Forecast             – immutable records
ObservationSet, ForecastSet       – append-only collections (``merge``)
DataBatch                         – one parsed input file
RecordStore                       – both collections, fed batch by batch
epoch_seconds(ts) / subsecond_nanos(ts)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List

import pandas as pd

from .config import NANOS_PER_SECOND


def epoch_seconds(ts: pd.Timestamp) -> int:
    """Whole seconds since the epoch (sub-second part is dropped)."""
    return ts.value // NANOS_PER_SECOND


def subsecond_nanos(ts: pd.Timestamp) -> int:
    return ts.value % NANOS_PER_SECOND


# ======================================================================== #
#  Records                                                                  #
# ======================================================================== #

@dataclass(frozen=True)
class Observation:
    """Observed value (wind speed) at one instant."""
    timestamp: pd.Timestamp
    value: float


@dataclass(frozen=True)
class Forecast:
    """
    One forecast issued at ``issued_at`` for the instant ``target_at``.

    ``declared_lead_id`` is the lead time (hours) written by the producer
    of the file; the derived lead time is authoritative.  The auxiliary
    value (temperature) is carried along but never scored.
    """
    issued_at: pd.Timestamp
    target_at: pd.Timestamp
    declared_lead_id: int
    predicted_value: float
    auxiliary_value: float = float("nan")


# ======================================================================== #
#  Collections                                                              #
# ======================================================================== #

class ObservationSet:
    """Append-only collection of observations."""

    def __init__(self, observations: Iterable[Observation] = ()):
        self._items: List[Observation] = list(observations)

    def merge(self, observations: Iterable[Observation]) -> "ObservationSet":
        self._items.extend(observations)
        return self

    def __iter__(self) -> Iterator[Observation]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "timestamp": [o.timestamp for o in self._items],
                "value": [o.value for o in self._items],
            }
        )


class ForecastSet:
    """Append-only collection of forecasts, kept in merge order."""

    def __init__(self, forecasts: Iterable[Forecast] = ()):
        self._items: List[Forecast] = list(forecasts)

    def merge(self, forecasts: Iterable[Forecast]) -> "ForecastSet":
        self._items.extend(forecasts)
        return self

    def __iter__(self) -> Iterator[Forecast]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, i: int) -> Forecast:
        return self._items[i]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "issued_at": [f.issued_at for f in self._items],
                "target_at": [f.target_at for f in self._items],
                "declared_lead_id": [f.declared_lead_id for f in self._items],
                "predicted_value": [f.predicted_value for f in self._items],
                "auxiliary_value": [f.auxiliary_value for f in self._items],
            }
        )


@dataclass
class DataBatch:
    """Records read from a single input file."""
    observations: List[Observation] = field(default_factory=list)
    forecasts: List[Forecast] = field(default_factory=list)
    source: str = ""


class RecordStore:
    """Running forecast/observation collections for a whole run."""

    def __init__(self):
        self.observations = ObservationSet()
        self.forecasts = ForecastSet()
        self.sources: List[str] = []

    def add_batch(self, batch: DataBatch) -> None:
        self.forecasts.merge(batch.forecasts)
        self.observations.merge(batch.observations)
        if batch.source:
            self.sources.append(batch.source)
