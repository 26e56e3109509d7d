"""
leadrmse.index
==============
Timestamp → observed value lookup used to match forecasts to the
observation they predicted.

Keys are whole epoch seconds.  When two observations share a second the
later one wins; the number of overwritten entries is kept on the index.
"""

from __future__ import annotations

import warnings
from typing import Dict, Iterable, Optional

import pandas as pd

from .records import Observation, epoch_seconds


class ObservationIndex:
    """O(1) lookup from an instant to its observed value."""

    def __init__(self, values: Optional[Dict[int, float]] = None, duplicates: int = 0):
        self._values: Dict[int, float] = dict(values or {})
        self.duplicates = duplicates

    @classmethod
    def build(cls, observations: Iterable[Observation]) -> "ObservationIndex":
        """Index every observation; must run after all batches are merged."""
        values: Dict[int, float] = {}
        duplicates = 0
        for obs in observations:
            key = epoch_seconds(obs.timestamp)
            if key in values:
                duplicates += 1
            values[key] = obs.value
        if duplicates:
            warnings.warn(
                f"{duplicates} observation(s) share a timestamp with an earlier "
                "one; the last value read was kept."
            )
        return cls(values, duplicates)

    def lookup(self, timestamp: pd.Timestamp) -> Optional[float]:
        return self._values.get(epoch_seconds(timestamp))

    def __contains__(self, timestamp: pd.Timestamp) -> bool:
        return epoch_seconds(timestamp) in self._values

    def __len__(self) -> int:
        return len(self._values)


def build_index(observations: Iterable[Observation]) -> ObservationIndex:
    return ObservationIndex.build(observations)
