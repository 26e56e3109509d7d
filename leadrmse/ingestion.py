"""
leadrmse.ingestion
==================
Discover input files and read each one into a `DataBatch`.

Input document
--------------
::

    <data>
      <weatherReports>
        <weatherReport date="2010-01-01T00:00:00.000Z" windspeed="3.1"/>
      </weatherReports>
      <weatherForecasts>
        <weatherForecast id="2" origin="2009-12-31T22:00:00.000Z"
                         date="2010-01-01T00:00:00.000Z" temp="4.5"
                         windspeed="5.0"/>
      </weatherForecasts>
    </data>

The attribute → field mapping is spelled out in `REPORT_FIELDS` and
`FORECAST_FIELDS`.

Public API
----------
parse_timestamp(text)               → pd.Timestamp
list_data_files(data_dir, ...)      → List[str]
read_batch(path)                    → DataBatch
load_records(paths)                 → RecordStore
"""

from __future__ import annotations

import glob
import math
import os
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from .records import DataBatch, Forecast, Observation, RecordStore


class IngestionError(Exception):
    """Raised when an input file cannot be read or parsed."""


# ======================================================================== #
#  1.  Timestamp parsing                                                    #
# ======================================================================== #

def parse_timestamp(text: str) -> pd.Timestamp:
    """
    Parse a date-time string into a tz-naive UTC ``pd.Timestamp``.

    Any format pandas understands is accepted (ISO 8601 with or without
    milliseconds and offset, ``YYYY-MM-DD HH:MM:SS``, ...).  Strings with
    an offset are converted to UTC; naive strings are taken as UTC.
    Sub-second digits are kept.

    Raises
    ------
    ValueError
        If the text is empty or not a date.
    """
    if text is None or not str(text).strip():
        raise ValueError("Empty timestamp")
    ts = pd.Timestamp(str(text).strip())
    if ts is pd.NaT:
        raise ValueError(f"Not a timestamp: {text!r}")
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def _parse_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Non-finite number: {text!r}")
    return value


def _parse_optional_float(text: Optional[str]) -> float:
    return float("nan") if text is None or text == "" else float(text)


# ======================================================================== #
#  2.  Schema                                                               #
# ======================================================================== #

# XML attribute → (record field, converter, required)
FieldSpec = Tuple[str, Callable, bool]

REPORT_FIELDS: Dict[str, FieldSpec] = {
    "date": ("timestamp", parse_timestamp, True),
    "windspeed": ("value", _parse_float, True),
}

FORECAST_FIELDS: Dict[str, FieldSpec] = {
    "id": ("declared_lead_id", int, True),
    "origin": ("issued_at", parse_timestamp, True),
    "date": ("target_at", parse_timestamp, True),
    "windspeed": ("predicted_value", _parse_float, True),
    "temp": ("auxiliary_value", _parse_optional_float, False),
}

REPORTS_TAG, REPORT_TAG = "weatherReports", "weatherReport"
FORECASTS_TAG, FORECAST_TAG = "weatherForecasts", "weatherForecast"


def _map_attributes(elem: ET.Element, schema: Dict[str, FieldSpec]) -> dict:
    """Convert one element's attributes into record keyword arguments."""
    kwargs = {}
    for attr, (name, convert, required) in schema.items():
        raw = elem.get(attr)
        if raw is None and required:
            raise ValueError(f"<{elem.tag}> is missing attribute '{attr}'")
        try:
            kwargs[name] = convert(raw)
        except (TypeError, ValueError) as e:
            raise ValueError(
                f"<{elem.tag}> attribute '{attr}'={raw!r}: {e}"
            ) from e
    return kwargs


# ======================================================================== #
#  3.  File listing                                                         #
# ======================================================================== #

def list_data_files(
    data_dir: str | Path,
    pattern: str = "*.xml",
    max_files: Optional[int] = None,
) -> List[str]:
    """
    List regular files matching *pattern* in *data_dir*, sorted by name.

    A missing directory yields an empty list.
    """
    if not os.path.isdir(str(data_dir)):
        return []
    files = sorted(
        f for f in glob.glob(os.path.join(str(data_dir), pattern))
        if os.path.isfile(f)
    )
    if max_files is not None:
        files = files[:max_files]
    return files


# ======================================================================== #
#  4.  Batch reader                                                         #
# ======================================================================== #

def read_batch(path: str | Path) -> DataBatch:
    """
    Read one input file.

    Raises
    ------
    IngestionError
        On unreadable files, malformed XML, or bad record attributes.
    """
    path = str(path)
    try:
        root = ET.parse(path).getroot()
    except (OSError, ET.ParseError) as e:
        raise IngestionError(f"Cannot read {os.path.basename(path)}: {e}") from e

    try:
        observations = [
            Observation(**_map_attributes(el, REPORT_FIELDS))
            for el in root.iterfind(f"{REPORTS_TAG}/{REPORT_TAG}")
        ]
        forecasts = [
            Forecast(**_map_attributes(el, FORECAST_FIELDS))
            for el in root.iterfind(f"{FORECASTS_TAG}/{FORECAST_TAG}")
        ]
    except ValueError as e:
        raise IngestionError(f"Cannot parse {os.path.basename(path)}: {e}") from e

    return DataBatch(observations=observations, forecasts=forecasts, source=path)


def load_records(paths: Sequence[str | Path], verbose: bool = True) -> RecordStore:
    """Read every file and merge it into one `RecordStore`."""
    store = RecordStore()
    for path in paths:
        batch = read_batch(path)
        store.add_batch(batch)
        if verbose:
            print(f"  {os.path.basename(str(path))}: "
                  f"{len(batch.forecasts)} forecasts, "
                  f"{len(batch.observations)} observations")
    return store
