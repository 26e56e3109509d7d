"""
leadrmse.export
===============
Write the RMSE curve and the optional run artefacts.

Folder layout
-------------
::

    <output_dir>/
        WindSpeedRMSE.xml      ← RMSE curve, one <rmse> per bucket
        rmse_summary.csv       ← per-bucket n / bias / mae / rmse (optional)
        run_metadata.json      ← config, environment, input hashes (optional)
"""

from __future__ import annotations

import json
import os
import xml.etree.ElementTree as ET
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from .aggregation import RmseCurve
from .config import RmseConfig, file_hash, get_environment_info


# ======================================================================== #
#  RMSE curve                                                               #
# ======================================================================== #

def curve_to_xml(curve: RmseCurve) -> str:
    """Serialise *curve* as ``<rmse_curve><rmse hour=".." value=".."/>...``."""
    root = ET.Element("rmse_curve")
    for hour, value in curve:
        ET.SubElement(root, "rmse", hour=str(hour), value=repr(float(value)))
    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="unicode")


def write_rmse_curve(curve: RmseCurve, path: str | Path) -> str:
    """Write the curve document; returns the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(curve_to_xml(curve) + "\n")
    return str(path)


def read_rmse_curve(path: str | Path) -> List[tuple]:
    """Read back ``(hour, value)`` pairs from a curve document."""
    root = ET.parse(str(path)).getroot()
    return [
        (int(el.get("hour")), float(el.get("value")))
        for el in root.iter("rmse")
    ]


# ======================================================================== #
#  Summary table                                                            #
# ======================================================================== #

def save_summary(summary: pd.DataFrame, path: str | Path) -> str:
    path = Path(path).with_suffix(".csv")
    path.parent.mkdir(parents=True, exist_ok=True)
    summary.to_csv(path, index=False)
    return str(path)


# ======================================================================== #
#  Run metadata                                                             #
# ======================================================================== #

def save_run_metadata(
    path: str | Path,
    config: RmseConfig,
    counters: Dict[str, Any],
    files_used: Optional[List[str]] = None,
) -> str:
    """
    Write a ``run_metadata.json`` describing one run.

    Returns the path of the written file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    meta = {
        "timestamp": datetime.now().isoformat(),
        "config": config.to_dict(),
        "counters": counters,
        "environment": get_environment_info(),
    }

    if files_used:
        meta["files_used"] = {
            os.path.basename(f): file_hash(f)
            for f in files_used
            if os.path.exists(f)
        }

    path.write_text(json.dumps(meta, indent=2, default=str))
    return str(path)
