"""
leadrmse.config
===============
Central configuration: constants, dataclasses, and sane defaults.

A run is fully described by an `RmseConfig` dataclass that can be saved
next to the RMSE curve for reproducibility.
"""

from __future__ import annotations

import hashlib
import platform
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

import json


# ---------------------------------------------------------------------------
# Lead-time buckets
# ---------------------------------------------------------------------------
MAX_LEAD: int = 50                 # buckets are 1..MAX_LEAD hours
SECONDS_PER_HOUR: int = 3600
NANOS_PER_SECOND: int = 1_000_000_000

# ---------------------------------------------------------------------------
# Default locations
# ---------------------------------------------------------------------------
DEFAULT_DATA_DIR: str = "/tmp/wsdata"
DEFAULT_OUTPUT_DIR: str = "/tmp/wsrmse"
DEFAULT_OUTPUT_FILE: str = "WindSpeedRMSE.xml"
SUMMARY_FILE: str = "rmse_summary.csv"
METADATA_FILE: str = "run_metadata.json"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------
class ErrorPolicy(str, Enum):
    """How scored errors accumulate inside one lead-time bucket."""
    ALL = "all"            # multiset: every error counts (true RMSE)
    DISTINCT = "distinct"  # set: equal-valued errors in a bucket count once


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------
@dataclass
class RmseConfig:
    """Master configuration for one RMSE run."""

    # -- Paths --
    data_dir: str = DEFAULT_DATA_DIR
    output_dir: str = DEFAULT_OUTPUT_DIR
    output_file: str = DEFAULT_OUTPUT_FILE
    file_pattern: str = "*.xml"
    max_files: Optional[int] = None

    # -- Aggregation --
    max_lead: int = MAX_LEAD
    error_policy: ErrorPolicy = ErrorPolicy.ALL

    # -- Extra artefacts --
    write_summary: bool = False
    write_metadata: bool = False
    verbose: bool = True

    # -- Reproducibility --
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def __post_init__(self):
        if self.max_lead < 1:
            raise ValueError(f"max_lead must be >= 1, got {self.max_lead}")
        self.error_policy = ErrorPolicy(self.error_policy)

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir) / self.output_file

    # ----- helpers -----
    def to_dict(self) -> dict:
        return {
            "data_dir": self.data_dir,
            "output_dir": self.output_dir,
            "output_file": self.output_file,
            "file_pattern": self.file_pattern,
            "max_files": self.max_files,
            "max_lead": self.max_lead,
            "error_policy": self.error_policy.value,
            "write_summary": self.write_summary,
            "write_metadata": self.write_metadata,
            "verbose": self.verbose,
            "created_at": self.created_at,
        }

    def save(self, path: str | Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2))

    @classmethod
    def load(cls, path: str | Path) -> "RmseConfig":
        raw = json.loads(Path(path).read_text())
        if "error_policy" in raw:
            raw["error_policy"] = ErrorPolicy(raw["error_policy"])
        return cls(**raw)


# ---------------------------------------------------------------------------
# Environment / reproducibility snapshot
# ---------------------------------------------------------------------------
def get_environment_info() -> dict:
    """Capture runtime environment for metadata."""
    info = {
        "python": platform.python_version(),
        "platform": platform.platform(),
        "timestamp": datetime.now().isoformat(),
    }
    try:
        info["git_commit"] = (
            subprocess.check_output(
                ["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL
            )
            .decode()
            .strip()
        )
    except (OSError, subprocess.CalledProcessError):
        info["git_commit"] = None
    return info


def file_hash(filepath: str | Path, algo: str = "sha256") -> str:
    """Compute hash of a file for provenance tracking."""
    h = hashlib.new(algo)
    with open(filepath, "rb") as f:
        for chunk in iter(lambda: f.read(1 << 20), b""):
            h.update(chunk)
    return h.hexdigest()
