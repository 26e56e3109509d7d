"""
leadrmse.runner
===============
Batch driver: load every input file, then audit → score → aggregate →
write.

All files are read before any computation starts, so the observation
index always sees every observation of the run before the first lookup.

Public API
----------
RmseRunner(config) – instantiate once, call .run()
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import List, Optional

from .aggregation import RmseCurve, aggregate
from .checks import run_all_checks
from .config import METADATA_FILE, SUMMARY_FILE, RmseConfig
from .evaluation import summarize_by_lead
from .export import save_run_metadata, save_summary, write_rmse_curve
from .index import ObservationIndex
from .ingestion import list_data_files, load_records
from .leadtime import LeadTimeAudit, audit_lead_times
from .records import RecordStore
from .scoring import ScoringResult, score_forecasts


class RmseRunner:
    """
    End-to-end RMSE-by-lead-time run.

    Parameters
    ----------
    config : RmseConfig
        Input/output locations and aggregation settings.

    After `run` the intermediate products are available as ``store``,
    ``audit``, ``index``, ``scoring`` and ``curve``.
    """

    def __init__(self, config: RmseConfig):
        self.cfg = config
        self.store: Optional[RecordStore] = None
        self.audit: Optional[LeadTimeAudit] = None
        self.index: Optional[ObservationIndex] = None
        self.scoring: Optional[ScoringResult] = None
        self.curve: Optional[RmseCurve] = None
        self.outputs: List[str] = []

    # ------------------------------------------------------------------ #
    #  Main entry point                                                    #
    # ------------------------------------------------------------------ #

    def run(self) -> Optional[RmseCurve]:
        """
        Execute the full run.

        Returns
        -------
        RmseCurve or None
            None when no input files were found (nothing is written).

        Raises
        ------
        IngestionError
            When any input file cannot be parsed; nothing is written.
        """
        t0 = time.time()

        files = list_data_files(
            self.cfg.data_dir, self.cfg.file_pattern, self.cfg.max_files
        )
        if not files:
            print("No wind speed forecast data files found")
            return None

        # 1. Load everything up front
        print(f"Loading {len(files)} data file(s) from {self.cfg.data_dir}...")
        self.store = load_records(files, verbose=self.cfg.verbose)
        print(f"  ✓ {len(self.store.forecasts):,} forecasts, "
              f"{len(self.store.observations):,} observations")

        # 2. Lead-time audit
        self.audit = audit_lead_times(self.store.forecasts, verbose=self.cfg.verbose)

        # 3. Match and score
        self.index = ObservationIndex.build(self.store.observations)
        self.scoring = score_forecasts(
            self.store.forecasts,
            self.audit.lead_times,
            self.index,
            max_lead=self.cfg.max_lead,
        )
        print(f"  Scored: {len(self.scoring.scored):,}  "
              f"unscored: {self.scoring.unscored:,}  "
              f"excluded: {self.scoring.excluded:,}")

        # 4. Aggregate
        self.curve = aggregate(
            self.scoring.scored, self.cfg.max_lead, self.cfg.error_policy
        )
        run_all_checks(self.curve, self.scoring, self.cfg.max_lead)

        # 5. Write
        self._write_outputs(files)

        elapsed = time.time() - t0
        print(f"  ✓ RMSE curve written to {self.cfg.output_path} ({elapsed:.1f}s)")
        print("======= Program Completed ============")
        return self.curve

    # ------------------------------------------------------------------ #
    #  Outputs                                                             #
    # ------------------------------------------------------------------ #

    def _write_outputs(self, files: List[str]) -> None:
        out_dir = Path(self.cfg.output_dir)
        self.outputs.append(write_rmse_curve(self.curve, self.cfg.output_path))

        if self.cfg.write_summary:
            summary = summarize_by_lead(self.scoring, self.cfg.max_lead)
            self.outputs.append(save_summary(summary, out_dir / SUMMARY_FILE))

        if self.cfg.write_metadata:
            counters = {
                "audit": self.audit.to_dict(),
                "scoring": self.scoring.to_dict(),
                "duplicate_observations": self.index.duplicates,
                "bucket_counts": list(self.curve.counts),
            }
            self.outputs.append(
                save_run_metadata(out_dir / METADATA_FILE, self.cfg, counters, files)
            )
