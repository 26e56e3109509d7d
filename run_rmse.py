#!/usr/bin/env python3
"""
run_rmse.py
===========
Main entry point for the wind-speed RMSE-by-lead-time calculator.

Usage
-----
  # Defaults: read /tmp/wsdata/*.xml, write /tmp/wsrmse/WindSpeedRMSE.xml
  python run_rmse.py

  # Custom config from JSON
  python run_rmse.py --config rmse_config.json

  # Reproduce the legacy set-based accumulation
  python run_rmse.py --distinct-errors

Pipeline Flow
-------------
::

  data files (XML)  ──→  merge forecasts + observations
       │
       ▼
  lead-time audit  (derived hours vs declared id)
       │
       ▼
  match each forecast to the observation at its target time
       │
       ▼
  bucket errors by lead hour (1..50)  →  RMSE per bucket
       │
       ▼
  WindSpeedRMSE.xml  (+ rmse_summary.csv, run_metadata.json)
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure the project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from leadrmse.config import ErrorPolicy, RmseConfig
from leadrmse.ingestion import IngestionError
from leadrmse.runner import RmseRunner


# ======================================================================== #
#  CLI                                                                      #
# ======================================================================== #

def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Wind speed forecast RMSE by lead time",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to an rmse_config.json file.",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Directory holding the input XML files.",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory the RMSE curve is written to.",
    )
    parser.add_argument(
        "--distinct-errors",
        action="store_true",
        help="Count equal-valued errors once per bucket (legacy behaviour).",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Also write the per-bucket summary CSV and run metadata.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only print totals, not per-record audit lines.",
    )
    return parser.parse_args(argv)


def build_config(args) -> RmseConfig:
    cfg = RmseConfig.load(args.config) if args.config else RmseConfig()
    if args.data_dir:
        cfg.data_dir = args.data_dir
    if args.output_dir:
        cfg.output_dir = args.output_dir
    if args.distinct_errors:
        cfg.error_policy = ErrorPolicy.DISTINCT
    if args.summary:
        cfg.write_summary = True
        cfg.write_metadata = True
    if args.quiet:
        cfg.verbose = False
    return cfg


def main(argv=None) -> int:
    args = parse_args(argv)
    cfg = build_config(args)

    print(f"RMSE Configuration:")
    print(f"  Data dir     : {cfg.data_dir}")
    print(f"  Output file  : {cfg.output_path}")
    print(f"  Max lead     : {cfg.max_lead} h")
    print(f"  Error policy : {cfg.error_policy.value}")
    print()

    try:
        RmseRunner(cfg).run()
    except IngestionError as e:
        print(f"ERROR: {e}")
        print("Run aborted; no output written.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
