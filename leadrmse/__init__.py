"""
leadrmse: forecast error by lead time.

Flow:
  XML batches → merged records → lead-time audit → observation matching
  → per-bucket RMSE → curve XML (+ summary / metadata)

Modules
-------
config      : Constants and the RmseConfig dataclass
records     : Forecast / Observation records and their collections
ingestion   : list_data_files, read_batch (XML reader), parse_timestamp
index       : ObservationIndex (timestamp → observed value)
leadtime    : resolve_lead_time, audit_lead_times
scoring     : score_forecasts (signed error per matched forecast)
aggregation : RmseAggregator, RmseCurve
evaluation  : Per-bucket n / bias / MAE / RMSE table
export      : Curve XML writer, summary CSV, run metadata
checks      : Output consistency assertions
runner      : RmseRunner, the batch driver
"""

__version__ = "0.1.0"
