"""
Prometheus metrics collection for the bulk import pipeline

Counts parsed rows, validation outcomes and per-record import results so
operators can follow data quality across runs.
"""
import time

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# PARSING METRICS
# =======================

records_parsed_total = Counter(
    name="import_records_parsed_total",
    documentation="Total number of rows produced by the file readers",
    labelnames=["file_format"],
    registry=REGISTRY,
)

# =======================
# DATA QUALITY METRICS
# =======================

validation_outcomes_total = Counter(
    name="import_validation_outcomes_total",
    documentation="Rows classified by the rule engine",
    labelnames=["entity", "status"],  # status: valid, valid_with_warnings, invalid
    registry=REGISTRY,
)

validation_failures_total = Counter(
    name="import_validation_failures_total",
    documentation="Total number of hard rule violations",
    labelnames=["entity", "rule_type", "field_name"],
    registry=REGISTRY,
)

validation_warnings_total = Counter(
    name="import_validation_warnings_total",
    documentation="Total number of soft rule violations (non-blocking issues)",
    labelnames=["entity", "rule_type", "field_name"],
    registry=REGISTRY,
)

# =======================
# IMPORT METRICS
# =======================

records_imported_total = Counter(
    name="import_records_imported_total",
    documentation="Records submitted to the create operation",
    labelnames=["entity", "status"],  # status: success, failure
    registry=REGISTRY,
)

import_duration_seconds = Histogram(
    name="import_duration_seconds",
    documentation="Time spent running a bulk create loop",
    labelnames=["entity"],
    buckets=[0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


class track_duration:
    """
    Context manager for tracking operation duration

    Usage:
        with track_duration(import_duration_seconds, entity="usuarios"):
            # do work
            pass
    """

    def __init__(self, histogram: Histogram, **labels):
        self.histogram = histogram
        self.labels = labels
        self.start_time: float | None = None

    def __enter__(self):
        self.start_time = time.monotonic()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.monotonic() - self.start_time
        self.histogram.labels(**self.labels).observe(duration)
        return False
