"""
Prometheus metrics for client imports.

The import pipeline itself emits nothing; callers record a finished
ImportOutcome here. Short-lived CLI runs push the registry to a Pushgateway.
"""
import os
from typing import Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    push_to_gateway,
)

from client_import.batch.result import ImportResultAggregator
from client_import.core.models import ImportOutcome


# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# IMPORT METRICS
# =======================

imports_total = Counter(
    name="client_imports_total",
    documentation="Total number of import runs",
    labelnames=["status"],  # status: completed, stopped, failed
    registry=REGISTRY,
)

import_rows_total = Counter(
    name="client_import_rows_total",
    documentation="Rows handled by import runs",
    labelnames=["outcome"],  # outcome: imported, duplicate, error
    registry=REGISTRY,
)

import_chunk_failures_total = Counter(
    name="client_import_chunk_failures_total",
    documentation="Chunks rolled back during import runs",
    registry=REGISTRY,
)

import_duration_seconds = Histogram(
    name="client_import_duration_seconds",
    documentation="Wall time of import runs in seconds",
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0],
    registry=REGISTRY,
)

import_last_success_timestamp = Gauge(
    name="client_import_last_success_timestamp_seconds",
    documentation="Unix time of the last import that completed",
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """Metrics in Prometheus text format."""
    return generate_latest(REGISTRY)


def import_status(outcome: ImportOutcome, max_errors: int) -> str:
    if not outcome.success:
        return "failed"
    if ImportResultAggregator.budget_reached(outcome.data.errors, max_errors):
        return "stopped"
    return "completed"


def record_import_outcome(outcome: ImportOutcome, duration_seconds: float, max_errors: int) -> None:
    """
    Record one finished import run.

    Args:
        outcome: Result returned by BatchImportPipeline.import_file()
        duration_seconds: Wall time of the run
        max_errors: Error budget the run was given
    """
    imports_total.labels(status=import_status(outcome, max_errors)).inc()
    import_duration_seconds.observe(duration_seconds)

    if not outcome.success:
        return

    data = outcome.data
    import_rows_total.labels(outcome="imported").inc(data.imported)
    import_rows_total.labels(outcome="duplicate").inc(data.duplicates)
    import_rows_total.labels(outcome="error").inc(data.errors)

    chunk_failures = sum(1 for detail in data.errors_details if detail.type == "batch_error")
    if chunk_failures:
        import_chunk_failures_total.inc(chunk_failures)

    import_last_success_timestamp.set_to_current_time()


def push_metrics(gateway: Optional[str] = None, job: str = "client_import") -> None:
    """
    Push the registry to a Prometheus Pushgateway.

    Args:
        gateway: host:port of the gateway (defaults to env var PUSHGATEWAY_URL)
        job: Job label for the pushed group
    """
    address = gateway or os.getenv("PUSHGATEWAY_URL")
    if not address:
        raise ValueError("Pushgateway address must be provided or set in PUSHGATEWAY_URL")
    push_to_gateway(address, job=job, registry=REGISTRY)
