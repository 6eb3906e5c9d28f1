"""
Observability — Logging and metrics for flashcollateral.

Provides:
- Structured logging with run ID
- Metrics collection (counters, gauges, histograms)
"""

from flashcollateral.observability.logging import (
    set_run_id,
    get_run_id,
    configure_logging,
    get_logger,
    LogContext,
    JSONFormatter,
    ReadableFormatter,
)
from flashcollateral.observability.metrics import (
    Counter,
    Gauge,
    Histogram,
    MetricsRegistry,
)

__all__ = [
    # Logging
    "set_run_id",
    "get_run_id",
    "configure_logging",
    "get_logger",
    "LogContext",
    "JSONFormatter",
    "ReadableFormatter",
    # Metrics
    "Counter",
    "Gauge",
    "Histogram",
    "MetricsRegistry",
]
