"""
Observability — Logging and metrics for the controller.

Provides:
- Activity-tagged logging (auto-play run, claims, energy)
- Metrics: labelled counters, gauges and per-endpoint latency
"""

from teraverse.observability.logging import (
    ActivityContext,
    ActivityScope,
    get_activity_context,
    reset_activity_context,
    configure_logging,
    get_logger,
    JSONFormatter,
    ReadableFormatter,
)
from teraverse.observability.metrics import (
    Counter,
    Gauge,
    LatencyTracker,
    MetricsRegistry,
    get_metrics,
    reset_metrics,
)

__all__ = [
    # Logging
    "ActivityContext",
    "ActivityScope",
    "get_activity_context",
    "reset_activity_context",
    "configure_logging",
    "get_logger",
    "JSONFormatter",
    "ReadableFormatter",
    # Metrics
    "Counter",
    "Gauge",
    "LatencyTracker",
    "MetricsRegistry",
    "get_metrics",
    "reset_metrics",
]
