"""Metric registry adapters."""

from statsd_reporter.adapters.registry.in_memory import (
    Counter,
    Gauge,
    Histogram,
    InMemoryMetricRegistry,
    infer_kind,
)

__all__ = [
    "Counter",
    "Gauge",
    "Histogram",
    "InMemoryMetricRegistry",
    "infer_kind",
]
