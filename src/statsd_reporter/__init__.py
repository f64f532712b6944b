"""statsd_reporter - report an in-process metric registry to StatsD over UDP."""

from statsd_reporter.adapters.logging import get_logger
from statsd_reporter.adapters.registry.in_memory import (
    Counter,
    Gauge,
    Histogram,
    InMemoryMetricRegistry,
)
from statsd_reporter.adapters.transport.udp import DatagramSocketFactory, UDPTransport
from statsd_reporter.core.config import ReporterConfig
from statsd_reporter.core.encoding.statsd import StatsdSerializer, sanitize
from statsd_reporter.core.errors import (
    AlreadyConnectedError,
    NotConnectedError,
    SerializationError,
    StatsdError,
    TransmissionError,
    UsageError,
)
from statsd_reporter.core.filters import pattern_filter
from statsd_reporter.core.models import (
    CycleReport,
    MetricKind,
    MetricName,
    RegistrySnapshot,
    Snapshot,
    StatType,
    TimeUnit,
)
from statsd_reporter.core.visitor import MetricVisitor
from statsd_reporter.reporter import StatsdReporter
from statsd_reporter.scheduler import PeriodicReporter

__all__ = [
    # Errors
    "AlreadyConnectedError",
    "NotConnectedError",
    "SerializationError",
    "StatsdError",
    "TransmissionError",
    "UsageError",
    # Models
    "CycleReport",
    "MetricKind",
    "MetricName",
    "RegistrySnapshot",
    "Snapshot",
    "StatType",
    "TimeUnit",
    # Pipeline
    "MetricVisitor",
    "StatsdSerializer",
    "sanitize",
    # Adapters
    "Counter",
    "DatagramSocketFactory",
    "Gauge",
    "Histogram",
    "InMemoryMetricRegistry",
    "UDPTransport",
    "pattern_filter",
    # Reporting
    "PeriodicReporter",
    "ReporterConfig",
    "StatsdReporter",
    "get_logger",
]
