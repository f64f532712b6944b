"""Port interfaces for metric sources.

These protocols define what the reporter needs from a metrics registry and
from the metrics it holds. The core depends only on these interfaces, so any
registry whose metrics expose the same attributes can be reported.
"""

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from statsd_reporter.core.models import RegistrySnapshot, Snapshot

MetricFilter = Callable[[str, Any], bool]
"""Predicate over ``(name, metric)`` deciding whether a metric is reported."""

Clock = Callable[[], float]
"""Zero-argument time source returning seconds."""


@runtime_checkable
class GaugeMetric(Protocol):
    """An instantaneous value read on demand.

    Reading ``value`` may run user code and may raise.
    """

    @property
    def value(self) -> Any: ...


@runtime_checkable
class CounterMetric(Protocol):
    """A running total."""

    @property
    def count(self) -> int: ...


@runtime_checkable
class MeteredMetric(Protocol):
    """A total count plus event rates, in events per second."""

    @property
    def count(self) -> int: ...

    @property
    def mean_rate(self) -> float: ...

    @property
    def one_minute_rate(self) -> float: ...

    @property
    def five_minute_rate(self) -> float: ...

    @property
    def fifteen_minute_rate(self) -> float: ...


@runtime_checkable
class SamplingMetric(Protocol):
    """A metric that can summarize its recorded values."""

    def snapshot(self) -> Snapshot: ...


@runtime_checkable
class TimerMetric(MeteredMetric, SamplingMetric, Protocol):
    """A meter of calls plus a sample of their durations, in seconds."""


@runtime_checkable
class MetricRegistryPort(Protocol):
    """Port for reading metrics out of a registry.

    Adapters implementing this protocol return a stable snapshot of their
    metrics grouped by kind.
    Examples: InMemoryMetricRegistry.
    """

    def snapshot(self, metric_filter: MetricFilter | None = None) -> RegistrySnapshot:
        """Take a snapshot of the registry.

        Args:
            metric_filter: Optional predicate; metrics it rejects are left out.

        Returns:
            RegistrySnapshot with one mapping per metric kind.
        """
        ...
