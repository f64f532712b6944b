"""In-memory metric registry adapter.

Holds metrics in a dict keyed by name. Suitable for tests and for
applications that do not already run a metrics library. Meters and timers
are not implemented here; any object exposing the ``MeteredMetric`` or
``TimerMetric`` attributes can be registered.
"""

import threading
from collections import deque
from collections.abc import Callable
from typing import Any

from statsd_reporter.core.models import MetricKind, MetricName, RegistrySnapshot, Snapshot
from statsd_reporter.core.ports import MetricFilter

DEFAULT_RESERVOIR_SIZE = 1028

_METERED_ATTRS = (
    "count",
    "mean_rate",
    "one_minute_rate",
    "five_minute_rate",
    "fifteen_minute_rate",
)


def infer_kind(metric: Any) -> MetricKind:
    """Work out a metric's kind from the attributes its class defines.

    Attributes are looked up on the class so that gauge callbacks are not
    run during registration.

    Raises:
        TypeError: If the metric matches no known kind.
    """
    cls = type(metric)
    metered = all(hasattr(cls, attr) for attr in _METERED_ATTRS)
    sampling = callable(getattr(cls, "snapshot", None))
    if metered and sampling:
        return MetricKind.TIMER
    if metered:
        return MetricKind.METER
    if sampling:
        return MetricKind.HISTOGRAM
    if hasattr(cls, "count"):
        return MetricKind.COUNTER
    if hasattr(cls, "value"):
        return MetricKind.GAUGE
    raise TypeError(f"cannot report metric of type {cls.__name__}")


class Gauge:
    """Gauge whose value is read from a callback on every report."""

    def __init__(self, fn: Callable[[], Any]) -> None:
        if not callable(fn):
            raise TypeError("gauge function must be callable")
        self._fn = fn

    @property
    def value(self) -> Any:
        return self._fn()


class Counter:
    """Thread-safe running total."""

    def __init__(self, initial: int = 0) -> None:
        self._count = initial
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        return self._count

    def inc(self, n: int = 1) -> None:
        with self._lock:
            self._count += n

    def dec(self, n: int = 1) -> None:
        with self._lock:
            self._count -= n


class Histogram:
    """Records values and summarizes the most recent ones.

    Keeps at most ``reservoir_size`` values; older values are evicted first.

    Args:
        reservoir_size: Maximum number of values kept for the snapshot.
    """

    def __init__(self, reservoir_size: int = DEFAULT_RESERVOIR_SIZE) -> None:
        if reservoir_size <= 0:
            raise ValueError("reservoir_size must be positive")
        self._values: deque[float] = deque(maxlen=reservoir_size)
        self._count = 0
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        """Total number of values ever recorded."""
        return self._count

    def update(self, value: float) -> None:
        with self._lock:
            self._values.append(value)
            self._count += 1

    def snapshot(self) -> Snapshot:
        with self._lock:
            values = list(self._values)
        return Snapshot.from_values(values)


class InMemoryMetricRegistry:
    """In-memory implementation of MetricRegistryPort.

    Example:
        ```python
        registry = InMemoryMetricRegistry()
        requests = registry.counter("http.requests")
        registry.gauge("queue.depth", lambda: len(queue))
        requests.inc()
        ```
    """

    def __init__(self) -> None:
        self._metrics: dict[str, tuple[MetricKind, Any]] = {}
        self._lock = threading.Lock()

    def register(
        self,
        name: str | MetricName,
        metric: Any,
        kind: MetricKind | None = None,
    ) -> Any:
        """Add a metric under ``name``.

        Args:
            name: Metric name; a MetricName is stored under ``str(name)``.
            metric: The metric object.
            kind: Metric kind. Inferred from the metric when omitted.

        Returns:
            The registered metric.

        Raises:
            ValueError: If the name is already registered.
            TypeError: If the kind cannot be inferred.
        """
        key = str(name)
        resolved = kind if kind is not None else infer_kind(metric)
        with self._lock:
            if key in self._metrics:
                raise ValueError(f"metric {key!r} is already registered")
            self._metrics[key] = (resolved, metric)
        return metric

    def remove(self, name: str | MetricName) -> bool:
        """Remove a metric. Returns True if it was registered."""
        with self._lock:
            return self._metrics.pop(str(name), None) is not None

    def gauge(self, name: str | MetricName, fn: Callable[[], Any]) -> Gauge:
        """Register a gauge reading its value from ``fn``."""
        return self.register(name, Gauge(fn), MetricKind.GAUGE)

    def counter(self, name: str | MetricName) -> Counter:
        """Register a new counter."""
        return self.register(name, Counter(), MetricKind.COUNTER)

    def histogram(
        self,
        name: str | MetricName,
        reservoir_size: int = DEFAULT_RESERVOIR_SIZE,
    ) -> Histogram:
        """Register a new histogram."""
        return self.register(name, Histogram(reservoir_size), MetricKind.HISTOGRAM)

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._metrics)

    def snapshot(self, metric_filter: MetricFilter | None = None) -> RegistrySnapshot:
        """Take a snapshot of the registered metrics.

        Args:
            metric_filter: Optional predicate over ``(name, metric)``.

        Returns:
            RegistrySnapshot with each kind's metrics sorted by name.
        """
        with self._lock:
            items = sorted(self._metrics.items())
        grouped: dict[MetricKind, dict[str, Any]] = {kind: {} for kind in MetricKind}
        for name, (kind, metric) in items:
            if metric_filter is None or metric_filter(name, metric):
                grouped[kind][name] = metric
        return RegistrySnapshot(
            gauges=grouped[MetricKind.GAUGE],
            counters=grouped[MetricKind.COUNTER],
            histograms=grouped[MetricKind.HISTOGRAM],
            meters=grouped[MetricKind.METER],
            timers=grouped[MetricKind.TIMER],
        )
