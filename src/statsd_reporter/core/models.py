"""Core domain models for StatsD reporting."""

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class StatType(Enum):
    """StatsD metric type and its wire code."""

    COUNTER = "c"
    TIMER = "ms"
    GAUGE = "g"

    @property
    def code(self) -> str:
        return self.value


class TimeUnit(Enum):
    """Time units, valued in seconds per unit."""

    NANOSECONDS = 1e-9
    MICROSECONDS = 1e-6
    MILLISECONDS = 1e-3
    SECONDS = 1.0
    MINUTES = 60.0
    HOURS = 3600.0
    DAYS = 86400.0

    @property
    def seconds(self) -> float:
        return self.value

    @classmethod
    def parse(cls, name: "str | TimeUnit") -> "TimeUnit":
        """Look up a unit by case-insensitive name (e.g. "milliseconds").

        Raises:
            ValueError: If the name is not a known unit.
        """
        if isinstance(name, TimeUnit):
            return name
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown time unit: {name!r}") from None


@dataclass(frozen=True)
class MetricName:
    """Structured metric name joined as ``group.type[.scope].name``.

    Attributes:
        group: Top-level group (usually a package or subsystem).
        type: Kind of component the metric belongs to.
        name: The metric's own name.
        scope: Optional scope between type and name.
    """

    group: str
    type: str
    name: str
    scope: str | None = None

    def __str__(self) -> str:
        parts = [self.group, self.type]
        if self.scope:
            parts.append(self.scope)
        parts.append(self.name)
        return ".".join(parts)


@dataclass(frozen=True)
class Snapshot:
    """Statistical summary of a sample of values.

    Attributes:
        min: Smallest value.
        max: Largest value.
        mean: Arithmetic mean.
        stddev: Standard deviation.
        median: 50th percentile.
        p75: 75th percentile.
        p95: 95th percentile.
        p98: 98th percentile.
        p99: 99th percentile.
        p999: 99.9th percentile.
        size: Number of values the summary was computed over.
    """

    min: float = 0.0
    max: float = 0.0
    mean: float = 0.0
    stddev: float = 0.0
    median: float = 0.0
    p75: float = 0.0
    p95: float = 0.0
    p98: float = 0.0
    p99: float = 0.0
    p999: float = 0.0
    size: int = 0

    @classmethod
    def from_values(cls, values: Iterable[float]) -> "Snapshot":
        """Compute a uniform snapshot over the given values.

        Quantiles use position ``q * (n + 1)`` with linear interpolation
        between neighbouring values. An empty input gives an all-zero snapshot.
        """
        ordered = sorted(float(v) for v in values)
        size = len(ordered)
        if size == 0:
            return cls()

        mean = math.fsum(ordered) / size
        if size > 1:
            variance = math.fsum((v - mean) ** 2 for v in ordered) / (size - 1)
        else:
            variance = 0.0

        return cls(
            min=ordered[0],
            max=ordered[-1],
            mean=mean,
            stddev=math.sqrt(variance),
            median=_quantile(ordered, 0.5),
            p75=_quantile(ordered, 0.75),
            p95=_quantile(ordered, 0.95),
            p98=_quantile(ordered, 0.98),
            p99=_quantile(ordered, 0.99),
            p999=_quantile(ordered, 0.999),
            size=size,
        )


def _quantile(ordered: list[float], quantile: float) -> float:
    pos = quantile * (len(ordered) + 1)
    index = int(pos)
    if index < 1:
        return ordered[0]
    if index >= len(ordered):
        return ordered[-1]
    lower = ordered[index - 1]
    upper = ordered[index]
    return lower + (pos - math.floor(pos)) * (upper - lower)


class MetricKind(Enum):
    """The five metric kinds, in reporting order."""

    GAUGE = "gauge"
    COUNTER = "counter"
    HISTOGRAM = "histogram"
    METER = "meter"
    TIMER = "timer"


@dataclass(frozen=True)
class MetricEntry:
    """One named metric of a known kind taken from a registry snapshot."""

    kind: MetricKind
    name: str
    metric: Any


@dataclass(frozen=True)
class RegistrySnapshot:
    """Point-in-time view of a registry, one mapping per metric kind.

    Keys may be plain strings or ``MetricName`` objects; they are reported
    under ``str(key)``.
    """

    gauges: Mapping[Any, Any] = field(default_factory=dict)
    counters: Mapping[Any, Any] = field(default_factory=dict)
    histograms: Mapping[Any, Any] = field(default_factory=dict)
    meters: Mapping[Any, Any] = field(default_factory=dict)
    timers: Mapping[Any, Any] = field(default_factory=dict)

    def entries(self) -> Iterator[MetricEntry]:
        """Yield gauges, counters, histograms, meters then timers.

        Within a kind, entries are sorted by name.
        """
        groups = (
            (MetricKind.GAUGE, self.gauges),
            (MetricKind.COUNTER, self.counters),
            (MetricKind.HISTOGRAM, self.histograms),
            (MetricKind.METER, self.meters),
            (MetricKind.TIMER, self.timers),
        )
        for kind, metrics in groups:
            named = sorted(
                ((str(key), metric) for key, metric in metrics.items()),
                key=lambda item: item[0],
            )
            for name, metric in named:
                yield MetricEntry(kind=kind, name=name, metric=metric)

    def __len__(self) -> int:
        return (
            len(self.gauges)
            + len(self.counters)
            + len(self.histograms)
            + len(self.meters)
            + len(self.timers)
        )


@dataclass(frozen=True)
class StatsdLine:
    """A single measurement ready to be written as a StatsD line.

    Attributes:
        name: Metric name before prefixing and sanitization.
        value: Already formatted value text.
        stat_type: The StatsD type of the measurement.
    """

    name: str
    value: str
    stat_type: StatType


@dataclass(frozen=True)
class Emitted:
    """A metric whose lines were all produced."""

    name: str
    kind: MetricKind
    lines: tuple[StatsdLine, ...]


@dataclass(frozen=True)
class Skipped:
    """A metric left out of the cycle, and why."""

    name: str
    kind: MetricKind
    reason: str


MetricResult = Emitted | Skipped


@dataclass
class VisitReport:
    """Per-metric outcomes of one visit over a registry snapshot."""

    results: list[MetricResult] = field(default_factory=list)

    @property
    def emitted(self) -> list[Emitted]:
        return [r for r in self.results if isinstance(r, Emitted)]

    @property
    def skipped(self) -> list[Skipped]:
        return [r for r in self.results if isinstance(r, Skipped)]

    @property
    def line_count(self) -> int:
        return sum(len(r.lines) for r in self.emitted)


@dataclass(frozen=True)
class CycleReport:
    """Outcome of one reporting cycle.

    Attributes:
        started_at: Clock reading when the cycle began.
        duration: Seconds spent in the cycle.
        lines: Number of lines written to the payload.
        skipped: Metrics left out of the payload.
        sent: Whether a datagram was handed to the socket successfully.
        payload_size: Payload size in bytes.
    """

    started_at: float
    duration: float
    lines: int = 0
    skipped: tuple[Skipped, ...] = ()
    sent: bool = False
    payload_size: int = 0
