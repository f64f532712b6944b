"""Walks a registry snapshot and drives the StatsD serializer.

Each metric kind has one handler that turns a metric into its StatsD lines.
A metric's lines are written only once its handler has produced all of
them, so a metric that fails part way contributes nothing and the rest of
the snapshot is still reported.
"""

import logging
from collections.abc import Callable
from typing import Any

from statsd_reporter.core.encoding.statsd import (
    StatsdSerializer,
    format_int,
    is_numeric,
    make_line,
)
from statsd_reporter.core.errors import SerializationError
from statsd_reporter.core.models import (
    Emitted,
    MetricEntry,
    MetricKind,
    MetricResult,
    RegistrySnapshot,
    Skipped,
    StatsdLine,
    StatType,
    TimeUnit,
    VisitReport,
)

Handler = Callable[[str, Any], list[StatsdLine]]


class MetricVisitor:
    """Turns registry snapshots into StatsD lines.

    Args:
        serializer: Serializer receiving the lines.
        rate_unit: Unit meter rates are reported per (rates arrive per second).
        duration_unit: Unit timer durations are reported in (durations arrive
            in seconds).
        logger: Logger for skipped and degraded metrics.
    """

    def __init__(
        self,
        serializer: StatsdSerializer,
        rate_unit: TimeUnit = TimeUnit.SECONDS,
        duration_unit: TimeUnit = TimeUnit.MILLISECONDS,
        logger: logging.Logger | None = None,
    ) -> None:
        self._serializer = serializer
        self._rate_factor = rate_unit.seconds
        self._duration_factor = 1.0 / duration_unit.seconds
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: dict[MetricKind, Handler] = {
            MetricKind.GAUGE: self._gauge_lines,
            MetricKind.COUNTER: self._counter_lines,
            MetricKind.HISTOGRAM: self._histogram_lines,
            MetricKind.METER: self._meter_lines,
            MetricKind.TIMER: self._timer_lines,
        }

    def visit(self, snapshot: RegistrySnapshot) -> VisitReport:
        """Write every metric of ``snapshot`` and report what happened."""
        report = VisitReport()
        for entry in snapshot.entries():
            result = self.visit_entry(entry)
            if isinstance(result, Emitted):
                for line in result.lines:
                    self._serializer.write_line(line)
            report.results.append(result)
        return report

    def visit_entry(self, entry: MetricEntry) -> MetricResult:
        """Produce one metric's lines, or the reason it was skipped."""
        handler = self._handlers[entry.kind]
        try:
            lines = handler(entry.name, entry.metric)
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
            self._logger.warning(
                "Unable to report %s '%s' (%s): %s",
                entry.kind.value,
                entry.name,
                type(entry.metric).__name__,
                reason,
            )
            return Skipped(name=entry.name, kind=entry.kind, reason=reason)
        return Emitted(name=entry.name, kind=entry.kind, lines=tuple(lines))

    # --- Handlers ---

    def _gauge_lines(self, name: str, gauge: Any) -> list[StatsdLine]:
        value = gauge.value
        if value is None:
            raise SerializationError("unsupported gauge value of type NoneType")
        if not is_numeric(value):
            self._logger.warning(
                "Gauge '%s' has non-numeric value of type %s; sending it as text",
                name,
                type(value).__name__,
            )
        return [make_line(f"{name}.count", value, StatType.GAUGE)]

    def _counter_lines(self, name: str, counter: Any) -> list[StatsdLine]:
        return [_int_line(f"{name}.count", counter.count)]

    def _histogram_lines(self, name: str, histogram: Any) -> list[StatsdLine]:
        return self._sampling_lines(name, histogram, 1.0)

    def _meter_lines(self, name: str, meter: Any) -> list[StatsdLine]:
        rate = self._rate_factor
        return [
            _int_line(f"{name}.count", meter.count),
            _timer_line(f"{name}.meanRate", meter.mean_rate * rate),
            _timer_line(f"{name}.1MinuteRate", meter.one_minute_rate * rate),
            _timer_line(f"{name}.5MinuteRate", meter.five_minute_rate * rate),
            _timer_line(f"{name}.15MinuteRate", meter.fifteen_minute_rate * rate),
        ]

    def _timer_lines(self, name: str, timer: Any) -> list[StatsdLine]:
        return self._meter_lines(name, timer) + self._sampling_lines(
            name, timer, self._duration_factor
        )

    def _sampling_lines(self, name: str, metric: Any, factor: float) -> list[StatsdLine]:
        snap = metric.snapshot()
        return [
            _timer_line(f"{name}.min", snap.min * factor),
            _timer_line(f"{name}.max", snap.max * factor),
            _timer_line(f"{name}.mean", snap.mean * factor),
            _timer_line(f"{name}.stddev", snap.stddev * factor),
            _timer_line(f"{name}.median", snap.median * factor),
            _timer_line(f"{name}.75percentile", snap.p75 * factor),
            _timer_line(f"{name}.95percentile", snap.p95 * factor),
            _timer_line(f"{name}.98percentile", snap.p98 * factor),
            _timer_line(f"{name}.99percentile", snap.p99 * factor),
            _timer_line(f"{name}.999percentile", snap.p999 * factor),
            _int_line(f"{name}.sampleCount", snap.size),
        ]


def _int_line(name: str, value: int) -> StatsdLine:
    return StatsdLine(name=name, value=format_int(value), stat_type=StatType.GAUGE)


def _timer_line(name: str, value: float) -> StatsdLine:
    return make_line(name, float(value), StatType.TIMER)
