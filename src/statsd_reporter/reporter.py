"""StatsD reporter: one registry snapshot per cycle, one datagram per cycle."""

import contextlib
import logging
import time

from statsd_reporter.adapters.logging import get_logger
from statsd_reporter.adapters.transport.udp import UDPTransport
from statsd_reporter.core.config import ReporterConfig
from statsd_reporter.core.encoding.statsd import StatsdSerializer
from statsd_reporter.core.errors import TransmissionError, UsageError
from statsd_reporter.core.models import CycleReport, TimeUnit
from statsd_reporter.core.ports import Clock, MetricFilter, MetricRegistryPort
from statsd_reporter.core.visitor import MetricVisitor


# @tra: Reporter.Cycle
# @tra: Reporter.Cycle.NeverRaises
class StatsdReporter:
    """Reports a metric registry to a StatsD collector.

    Each call to ``run_cycle()`` connects the transport, serializes a fresh
    registry snapshot, sends it as one datagram and closes the transport.
    Errors are logged and never propagate to the caller, so a periodic
    scheduler can call ``run_cycle()`` blindly.

    Example:
        ```python
        registry = InMemoryMetricRegistry()
        reporter = StatsdReporter(registry, UDPTransport("localhost", 8125))
        reporter.run_cycle()
        ```
    """

    def __init__(
        self,
        registry: MetricRegistryPort,
        transport: UDPTransport,
        prefix: str | None = "",
        metric_filter: MetricFilter | None = None,
        rate_unit: TimeUnit = TimeUnit.SECONDS,
        duration_unit: TimeUnit = TimeUnit.MILLISECONDS,
        clock: Clock = time.time,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the reporter.

        Args:
            registry: Source of metrics.
            transport: Transport delivering payloads.
            prefix: Prefix for every metric name ("" or None for none).
            metric_filter: Optional predicate selecting metrics to report.
            rate_unit: Unit meter rates are reported per.
            duration_unit: Unit timer durations are reported in.
            clock: Time source used to time cycles.
            logger: Logger for cycle failures and summaries.
        """
        self._registry = registry
        self._transport = transport
        self._metric_filter = metric_filter
        self._clock = clock
        self._logger = logger or get_logger(__name__)
        self._serializer = StatsdSerializer(prefix, logger=self._logger)
        self._visitor = MetricVisitor(
            self._serializer,
            rate_unit=rate_unit,
            duration_unit=duration_unit,
            logger=self._logger,
        )
        self.last_report: CycleReport | None = None

    @classmethod
    def from_config(
        cls,
        registry: MetricRegistryPort,
        config: ReporterConfig,
        clock: Clock = time.time,
        logger: logging.Logger | None = None,
    ) -> "StatsdReporter":
        """Create a reporter and its UDP transport from a ReporterConfig."""
        config.validate()
        transport = UDPTransport(
            config.host,
            config.port,
            timeout=config.send_timeout,
            logger=logger,
        )
        return cls(
            registry,
            transport,
            prefix=config.prefix,
            metric_filter=config.metric_filter(),
            rate_unit=config.rate_time_unit,
            duration_unit=config.duration_time_unit,
            clock=clock,
            logger=logger,
        )

    @property
    def transport(self) -> UDPTransport:
        return self._transport

    @property
    def failure_count(self) -> int:
        """Consecutive failed sends, as counted by the transport."""
        return self._transport.failure_count

    def run_cycle(self) -> None:
        """Report the registry once. Never raises."""
        started_at = self._clock()
        try:
            self.last_report = self._report(started_at)
        except Exception:
            self._logger.exception("Error reporting metrics to statsd")
            self.last_report = CycleReport(
                started_at=started_at, duration=self._clock() - started_at
            )

    def _report(self, started_at: float) -> CycleReport:
        self._serializer.reset()
        with contextlib.ExitStack() as stack:
            try:
                transport = stack.enter_context(self._transport.connection())
            except (UsageError, TransmissionError) as e:
                host, port = self._transport.address
                self._logger.warning(
                    "Unable to connect to statsd at '%s:%s': %s", host, port, e
                )
                return CycleReport(started_at=started_at, duration=self._clock() - started_at)
            snapshot = self._registry.snapshot(self._metric_filter)
            visit = self._visitor.visit(snapshot)
            payload = self._serializer.to_bytes()
            if payload:
                sent = transport.send(payload)
            else:
                self._logger.debug("No metrics to report")
                sent = False

        report = CycleReport(
            started_at=started_at,
            duration=self._clock() - started_at,
            lines=self._serializer.line_count,
            skipped=tuple(visit.skipped),
            sent=sent,
            payload_size=len(payload),
        )
        self._logger.debug(
            "Reported %d lines (%d bytes, %d skipped) in %.3fs",
            report.lines,
            report.payload_size,
            len(report.skipped),
            report.duration,
        )
        return report
