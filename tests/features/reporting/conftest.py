"""BDD step definitions for reporting features.

Scenarios build a registry snapshot from fakes, run the reporter against a
socket factory that records datagrams, and check what the collector got.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from statsd_reporter.adapters.transport.udp import UDPTransport
from statsd_reporter.core.models import RegistrySnapshot
from statsd_reporter.reporter import StatsdReporter
from tests.helpers import (
    HISTOGRAM_SNAPSHOT,
    ExplodingGauge,
    FakeCounter,
    FakeGauge,
    FakeHistogram,
    FakeSocketFactory,
    StaticRegistry,
)


@dataclass
class ReportingScenarioContext:
    """Shared state between steps in a reporting scenario."""

    host: str = "localhost"
    port: int = 8125
    prefix: str = ""
    factory: FakeSocketFactory = field(default_factory=FakeSocketFactory)
    gauges: dict[str, Any] = field(default_factory=dict)
    counters: dict[str, Any] = field(default_factory=dict)
    histograms: dict[str, Any] = field(default_factory=dict)
    reporter: StatsdReporter | None = None


@pytest.fixture
def ctx() -> ReportingScenarioContext:
    """Fresh scenario context for each test."""
    return ReportingScenarioContext()


def _reporter(ctx: ReportingScenarioContext, logger: logging.Logger) -> StatsdReporter:
    """Build the reporter once, on the first cycle of a scenario."""
    if ctx.reporter is None:
        snapshot = RegistrySnapshot(
            gauges=ctx.gauges,
            counters=ctx.counters,
            histograms=ctx.histograms,
        )
        transport = UDPTransport(
            ctx.host, ctx.port, socket_factory=ctx.factory, logger=logger
        )
        ctx.reporter = StatsdReporter(
            StaticRegistry(snapshot), transport, prefix=ctx.prefix, logger=logger
        )
    return ctx.reporter


# === Background Steps ===
@given(parsers.parse('a collector at "{host}" port {port:d}'))
def step_collector(ctx: ReportingScenarioContext, host: str, port: int) -> None:
    ctx.host = host
    ctx.port = port


# === Registry Steps ===
@given(parsers.parse('the reporter prefix "{prefix}"'))
def step_prefix(ctx: ReportingScenarioContext, prefix: str) -> None:
    ctx.prefix = prefix


@given(parsers.parse('a gauge "{name}" with value {value:d}'))
def step_int_gauge(ctx: ReportingScenarioContext, name: str, value: int) -> None:
    ctx.gauges[name] = FakeGauge(value)


@given(parsers.parse('a gauge "{name}" with text value "{text}"'))
def step_text_gauge(ctx: ReportingScenarioContext, name: str, text: str) -> None:
    ctx.gauges[name] = FakeGauge(text)


@given(parsers.parse('a gauge "{name}" whose value cannot be read'))
def step_exploding_gauge(ctx: ReportingScenarioContext, name: str) -> None:
    ctx.gauges[name] = ExplodingGauge()


@given(parsers.parse('a counter "{name}" with count {count:d}'))
def step_counter(ctx: ReportingScenarioContext, name: str, count: int) -> None:
    ctx.counters[name] = FakeCounter(count)


@given(parsers.parse('a histogram "{name}" with a sample of {count:d} values'))
def step_histogram(ctx: ReportingScenarioContext, name: str, count: int) -> None:
    ctx.histograms[name] = FakeHistogram(HISTOGRAM_SNAPSHOT, count)


# === Network Steps ===
@given("the network is unreachable")
def step_network_down(ctx: ReportingScenarioContext) -> None:
    ctx.factory.fail_sends_with = OSError("Network is unreachable")


@when("the network recovers")
def step_network_up(ctx: ReportingScenarioContext) -> None:
    ctx.factory.fail_sends_with = None


# === Cycle Steps ===
@when("a reporting cycle runs")
def step_run_cycle(ctx: ReportingScenarioContext, test_logger: logging.Logger) -> None:
    _reporter(ctx, test_logger).run_cycle()


@when(parsers.parse("{n:d} reporting cycles run"))
def step_run_cycles(
    ctx: ReportingScenarioContext, test_logger: logging.Logger, n: int
) -> None:
    reporter = _reporter(ctx, test_logger)
    for _ in range(n):
        reporter.run_cycle()


# === Assertions ===
@then(parsers.parse('the collector should receive "{payload}"'))
def step_received(ctx: ReportingScenarioContext, payload: str) -> None:
    assert ctx.factory.payloads == [payload.replace("\\n", "\n")]


@then("the collector should receive nothing")
def step_received_nothing(ctx: ReportingScenarioContext) -> None:
    assert ctx.factory.payloads == []


@then("the socket should be closed")
def step_socket_closed(ctx: ReportingScenarioContext) -> None:
    assert ctx.factory.sockets
    assert all(sock.closed for sock in ctx.factory.sockets)


@then(parsers.parse("the datagram should have {n:d} lines"))
def step_line_count(ctx: ReportingScenarioContext, n: int) -> None:
    assert len(ctx.factory.payloads) == 1
    assert len(ctx.factory.payloads[0].split("\n")) == n


@then(parsers.parse('line {index:d} should be "{line}"'))
def step_line(ctx: ReportingScenarioContext, index: int, line: str) -> None:
    assert ctx.factory.payloads[0].split("\n")[index - 1] == line


@then(parsers.parse('a warning should name the metric "{name}"'))
def step_warning_names_metric(caplog: pytest.LogCaptureFixture, name: str) -> None:
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert any(f"'{name}'" in r.getMessage() for r in warnings)


@then(parsers.parse("the failure count should be {n:d}"))
def step_failure_count(ctx: ReportingScenarioContext, n: int) -> None:
    assert ctx.reporter is not None
    assert ctx.reporter.failure_count == n


@then(parsers.parse("the send failures should be logged at {levels}"))
def step_failure_levels(caplog: pytest.LogCaptureFixture, levels: str) -> None:
    expected = [
        logging.getLevelName(level.strip().strip('"')) for level in levels.split(",")
    ]
    observed = [r.levelno for r in caplog.records if "unable to send" in r.getMessage()]
    assert observed == expected
