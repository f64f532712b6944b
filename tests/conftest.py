"""Shared test fixtures for all test modules."""

import logging

import pytest

from statsd_reporter.adapters.registry.in_memory import InMemoryMetricRegistry
from statsd_reporter.adapters.transport.udp import UDPTransport
from statsd_reporter.core.encoding.statsd import StatsdSerializer
from tests.helpers import FakeSocketFactory, StepClock


@pytest.fixture
def socket_factory() -> FakeSocketFactory:
    """Socket factory whose sockets record datagrams instead of sending them."""
    return FakeSocketFactory()


@pytest.fixture
def failing_socket_factory() -> FakeSocketFactory:
    """Socket factory whose sockets fail every send."""
    return FakeSocketFactory(fail_sends_with=OSError("Network is unreachable"))


@pytest.fixture
def transport(socket_factory: FakeSocketFactory) -> UDPTransport:
    """Transport aimed at example.com:1234 using fake sockets."""
    return UDPTransport("example.com", 1234, socket_factory=socket_factory)


@pytest.fixture
def serializer() -> StatsdSerializer:
    """Serializer without a prefix."""
    return StatsdSerializer()


@pytest.fixture
def registry() -> InMemoryMetricRegistry:
    """Empty in-memory registry."""
    return InMemoryMetricRegistry()


@pytest.fixture
def clock() -> StepClock:
    """Deterministic clock advancing half a second per read."""
    return StepClock()


@pytest.fixture
def test_logger() -> logging.Logger:
    """Logger at DEBUG level whose records reach caplog."""
    logger = logging.getLogger("statsd_reporter.tests")
    logger.setLevel(logging.DEBUG)
    return logger
