"""Fakes shared by unit, integration and BDD tests."""

from dataclasses import dataclass, field
from typing import Any

from statsd_reporter.core.models import Snapshot


class FakeSocket:
    """Datagram socket double that records what it is asked to send."""

    def __init__(self, fail_with: OSError | None = None) -> None:
        self.fail_with = fail_with
        self.sent: list[tuple[bytes, tuple[str, int]]] = []
        self.timeout: float | None = None
        self.closed = False

    def settimeout(self, timeout: float | None) -> None:
        self.timeout = timeout

    def sendto(self, data: bytes, address: tuple[str, int]) -> int:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((data, address))
        return len(data)

    def close(self) -> None:
        self.closed = True


class FakeSocketFactory:
    """Socket factory handing out FakeSockets and remembering them.

    Args:
        fail_sends_with: Error every created socket raises on send.
        fail_create_with: Error raised instead of creating a socket.
    """

    def __init__(
        self,
        fail_sends_with: OSError | None = None,
        fail_create_with: OSError | None = None,
    ) -> None:
        self.fail_sends_with = fail_sends_with
        self.fail_create_with = fail_create_with
        self.sockets: list[FakeSocket] = []

    def create_socket(self) -> FakeSocket:
        if self.fail_create_with is not None:
            raise self.fail_create_with
        sock = FakeSocket(fail_with=self.fail_sends_with)
        self.sockets.append(sock)
        return sock

    @property
    def payloads(self) -> list[str]:
        """Every datagram sent through any created socket, decoded."""
        return [data.decode("utf-8") for sock in self.sockets for data, _ in sock.sent]


@dataclass
class FakeGauge:
    """Gauge returning a fixed value."""

    fixed: Any

    @property
    def value(self) -> Any:
        return self.fixed


class ExplodingGauge:
    """Gauge whose value accessor raises."""

    @property
    def value(self) -> Any:
        raise RuntimeError("gauge callback failed")


@dataclass
class FakeCounter:
    count: int = 0


@dataclass
class FakeHistogram:
    summary: Snapshot = field(default_factory=Snapshot)
    count: int = 0

    def snapshot(self) -> Snapshot:
        return self.summary


@dataclass
class FakeMeter:
    count: int = 0
    mean_rate: float = 0.0
    one_minute_rate: float = 0.0
    five_minute_rate: float = 0.0
    fifteen_minute_rate: float = 0.0


@dataclass
class FakeTimer(FakeMeter):
    summary: Snapshot = field(default_factory=Snapshot)

    def snapshot(self) -> Snapshot:
        return self.summary


class StaticRegistry:
    """Registry port returning a fixed snapshot, recording the filters used."""

    def __init__(self, snapshot: Any) -> None:
        self._snapshot = snapshot
        self.filters: list[Any] = []

    def snapshot(self, metric_filter: Any = None) -> Any:
        self.filters.append(metric_filter)
        return self._snapshot


class BrokenRegistry:
    """Registry port whose snapshot always fails."""

    def snapshot(self, metric_filter: Any = None) -> Any:
        raise RuntimeError("registry unavailable")


class StepClock:
    """Clock advancing by ``step`` seconds on every read."""

    def __init__(self, start: float = 1702300000.0, step: float = 0.5) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> float:
        current = self.now
        self.now += self.step
        return current


HISTOGRAM_SNAPSHOT = Snapshot(
    min=-1,
    max=1,
    mean=0.0,
    stddev=0.5,
    median=0.0,
    p75=0.1,
    p95=0.2,
    p98=0.3,
    p99=0.4,
    p999=0.5,
    size=100,
)
