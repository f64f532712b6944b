"""UDP transport for StatsD payloads.

Sends each payload as a single datagram. Delivery is best-effort: a failed
send is counted and logged, never retried and never raised.
"""

import logging
import socket
from collections.abc import Iterator
from contextlib import contextmanager

from statsd_reporter.adapters.logging import get_logger
from statsd_reporter.core.errors import (
    AlreadyConnectedError,
    NotConnectedError,
    TransmissionError,
)

DEFAULT_PORT = 8125
DEFAULT_TIMEOUT = 2.0


class DatagramSocketFactory:
    """Creates UDP sockets for the transport.

    Args:
        family: Address family of created sockets (default: ``AF_INET``).
    """

    def __init__(self, family: socket.AddressFamily = socket.AF_INET) -> None:
        self.family = family

    def create_socket(self) -> socket.socket:
        """Return a new, unbound datagram socket."""
        return socket.socket(self.family, socket.SOCK_DGRAM)


# @tra: Adapter.Transport.UDP.Lifecycle
# @tra: Adapter.Transport.UDP.Failures
class UDPTransport:
    """Owns the socket used to ship StatsD payloads to a collector.

    The transport moves between disconnected and connected. The reporter
    connects at the start of each cycle and closes at the end, so a broken
    socket is replaced on the next cycle without reconnect logic.

    Example:
        ```python
        transport = UDPTransport("statsd.internal", 8125)
        with transport.connection():
            transport.send(b"requests.count:1|g")
        ```
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = DEFAULT_PORT,
        socket_factory: DatagramSocketFactory | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            host: Collector hostname or IP address.
            port: Collector UDP port.
            socket_factory: Factory for new sockets (default: IPv4 UDP).
            timeout: Send timeout in seconds applied to each new socket.
                None leaves the socket blocking.
            logger: Logger for send failures.
        """
        self._address = (host, port)
        self._socket_factory = socket_factory or DatagramSocketFactory()
        self._timeout = timeout
        self._logger = logger or get_logger(__name__)
        self._socket: socket.socket | None = None
        self._failures = 0

    @property
    def address(self) -> tuple[str, int]:
        return self._address

    @property
    def connected(self) -> bool:
        return self._socket is not None

    @property
    def failure_count(self) -> int:
        """Number of consecutive failed sends."""
        return self._failures

    def connect(self) -> None:
        """Open a new socket.

        Raises:
            AlreadyConnectedError: If a socket is already open. The open
                socket is left as it is.
            TransmissionError: If the socket cannot be created.
        """
        if self._socket is not None:
            raise AlreadyConnectedError()
        try:
            sock = self._socket_factory.create_socket()
            if self._timeout is not None:
                sock.settimeout(self._timeout)
        except OSError as e:
            raise TransmissionError(f"unable to open UDP socket: {e}") from e
        self._socket = sock

    def send(self, payload: bytes | str) -> bool:
        """Send ``payload`` as one datagram.

        Returns:
            True if the socket accepted the datagram, False otherwise.

        Raises:
            NotConnectedError: If called before ``connect()``.
        """
        if self._socket is None:
            raise NotConnectedError()
        data = payload.encode("utf-8") if isinstance(payload, str) else payload
        try:
            self._socket.sendto(data, self._address)
        except OSError as e:
            self._failures += 1
            host, port = self._address
            # Only the first failure of an outage is worth a warning
            level = logging.WARNING if self._failures == 1 else logging.DEBUG
            self._logger.log(
                level,
                "unable to send packet to statsd at '%s:%s' (failures=%d): %s",
                host,
                port,
                self._failures,
                e,
            )
            return False
        self._failures = 0
        return True

    def close(self) -> None:
        """Close the socket if one is open. Safe to call repeatedly."""
        sock, self._socket = self._socket, None
        if sock is None:
            return
        try:
            sock.close()
        except OSError:
            self._logger.debug("Error disconnecting from statsd", exc_info=True)

    @contextmanager
    def connection(self) -> Iterator["UDPTransport"]:
        """Context manager holding a connection for one cycle.

        Connects on entry and always closes on exit. If connecting fails
        nothing is closed, so an already open socket stays untouched.
        """
        self.connect()
        try:
            yield self
        finally:
            self.close()
