"""Transport adapters."""

from statsd_reporter.adapters.transport.udp import DatagramSocketFactory, UDPTransport

__all__ = ["DatagramSocketFactory", "UDPTransport"]
