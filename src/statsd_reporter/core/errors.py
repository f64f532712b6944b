"""Exceptions raised by the reporting pipeline."""


class StatsdError(Exception):
    """Base class for statsd_reporter errors."""


class UsageError(StatsdError):
    """A transport lifecycle method was called in the wrong state."""


class AlreadyConnectedError(UsageError):
    """``connect()`` was called on a transport that already holds a socket."""

    def __init__(self, message: str = "Already connected") -> None:
        super().__init__(message)


class NotConnectedError(UsageError):
    """``send()`` was called on a transport without a socket."""

    def __init__(self, message: str = "Not connected") -> None:
        super().__init__(message)


class TransmissionError(StatsdError):
    """The transport could not open its socket."""


class SerializationError(StatsdError):
    """A metric value cannot be rendered as a StatsD value."""
