"""Wire encoders."""

from statsd_reporter.core.encoding.statsd import (
    StatsdSerializer,
    format_float,
    format_int,
    format_value,
    sanitize,
)

__all__ = [
    "StatsdSerializer",
    "format_float",
    "format_int",
    "format_value",
    "sanitize",
]
