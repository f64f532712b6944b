"""StatsD line encoder.

Renders measurements as ``<prefix><name>:<value>|<type>`` lines and joins
one cycle's lines with ``\\n``, without a trailing separator.
"""

import decimal
import io
import logging
import math
import numbers
import re
from typing import Any, TextIO

from statsd_reporter.core.errors import SerializationError
from statsd_reporter.core.models import StatsdLine, StatType

_WHITESPACE = re.compile(r"\s+")


def sanitize(s: str) -> str:
    """Collapse every run of whitespace into a single ``-``."""
    return _WHITESPACE.sub("-", s)


def format_int(value: int) -> str:
    """Format an integer as plain decimal digits."""
    return str(int(value))


def format_float(value: float | decimal.Decimal) -> str:
    """Format a real number with exactly two decimal places.

    Uses Python's correctly rounded fixed-point formatting, which never
    consults the process locale.

    Raises:
        SerializationError: If the value is NaN or infinite.
    """
    number = float(value)
    if not math.isfinite(number):
        raise SerializationError(f"cannot encode non-finite value {value!r}")
    return f"{number:.2f}"


def is_numeric(value: Any) -> bool:
    """Return True if ``value`` has an integer or fixed-point rendering."""
    return isinstance(value, (numbers.Real, decimal.Decimal))


def format_value(value: Any) -> str:
    """Format a value by type: integers exactly, reals to two places.

    Booleans count as integers. Any other type falls back to ``str()``.

    Raises:
        SerializationError: If the value is None or a non-finite real.
    """
    if value is None:
        raise SerializationError("cannot encode None")
    if isinstance(value, numbers.Integral):
        return format_int(value)
    if isinstance(value, (numbers.Real, decimal.Decimal)):
        return format_float(value)
    return str(value)


def make_line(name: str, value: Any, stat_type: StatType) -> StatsdLine:
    """Format ``value`` and bundle it with its name and type."""
    return StatsdLine(name=name, value=format_value(value), stat_type=stat_type)


def render_line(line: StatsdLine, prefix: str = "") -> str:
    """Render a line as ``<prefix><name>:<value>|<type>``."""
    return (
        f"{prefix}{sanitize(line.name)}:{sanitize(line.value)}"
        f"|{line.stat_type.code}"
    )


def normalize_prefix(prefix: str | None) -> str:
    """Return ``""`` or the sanitized prefix ending in exactly one ``.``."""
    prefix = prefix.strip() if prefix else ""
    if not prefix:
        return ""
    prefix = sanitize(prefix)
    return prefix if prefix.endswith(".") else prefix + "."


class StatsdSerializer:
    """Accumulates one reporting cycle's StatsD lines in a text buffer.

    The serializer owns its buffer for the length of a cycle: ``reset()`` at
    the start, writes during the cycle, then ``to_bytes()`` for the transport.

    Args:
        prefix: Optional prefix for every metric name.
        sink: Text stream to write into. Defaults to a fresh ``io.StringIO``.
        logger: Logger for dropped lines.
    """

    def __init__(
        self,
        prefix: str | None = "",
        sink: TextIO | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._prefix = normalize_prefix(prefix)
        self._sink: TextIO = sink if sink is not None else io.StringIO()
        self._logger = logger or logging.getLogger(__name__)
        self._prepend_newline = False
        self._line_count = 0

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def line_count(self) -> int:
        """Number of lines written since the last reset."""
        return self._line_count

    def reset(self) -> None:
        """Empty the buffer and start a new cycle."""
        self._sink.seek(0)
        self._sink.truncate(0)
        self._prepend_newline = False
        self._line_count = 0

    def write_gauge(self, name: str, value: Any) -> None:
        self.write_line(make_line(name, value, StatType.GAUGE))

    def write_timer(self, name: str, value: Any) -> None:
        self.write_line(make_line(name, value, StatType.TIMER))

    def write_counter(self, name: str, value: Any) -> None:
        self.write_line(make_line(name, value, StatType.COUNTER))

    def write_line(self, line: StatsdLine) -> None:
        """Append one line, preceded by ``\\n`` unless it is the first.

        A line the sink refuses is logged and dropped; the buffer stays
        well-formed for the lines that follow.
        """
        text = render_line(line, self._prefix)
        if self._prepend_newline:
            text = "\n" + text
        try:
            self._sink.write(text)
        except (OSError, ValueError, MemoryError):
            self._logger.error("Error serializing metric %r", line.name, exc_info=True)
            return
        self._prepend_newline = True
        self._line_count += 1

    def getvalue(self) -> str:
        """Return the buffered lines."""
        position = self._sink.tell()
        self._sink.seek(0)
        text = self._sink.read(position)
        self._sink.seek(position)
        return text

    def to_bytes(self) -> bytes:
        """Return the buffered lines encoded as UTF-8."""
        return self.getvalue().encode("utf-8")
