"""Configuration for the StatsD reporter."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from statsd_reporter.core.filters import pattern_filter
from statsd_reporter.core.models import TimeUnit
from statsd_reporter.core.ports import MetricFilter

ENV_PREFIX = "STATSD_REPORTER_"


@dataclass
class ReporterConfig:
    """Settings for a StatsD reporter.

    Attributes:
        host: Collector hostname or IP address.
        port: Collector UDP port.
        prefix: Prefix for every metric name ("" for none).
        rate_unit: Unit meter rates are reported per.
        duration_unit: Unit timer durations are reported in.
        period_seconds: Seconds between reporting cycles.
        send_timeout: Socket send timeout in seconds.
        include_patterns: Glob patterns of metric names to report
            (empty reports everything).
    """

    # Collector
    host: str = "localhost"
    port: int = 8125
    prefix: str = ""

    # Units
    rate_unit: str = "seconds"
    duration_unit: str = "milliseconds"

    # Scheduling
    period_seconds: float = 10.0
    send_timeout: float = 2.0

    # Filtering
    include_patterns: list[str] = field(default_factory=list)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ReporterConfig":
        """Build a config from defaults overridden by environment variables.

        Args:
            environ: Mapping to read from (default: ``os.environ``).

        Returns:
            Validated ReporterConfig.
        """
        config = cls()
        config._load_from_env(os.environ if environ is None else environ)
        config.validate()
        return config

    def _load_from_env(self, environ: Mapping[str, str]) -> None:
        """Load configuration from environment variables."""
        env_mappings = {
            "HOST": "host",
            "PORT": "port",
            "PREFIX": "prefix",
            "RATE_UNIT": "rate_unit",
            "DURATION_UNIT": "duration_unit",
            "PERIOD": "period_seconds",
            "TIMEOUT": "send_timeout",
            "INCLUDE": "include_patterns",
        }

        for suffix, attr in env_mappings.items():
            value = environ.get(ENV_PREFIX + suffix)
            if value is None:
                continue
            if attr == "port":
                setattr(self, attr, int(value))
            elif attr in ("period_seconds", "send_timeout"):
                setattr(self, attr, float(value))
            elif attr == "include_patterns":
                setattr(self, attr, [p.strip() for p in value.split(",") if p.strip()])
            else:
                setattr(self, attr, value)

    def validate(self) -> None:
        """Check the settings.

        Raises:
            ValueError: If a setting is out of range or a unit is unknown.
        """
        if not self.host:
            raise ValueError("host must not be empty")
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")
        if self.period_seconds <= 0:
            raise ValueError("period_seconds must be positive")
        if self.send_timeout <= 0:
            raise ValueError("send_timeout must be positive")
        TimeUnit.parse(self.rate_unit)
        TimeUnit.parse(self.duration_unit)

    @property
    def rate_time_unit(self) -> TimeUnit:
        return TimeUnit.parse(self.rate_unit)

    @property
    def duration_time_unit(self) -> TimeUnit:
        return TimeUnit.parse(self.duration_unit)

    def metric_filter(self) -> MetricFilter | None:
        """Return a filter for ``include_patterns``, or None to report all."""
        if not self.include_patterns:
            return None
        return pattern_filter(self.include_patterns)
