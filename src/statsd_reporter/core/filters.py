"""Metric filters."""

import fnmatch
from collections.abc import Iterable
from typing import Any

from statsd_reporter.core.ports import MetricFilter


def pattern_filter(patterns: Iterable[str]) -> MetricFilter:
    """Build a filter accepting metric names that match any glob pattern.

    Matching is case-sensitive. An empty pattern list accepts every metric.
    """
    pattern_list = list(patterns)

    def _accepts(name: str, metric: Any) -> bool:
        if not pattern_list:
            return True
        return any(fnmatch.fnmatchcase(name, pattern) for pattern in pattern_list)

    return _accepts
