"""Process gauges backed by psutil.

Registers gauges describing the running Python process so they are reported
alongside application metrics.
"""

import psutil

from statsd_reporter.adapters.registry.in_memory import Gauge, InMemoryMetricRegistry


def register_process_gauges(
    registry: InMemoryMetricRegistry,
    prefix: str = "process",
    process: psutil.Process | None = None,
) -> list[str]:
    """Register CPU, memory, thread and file descriptor gauges.

    Args:
        registry: Registry receiving the gauges.
        prefix: Name prefix for the gauges (default: "process").
        process: Process to observe (default: the current process).

    Returns:
        Names of the registered gauges.
    """
    proc = process or psutil.Process()

    gauges = {
        f"{prefix}.cpu.percent": lambda: proc.cpu_percent(interval=None),
        f"{prefix}.memory.rss": lambda: proc.memory_info().rss,
        f"{prefix}.memory.vms": lambda: proc.memory_info().vms,
        f"{prefix}.threads": proc.num_threads,
    }
    # num_fds only exists on POSIX
    if hasattr(proc, "num_fds"):
        gauges[f"{prefix}.fds"] = proc.num_fds

    for name, fn in gauges.items():
        registry.register(name, Gauge(fn))
    return list(gauges)
