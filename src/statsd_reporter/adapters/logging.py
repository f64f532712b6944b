"""Logging helpers for statsd_reporter.

The package logs through the standard library ``logging`` module. The
package root logger carries a ``NullHandler`` so that nothing is printed
unless the host application configures logging.

Example:
    ```python
    import logging

    logging.basicConfig(level=logging.DEBUG)
    logging.getLogger("statsd_reporter").setLevel(logging.DEBUG)
    ```
"""

import logging

ROOT_LOGGER_NAME = "statsd_reporter"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the package root logger.

    Args:
        name: Module name (usually ``__name__``). Names outside the package
            are nested under it, so ``"app"`` becomes ``"statsd_reporter.app"``.
            None returns the package root logger.

    Returns:
        The requested logger.
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
