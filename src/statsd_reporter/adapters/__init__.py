"""Adapters for I/O: transports, registries and logging."""
