"""Core domain: models, ports, encoding and the metric visitor."""
