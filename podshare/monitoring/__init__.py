"""Monitoring: metrics and logging setup."""

from podshare.monitoring.metrics import MetricsCollector
from podshare.monitoring.logs import configure_logging

__all__ = ["MetricsCollector", "configure_logging"]
