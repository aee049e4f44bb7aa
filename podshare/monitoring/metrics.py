"""
Metrics Collector

Tracks submission outcomes: pods mapped/failed per order, mapping latency,
ingress accepts and rejects.
"""

import threading

from podshare.core.config import Config


class MetricsCollector:
    """Collects submission metrics in memory."""

    def __init__(self, config: Config):
        self.config = config
        self.metrics = {}
        self._lock = threading.Lock()

    def record_mapping(self, pods_ok: int, pods_failed: int, pods_skipped: int, duration_sec: float):
        if not self.config.monitoring.metrics_enabled:
            return
        with self._lock:
            self._incr("pods_mapped", pods_ok)
            self._incr("pods_failed", pods_failed)
            self._incr("pods_skipped", pods_skipped)
            arr = self.metrics.get("mapping_latency_sec", [])
            arr.append(duration_sec)
            self.metrics["mapping_latency_sec"] = arr

    def record_submission(self, outcome: str):
        """outcome: accepted, rejected, unavailable or dry_run."""
        if not self.config.monitoring.metrics_enabled:
            return
        with self._lock:
            self._incr(f"submissions_{outcome}", 1)

    def record_cancellation(self, outcome: str):
        if not self.config.monitoring.metrics_enabled:
            return
        with self._lock:
            self._incr(f"cancellations_{outcome}", 1)

    def snapshot(self) -> dict:
        with self._lock:
            return {k: (list(v) if isinstance(v, list) else v) for k, v in self.metrics.items()}

    def _incr(self, name: str, by: int):
        self.metrics[name] = self.metrics.get(name, 0) + by
