"""Logging setup for the CLI and embedding applications."""

import logging

from podshare.core.config import MonitoringConfig


LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def configure_logging(config: MonitoringConfig) -> None:
    """Route podshare loggers to stderr at the configured level."""
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    logging.getLogger("podshare").setLevel(getattr(logging, config.log_level, logging.INFO))
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
