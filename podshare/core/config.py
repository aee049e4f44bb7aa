"""
Configuration management for the podshare client.

Supports loading from YAML/dicts and environment variable overrides.
"""

import os
from dataclasses import dataclass, field
from typing import Literal


INGRESS_URLS = {
    "local": "http://127.0.0.1:18515",
    "testnet": "https://ingress-testnet.podshare.network",
    "mainnet": "https://ingress-mainnet.podshare.network",
}


@dataclass
class SharingConfig:
    """Fragmentation and pod mapping parameters."""

    all_or_nothing: bool = True  # Fail the whole mapping if any pod fails
    max_workers: int = 0  # Worker pool size (0 = one worker per pod)


@dataclass
class IngressConfig:
    """Ingress endpoint settings."""

    network: Literal["local", "testnet", "mainnet"] = "testnet"
    url: str = ""  # Auto-set from network when empty
    timeout_sec: float = 10.0

    def __post_init__(self):
        """Set ingress URL based on network."""
        if not self.url:
            self.url = INGRESS_URLS.get(self.network, "")


@dataclass
class LedgerConfig:
    """Local order ledger storage."""

    backend: Literal["memory", "file"] = "file"
    data_dir: str = os.path.join("~", ".podshare", "ledger")


@dataclass
class TraderConfig:
    """Trader identity used to sign orders."""

    address: str = ""
    private_key: str = ""  # Hex private key (from env)


@dataclass
class PodsConfig:
    """Pod directory snapshot source."""

    directory_file: str = ""  # YAML/JSON file listing pods and member keys


@dataclass
class MonitoringConfig:
    """Logging and metrics."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    metrics_enabled: bool = True


@dataclass
class Config:
    """
    Complete client configuration.

    Environment variables (override config file):
    - PODSHARE_NETWORK: "local", "testnet" or "mainnet"
    - PODSHARE_INGRESS_URL: explicit ingress base URL
    - PODSHARE_PRIVATE_KEY: trader private key (hex)
    - PODSHARE_LEDGER_DIR: directory of the file-backed ledger
    """

    sharing: SharingConfig = field(default_factory=SharingConfig)
    ingress: IngressConfig = field(default_factory=IngressConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    trader: TraderConfig = field(default_factory=TraderConfig)
    pods: PodsConfig = field(default_factory=PodsConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    def __post_init__(self):
        """Load environment variable overrides."""
        if os.getenv("PODSHARE_NETWORK"):
            self.ingress.network = os.getenv("PODSHARE_NETWORK", "testnet")
            self.ingress.url = ""

        if os.getenv("PODSHARE_INGRESS_URL"):
            self.ingress.url = os.getenv("PODSHARE_INGRESS_URL", "")

        if os.getenv("PODSHARE_PRIVATE_KEY"):
            self.trader.private_key = os.getenv("PODSHARE_PRIVATE_KEY", "")

        if os.getenv("PODSHARE_LEDGER_DIR"):
            self.ledger.data_dir = os.getenv("PODSHARE_LEDGER_DIR", "")

        # Re-initialize to set the ingress URL
        self.ingress.__post_init__()

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load config from YAML file."""
        import yaml

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Load config from dictionary."""
        from dataclasses import is_dataclass, fields

        def build(dc_type, data):
            if not is_dataclass(dc_type):
                return data
            kwargs = {}
            for f in fields(dc_type):
                if f.name in data:
                    val = data[f.name]
                    sub_type = f.default_factory if callable(f.default_factory) else None
                    if is_dataclass(sub_type) and isinstance(val, dict):
                        kwargs[f.name] = build(sub_type, val)
                    else:
                        kwargs[f.name] = val
            return dc_type(**kwargs)

        return build(cls, data)

    def validate(self) -> list[str]:
        """
        Validate configuration parameters.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not self.ingress.url:
            errors.append("ingress.url is empty and ingress.network has no default URL")

        if self.ingress.timeout_sec <= 0:
            errors.append("ingress.timeout_sec must be > 0")

        if self.sharing.max_workers < 0:
            errors.append("sharing.max_workers must be >= 0")

        if self.ledger.backend not in ("memory", "file"):
            errors.append("ledger.backend must be 'memory' or 'file'")

        if self.ledger.backend == "file" and not self.ledger.data_dir:
            errors.append("ledger.data_dir required for the file backend")

        if self.monitoring.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            errors.append("monitoring.log_level must be DEBUG, INFO, WARNING or ERROR")

        return errors
