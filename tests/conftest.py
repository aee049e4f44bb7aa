"""Shared fixtures."""

import random

import pytest

from podshare.core.config import Config
from podshare.orders.order import Order
from tests.helpers import make_order


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep PODSHARE_* variables from the host out of Config()."""
    for name in ("PODSHARE_NETWORK", "PODSHARE_INGRESS_URL", "PODSHARE_PRIVATE_KEY", "PODSHARE_LEDGER_DIR"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def order() -> Order:
    return make_order()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def config() -> Config:
    cfg = Config()
    cfg.ingress.url = "http://ingress.test"
    cfg.ledger.backend = "memory"
    return cfg
