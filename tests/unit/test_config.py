"""
Tests for configuration loading and validation.
"""

from podshare.core.config import INGRESS_URLS, Config


class TestConfig:
    def test_defaults(self):
        cfg = Config()
        assert cfg.ingress.network == "testnet"
        assert cfg.ingress.url == INGRESS_URLS["testnet"]
        assert cfg.sharing.all_or_nothing is True
        assert cfg.ledger.backend == "file"
        assert cfg.validate() == []

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PODSHARE_NETWORK", "mainnet")
        monkeypatch.setenv("PODSHARE_PRIVATE_KEY", "0xabc")
        monkeypatch.setenv("PODSHARE_LEDGER_DIR", "/tmp/ledger")
        cfg = Config()
        assert cfg.ingress.url == INGRESS_URLS["mainnet"]
        assert cfg.trader.private_key == "0xabc"
        assert cfg.ledger.data_dir == "/tmp/ledger"

    def test_explicit_ingress_url_wins(self, monkeypatch):
        monkeypatch.setenv("PODSHARE_NETWORK", "local")
        monkeypatch.setenv("PODSHARE_INGRESS_URL", "http://localhost:9999")
        assert Config().ingress.url == "http://localhost:9999"

    def test_from_dict(self):
        cfg = Config.from_dict({
            "ingress": {"network": "local", "timeout_sec": 3},
            "sharing": {"all_or_nothing": False, "max_workers": 4},
            "monitoring": {"log_level": "DEBUG"},
        })
        assert cfg.ingress.url == INGRESS_URLS["local"]
        assert cfg.ingress.timeout_sec == 3
        assert cfg.sharing.all_or_nothing is False
        assert cfg.sharing.max_workers == 4
        assert cfg.monitoring.log_level == "DEBUG"
        assert cfg.ledger.backend == "file"

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "ingress:\n"
            "  url: http://ingress.example:18515\n"
            "ledger:\n"
            "  backend: memory\n"
            "pods:\n"
            "  directory_file: pods.yaml\n"
        )
        cfg = Config.from_yaml(str(path))
        assert cfg.ingress.url == "http://ingress.example:18515"
        assert cfg.ledger.backend == "memory"
        assert cfg.pods.directory_file == "pods.yaml"

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert Config.from_yaml(str(path)).ingress.network == "testnet"

    def test_validate(self):
        cfg = Config()
        cfg.ingress.timeout_sec = 0
        cfg.sharing.max_workers = -1
        cfg.ledger.backend = "redis"
        cfg.monitoring.log_level = "LOUD"
        errors = cfg.validate()
        assert len(errors) == 4
        assert any("timeout_sec" in e for e in errors)
        assert any("max_workers" in e for e in errors)

    def test_unknown_network_needs_url(self):
        cfg = Config.from_dict({"ingress": {"network": "devnet"}})
        assert cfg.ingress.url == ""
        assert any("ingress.url" in e for e in cfg.validate())
