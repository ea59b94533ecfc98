"""Tests for ConfigManager YAML loading and validation."""

from pathlib import Path

import pytest

from config.config_manager import ConfigManager
from storehub.domain.exceptions import ConfigurationError

BASE_YAML = """
api:
  base_url: "http://localhost:8000/api/"
  timeout_sec: 10
session:
  backend: memory
orders:
  page_size: 10
logging:
  level: info
"""


def write(directory: Path, name: str, body: str) -> None:
    (directory / name).write_text(body)


class TestLoad:
    """Layered loading."""

    def test_base_only(self, tmp_path):
        write(tmp_path, "base.yaml", BASE_YAML)

        config = ConfigManager(tmp_path, env="dev").load()

        assert config.api.base_url == "http://localhost:8000/api"
        assert config.api.refresh_path == "/auth/token/refresh/"
        assert config.session.backend == "memory"
        assert config.orders.auto_close_delay_sec == 1.5
        assert config.notifications.poll_interval_sec == 30.0
        assert config.logging.level == "INFO"
        assert config.env == "dev"

    def test_env_and_secrets_override(self, tmp_path):
        write(tmp_path, "base.yaml", BASE_YAML)
        write(tmp_path, "prod.yaml", "api:\n  timeout_sec: 20\norders:\n  page_size: 25\n")
        write(tmp_path, "secrets.yaml", "api:\n  base_url: https://admin.example.test/api\n")

        config = ConfigManager(tmp_path, env="prod").load()

        assert config.api.timeout_sec == 20.0
        assert config.api.base_url == "https://admin.example.test/api"
        assert config.orders.page_size == 25
        assert config.session.backend == "memory"

    def test_shipped_config_loads(self):
        config_dir = Path(__file__).resolve().parents[2] / "config"
        config = ConfigManager(config_dir, env="prod").load()
        assert config.api.base_url.startswith("http")


class TestErrors:
    """Every problem surfaces as ConfigurationError."""

    def test_missing_base(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigManager(tmp_path).load()

    def test_missing_base_url(self, tmp_path):
        write(tmp_path, "base.yaml", "api:\n  timeout_sec: 5\n")
        with pytest.raises(ConfigurationError, match="base_url"):
            ConfigManager(tmp_path).load()

    def test_invalid_yaml(self, tmp_path):
        write(tmp_path, "base.yaml", "api: [unclosed\n")
        with pytest.raises(ConfigurationError):
            ConfigManager(tmp_path).load()

    def test_not_a_mapping(self, tmp_path):
        write(tmp_path, "base.yaml", "- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            ConfigManager(tmp_path).load()

    @pytest.mark.parametrize(
        "override",
        [
            "api:\n  base_url: ftp://host\n",
            "api:\n  timeout_sec: 0\n",
            "session:\n  backend: redis\n",
            "orders:\n  page_size: 0\n",
            "notifications:\n  poll_interval_sec: -1\n",
            "logging:\n  level: LOUD\n",
            "orders:\n  page_size: many\n",
        ],
    )
    def test_invalid_values(self, tmp_path, override):
        write(tmp_path, "base.yaml", BASE_YAML)
        write(tmp_path, "dev.yaml", override)
        with pytest.raises(ConfigurationError):
            ConfigManager(tmp_path, env="dev").load()
