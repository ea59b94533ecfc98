"""
Configuration manager with environment-based loading.

Supports:
- Base configuration (base.yaml)
- Environment-specific overrides (dev.yaml, prod.yaml)
- Secrets loading (secrets.yaml - gitignored)
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any
import yaml
import logging

from storehub.domain.exceptions import ConfigurationError

from .models import (
    AppConfig,
    ApiConfig,
    SessionConfig,
    OrdersConfig,
    NotificationsConfig,
    LoggingConfig,
)


logger = logging.getLogger(__name__)

SESSION_BACKENDS = ("memory", "file")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigManager:
    """
    Configuration manager with environment support.

    Loads configuration in this order:
    1. base.yaml (default config)
    2. {env}.yaml (environment-specific, e.g., dev.yaml)
    3. secrets.yaml (if exists, gitignored)

    Later configs override earlier ones.
    """

    def __init__(self, config_dir: str | Path = "config", env: str = "dev"):
        """
        Initialize config manager.

        Args:
            config_dir: Directory containing config files.
            env: Environment name (dev, prod, etc).
        """
        self.config_dir = Path(config_dir)
        self.env = env
        self.config: Dict[str, Any] = {}

    def load(self) -> AppConfig:
        """
        Load configuration from YAML files.

        Returns:
            AppConfig object.

        Raises:
            ConfigurationError: If base config is missing or any file is invalid.
        """
        base_path = self.config_dir / "base.yaml"
        if not base_path.exists():
            raise ConfigurationError(f"Base config not found: {base_path}")

        self.config = self._load_yaml(base_path)
        logger.info(f"Loaded base config from {base_path}")

        env_path = self.config_dir / f"{self.env}.yaml"
        if env_path.exists():
            env_config = self._load_yaml(env_path)
            self.config = self._merge_dicts(self.config, env_config)
            logger.info(f"Loaded {self.env} config from {env_path}")

        secrets_path = self.config_dir / "secrets.yaml"
        if secrets_path.exists():
            secrets = self._load_yaml(secrets_path)
            self.config = self._merge_dicts(self.config, secrets)
            logger.info("Loaded secrets")

        return self._parse_config()

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """Load YAML file."""
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping at the top level")
        return data

    def _merge_dicts(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts (override wins)."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result

    def _parse_config(self) -> AppConfig:
        """Parse raw dict into AppConfig."""
        try:
            api_raw = self.config.get("api") or {}
            api = ApiConfig(
                base_url=str(api_raw["base_url"]).rstrip("/"),
                timeout_sec=float(api_raw.get("timeout_sec", 10.0)),
                refresh_path=api_raw.get("refresh_path", "/auth/token/refresh/"),
            )

            session_raw = self.config.get("session") or {}
            session = SessionConfig(
                backend=session_raw.get("backend", "file"),
                path=session_raw.get("path", "~/.storehub/session.json"),
            )

            orders_raw = self.config.get("orders") or {}
            orders = OrdersConfig(
                page_size=int(orders_raw.get("page_size", 10)),
                auto_close_delay_sec=float(orders_raw.get("auto_close_delay_sec", 1.5)),
            )

            notifications_raw = self.config.get("notifications") or {}
            notifications = NotificationsConfig(
                poll_interval_sec=float(notifications_raw.get("poll_interval_sec", 30)),
                preview_limit=int(notifications_raw.get("preview_limit", 5)),
            )

            logging_raw = self.config.get("logging") or {}
            logging_config = LoggingConfig(
                level=str(logging_raw.get("level", "INFO")).upper(),
                json=bool(logging_raw.get("json", True)),
                log_dir=logging_raw.get("log_dir", "./logs"),
                console=bool(logging_raw.get("console", False)),
            )

        except KeyError as e:
            raise ConfigurationError(f"Missing required config key: {e}") from e
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Failed to parse config: {e}") from e

        self._validate(api, session, orders, notifications, logging_config)

        return AppConfig(
            api=api,
            session=session,
            orders=orders,
            notifications=notifications,
            logging=logging_config,
            raw=self.config,
            env=self.env,
        )

    @staticmethod
    def _validate(
        api: ApiConfig,
        session: SessionConfig,
        orders: OrdersConfig,
        notifications: NotificationsConfig,
        logging_config: LoggingConfig,
    ) -> None:
        if not api.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"api.base_url must be an http(s) URL: {api.base_url!r}")
        if api.timeout_sec <= 0:
            raise ConfigurationError("api.timeout_sec must be positive")
        if session.backend not in SESSION_BACKENDS:
            raise ConfigurationError(
                f"session.backend must be one of {SESSION_BACKENDS}, got {session.backend!r}"
            )
        if orders.page_size <= 0:
            raise ConfigurationError("orders.page_size must be positive")
        if notifications.poll_interval_sec <= 0:
            raise ConfigurationError("notifications.poll_interval_sec must be positive")
        if logging_config.level not in LOG_LEVELS:
            raise ConfigurationError(f"logging.level must be one of {LOG_LEVELS}")
