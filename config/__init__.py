"""Configuration management."""

from .config_manager import ConfigManager
from .models import (
    AppConfig,
    ApiConfig,
    SessionConfig,
    OrdersConfig,
    NotificationsConfig,
    LoggingConfig,
)

__all__ = [
    "ConfigManager",
    "AppConfig",
    "ApiConfig",
    "SessionConfig",
    "OrdersConfig",
    "NotificationsConfig",
    "LoggingConfig",
]
