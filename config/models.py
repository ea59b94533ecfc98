"""Configuration data models."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, Optional


@dataclass
class ApiConfig:
    """StoreHub REST backend."""
    base_url: str
    timeout_sec: float = 10.0
    refresh_path: str = "/auth/token/refresh/"


@dataclass
class SessionConfig:
    """Where access/refresh tokens and preferences are kept."""
    backend: str = "file"  # memory | file
    path: str = "~/.storehub/session.json"


@dataclass
class OrdersConfig:
    """Order list and detail behaviour."""
    page_size: int = 10
    auto_close_delay_sec: float = 1.5


@dataclass
class NotificationsConfig:
    """Notification bell polling."""
    poll_interval_sec: float = 30.0
    preview_limit: int = 5


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    json: bool = True
    log_dir: str = "./logs"
    console: bool = False


@dataclass
class AppConfig:
    """Complete application configuration."""
    api: ApiConfig
    session: SessionConfig = field(default_factory=SessionConfig)
    orders: OrdersConfig = field(default_factory=OrdersConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    raw: Dict[str, Any] = field(default_factory=dict)
    env: Optional[str] = None
