"""
Application Bootstrap - Composition Root for Service Wiring.

Builds the HTTP client, REST adapters, caches and controllers from an
AppConfig so the CLI (and tests) get one explicitly wired object graph.

Usage:
    container = AppContainer(config)
    container.initialize(logger)
    await container.order_list.load()
    ...
    await container.cleanup()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, TYPE_CHECKING

import requests

from ..domain.interfaces.session_store import SessionStore
from ..infrastructure.adapters import ApiClient, NotificationsApi, OrdersApi
from ..infrastructure.session import FileSessionStore, MemorySessionStore
from ..infrastructure.stores import OrderStore
from ..utils.structured_logger import LogCategory, StructuredLogger
from .notification_poller import NotificationPoller
from .order_list_service import OrderListService
from .reconciliation import ReconciliationController
from .simple_event_bus import SimpleEventBus

if TYPE_CHECKING:
    from config.models import AppConfig


@dataclass
class AppContainer:
    """
    Composition root for all application services.

    Attributes:
        config: Application configuration.
        session_store: Optional pre-built session store (overrides config).
        http: Optional pre-built requests.Session (tests inject a mock).
    """

    config: "AppConfig"
    session_store: Optional[SessionStore] = None
    http: Optional[requests.Session] = None

    # Created during initialize
    event_bus: Optional[SimpleEventBus] = field(default=None, init=False)
    client: Optional[ApiClient] = field(default=None, init=False)
    orders_api: Optional[OrdersApi] = field(default=None, init=False)
    notifications_api: Optional[NotificationsApi] = field(default=None, init=False)
    order_store: Optional[OrderStore] = field(default=None, init=False)
    order_list: Optional[OrderListService] = field(default=None, init=False)
    controller: Optional[ReconciliationController] = field(default=None, init=False)
    poller: Optional[NotificationPoller] = field(default=None, init=False)

    _logger: Optional[StructuredLogger] = field(default=None, init=False)
    _initialized: bool = field(default=False, init=False)

    def initialize(self, logger: Optional[StructuredLogger] = None) -> "AppContainer":
        """
        Create and wire all services.

        Args:
            logger: Structured logger for initialization messages.

        Raises:
            RuntimeError: If called twice.
        """
        if self._initialized:
            raise RuntimeError("AppContainer already initialized")

        self._logger = logger

        # Phase 1: Core infrastructure
        self.event_bus = SimpleEventBus()
        self.order_store = OrderStore()
        self._create_session_store()

        # Phase 2: REST adapters
        api = self.config.api
        self.client = ApiClient(
            base_url=api.base_url,
            session_store=self.session_store,
            timeout_sec=api.timeout_sec,
            refresh_path=api.refresh_path,
            http=self.http,
        )
        self.orders_api = OrdersApi(self.client)
        self.notifications_api = NotificationsApi(self.client)
        self._log("REST adapters created", {"base_url": api.base_url})

        # Phase 3: Application services
        self.order_list = OrderListService(
            gateway=self.orders_api,
            store=self.order_store,
            event_bus=self.event_bus,
            page_size=self.config.orders.page_size,
        )
        self.controller = ReconciliationController(
            gateway=self.orders_api,
            store=self.order_store,
            event_bus=self.event_bus,
            auto_close_delay_sec=self.config.orders.auto_close_delay_sec,
        )
        self.poller = NotificationPoller(
            gateway=self.notifications_api,
            event_bus=self.event_bus,
            poll_interval_sec=self.config.notifications.poll_interval_sec,
            preview_limit=self.config.notifications.preview_limit,
        )

        self._initialized = True
        self._log("AppContainer initialization complete")
        return self

    def _create_session_store(self) -> None:
        if self.session_store is not None:
            self._log("Using injected session store")
            return

        session = self.config.session
        if session.backend == "memory":
            self.session_store = MemorySessionStore()
        else:
            self.session_store = FileSessionStore(Path(session.path).expanduser())
        self._log("Session store created", {"backend": session.backend})

    def _log(self, message: str, extra: Optional[Dict] = None) -> None:
        """Log a message if logger is available."""
        if self._logger:
            self._logger.info(LogCategory.SYSTEM, message, extra or {})

    async def cleanup(self) -> None:
        """Stop background tasks and release the HTTP session."""
        if self.poller is not None:
            await self.poller.stop()
        if self.controller is not None:
            self.controller.close()
        if self.client is not None:
            self.client.close()
        self._log("AppContainer cleaned up")
