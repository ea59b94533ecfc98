"""Domain interfaces for the remote backend, the session and the event bus."""

from .event_bus import EventBus
from .notifications_gateway import NotificationsGateway
from .orders_gateway import OrdersGateway
from .session_store import SessionStore

__all__ = ["EventBus", "NotificationsGateway", "OrdersGateway", "SessionStore"]
