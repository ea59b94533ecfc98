"""REST adapters for the StoreHub backend."""

from .http_client import ApiClient
from .notifications_api import NotificationsApi
from .orders_api import OrdersApi

__all__ = ["ApiClient", "NotificationsApi", "OrdersApi"]
