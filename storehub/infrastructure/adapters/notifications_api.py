"""REST adapter for the notification endpoints."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional
from urllib.parse import quote

from ...domain.interfaces.notifications_gateway import NotificationsGateway
from ...models.notification import Notification
from ...models.page import Page
from ...utils.logging_setup import get_logger
from .envelope import UnreadCountBody, parse_model, parse_page
from .http_client import ApiClient

logger = get_logger(__name__)

NOTIFICATIONS_PATH = "/auth/notifications/"
UNREAD_COUNT_PATH = "/auth/notifications/unread-count/"
MARK_READ_PATH = "/auth/notifications/{id}/read/"
MARK_ALL_READ_PATH = "/auth/notifications/mark-all-read/"
DELETE_PATH = "/auth/notifications/{id}/delete/"
DELETE_ALL_PATH = "/auth/notifications/delete-all/"


class NotificationsApi(NotificationsGateway):
    """NotificationsGateway over the StoreHub REST API."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def list_notifications(self, page: int = 1, limit: Optional[int] = None) -> Page[Notification]:
        params: Dict[str, Any] = {"page": page}
        if limit is not None:
            params["limit"] = limit
        body = await asyncio.to_thread(self.client.get, NOTIFICATIONS_PATH, params)
        return parse_page(body, Notification)

    async def unread_count(self) -> int:
        body = await asyncio.to_thread(self.client.get, UNREAD_COUNT_PATH)
        return parse_model(body, UnreadCountBody).unread_count

    async def mark_read(self, notification_id: str) -> None:
        await asyncio.to_thread(self.client.post, MARK_READ_PATH.format(id=quote(notification_id, safe="")))
        logger.debug(f"Marked notification {notification_id} read")

    async def mark_all_read(self) -> None:
        await asyncio.to_thread(self.client.post, MARK_ALL_READ_PATH)

    async def delete(self, notification_id: str) -> None:
        await asyncio.to_thread(self.client.delete, DELETE_PATH.format(id=quote(notification_id, safe="")))
        logger.debug(f"Deleted notification {notification_id}")

    async def delete_all(self) -> None:
        await asyncio.to_thread(self.client.delete, DELETE_ALL_PATH)
