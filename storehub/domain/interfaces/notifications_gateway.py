"""Notifications gateway interface consumed by the poller."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...models.notification import Notification
from ...models.page import Page


class NotificationsGateway(ABC):
    """Remote notification service."""

    @abstractmethod
    async def list_notifications(self, page: int = 1, limit: Optional[int] = None) -> Page[Notification]:
        pass

    @abstractmethod
    async def unread_count(self) -> int:
        pass

    @abstractmethod
    async def mark_read(self, notification_id: str) -> None:
        pass

    @abstractmethod
    async def mark_all_read(self) -> None:
        pass

    @abstractmethod
    async def delete(self, notification_id: str) -> None:
        pass

    @abstractmethod
    async def delete_all(self) -> None:
        pass
