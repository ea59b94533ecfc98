"""Notification list ViewModel."""

from __future__ import annotations

from typing import List

from ...models.notification import Notification
from ..formatters import format_datetime, truncate
from .base import BaseViewModel

COLUMNS = ["ID", "", "Title", "Message", "Type", "Received"]


class NotificationViewModel(BaseViewModel[Notification]):
    """Rows keyed by notification id, unread ones flagged with a star."""

    columns = COLUMNS

    def row_key(self, item: Notification) -> str:
        return item.id

    def format_row(self, item: Notification) -> List[str]:
        return [
            item.id,
            "" if item.is_read else "*",
            truncate(item.title, 40),
            truncate(item.message, 60),
            item.notification_type_display or item.notification_type or "",
            format_datetime(item.created_at),
        ]
