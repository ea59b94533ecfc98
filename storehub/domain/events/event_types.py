"""Event types and the operator notice payload."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class EventType(Enum):
    """Client event types."""
    # Operator-facing transient messages
    NOTICE = "notice"

    # Order list / detail
    ORDERS_LOADED = "orders_loaded"
    ORDER_FOCUSED = "order_focused"
    ORDER_CLOSED = "order_closed"
    ORDER_RECONCILED = "order_reconciled"
    ORDER_AUTO_CLOSE = "order_auto_close"

    # Notifications
    NOTIFICATIONS_UPDATED = "notifications_updated"
    UNREAD_COUNT_CHANGED = "unread_count_changed"

    # Session
    SESSION_EXPIRED = "session_expired"


class NoticeLevel(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """
    Non-blocking message for the operator.

    Every recoverable error that reaches a UI-facing operation ends up as
    one of these instead of an exception.
    """

    level: NoticeLevel
    message: str
    order_number: Optional[str] = None
    detail: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level.value,
            "message": self.message,
            "order_number": self.order_number,
            "detail": self.detail,
        }
