"""Event bus interface: how services reach the views without importing them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from ..events.event_types import EventType, Notice, NoticeLevel

Subscriber = Callable[[Any], None]


class EventBus(ABC):
    """
    In-process publish/subscribe.

    Publishing is synchronous and never raises because of a subscriber;
    the reconciliation controller publishes in the middle of a save and a
    broken view must not change the save's outcome.
    """

    @abstractmethod
    def publish(self, event_type: EventType, payload: Any) -> None:
        """Deliver payload to every subscriber of event_type, in subscription order."""

    @abstractmethod
    def subscribe(self, event_type: EventType, callback: Subscriber) -> None:
        pass

    @abstractmethod
    def unsubscribe(self, event_type: EventType, callback: Subscriber) -> None:
        """Remove callback; unknown callbacks are ignored."""

    @abstractmethod
    def notify(
        self,
        level: NoticeLevel,
        message: str,
        order_number: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> Notice:
        """Publish an operator notice (EventType.NOTICE) and return it."""
