"""Simple in-memory event bus implementation."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from ..domain.events.event_types import EventType, Notice, NoticeLevel
from ..domain.interfaces.event_bus import EventBus
from ..utils.logging_setup import get_logger

logger = get_logger(__name__)


class SimpleEventBus(EventBus):
    """
    Simple in-memory event bus implementation.

    Subscriber errors are logged and never reach the publisher, so a broken
    view cannot abort a save.
    """

    def __init__(self):
        self._subscribers: Dict[EventType, List[Callable[[Any], None]]] = {}

    def publish(self, event_type: EventType, payload: Any) -> None:
        logger.debug(f"Publishing event: {event_type.value}")

        for callback in list(self._subscribers.get(event_type, [])):
            try:
                callback(payload)
            except Exception as e:
                logger.error(f"Error in event subscriber: {e}", exc_info=True)

    def subscribe(self, event_type: EventType, callback: Callable[[Any], None]) -> None:
        self._subscribers.setdefault(event_type, []).append(callback)
        logger.debug(f"Subscribed to {event_type.value}")

    def unsubscribe(self, event_type: EventType, callback: Callable[[Any], None]) -> None:
        if event_type in self._subscribers:
            try:
                self._subscribers[event_type].remove(callback)
            except ValueError:
                logger.warning(f"Callback not found for {event_type.value}")

    def notify(
        self,
        level: NoticeLevel,
        message: str,
        order_number: str | None = None,
        detail: str | None = None,
    ) -> Notice:
        """Publish an operator notice and return it."""
        notice = Notice(level=level, message=message, order_number=order_number, detail=detail)
        self.publish(EventType.NOTICE, notice)
        return notice
