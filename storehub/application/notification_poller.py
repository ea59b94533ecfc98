"""
Notification poller - bell/indicator refresh loop.

Refreshes the unread count and the latest notifications every
``poll_interval_sec`` on its own asyncio task, independent of order
reconciliation. A failed poll is logged and the loop carries on.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

from ..domain.events.event_types import EventType, NoticeLevel
from ..domain.exceptions import RecoverableError
from ..domain.interfaces.notifications_gateway import NotificationsGateway
from ..models.notification import Notification
from ..utils.logging_setup import get_logger
from ..utils.trace_context import new_operation
from .reconciliation import describe_error
from .simple_event_bus import SimpleEventBus

logger = get_logger(__name__)


class NotificationPoller:
    """
    Periodic notification refresh.

    Responsibilities:
    - Poll unread count and latest notifications
    - Publish UNREAD_COUNT_CHANGED / NOTIFICATIONS_UPDATED on change
    - Mark-read / delete passthroughs that keep the count in sync
    """

    def __init__(
        self,
        gateway: NotificationsGateway,
        event_bus: SimpleEventBus,
        poll_interval_sec: float = 30.0,
        preview_limit: int = 5,
    ):
        """
        Initialize the poller.

        Args:
            gateway: Remote notification service.
            event_bus: EventBus for publishing updates.
            poll_interval_sec: Seconds between polls.
            preview_limit: Number of latest notifications kept for the bell.
        """
        self.gateway = gateway
        self.event_bus = event_bus
        self.poll_interval_sec = poll_interval_sec
        self.preview_limit = preview_limit

        self._unread_count = 0
        self._latest: List[Notification] = []
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def unread_count(self) -> int:
        return self._unread_count

    @property
    def latest(self) -> List[Notification]:
        return list(self._latest)

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start polling loop."""
        if self._running:
            logger.warning("Notification poller already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._poll_loop())
        logger.info(f"Notification poller started (every {self.poll_interval_sec}s)")

    async def stop(self) -> None:
        """Stop polling loop."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Notification poller stopped")

    async def _poll_loop(self) -> None:
        while self._running:
            try:
                await self.poll_once()
            except Exception as e:
                logger.error(f"Notification poller error: {e}", exc_info=True)
            await asyncio.sleep(self.poll_interval_sec)

    async def poll_once(self) -> bool:
        """
        Refresh unread count and latest notifications once.

        Returns:
            True when both calls succeeded.
        """
        with new_operation():
            try:
                count = await self.gateway.unread_count()
                page = await self.gateway.list_notifications(page=1, limit=self.preview_limit)
            except RecoverableError as e:
                logger.warning(f"Notification poll failed: {e}")
                return False

            self._set_unread_count(count)
            latest = list(page.items[: self.preview_limit])
            if latest != self._latest:
                self._latest = latest
                self.event_bus.publish(EventType.NOTIFICATIONS_UPDATED, self.latest)
            logger.debug(f"Polled notifications: unread={count} latest={len(latest)}")
            return True

    def _set_unread_count(self, count: int) -> None:
        if count != self._unread_count:
            self._unread_count = count
            self.event_bus.publish(EventType.UNREAD_COUNT_CHANGED, count)

    # -------------------------------------------------------------------------
    # Operator actions
    # -------------------------------------------------------------------------

    async def mark_read(self, notification_id: str) -> bool:
        return await self._act(self.gateway.mark_read, notification_id, "mark notification as read")

    async def mark_all_read(self) -> bool:
        return await self._act(self.gateway.mark_all_read, None, "mark all notifications as read")

    async def delete(self, notification_id: str) -> bool:
        return await self._act(self.gateway.delete, notification_id, "delete notification")

    async def delete_all(self) -> bool:
        return await self._act(self.gateway.delete_all, None, "delete notifications")

    async def _act(self, call, notification_id: Optional[str], what: str) -> bool:
        with new_operation():
            try:
                if notification_id is None:
                    await call()
                else:
                    await call(notification_id)
            except RecoverableError as e:
                message = describe_error(e)
                logger.warning(f"Failed to {what}: {message}")
                self.event_bus.notify(NoticeLevel.ERROR, f"Failed to {what}: {message}")
                return False
            logger.info(f"Done: {what} ({notification_id or 'all'})")

        await self.poll_once()
        return True
