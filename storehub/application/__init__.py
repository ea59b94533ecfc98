"""Application layer: edit overlay, reconciliation, order list, notifications."""

from .bootstrap import AppContainer
from .edit_overlay import EditOverlay
from .notification_poller import NotificationPoller
from .order_list_service import OrderListService
from .reconciliation import (
    Confirmed,
    ControllerState,
    Discarded,
    NoChanges,
    ReconciliationController,
    Rejected,
    SaveOutcome,
    Unconfirmed,
)
from .simple_event_bus import SimpleEventBus

__all__ = [
    "AppContainer",
    "EditOverlay",
    "NotificationPoller",
    "OrderListService",
    "Confirmed",
    "ControllerState",
    "Discarded",
    "NoChanges",
    "ReconciliationController",
    "Rejected",
    "SaveOutcome",
    "Unconfirmed",
    "SimpleEventBus",
]
