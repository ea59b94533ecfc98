"""Wire models validated at the API boundary."""

from .notification import Notification
from .order import OrderItem, OrderSnapshot, OrderStatus, PaymentStatus, TimelineEntry
from .page import Page
from .query import OrderQuery
from .payment import PaymentTransaction, TransactionStatus, TransactionType

__all__ = [
    "Notification",
    "OrderItem",
    "OrderSnapshot",
    "OrderStatus",
    "PaymentStatus",
    "TimelineEntry",
    "Page",
    "OrderQuery",
    "PaymentTransaction",
    "TransactionStatus",
    "TransactionType",
]
