"""Order snapshot model.

An OrderSnapshot is the last server-confirmed representation of an order.
It is frozen: the client never edits a snapshot in place. Local edits live
in the EditOverlay and a new snapshot only ever comes from a fetch (or, in
degraded mode, from an explicit local merge flagged as unconfirmed).
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .payment import PaymentTransaction


class OrderStatus(str, Enum):
    """Order lifecycle status (server-authoritative)."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    PREPARING = "preparing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Aggregate payment status of an order."""
    PENDING = "pending"
    PAID = "paid"
    PARTIAL = "partial"
    FAILED = "failed"
    REFUNDED = "refunded"


_FROZEN = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class OrderItem(BaseModel):
    """Line item. Quoted items carry no price until the vendor prices them."""

    model_config = _FROZEN

    name: str = Field(default="", validation_alias=AliasChoices("name", "product_name", "service_name"))
    quantity: int = 1
    unit_price: Optional[Decimal] = Field(default=None, validation_alias=AliasChoices("unit_price", "price"))
    total_price: Optional[Decimal] = None
    to_be_quoted: bool = False

    @property
    def line_total(self) -> Optional[Decimal]:
        if self.to_be_quoted:
            return None
        if self.total_price is not None:
            return self.total_price
        if self.unit_price is not None:
            return self.unit_price * self.quantity
        return None


class TimelineEntry(BaseModel):
    """Lifecycle milestone as reported by the server."""

    model_config = _FROZEN

    status: str
    label: str = ""
    timestamp: Optional[datetime] = None
    # None when the server did not say; explicit False is kept
    completed: Optional[bool] = None


class OrderSnapshot(BaseModel):
    """Server-authoritative order record."""

    model_config = _FROZEN

    order_number: str
    status: OrderStatus = Field(alias="order_status")
    payment_status: PaymentStatus = PaymentStatus.PENDING
    total_price: Decimal = Decimal("0")
    currency: str = "EGP"
    notes: Optional[str] = None
    hint_note: Optional[str] = None
    vendor: Optional[str] = None
    items: Tuple[OrderItem, ...] = ()
    timeline: Tuple[TimelineEntry, ...] = ()
    payment_transactions: Tuple[PaymentTransaction, ...] = ()
    can_be_edited: bool = False
    can_be_cancelled: bool = False

    # Display and tracking details
    user_name: Optional[str] = None
    shipping_address: Any = None
    created_at: Optional[datetime] = None
    status_display: Optional[str] = None
    is_trackable: bool = False
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    estimated_delivery: Optional[date] = None

    @field_validator("order_number", mode="before")
    @classmethod
    def _order_number_as_str(cls, value):
        return str(value) if value is not None else value

    @field_validator("items", "timeline", "payment_transactions", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return () if value is None else value

    def with_fields(self, fields: Dict[str, Any]) -> "OrderSnapshot":
        """
        Copy with the given attribute values replaced.

        Values must already be of the attribute's type; no validation runs.
        """
        if not fields:
            return self
        return self.model_copy(update=fields)

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    @property
    def has_quoted_items(self) -> bool:
        return any(item.to_be_quoted for item in self.items)
