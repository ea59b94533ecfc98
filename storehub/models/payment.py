"""Payment transaction models.

Terminology:
- Full payment: the order is settled by one transaction of type ``full``.
- Split payment: a ``deposit`` confirms the booking, a ``final`` settles the
  remainder once the service is delivered.
- Refund: a transaction whose status moved to ``refunded``.

Transactions are created and mutated server-side only; the client reads
and classifies them.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TransactionType(str, Enum):
    """Transaction type."""
    FULL = "full"
    DEPOSIT = "deposit"
    FINAL = "final"
    REFUND = "refund"


class TransactionStatus(str, Enum):
    """Transaction status."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentTransaction(BaseModel):
    """A single payment transaction attached to an order."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    type: TransactionType = Field(alias="transaction_type")
    status: TransactionStatus = Field(alias="transaction_status")
    amount: Decimal = Decimal("0")
    method: Optional[str] = Field(default=None, alias="payment_method")
    transaction_id: Optional[str] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    is_completed: Optional[bool] = None

    # Server-rendered labels
    type_display: Optional[str] = Field(default=None, alias="transaction_type_display")
    status_display: Optional[str] = Field(default=None, alias="transaction_status_display")
    method_display: Optional[str] = Field(default=None, alias="payment_method_display")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value):
        return str(value) if value is not None else value

    @property
    def completed(self) -> bool:
        """Server flag when present, otherwise derived from status."""
        if self.is_completed is not None:
            return self.is_completed
        return self.status == TransactionStatus.COMPLETED

    @property
    def is_refunded(self) -> bool:
        return self.status == TransactionStatus.REFUNDED
