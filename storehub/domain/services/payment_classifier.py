"""
Payment step classifier.

Decides which payment summary an order shows from its transactions.
First match wins:

1. any transaction with status ``refunded``  -> REFUNDED view of it
2. any transaction of type ``full``          -> FULL payment view
3. otherwise                                 -> SPLIT view (deposit/final)

An empty transaction list is a valid SPLIT view with zero progress (e.g.
cash-on-delivery orders before any payment is recorded).

Progress is the sum of completed deposit and final amounts over the order
total. It is deliberately not clamped: a sum above the total is surfaced
through ``overflow`` rather than hidden.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Sequence, Tuple

from ...models.payment import PaymentTransaction, TransactionType

DEPOSIT_REQUIRED_HINT = "Initial deposit required to confirm service booking"
FINAL_DUE_HINT = "Final payment due upon service completion"
AWAITING_DEPOSIT_HINT = "Available after deposit is paid"
DEPOSIT_REFUNDED_HINT = "Deposit amount has been refunded"
FINAL_REFUNDED_HINT = "Final payment has been refunded"


class PaymentShape(str, Enum):
    FULL = "full"
    REFUNDED = "refunded"
    SPLIT = "split"


@dataclass(frozen=True)
class PaymentStep:
    """One step of a split payment (1 = deposit, 2 = final)."""

    number: int
    transaction: PaymentTransaction
    hint: Optional[str] = None


@dataclass(frozen=True)
class PaymentSummary:
    """Classified payment state of an order."""

    shape: PaymentShape
    total_amount: Decimal
    transaction: Optional[PaymentTransaction] = None
    deposit: Optional[PaymentTransaction] = None
    final: Optional[PaymentTransaction] = None
    paid_amount: Decimal = Decimal("0")

    @property
    def deposit_paid(self) -> bool:
        return self.deposit is not None and self.deposit.completed

    @property
    def final_paid(self) -> bool:
        return self.final is not None and self.final.completed

    @property
    def is_complete(self) -> bool:
        """Both split steps settled."""
        return self.deposit_paid and self.final_paid

    @property
    def progress(self) -> Decimal:
        """paid / total as a ratio; 0 when the total is 0."""
        if self.total_amount == 0:
            return Decimal("0")
        return self.paid_amount / self.total_amount

    @property
    def progress_pct(self) -> float:
        return float(self.progress * 100)

    @property
    def overflow(self) -> bool:
        """Completed amounts exceed the order total (data error upstream)."""
        return self.paid_amount > self.total_amount

    @property
    def steps(self) -> Tuple[PaymentStep, ...]:
        """Deposit/final steps with their operator hints (SPLIT only)."""
        if self.shape != PaymentShape.SPLIT:
            return ()

        steps = []
        if self.deposit is not None:
            if self.deposit.is_refunded:
                hint = DEPOSIT_REFUNDED_HINT
            elif not self.deposit.completed:
                hint = DEPOSIT_REQUIRED_HINT
            else:
                hint = None
            steps.append(PaymentStep(number=1, transaction=self.deposit, hint=hint))

        if self.final is not None:
            if self.final.is_refunded:
                hint = FINAL_REFUNDED_HINT
            elif not self.deposit_paid:
                hint = AWAITING_DEPOSIT_HINT
            elif not self.final.completed:
                hint = FINAL_DUE_HINT
            else:
                hint = None
            steps.append(PaymentStep(number=2, transaction=self.final, hint=hint))

        return tuple(steps)


def _first(transactions: Sequence[PaymentTransaction], predicate) -> Optional[PaymentTransaction]:
    return next((t for t in transactions if predicate(t)), None)


def classify_payments(
    transactions: Sequence[PaymentTransaction],
    total_amount: Decimal,
) -> PaymentSummary:
    """
    Classify an order's transactions into a payment summary.

    Args:
        transactions: Order payment transactions, in server order.
        total_amount: Order total used as the progress denominator.

    Returns:
        PaymentSummary for the first matching shape.
    """
    total = Decimal(total_amount)

    refunded = _first(transactions, lambda t: t.is_refunded)
    if refunded is not None:
        return PaymentSummary(shape=PaymentShape.REFUNDED, total_amount=total, transaction=refunded)

    full = _first(transactions, lambda t: t.type == TransactionType.FULL)
    if full is not None:
        paid = full.amount if full.completed else Decimal("0")
        return PaymentSummary(shape=PaymentShape.FULL, total_amount=total, transaction=full, paid_amount=paid)

    deposit = _first(transactions, lambda t: t.type == TransactionType.DEPOSIT)
    final = _first(transactions, lambda t: t.type == TransactionType.FINAL)

    paid = Decimal("0")
    for step in (deposit, final):
        if step is not None and step.completed:
            paid += step.amount

    return PaymentSummary(
        shape=PaymentShape.SPLIT,
        total_amount=total,
        deposit=deposit,
        final=final,
        paid_amount=paid,
    )
