"""
Formatting utilities for the order console.

Provides consistent money, status and progress formatting across views.
Uses Rich markup syntax.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

STATUS_STYLES = {
    "pending": "yellow",
    "confirmed": "cyan",
    "processing": "blue",
    "preparing": "blue",
    "shipped": "magenta",
    "delivered": "green",
    "cancelled": "red",
    # Payment status
    "paid": "green",
    "partial": "yellow",
    "failed": "red",
    "refunded": "magenta",
    # Transaction status
    "completed": "green",
}


def format_money(amount: Decimal | float | None, currency: str = "EGP") -> str:
    """
    Format an amount with its currency code.

    Args:
        amount: The amount to format (or None)
        currency: ISO-like currency code shown after the amount

    Returns:
        "1,250.00 EGP", or "" when amount is None
    """
    if amount is None:
        return ""
    return f"{Decimal(amount):,.2f} {currency}"


def format_status(status: object, styled: bool = False) -> str:
    """Status label ("partial_failure" -> "Partial Failure"), optionally coloured."""
    raw = getattr(status, "value", status)
    raw = "" if raw is None else str(raw)
    label = raw.replace("_", " ").title()
    if not styled:
        return label
    style = STATUS_STYLES.get(raw)
    return f"[{style}]{label}[/]" if style else label


def format_datetime(value: Optional[datetime | date], with_time: bool = True) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime) and with_time:
        return value.strftime("%Y-%m-%d %H:%M")
    return value.strftime("%Y-%m-%d")


def format_progress(pct: float, width: int = 20) -> str:
    """
    Text progress bar. Values above 100% are not clamped; the bar fills and
    the percentage shows the real value.
    """
    filled = max(0, min(width, int(round(pct / 100 * width))))
    bar = "#" * filled + "-" * (width - filled)
    return f"[{bar}] {pct:.0f}%"


def truncate(text: Optional[str], limit: int = 40) -> str:
    if not text:
        return ""
    return text if len(text) <= limit else text[: limit - 3] + "..."
