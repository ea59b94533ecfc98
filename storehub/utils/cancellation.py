"""
Cancellation tokens for async calls tied to a focused order.

A token is handed to every reconciliation call. Closing or re-focusing the
detail view cancels the token; the controller checks it after each await
and drops responses that arrive for an order that is no longer in focus.
"""

from __future__ import annotations

from typing import Optional


class CancellationToken:
    """Cooperative cancellation flag."""

    __slots__ = ("_cancelled", "_reason", "label")

    def __init__(self, label: str = "") -> None:
        self._cancelled = False
        self._reason: Optional[str] = None
        self.label = label

    def cancel(self, reason: str = "cancelled") -> None:
        """Mark the token cancelled. Idempotent; the first reason wins."""
        if not self._cancelled:
            self._cancelled = True
            self._reason = reason

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def __repr__(self) -> str:
        state = f"cancelled: {self._reason}" if self._cancelled else "active"
        return f"CancellationToken({self.label!r}, {state})"
