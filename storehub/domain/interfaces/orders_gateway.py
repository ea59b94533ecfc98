"""Orders gateway interface consumed by the reconciliation core."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ...models.order import OrderSnapshot
from ...models.page import Page
from ...models.query import OrderQuery


class OrdersGateway(ABC):
    """
    Remote order backend.

    Implementations raise RecoverableError subclasses on transport or
    server failures; they never return partial data.
    """

    @abstractmethod
    async def list_orders(self, query: OrderQuery) -> Page[OrderSnapshot]:
        """Fetch one page of orders matching the query."""
        pass

    @abstractmethod
    async def get_order(self, order_number: str) -> OrderSnapshot:
        """Fetch the full order detail (timeline, transactions, permissions)."""
        pass

    @abstractmethod
    async def update_order(self, order_number: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Send a partial update containing only the changed wire fields.

        Returns:
            The server's response body, if any.
        """
        pass
