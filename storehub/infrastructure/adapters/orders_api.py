"""REST adapter for the admin orders endpoints."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional
from urllib.parse import quote

from ...domain.interfaces.orders_gateway import OrdersGateway
from ...models.order import OrderSnapshot
from ...models.page import Page
from ...models.query import OrderQuery
from ...utils.logging_setup import get_logger
from .envelope import parse_model, parse_page
from .http_client import ApiClient

logger = get_logger(__name__)

ORDERS_PATH = "/orders/admin/orders/"
ORDER_DETAIL_PATH = "/orders/admin/orders/{order_number}/"
ORDER_UPDATE_PATH = "/orders/admin/orders/{order_number}/update-status/"


class OrdersApi(OrdersGateway):
    """OrdersGateway over the StoreHub REST API."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def list_orders(self, query: OrderQuery) -> Page[OrderSnapshot]:
        return await asyncio.to_thread(self.list_orders_sync, query)

    async def get_order(self, order_number: str) -> OrderSnapshot:
        return await asyncio.to_thread(self.get_order_sync, order_number)

    async def update_order(self, order_number: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await asyncio.to_thread(self.update_order_sync, order_number, payload)

    # Blocking implementations (run in a worker thread)

    def list_orders_sync(self, query: OrderQuery) -> Page[OrderSnapshot]:
        body = self.client.get(ORDERS_PATH, params=query.to_params())
        page = parse_page(body, OrderSnapshot)
        logger.debug(f"Listed {len(page)} of {page.total} orders (page {query.page})")
        return page

    def get_order_sync(self, order_number: str) -> OrderSnapshot:
        body = self.client.get(ORDER_DETAIL_PATH.format(order_number=quote(order_number, safe="")))
        return parse_model(body, OrderSnapshot)

    def update_order_sync(self, order_number: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        logger.info(f"Updating order {order_number}: fields={sorted(payload)}")
        body = self.client.post(
            ORDER_UPDATE_PATH.format(order_number=quote(order_number, safe="")),
            json_body=payload,
        )
        return body if isinstance(body, dict) else None
