"""Order list ViewModel: one table row per order on the current page."""

from __future__ import annotations

from typing import List

from ...models.order import OrderSnapshot
from ..formatters import format_datetime, format_money, format_status, truncate
from .base import BaseViewModel

COLUMNS = ["Order #", "Customer", "Vendor", "Total", "Status", "Payment", "Created"]


class OrderListViewModel(BaseViewModel[OrderSnapshot]):
    """
    Rows keyed by order number, in server order.

    Quoted orders show "Quote pending" instead of a total when the price
    is still zero.
    """

    columns = COLUMNS

    def row_key(self, item: OrderSnapshot) -> str:
        return item.order_number

    def format_row(self, item: OrderSnapshot) -> List[str]:
        if item.has_quoted_items and item.total_price == 0:
            total = "Quote pending"
        else:
            total = format_money(item.total_price, item.currency)

        return [
            item.order_number,
            truncate(item.user_name, 24),
            truncate(item.vendor, 24),
            total,
            item.status_display or format_status(item.status),
            format_status(item.payment_status),
            format_datetime(item.created_at),
        ]
