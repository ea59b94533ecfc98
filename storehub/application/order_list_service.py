"""
Paginated admin order list.

Search, status/date filters and paging over ``GET /orders/admin/orders/``.
The page on screen lives in the OrderStore; a failed load leaves it in
place and publishes a notice instead.
"""

from __future__ import annotations

from typing import List, Optional

from ..domain.events.event_types import EventType, NoticeLevel
from ..domain.exceptions import RecoverableError
from ..domain.interfaces.orders_gateway import OrdersGateway
from ..infrastructure.stores.order_store import OrderStore
from ..models.order import OrderSnapshot
from ..models.page import Page
from ..models.query import OrderQuery
from ..utils.logging_setup import get_logger
from ..utils.trace_context import new_operation
from .reconciliation import describe_error
from .simple_event_bus import SimpleEventBus

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 10


class OrderListService:
    """Loads order list pages into the OrderStore."""

    def __init__(
        self,
        gateway: OrdersGateway,
        store: OrderStore,
        event_bus: SimpleEventBus,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.gateway = gateway
        self.store = store
        self.event_bus = event_bus
        self.page_size = page_size
        self._loading = False

    @property
    def query(self) -> OrderQuery:
        return self.store.query

    @property
    def rows(self) -> List[OrderSnapshot]:
        return self.store.rows

    @property
    def total(self) -> int:
        return self.store.total

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def page_count(self) -> int:
        return Page(total=self.store.total).page_count(self.page_size)

    @property
    def has_next(self) -> bool:
        return self.query.page < self.page_count

    @property
    def has_previous(self) -> bool:
        return self.query.page > 1

    async def load(self, query: Optional[OrderQuery] = None) -> bool:
        """
        Load one page.

        Args:
            query: Query to load (defaults to the current one).

        Returns:
            True when the page was replaced, False when the load failed.
        """
        # page_count assumes the server honours the requested page size
        query = (query or self.store.query).with_page_size(self.page_size)

        with new_operation():
            self._loading = True
            try:
                page = await self.gateway.list_orders(query)
            except RecoverableError as e:
                message = describe_error(e)
                logger.warning(f"Failed to load orders (page {query.page}): {message}")
                self.event_bus.notify(NoticeLevel.ERROR, f"Failed to load orders: {message}")
                return False
            finally:
                self._loading = False

            self.store.set_page(page, query)
            logger.info(f"Loaded {len(page)} orders (page {query.page}, total {page.total})")
            self.event_bus.publish(EventType.ORDERS_LOADED, page)
            return True

    async def refresh(self) -> bool:
        """Reload the current page."""
        return await self.load(self.store.query)

    async def next_page(self) -> bool:
        if not self.has_next:
            return False
        return await self.load(self.query.with_page(self.query.page + 1))

    async def previous_page(self) -> bool:
        if not self.has_previous:
            return False
        return await self.load(self.query.with_page(self.query.page - 1))

    async def go_to_page(self, page: int) -> bool:
        page = min(max(1, page), self.page_count)
        return await self.load(self.query.with_page(page))

    async def apply_filters(self, **filters) -> bool:
        """
        Apply search / status / date filters and return to page 1.

        Keyword arguments are OrderQuery fields: search, status, start_date,
        end_date.
        """
        return await self.load(self.query.with_filters(**filters))
