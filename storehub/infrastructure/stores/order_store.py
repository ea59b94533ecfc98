"""
Order snapshot cache.

Holds the order currently open in the detail view plus the list page on
screen. It is the single source of truth for rendering until a fresh
fetch supersedes it; there is no TTL and no background refresh.

Writing the focused snapshot also patches the matching list row, so the
list and the detail view never disagree after a save.
"""

from __future__ import annotations

from typing import List, Optional

from ...models.order import OrderSnapshot
from ...models.page import Page
from ...models.query import OrderQuery
from ...utils.logging_setup import get_logger
from .rcu_store import RCUList, RCURef

logger = get_logger(__name__)


class OrderStore:
    """Focused order snapshot + current list page, copy-on-write."""

    def __init__(self) -> None:
        self._focused: RCURef[OrderSnapshot] = RCURef()
        self._rows: RCUList[OrderSnapshot] = RCUList()
        self._total = 0
        self._query = OrderQuery()

    # -------------------------------------------------------------------------
    # Snapshot contract
    # -------------------------------------------------------------------------

    def get(self, order_number: str) -> Optional[OrderSnapshot]:
        """Focused snapshot if it matches, else the list row, else None."""
        focused = self._focused.get()
        if focused is not None and focused.order_number == order_number:
            return focused
        return self._rows.find(lambda o: o.order_number == order_number)

    def set(self, order_number: str, snapshot: OrderSnapshot) -> None:
        """
        Replace the focused snapshot and patch its list row.

        Raises:
            ValueError: If the snapshot's identity does not match order_number.
        """
        if snapshot.order_number != order_number:
            raise ValueError(
                f"Snapshot {snapshot.order_number} cannot be stored as {order_number}"
            )
        self._focused.set(snapshot)
        patched = self.patch_row(snapshot)
        logger.debug(f"Stored snapshot {order_number} (list rows patched: {patched})")

    def invalidate(self, order_number: str) -> None:
        """Drop the focused snapshot if it is this order. List rows stay."""
        if self._focused.compare_and_clear(lambda o: o.order_number == order_number):
            logger.debug(f"Invalidated focused snapshot {order_number}")

    # -------------------------------------------------------------------------
    # List page
    # -------------------------------------------------------------------------

    def set_page(self, page: Page[OrderSnapshot], query: OrderQuery) -> None:
        """Replace the whole list page."""
        self._rows.set_all(page.items)
        self._total = page.total
        self._query = query

    def patch_row(self, snapshot: OrderSnapshot) -> int:
        """Replace the list row with the same order number, if on screen."""
        return self._rows.replace_where(
            lambda o: o.order_number == snapshot.order_number, snapshot
        )

    @property
    def focused(self) -> Optional[OrderSnapshot]:
        return self._focused.get()

    @property
    def rows(self) -> List[OrderSnapshot]:
        return self._rows.get_all()

    @property
    def total(self) -> int:
        return self._total

    @property
    def query(self) -> OrderQuery:
        return self._query

    @property
    def version(self) -> int:
        """Changes whenever the focus or the list changes."""
        return self._focused.version + self._rows.version
