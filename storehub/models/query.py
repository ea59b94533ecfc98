"""Order list query (search, filter, pagination)."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, Optional


@dataclass(frozen=True)
class OrderQuery:
    """Filters for the paginated admin order list. Pages are 1-based."""

    search: str = ""
    status: str = ""
    page: int = 1
    page_size: int = 10
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    def to_params(self) -> Dict[str, str]:
        """Query-string parameters; empty filters are sent as empty strings."""
        return {
            "search": self.search,
            "status": self.status,
            "page": str(self.page),
            "page_size": str(self.page_size),
            "start_date": self.start_date.isoformat() if self.start_date else "",
            "end_date": self.end_date.isoformat() if self.end_date else "",
        }

    def with_page(self, page: int) -> "OrderQuery":
        return replace(self, page=max(1, page))

    def with_page_size(self, page_size: int) -> "OrderQuery":
        return self if page_size == self.page_size else replace(self, page_size=page_size)

    def with_filters(self, **filters) -> "OrderQuery":
        """New query with the given filters; always resets to page 1."""
        return replace(self, page=1, **filters)
