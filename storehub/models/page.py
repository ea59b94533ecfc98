"""Paginated result envelope."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """
    One page of a server-paginated collection.

    ``total`` is the server-side count across all pages, not len(items).
    """

    items: List[T] = field(default_factory=list)
    total: int = 0

    def page_count(self, page_size: int) -> int:
        """Number of pages at the given page size (at least 1)."""
        if page_size <= 0:
            return 1
        return max(1, math.ceil(self.total / page_size))

    def __len__(self) -> int:
        return len(self.items)
