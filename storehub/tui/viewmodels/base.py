"""
Table ViewModel base - framework agnostic.

A table view model formats one item (order, notification) into one row of
strings keyed by the item's identity and remembers what it formatted last
time. Re-formatting a refreshed page therefore yields only the rows and
cells that changed, so a watch loop prints what is new and nothing else.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class CellUpdate:
    """One changed cell of an existing row."""

    row_key: str
    column_index: int
    value: str


@dataclass
class RowUpdate:
    """A row that appeared ("add", with its values) or disappeared ("remove")."""

    row_key: str
    action: str
    values: Optional[List[str]] = None


@dataclass
class TableUpdate:
    """Result of comparing a freshly formatted page with the cached one."""

    rows: List[RowUpdate] = field(default_factory=list)
    cells: List[CellUpdate] = field(default_factory=list)
    order: List[str] = field(default_factory=list)
    reordered: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.rows and not self.cells and not self.reordered


class BaseViewModel(ABC, Generic[T]):
    """
    Rows keyed by item identity, with a cache of the last formatted page.

    Subclasses provide ``columns``, ``row_key`` and ``format_row``. View
    models never import rich and never hold renderables.
    """

    columns: Sequence[str] = ()

    def __init__(self) -> None:
        self._rows: Dict[str, List[str]] = {}
        self._order: List[str] = []

    @abstractmethod
    def row_key(self, item: T) -> str:
        """Stable identity of the row for this item."""

    @abstractmethod
    def format_row(self, item: T) -> List[str]:
        """Display strings for this item, one per column."""

    def compute_updates(self, items: Sequence[T]) -> TableUpdate:
        """Diff the new page against the cached one and cache the new page."""
        rows = {self.row_key(item): self.format_row(item) for item in items}
        # Server order; rows are never re-sorted client-side
        order = [self.row_key(item) for item in items]
        update = TableUpdate(order=order)

        for key in self._order:
            if key not in rows:
                update.rows.append(RowUpdate(row_key=key, action="remove"))

        for key in order:
            old = self._rows.get(key)
            if old is None:
                update.rows.append(RowUpdate(row_key=key, action="add", values=rows[key]))
                continue
            for index, (before, after) in enumerate(zip(old, rows[key])):
                if before != after:
                    update.cells.append(CellUpdate(row_key=key, column_index=index, value=after))

        kept_before = [key for key in self._order if key in rows]
        kept_after = [key for key in order if key in self._rows]
        update.reordered = kept_before != kept_after

        self._rows = rows
        self._order = order
        return update

    def cached_row(self, row_key: str) -> Optional[List[str]]:
        row = self._rows.get(row_key)
        return list(row) if row is not None else None
