"""
Read-Copy-Update containers for the order caches.

Readers (view models, the CLI renderer) get a consistent snapshot without
locking: every write builds a new object and swaps the reference, which is
atomic in Python. The list cache is therefore never observed half-patched
while a save is replacing one of its rows.

Usage:
    rows = RCUList[OrderSnapshot]()
    rows.set_all(page.items)
    rows.replace_where(lambda o: o.order_number == n, fresh)

    focused = RCURef[OrderSnapshot]()
    focused.set(snapshot)
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, Iterator, List, Optional, TypeVar

V = TypeVar("V")


class RCURef(Generic[V]):
    """Single atomically replaced reference."""

    __slots__ = ("_value", "_write_lock", "_version")

    def __init__(self, initial: Optional[V] = None):
        self._value: Optional[V] = initial
        self._write_lock = threading.Lock()
        self._version = 0

    def get(self) -> Optional[V]:
        """Lock-free read."""
        return self._value

    def set(self, value: Optional[V]) -> None:
        with self._write_lock:
            self._value = value
            self._version += 1

    def compare_and_clear(self, predicate: Callable[[V], bool]) -> bool:
        """Clear the reference if the current value matches predicate."""
        with self._write_lock:
            if self._value is None or not predicate(self._value):
                return False
            self._value = None
            self._version += 1
            return True

    @property
    def version(self) -> int:
        return self._version


class RCUList(Generic[V]):
    """
    Read-Copy-Update list for lock-free reads.

    get_all() returns the internal list; treat it as immutable.
    """

    __slots__ = ("_data", "_write_lock", "_version")

    def __init__(self, initial: Optional[List[V]] = None):
        self._data: List[V] = list(initial) if initial else []
        self._write_lock = threading.Lock()
        self._version = 0

    def get_all(self) -> List[V]:
        """Lock-free snapshot of all data (do not modify!)."""
        return self._data

    def set_all(self, items: List[V]) -> None:
        """Replace all data atomically (items are copied)."""
        with self._write_lock:
            self._data = list(items)
            self._version += 1

    def find(self, predicate: Callable[[V], bool]) -> Optional[V]:
        for item in self._data:
            if predicate(item):
                return item
        return None

    def replace_where(self, predicate: Callable[[V], bool], item: V) -> int:
        """
        Copy-on-write replacement of every element matching predicate.

        Returns:
            Number of elements replaced (0 leaves the list untouched).
        """
        with self._write_lock:
            replaced = 0
            new_data = []
            for existing in self._data:
                if predicate(existing):
                    new_data.append(item)
                    replaced += 1
                else:
                    new_data.append(existing)
            if replaced:
                self._data = new_data
                self._version += 1
            return replaced

    def clear(self) -> None:
        with self._write_lock:
            self._data = []
            self._version += 1

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[V]:
        return iter(self._data)

    @property
    def version(self) -> int:
        """Incremented on every write; cheap change detection for views."""
        return self._version
