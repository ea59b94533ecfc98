"""
Edit overlay: unsaved operator edits layered over an order snapshot.

The overlay is bound to the snapshot the edits were made against (its
base). Rendering reads ``effective()``: overlay value where one is set,
snapshot value everywhere else. The overlay never talks to the server and
is never persisted.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..domain.exceptions import OrderValidationError
from ..domain.services.order_diff import coerce_value, diff, merge
from ..models.order import OrderSnapshot
from ..utils.logging_setup import get_logger

logger = get_logger(__name__)


class EditOverlay:
    """Sparse record of touched fields for one order."""

    def __init__(self, snapshot: Optional[OrderSnapshot] = None):
        self._base: Optional[OrderSnapshot] = snapshot
        self._values: Dict[str, Any] = {}

    # -------------------------------------------------------------------------
    # Binding
    # -------------------------------------------------------------------------

    def bind(self, snapshot: Optional[OrderSnapshot]) -> None:
        """Start a fresh overlay on a snapshot (None unbinds)."""
        self._base = snapshot
        self._values = {}

    def rebase(self, snapshot: OrderSnapshot) -> None:
        """
        Move the overlay onto a newer snapshot of the same order, keeping edits.

        Raises:
            ValueError: If the snapshot belongs to another order.
        """
        if self._base is not None and snapshot.order_number != self._base.order_number:
            raise ValueError(
                f"Cannot rebase overlay for {self._base.order_number} onto {snapshot.order_number}"
            )
        self._base = snapshot

    @property
    def base(self) -> Optional[OrderSnapshot]:
        return self._base

    @property
    def order_number(self) -> Optional[str]:
        return self._base.order_number if self._base is not None else None

    # -------------------------------------------------------------------------
    # Edits
    # -------------------------------------------------------------------------

    def set_field(self, field: str, value: Any) -> bool:
        """
        Record an edit.

        Setting None removes the edit for that field. Ignored (returns False)
        when the bound order cannot be edited; the caller is expected to have
        disabled the input already.

        Raises:
            OrderValidationError: No order is bound, the field is not editable
                or the value cannot be converted to the field's type.
        """
        if self._base is None:
            raise OrderValidationError("No order is open for editing")

        # Validate even when ignored so bad input surfaces the same way
        coerce_value(field, value)

        if not self._base.can_be_edited:
            logger.info(f"Ignoring edit of {field} on {self._base.order_number}: order is not editable")
            return False

        if value is None:
            self._values.pop(field, None)
        else:
            self._values[field] = value
        return True

    def reset(self) -> None:
        """Drop all edits; the binding stays."""
        self._values = {}

    @property
    def values(self) -> Dict[str, Any]:
        """Copy of the raw edited values, as entered."""
        return dict(self._values)

    @property
    def is_dirty(self) -> bool:
        """True when at least one edit differs from the base snapshot."""
        return bool(self.changes())

    def changes(self) -> Dict[str, Any]:
        """Edits that differ from the base snapshot."""
        if self._base is None:
            return {}
        return diff(self._values, self._base)

    def effective(self, snapshot: Optional[OrderSnapshot] = None) -> Optional[OrderSnapshot]:
        """
        Resolved view: overlay values over the snapshot.

        Args:
            snapshot: Snapshot to resolve against (defaults to the base).
        """
        target = snapshot if snapshot is not None else self._base
        if target is None:
            return None
        return merge(self._values, target)

    def __repr__(self) -> str:
        return f"EditOverlay({self.order_number!r}, {self._values!r})"
