"""
Diff/patch resolver for order edits.

Compares an edit overlay against the snapshot it was made on and returns
only the fields whose value really changed. Comparison rules, applied the
same way to every field of a kind:

- numeric fields (total_price): parsed as Decimal, so "10.00" == 10 == 10.0
- enum fields (status, payment_status): compared by enum value
- text fields: compared as strings with None treated as ""

An overlay value of None means "untouched" and never produces a change.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from ...models.order import OrderSnapshot, OrderStatus, PaymentStatus
from ..exceptions import OrderValidationError

# Attribute name -> wire name accepted by the update endpoint
EDITABLE_FIELDS: Dict[str, str] = {
    "total_price": "total_price",
    "status": "order_status",
    "payment_status": "payment_status",
    "notes": "notes",
    "vendor": "vendor",
    "currency": "currency",
    "hint_note": "hint_note",
}

NUMERIC_FIELDS = frozenset({"total_price"})

ENUM_FIELDS: Dict[str, type[Enum]] = {
    "status": OrderStatus,
    "payment_status": PaymentStatus,
}


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Parse numbers and numeric strings; None for anything else."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return parsed if parsed.is_finite() else None


def _normalise(field: str, value: Any) -> Any:
    if field in NUMERIC_FIELDS:
        parsed = parse_decimal(value)
        # Unparseable input stays a string so it still registers as a change
        return parsed if parsed is not None else str(value).strip()
    if field in ENUM_FIELDS:
        return value.value if isinstance(value, Enum) else str(value)
    return "" if value is None else str(value)


def values_equal(field: str, left: Any, right: Any) -> bool:
    """Field-aware equality used by diff()."""
    return _normalise(field, left) == _normalise(field, right)


def coerce_value(field: str, value: Any) -> Any:
    """
    Convert an edited value to the snapshot attribute's type.

    Raises:
        OrderValidationError: Unknown field, unknown enum value or an amount
            that is not a finite number.
    """
    if field not in EDITABLE_FIELDS:
        raise OrderValidationError(f"Field '{field}' cannot be edited")
    if value is None:
        return None
    if field in NUMERIC_FIELDS:
        parsed = parse_decimal(value)
        if parsed is None:
            raise OrderValidationError(f"Invalid amount for {field}: {value!r}")
        return parsed
    if field in ENUM_FIELDS:
        enum_type = ENUM_FIELDS[field]
        raw = value.value if isinstance(value, Enum) else str(value)
        try:
            return enum_type(raw)
        except ValueError as e:
            raise OrderValidationError(f"Invalid {field}: {raw!r}") from e
    return str(value)


def merge(overlay: Mapping[str, Any], snapshot: OrderSnapshot) -> OrderSnapshot:
    """Snapshot copy with every non-None overlay value applied (coerced)."""
    fields = {
        field: coerce_value(field, value)
        for field, value in overlay.items()
        if value is not None
    }
    return snapshot.with_fields(fields)


def diff(overlay: Mapping[str, Any], snapshot: OrderSnapshot) -> Dict[str, Any]:
    """
    Minimal set of changed fields between overlay and snapshot.

    Args:
        overlay: Sparse mapping of attribute name -> edited value.
        snapshot: The snapshot the edits were made against.

    Returns:
        Mapping of changed attribute -> overlay value. Empty when the overlay
        mirrors the snapshot.

    Raises:
        OrderValidationError: If the overlay contains a non-editable field.
    """
    changes: Dict[str, Any] = {}
    for field, value in overlay.items():
        if field not in EDITABLE_FIELDS:
            raise OrderValidationError(f"Field '{field}' cannot be edited")
        if value is None:
            continue
        if not values_equal(field, value, getattr(snapshot, field)):
            changes[field] = value
    return changes


def to_patch_payload(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Map a diff to the update endpoint's wire names and JSON-safe values.

    Prices are sent as plain decimal strings ("49.90") to avoid float drift.
    """
    payload: Dict[str, Any] = {}
    for field, value in changes.items():
        wire_name = EDITABLE_FIELDS[field]
        if field in NUMERIC_FIELDS:
            parsed = parse_decimal(value)
            if parsed is None:
                raise OrderValidationError(f"Invalid amount for {field}: {value!r}")
            payload[wire_name] = str(parsed)
        elif isinstance(value, Enum):
            payload[wire_name] = value.value
        else:
            payload[wire_name] = value
    return payload
