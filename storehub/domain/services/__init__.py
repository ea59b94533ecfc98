"""Pure order services: diff resolver, timeline projector, payment classifier."""

from .order_diff import (
    EDITABLE_FIELDS,
    coerce_value,
    diff,
    merge,
    parse_decimal,
    to_patch_payload,
    values_equal,
)
from .payment_classifier import PaymentShape, PaymentStep, PaymentSummary, classify_payments
from .timeline_projector import CANCELLED_MARKER, TimelineProjection, TimelineStep, project_timeline

__all__ = [
    "EDITABLE_FIELDS",
    "coerce_value",
    "diff",
    "merge",
    "parse_decimal",
    "to_patch_payload",
    "values_equal",
    "PaymentShape",
    "PaymentStep",
    "PaymentSummary",
    "classify_payments",
    "CANCELLED_MARKER",
    "TimelineProjection",
    "TimelineStep",
    "project_timeline",
]
