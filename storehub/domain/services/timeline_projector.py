"""
Timeline projector.

Derives the display timeline from the server's lifecycle entries and the
order's current status:

- the entry whose status equals the current status is the single active
  step (completed=False)
- entries before it count as completed unless the server explicitly sent
  completed=False for them (server flag wins over position)
- entries after it keep the server's flag
- a cancelled order projects to one terminal CANCELLED marker; the
  historical entries are not shown
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Sequence, Tuple, Union

from ...models.order import OrderStatus, TimelineEntry

# Canonical lifecycle: placed -> confirmed -> preparing -> shipped -> delivered
DEFAULT_LABELS: Dict[str, str] = {
    "placed": "Order Placed",
    "pending": "Order Placed",
    "confirmed": "Confirmed",
    "processing": "Processing",
    "preparing": "Preparing",
    "shipped": "Shipped",
    "delivered": "Delivered",
}

CANCELLED_LABEL = "CANCELLED"


@dataclass(frozen=True)
class TimelineStep:
    """One derived, display-ready timeline step."""

    status: str
    label: str
    timestamp: Optional[datetime]
    completed: bool
    active: bool = False


@dataclass(frozen=True)
class TimelineProjection:
    """Projected timeline. ``terminal`` is set for cancelled orders."""

    steps: Tuple[TimelineStep, ...]
    terminal: bool = False

    @property
    def active_step(self) -> Optional[TimelineStep]:
        for step in self.steps:
            if step.active:
                return step
        return None


CANCELLED_MARKER = TimelineStep(
    status=OrderStatus.CANCELLED.value,
    label=CANCELLED_LABEL,
    timestamp=None,
    completed=True,
    active=True,
)


def _label_for(entry: TimelineEntry) -> str:
    if entry.label:
        return entry.label
    return DEFAULT_LABELS.get(entry.status, entry.status.replace("_", " ").title())


def project_timeline(
    timeline: Sequence[TimelineEntry],
    current_status: Union[OrderStatus, str],
) -> TimelineProjection:
    """
    Project server timeline entries for display.

    Args:
        timeline: Ordered entries from OrderSnapshot.timeline.
        current_status: The order's current status.

    Returns:
        TimelineProjection with at most one active step.
    """
    status = current_status.value if isinstance(current_status, OrderStatus) else str(current_status)

    if status == OrderStatus.CANCELLED.value:
        return TimelineProjection(steps=(CANCELLED_MARKER,), terminal=True)

    active_index: Optional[int] = None
    for index, entry in enumerate(timeline):
        if entry.status == status:
            active_index = index
            break

    steps = []
    for index, entry in enumerate(timeline):
        if index == active_index:
            completed = False
            active = True
        elif active_index is not None and index < active_index:
            completed = True if entry.completed is None else entry.completed
            active = False
        else:
            completed = bool(entry.completed)
            active = False

        steps.append(
            TimelineStep(
                status=entry.status,
                label=_label_for(entry),
                timestamp=entry.timestamp,
                completed=completed,
                active=active,
            )
        )

    return TimelineProjection(steps=tuple(steps))
