"""Tests for the timeline projector."""

from datetime import datetime

from storehub.domain.services.timeline_projector import CANCELLED_MARKER, project_timeline
from storehub.models import OrderStatus, TimelineEntry


def entries(*specs):
    return [TimelineEntry(status=s, label="", completed=c) for s, c in specs]


class TestActiveStep:
    """Exactly one active step, matching the current status."""

    def test_single_active(self):
        timeline = entries(("pending", True), ("confirmed", None), ("shipped", None))
        projection = project_timeline(timeline, OrderStatus.CONFIRMED)

        active = [s for s in projection.steps if s.active]
        assert len(active) == 1
        assert active[0].status == "confirmed"
        assert active[0].completed is False
        assert projection.active_step is active[0]

    def test_no_matching_status(self):
        timeline = entries(("pending", True), ("confirmed", False))
        projection = project_timeline(timeline, "delivered")

        assert projection.active_step is None
        assert [s.completed for s in projection.steps] == [True, False]

    def test_active_even_if_server_marked_completed(self):
        timeline = entries(("pending", True), ("shipped", True))
        projection = project_timeline(timeline, "shipped")
        assert projection.steps[1].active
        assert projection.steps[1].completed is False


class TestCompletedInference:
    """Steps before the active one are completed unless the server says no."""

    def test_earlier_steps_inferred_completed(self):
        timeline = entries(("pending", None), ("confirmed", None), ("shipped", None))
        steps = project_timeline(timeline, "shipped").steps
        assert [s.completed for s in steps] == [True, True, False]

    def test_explicit_false_wins(self):
        timeline = entries(("pending", True), ("confirmed", False), ("shipped", None))
        steps = project_timeline(timeline, "shipped").steps
        assert [s.completed for s in steps] == [True, False, False]

    def test_later_steps_keep_server_flag(self):
        timeline = entries(("pending", None), ("confirmed", True), ("shipped", None))
        steps = project_timeline(timeline, "pending").steps
        assert [s.completed for s in steps] == [False, True, False]

    def test_labels_and_timestamps(self):
        ts = datetime(2026, 3, 1, 10, 0)
        timeline = [
            TimelineEntry(status="placed", label="", timestamp=ts, completed=True),
            TimelineEntry(status="out_for_delivery", label="", completed=False),
            TimelineEntry(status="delivered", label="Arrived", completed=False),
        ]
        steps = project_timeline(timeline, "pending").steps
        assert steps[0].label == "Order Placed"
        assert steps[0].timestamp == ts
        assert steps[1].label == "Out For Delivery"
        assert steps[2].label == "Arrived"


class TestCancelled:
    """Cancelled orders project to a single terminal marker."""

    def test_terminal_marker(self):
        timeline = entries(("pending", True), ("confirmed", True), ("shipped", False))
        projection = project_timeline(timeline, OrderStatus.CANCELLED)

        assert projection.terminal
        assert projection.steps == (CANCELLED_MARKER,)

    def test_terminal_marker_from_string_and_empty_timeline(self):
        projection = project_timeline([], "cancelled")
        assert projection.steps == (CANCELLED_MARKER,)
        assert projection.steps[0].label == "CANCELLED"

    def test_empty_timeline(self):
        projection = project_timeline([], "pending")
        assert projection.steps == ()
        assert not projection.terminal
