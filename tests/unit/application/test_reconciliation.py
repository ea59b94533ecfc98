"""
Tests for the reconciliation controller.

Covers:
- Save outcomes: success, partial failure, failure, update-ok/fetch-failed
- No-op save and cancellation guards (no request issued)
- Strict update-then-fetch ordering
- Late responses discarded after close / re-focus
- Auto-close after a confirmed save
"""

import asyncio
from typing import List
from unittest.mock import AsyncMock

import pytest

from conftest import make_order
from storehub.application.reconciliation import (
    NOTHING_TO_SAVE,
    REASON_REQUIRED,
    SAVE_IN_PROGRESS,
    Confirmed,
    ControllerState,
    Discarded,
    NoChanges,
    ReconciliationController,
    Rejected,
    Unconfirmed,
)
from storehub.domain.events import EventType, NoticeLevel
from storehub.domain.exceptions import ApiError, TransportError
from storehub.models import OrderQuery, OrderStatus, Page


@pytest.fixture
def controller(orders_gateway, order_store, event_bus):
    return ReconciliationController(
        gateway=orders_gateway,
        store=order_store,
        event_bus=event_bus,
        auto_close_delay_sec=0,
    )


@pytest.fixture
def listed(order_store, pending_order):
    """The pending order is also a row of the list page on screen."""
    other = make_order(order_number="ORD-0999")
    order_store.set_page(Page(items=[other, pending_order], total=2), OrderQuery())
    return order_store


class TestOpenClose:
    """Focus lifecycle."""

    @pytest.mark.asyncio
    async def test_open_focuses_order(self, controller, order_store, pending_order, event_bus):
        focused: List = []
        event_bus.subscribe(EventType.ORDER_FOCUSED, focused.append)

        snapshot = await controller.open("ORD-1001")

        assert snapshot is pending_order
        assert order_store.focused is pending_order
        assert controller.overlay.base is pending_order
        assert controller.state == ControllerState.IDLE
        assert focused == [pending_order]

    @pytest.mark.asyncio
    async def test_open_failure_is_notice(self, controller, orders_gateway, notices, order_store):
        orders_gateway.get_order.side_effect = TransportError("connection refused")

        assert await controller.open("ORD-1001") is None
        assert order_store.focused is None
        assert notices[-1].level == NoticeLevel.ERROR

    @pytest.mark.asyncio
    async def test_close_resets(self, controller, order_store):
        await controller.open("ORD-1001")
        controller.set_field("notes", "x")
        token = controller.token

        controller.close()

        assert token.cancelled
        assert controller.overlay.values == {}
        assert controller.order_number is None
        assert order_store.focused is None

    @pytest.mark.asyncio
    async def test_open_keys_by_server_order_number(self, controller, order_store, pending_order, notices):
        snapshot = await controller.open("ord-1001")

        assert snapshot is pending_order
        assert order_store.get("ORD-1001") is pending_order
        assert controller.order_number == "ORD-1001"
        assert not notices

    @pytest.mark.asyncio
    async def test_reopen_cancels_previous_token(self, controller):
        await controller.open("ORD-1001")
        first = controller.token
        await controller.open("ORD-1001")
        assert first.cancelled
        assert not controller.token.cancelled


class TestSave:
    """Save outcomes."""

    @pytest.mark.asyncio
    async def test_success_end_to_end(self, controller, orders_gateway, listed, pending_order, notices):
        confirmed = make_order(order_status="confirmed")
        orders_gateway.get_order.side_effect = [pending_order, confirmed]

        await controller.open("ORD-1001")
        controller.set_field("status", "confirmed")
        outcome = await controller.save()

        assert isinstance(outcome, Confirmed)
        assert outcome.saved
        assert outcome.snapshot is confirmed
        orders_gateway.update_order.assert_awaited_once_with("ORD-1001", {"order_status": "confirmed"})
        assert listed.focused is confirmed
        assert controller.overlay.values == {}
        assert listed.rows[1].status == OrderStatus.CONFIRMED
        assert listed.rows[0].order_number == "ORD-0999"
        assert controller.last_state == ControllerState.SUCCESS
        assert controller.state == ControllerState.IDLE
        assert notices[-1].level == NoticeLevel.SUCCESS

    @pytest.mark.asyncio
    async def test_update_then_fetch_in_order(self, controller, orders_gateway, pending_order):
        calls: List[str] = []

        async def update(order_number, payload):
            calls.append("update")
            await asyncio.sleep(0)
            calls.append("update-done")
            return {}

        async def fetch(order_number):
            calls.append("fetch")
            return pending_order

        orders_gateway.update_order = AsyncMock(side_effect=update)
        await controller.open("ORD-1001")
        orders_gateway.get_order = AsyncMock(side_effect=fetch)

        controller.set_field("vendor", "New Vendor")
        await controller.save()

        assert calls == ["update", "update-done", "fetch"]

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_overlay(self, controller, orders_gateway, listed, pending_order, notices):
        fetched = make_order()
        orders_gateway.get_order.side_effect = [pending_order, fetched]
        orders_gateway.update_order.side_effect = ApiError(400, "Invalid status transition")

        await controller.open("ORD-1001")
        controller.set_field("status", "confirmed")
        outcome = await controller.save()

        assert isinstance(outcome, Confirmed)
        assert not outcome.saved
        assert outcome.state == ControllerState.PARTIAL_FAILURE
        assert listed.focused is fetched
        assert controller.overlay.values == {"status": "confirmed"}
        assert controller.overlay.base is fetched
        assert controller.effective.status == OrderStatus.CONFIRMED
        assert not controller.is_unconfirmed
        assert notices[-1].level == NoticeLevel.ERROR
        assert "Invalid status transition" in notices[-1].message

    @pytest.mark.asyncio
    async def test_failure_local_merge(self, controller, orders_gateway, listed, pending_order, notices):
        orders_gateway.get_order.side_effect = [pending_order, TransportError("offline")]
        orders_gateway.update_order.side_effect = TransportError("offline")

        await controller.open("ORD-1001")
        controller.set_field("status", "confirmed")
        controller.set_field("total_price", "60")
        outcome = await controller.save()

        assert isinstance(outcome, Unconfirmed)
        assert outcome.state == ControllerState.FAILURE
        assert not outcome.update_accepted
        assert outcome.merged_view.status == OrderStatus.CONFIRMED
        assert listed.focused is outcome.merged_view
        assert listed.rows[1].status == OrderStatus.CONFIRMED
        assert controller.is_unconfirmed
        assert notices[-1].level == NoticeLevel.WARNING
        # Edits stay so the save can be retried against the confirmed snapshot
        assert controller.overlay.base is pending_order
        assert controller.overlay.changes() == {"status": "confirmed", "total_price": "60"}

    @pytest.mark.asyncio
    async def test_update_ok_fetch_failed(self, controller, orders_gateway, listed, pending_order):
        orders_gateway.get_order.side_effect = [pending_order, TransportError("timeout")]

        await controller.open("ORD-1001")
        controller.set_field("status", "confirmed")
        outcome = await controller.save()

        assert isinstance(outcome, Unconfirmed)
        assert outcome.update_accepted
        assert controller.is_unconfirmed
        assert controller.overlay.values == {}
        assert listed.focused.status == OrderStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_outcome_published(self, controller, orders_gateway, event_bus):
        outcomes: List = []
        event_bus.subscribe(EventType.ORDER_RECONCILED, outcomes.append)

        await controller.open("ORD-1001")
        controller.set_field("notes", "leave at door")
        outcome = await controller.save()

        assert outcomes == [outcome]


class TestNoRequestPaths:
    """Client-side short circuits never touch the network."""

    @pytest.mark.asyncio
    async def test_noop_save(self, controller, orders_gateway, order_store, pending_order, notices):
        await controller.open("ORD-1001")
        controller.set_field("status", "pending")
        controller.set_field("total_price", "50.00")

        outcome = await controller.save()

        assert isinstance(outcome, NoChanges)
        orders_gateway.update_order.assert_not_awaited()
        assert orders_gateway.get_order.await_count == 1
        assert controller.overlay.values == {"status": "pending", "total_price": "50.00"}
        assert order_store.focused is pending_order
        assert notices[-1].message == NOTHING_TO_SAVE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reason", ["", "   ", "\t\n"])
    async def test_cancel_requires_reason(self, controller, orders_gateway, reason):
        await controller.open("ORD-1001")

        outcome = await controller.cancel(reason)

        assert isinstance(outcome, Rejected)
        assert outcome.reason == REASON_REQUIRED
        orders_gateway.update_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cancel_not_cancellable(self, controller, orders_gateway, locked_order):
        orders_gateway.get_order.return_value = locked_order
        await controller.open(locked_order.order_number)

        outcome = await controller.cancel("Customer request")

        assert isinstance(outcome, Rejected)
        orders_gateway.update_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_save_without_open(self, controller, orders_gateway):
        outcome = await controller.save()
        assert isinstance(outcome, Rejected)
        orders_gateway.update_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_price_rejected(self, controller, orders_gateway):
        await controller.open("ORD-1001")
        controller.overlay._values["total_price"] = "abc"

        outcome = await controller.save()

        assert isinstance(outcome, Rejected)
        orders_gateway.update_order.assert_not_awaited()


class TestCancel:
    """Cancellation through the update endpoint."""

    @pytest.mark.asyncio
    async def test_cancel_success(self, controller, orders_gateway, pending_order, listed):
        cancelled = make_order(order_status="cancelled", can_be_cancelled=False)
        orders_gateway.get_order.side_effect = [pending_order, cancelled]

        await controller.open("ORD-1001")
        outcome = await controller.cancel("  Customer request ")

        assert isinstance(outcome, Confirmed)
        orders_gateway.update_order.assert_awaited_once_with(
            "ORD-1001", {"order_status": "cancelled", "reason": "Customer request"}
        )
        assert listed.rows[1].status == OrderStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_cancel_double_failure(self, controller, orders_gateway, pending_order):
        orders_gateway.get_order.side_effect = [pending_order, TransportError("offline")]
        orders_gateway.update_order.side_effect = TransportError("offline")

        await controller.open("ORD-1001")
        outcome = await controller.cancel("Duplicate order")

        assert isinstance(outcome, Unconfirmed)
        assert outcome.merged_view.status == OrderStatus.CANCELLED


class TestCancellationToken:
    """Late responses for an order no longer in focus."""

    @pytest.mark.asyncio
    async def test_close_during_save_discards(self, controller, orders_gateway, order_store, pending_order):
        gate = asyncio.Event()

        async def slow_update(order_number, payload):
            await gate.wait()
            return {}

        orders_gateway.update_order = AsyncMock(side_effect=slow_update)
        await controller.open("ORD-1001")
        controller.set_field("status", "confirmed")

        task = asyncio.create_task(controller.save())
        await asyncio.sleep(0)
        assert controller.state == ControllerState.SAVING

        controller.close()
        gate.set()
        outcome = await task

        assert isinstance(outcome, Discarded)
        assert orders_gateway.get_order.await_count == 1
        assert order_store.focused is None

    @pytest.mark.asyncio
    async def test_concurrent_save_rejected(self, controller, orders_gateway):
        gate = asyncio.Event()

        async def slow_update(order_number, payload):
            await gate.wait()
            return {}

        orders_gateway.update_order = AsyncMock(side_effect=slow_update)
        await controller.open("ORD-1001")
        controller.set_field("notes", "x")

        task = asyncio.create_task(controller.save())
        await asyncio.sleep(0)
        second = await controller.save()
        gate.set()
        first = await task

        assert isinstance(second, Rejected)
        assert second.reason == SAVE_IN_PROGRESS
        assert isinstance(first, Confirmed)
        orders_gateway.update_order.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_refocus_discards_stale_detail(self, controller, orders_gateway, order_store):
        gate = asyncio.Event()
        first = make_order(order_number="A")
        second = make_order(order_number="B")

        async def fetch(order_number):
            if order_number == "A":
                await gate.wait()
                return first
            return second

        orders_gateway.get_order = AsyncMock(side_effect=fetch)

        stale = asyncio.create_task(controller.open("A"))
        await asyncio.sleep(0)
        await controller.open("B")
        gate.set()

        assert await stale is None
        assert order_store.focused is second
        assert controller.order_number == "B"


class TestAutoClose:
    """Detail view closes shortly after a confirmed save."""

    @pytest.mark.asyncio
    async def test_auto_close(self, orders_gateway, order_store, event_bus):
        controller = ReconciliationController(
            orders_gateway, order_store, event_bus, auto_close_delay_sec=0.01
        )
        closed: List = []
        event_bus.subscribe(EventType.ORDER_AUTO_CLOSE, closed.append)

        await controller.open("ORD-1001")
        controller.set_field("notes", "x")
        await controller.save()
        await asyncio.sleep(0.05)

        assert closed == ["ORD-1001"]
        assert controller.order_number is None
        assert order_store.focused is None

    @pytest.mark.asyncio
    async def test_no_auto_close_on_partial_failure(self, orders_gateway, order_store, event_bus):
        controller = ReconciliationController(
            orders_gateway, order_store, event_bus, auto_close_delay_sec=0.01
        )
        orders_gateway.update_order.side_effect = ApiError(409, "Conflict")

        await controller.open("ORD-1001")
        controller.set_field("notes", "x")
        await controller.save()
        await asyncio.sleep(0.05)

        assert controller.order_number == "ORD-1001"
