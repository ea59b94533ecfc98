"""
Tests for the console ViewModels.

Covers:
- Table diffs (added, removed, changed cells, reorder)
- Order list rows (quoted orders)
- Order detail display (edits, banners, timeline, payments)
"""

from decimal import Decimal

from conftest import make_order
from storehub.tui.viewmodels import (
    NotificationViewModel,
    OrderDetailViewModel,
    OrderListViewModel,
)
from storehub.tui.viewmodels.order_detail_vm import UNCONFIRMED_BANNER
from storehub.models import Notification, OrderStatus


class TestOrderListViewModel:
    """Row formatting and incremental updates."""

    def test_row(self, pending_order):
        row = OrderListViewModel().format_row(pending_order)
        assert row[:5] == ["ORD-1001", "Mona Adel", "Cairo Crafts", "50.00 EGP", "Pending"]

    def test_quote_pending(self):
        order = make_order(
            total_price="0",
            items=[{"product_name": "Custom sign", "quantity": 1, "to_be_quoted": True}],
        )
        assert OrderListViewModel().format_row(order)[3] == "Quote pending"

    def test_first_load_adds_rows_in_order(self):
        vm = OrderListViewModel()
        orders = [make_order(order_number="B"), make_order(order_number="A")]

        update = vm.compute_updates(orders)

        assert [op.row_key for op in update.rows] == ["B", "A"]
        assert all(op.action == "add" for op in update.rows)
        assert update.cells == []
        assert update.order == ["B", "A"]
        assert not update.reordered

    def test_patched_row_is_cell_update(self, pending_order):
        vm = OrderListViewModel()
        vm.compute_updates([pending_order])

        confirmed = pending_order.with_fields({"status": OrderStatus.CONFIRMED})
        update = vm.compute_updates([confirmed])

        assert update.rows == []
        assert len(update.cells) == 1
        assert update.cells[0].row_key == "ORD-1001"
        assert update.cells[0].column_index == 4
        assert update.cells[0].value == "Confirmed"
        assert vm.cached_row("ORD-1001")[4] == "Confirmed"

    def test_unchanged_page_is_empty_update(self, pending_order):
        vm = OrderListViewModel()
        vm.compute_updates([pending_order])
        assert vm.compute_updates([pending_order]).is_empty

    def test_removed_row(self, pending_order):
        vm = OrderListViewModel()
        vm.compute_updates([pending_order])

        update = vm.compute_updates([])

        assert [(op.row_key, op.action) for op in update.rows] == [("ORD-1001", "remove")]

    def test_reorder_detected(self):
        vm = OrderListViewModel()
        a, b = make_order(order_number="A"), make_order(order_number="B")
        vm.compute_updates([a, b])

        update = vm.compute_updates([b, a])

        assert update.reordered
        assert update.rows == [] and update.cells == []
        assert update.order == ["B", "A"]


class TestOrderDetailViewModel:
    """Detail display composition."""

    def test_edited_fields_marked(self, pending_order):
        effective = pending_order.with_fields({"total_price": Decimal("60")})

        display = OrderDetailViewModel().compute_display(pending_order, effective)

        assert display.edited_fields == ("total_price",)
        assert dict(display.header)["Total"] == "60.00 EGP *"
        assert display.can_edit and display.can_cancel

    def test_unconfirmed_banner(self, pending_order):
        display = OrderDetailViewModel().compute_display(pending_order, unconfirmed=True)
        assert display.banners == [UNCONFIRMED_BANNER]

    def test_cancelled_order(self):
        order = make_order(order_status="cancelled")

        display = OrderDetailViewModel().compute_display(order)

        assert display.timeline_lines == ["[bold red]CANCELLED[/]"]
        assert "This order has been cancelled" in display.banners
        assert not display.can_cancel

    def test_timeline_active_step(self, pending_order):
        display = OrderDetailViewModel().compute_display(pending_order)

        assert display.timeline_lines[0].startswith("[bold cyan]>[/] Order Placed")
        assert display.timeline_lines[1] == "[dim]o[/] Confirmed"

    def test_items(self, pending_order):
        display = OrderDetailViewModel().compute_display(pending_order)
        assert display.item_lines == ["2 x Tote bag  50.00 EGP"]

    def test_split_payment(self, sample_transactions):
        order = make_order(
            total_price="100.00",
            payment_transactions=[sample_transactions["deposit"], sample_transactions["final"]],
        )

        lines = OrderDetailViewModel().compute_display(order).payment_lines

        assert lines[0] == "Split payment: 30.00 EGP / 100.00 EGP"
        assert lines[1] == "[######--------------] 30%"
        assert lines[2].startswith("1. Deposit: 30.00 EGP")
        assert "Final payment due upon service completion" in lines[3]

    def test_refund_wins(self, sample_transactions):
        order = make_order(
            payment_transactions=[sample_transactions["full"], sample_transactions["refunded"]],
        )
        lines = OrderDetailViewModel().compute_display(order).payment_lines
        assert lines[0] == "[magenta]Refunded[/]"


class TestNotificationViewModel:
    def test_unread_flag(self):
        vm = NotificationViewModel()
        unread = vm.format_row(Notification(id="1", title="Shipped", is_read=False))
        read = vm.format_row(Notification(id="2", is_read=True))
        assert unread[1] == "*"
        assert read[1] == ""

    def test_marking_read_is_one_cell(self):
        vm = NotificationViewModel()
        vm.compute_updates([Notification(id="1", title="Shipped")])

        update = vm.compute_updates([Notification(id="1", title="Shipped", is_read=True)])

        assert [(c.row_key, c.column_index, c.value) for c in update.cells] == [("1", 1, "")]
