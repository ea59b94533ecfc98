"""Tests for the pydantic wire models and list query."""

from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from conftest import make_order, order_payload
from storehub.models import (
    OrderItem,
    OrderQuery,
    OrderSnapshot,
    OrderStatus,
    Page,
    PaymentTransaction,
    TransactionType,
)


class TestOrderSnapshot:
    """Parsing the order detail body."""

    def test_aliases_and_types(self, pending_order):
        assert pending_order.status is OrderStatus.PENDING
        assert pending_order.total_price == Decimal("50.00")
        assert pending_order.items[0].name == "Tote bag"
        assert pending_order.items[0].unit_price == Decimal("25.00")
        assert pending_order.timeline[1].completed is False

    def test_numeric_order_number(self):
        assert make_order(order_number=1001).order_number == "1001"

    def test_null_collections(self):
        order = make_order(items=None, timeline=None, payment_transactions=None)
        assert order.items == ()
        assert order.payment_transactions == ()

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            OrderSnapshot.model_validate(order_payload(order_status="lost"))

    def test_frozen(self, pending_order):
        with pytest.raises(ValidationError):
            pending_order.notes = "x"

    def test_with_fields_copies(self, pending_order):
        copy = pending_order.with_fields({"notes": "rush"})
        assert copy.notes == "rush"
        assert pending_order.notes is None
        assert pending_order.with_fields({}) is pending_order


class TestOrderItem:
    def test_line_total_fallback(self):
        assert OrderItem(name="Mug", quantity=3, unit_price=Decimal("4.50")).line_total == Decimal("13.50")

    def test_quoted_item_has_no_total(self):
        assert OrderItem(name="Sign", to_be_quoted=True, total_price=Decimal("9")).line_total is None


class TestPaymentTransaction:
    def test_completed_flag_precedence(self, sample_transactions):
        tx = PaymentTransaction.model_validate({**sample_transactions["deposit"], "is_completed": False})
        assert tx.type is TransactionType.DEPOSIT
        assert not tx.completed

    def test_completed_from_status(self, sample_transactions):
        assert PaymentTransaction.model_validate(sample_transactions["full"]).completed


class TestOrderQuery:
    def test_params(self):
        query = OrderQuery(search="mona", page=2, start_date=datetime(2026, 1, 1))
        assert query.to_params() == {
            "search": "mona",
            "status": "",
            "page": "2",
            "page_size": "10",
            "start_date": "2026-01-01T00:00:00",
            "end_date": "",
        }

    def test_with_filters_resets_page(self):
        assert OrderQuery(page=4).with_filters(status="pending") == OrderQuery(status="pending")

    def test_with_page_floor(self):
        assert OrderQuery().with_page(0).page == 1


class TestPage:
    def test_page_count(self):
        assert Page(total=25).page_count(10) == 3
        assert Page(total=0).page_count(10) == 1
