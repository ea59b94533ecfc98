"""Pytest configuration and fixtures."""

from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest

from storehub.application.simple_event_bus import SimpleEventBus
from storehub.domain.events import EventType, Notice
from storehub.infrastructure.stores import OrderStore
from storehub.models import OrderSnapshot


def order_payload(**overrides: Any) -> Dict[str, Any]:
    """Order detail body as the admin endpoint returns it."""
    payload: Dict[str, Any] = {
        "order_number": "ORD-1001",
        "order_status": "pending",
        "payment_status": "pending",
        "total_price": "50.00",
        "currency": "EGP",
        "notes": None,
        "hint_note": None,
        "vendor": "Cairo Crafts",
        "user_name": "Mona Adel",
        "items": [
            {"product_name": "Tote bag", "quantity": 2, "price": "25.00", "total_price": "50.00"},
        ],
        "timeline": [
            {"status": "pending", "label": "Order Placed", "timestamp": "2026-03-01T10:00:00", "completed": True},
            {"status": "confirmed", "label": "Confirmed", "timestamp": None, "completed": False},
            {"status": "shipped", "label": "Shipped", "timestamp": None, "completed": False},
        ],
        "payment_transactions": [],
        "can_be_edited": True,
        "can_be_cancelled": True,
    }
    payload.update(overrides)
    return payload


def make_order(**overrides: Any) -> OrderSnapshot:
    return OrderSnapshot.model_validate(order_payload(**overrides))


@pytest.fixture
def pending_order() -> OrderSnapshot:
    """Editable pending order, total 50."""
    return make_order()


@pytest.fixture
def locked_order() -> OrderSnapshot:
    """Order the operator may neither edit nor cancel."""
    return make_order(order_number="ORD-2002", can_be_edited=False, can_be_cancelled=False)


@pytest.fixture
def event_bus() -> SimpleEventBus:
    return SimpleEventBus()


@pytest.fixture
def notices(event_bus: SimpleEventBus) -> List[Notice]:
    """Every notice published on the event bus, in order."""
    received: List[Notice] = []
    event_bus.subscribe(EventType.NOTICE, received.append)
    return received


@pytest.fixture
def order_store() -> OrderStore:
    return OrderStore()


@pytest.fixture
def orders_gateway(pending_order: OrderSnapshot) -> MagicMock:
    """OrdersGateway double: detail returns pending_order, update succeeds."""
    gateway = MagicMock()
    gateway.get_order = AsyncMock(return_value=pending_order)
    gateway.update_order = AsyncMock(return_value={"success": True})
    gateway.list_orders = AsyncMock()
    return gateway


@pytest.fixture
def sample_transactions() -> Dict[str, Dict[str, Any]]:
    """Transaction payloads keyed by role."""
    return {
        "deposit": {
            "id": 1, "transaction_type": "deposit", "transaction_status": "completed",
            "amount": "30.00", "payment_method": "card",
        },
        "final": {
            "id": 2, "transaction_type": "final", "transaction_status": "pending",
            "amount": "70.00", "payment_method": "card",
        },
        "full": {
            "id": 3, "transaction_type": "full", "transaction_status": "completed",
            "amount": "100.00", "payment_method": "cod",
        },
        "refunded": {
            "id": 4, "transaction_type": "deposit", "transaction_status": "refunded",
            "amount": "30.00", "payment_method": "card",
        },
    }

