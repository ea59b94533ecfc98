"""Tests for category logging and the structured logger."""

import json
import logging
from unittest.mock import MagicMock

import pytest

from storehub.utils import logging_setup
from storehub.utils.logging_setup import (
    CATEGORIES,
    JSONFormatter,
    get_category_for_module,
    get_logger,
    setup_category_logging,
)
from storehub.utils.structured_logger import LogCategory, StructuredLogger


@pytest.fixture
def clean_logging():
    yield
    logging_setup.reset_logging()


class TestRouting:
    @pytest.mark.parametrize(
        "module, category",
        [
            ("storehub.infrastructure.adapters.http_client", "api"),
            ("storehub.infrastructure.adapters.notifications_api", "notify"),
            ("storehub.application.reconciliation", "orders"),
            ("storehub.domain.services.order_diff", "orders"),
            ("storehub.application.notification_poller", "notify"),
            ("storehub.application.bootstrap", "system"),
            ("somewhere.else", "system"),
        ],
    )
    def test_category(self, module, category):
        assert get_category_for_module(module) == category

    def test_logger_name(self):
        assert get_logger("storehub.application.reconciliation").name == "storehub.orders"


class TestJSONFormatter:
    def record(self, msg: str) -> logging.LogRecord:
        return logging.LogRecord("storehub.orders", logging.INFO, __file__, 1, msg, None, None)

    def test_plain_message(self):
        entry = json.loads(JSONFormatter().format(self.record("Saved ORD-1")))
        assert entry["cat"] == "orders"
        assert entry["msg"] == "Saved ORD-1"
        assert entry["op"] == "------"

    def test_structured_message_not_double_encoded(self):
        message = json.dumps({"timestamp": "t", "category": "ORDERS", "message": "m", "data": {"a": 1}})
        entry = json.loads(JSONFormatter().format(self.record(message)))
        assert entry["cat"] == "orders"
        assert entry["msg"] == "m"
        assert entry["data"] == {"a": 1}


class TestStructuredLogger:
    def test_entry_schema(self):
        logger = MagicMock()
        StructuredLogger(logger).warning(LogCategory.ORDERS, "Order save failure", {"order_number": "ORD-1"})

        entry = json.loads(logger.warning.call_args.args[0])
        assert entry["level"] == "WARNING"
        assert entry["category"] == "ORDERS"
        assert entry["data"] == {"order_number": "ORD-1"}
        assert entry["timestamp"].endswith("Z")
        assert entry["op"] == "------"


class TestSetup:
    def test_files_per_category(self, tmp_path, clean_logging):
        loggers = setup_category_logging(env="test", log_dir=str(tmp_path), level="DEBUG")

        assert set(loggers) == set(CATEGORIES)
        loggers["orders"].info("hello")
        logging_setup.shutdown_logging()

        files = sorted(p.name for p in tmp_path.rglob("*.log"))
        assert len(files) == 4
        assert any("_ord_" in name for name in files)
        ord_file = next(p for p in tmp_path.rglob("*_ord_*.log"))
        assert "hello" in ord_file.read_text()
