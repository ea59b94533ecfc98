"""
Structured JSON logger with log categories.

Used for the entries an operator might want to audit later: every
reconciliation outcome and every order cancellation is written as one JSON
object with a stable schema.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from .trace_context import get_operation_id


class LogCategory(Enum):
    """Log entry categories."""
    SYSTEM = "SYSTEM"  # Startup, shutdown, config
    API = "API"  # HTTP calls and session refresh
    ORDERS = "ORDERS"  # Reconciliation outcomes and order edits
    NOTIFY = "NOTIFY"  # Notification polling


class StructuredLogger:
    """
    Structured JSON logger.

    Outputs logs in JSON format with standard schema:
    {
        "timestamp": "2026-03-15T10:30:45.123Z",
        "level": "INFO",
        "category": "ORDERS",
        "message": "Order save success",
        "op": "a7f3b2",
        "data": {...}
    }
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def log(
        self,
        level: str,
        category: LogCategory,
        message: str,
        data: Dict[str, Any] | None = None,
    ) -> None:
        """
        Log a structured message.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            category: Log category enum.
            message: Log message.
            data: Optional additional data dict.
        """
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level.upper(),
            "category": category.value,
            "message": message,
            "op": get_operation_id(),
        }

        if data:
            log_entry["data"] = data

        log_func = getattr(self.logger, level.lower(), self.logger.info)
        log_func(json.dumps(log_entry, default=str))

    def info(self, category: LogCategory, message: str, data: Dict[str, Any] | None = None) -> None:
        self.log("INFO", category, message, data)

    def warning(self, category: LogCategory, message: str, data: Dict[str, Any] | None = None) -> None:
        self.log("WARNING", category, message, data)

    def error(self, category: LogCategory, message: str, data: Dict[str, Any] | None = None) -> None:
        self.log("ERROR", category, message, data)

    def debug(self, category: LogCategory, message: str, data: Dict[str, Any] | None = None) -> None:
        self.log("DEBUG", category, message, data)
