"""Utility modules."""

from .cancellation import CancellationToken
from .logging_setup import (
    flush_all_loggers,
    get_logger,
    reset_logging,
    setup_category_logging,
    shutdown_logging,
)
from .result import Err, Ok, Result, attempt
from .structured_logger import LogCategory, StructuredLogger
from .trace_context import get_operation_id, new_operation

__all__ = [
    # Logging setup
    "setup_category_logging",
    "shutdown_logging",
    "flush_all_loggers",
    "reset_logging",
    "get_logger",
    "StructuredLogger",
    "LogCategory",
    # Trace context
    "get_operation_id",
    "new_operation",
    # Result type
    "Result",
    "Ok",
    "Err",
    "attempt",
    # Cancellation
    "CancellationToken",
]
