"""
Trace context for correlating logs across a single operator action.

Each save, cancel or notification poll runs under its own operation ID so
that the update request, the re-fetch and the resulting outcome can be
grepped together in the category log files.

Usage:
    with new_operation() as op_id:
        await controller.save()

    # In any module
    from storehub.utils.trace_context import get_operation_id
    logger.info(f"[{get_operation_id()}] Saving order...")
"""

from __future__ import annotations

import secrets
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Generator, Optional

# Context variable for the current operation ID (async-safe)
_operation_id: ContextVar[Optional[str]] = ContextVar("operation_id", default=None)


def generate_operation_id() -> str:
    """Generate a 6-character hex operation ID (e.g., "a7f3b2")."""
    return secrets.token_hex(3)


def get_operation_id() -> str:
    """Current operation ID, or "------" outside an operation."""
    op_id = _operation_id.get()
    return op_id if op_id else "------"


@contextmanager
def new_operation() -> Generator[str, None, None]:
    """
    Run the enclosed block under a fresh operation ID.

    Nested operations restore the outer ID on exit.

    Yields:
        The new operation ID.
    """
    op_id = generate_operation_id()
    token = _operation_id.set(op_id)

    try:
        yield op_id
    finally:
        _operation_id.reset(token)
