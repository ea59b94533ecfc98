"""
Category logging for the order console.

Every module logs through ``get_logger(__name__)``; the module path decides
which of four category loggers receives the record:

- system: startup, shutdown, config, CLI, event bus, view models
- api: HTTP client, token refresh, session stores, order REST adapter
- orders: snapshot cache, overlay, diff, reconciliation, list paging
- notify: notification adapter, poller and bell state

After ``setup_category_logging`` each category writes to its own file under
``{log_dir}/{date}/`` through a queue listener, so a slow disk never stalls
the event loop. Every line carries the operation id of the save, cancel or
poll that produced it.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from queue import Queue
from typing import Dict, List, Optional, Tuple

from .trace_context import get_operation_id

ROOT_LOGGER = "storehub"

# Category -> file name suffix
CATEGORY_FILES: Dict[str, str] = {
    "system": "sys",
    "api": "api",
    "orders": "ord",
    "notify": "ntf",
}
CATEGORIES = list(CATEGORY_FILES)

# Longest matching prefix wins, so list specific modules before packages
MODULE_ROUTING: List[Tuple[str, str]] = [
    ("storehub.infrastructure.adapters.notifications_api", "notify"),
    ("storehub.infrastructure.adapters", "api"),
    ("storehub.infrastructure.session", "api"),
    ("storehub.infrastructure.stores", "orders"),
    ("storehub.domain.services", "orders"),
    ("storehub.application.edit_overlay", "orders"),
    ("storehub.application.reconciliation", "orders"),
    ("storehub.application.order_list_service", "orders"),
    ("storehub.application.notification_poller", "notify"),
]


@dataclass
class _LoggingState:
    level: str = "INFO"
    verbose: bool = False
    run_id: Optional[str] = None
    loggers: Dict[str, logging.Logger] = field(default_factory=dict)
    listeners: List[logging.handlers.QueueListener] = field(default_factory=list)

    @property
    def effective_level(self) -> str:
        return "DEBUG" if self.verbose else self.level


_state = _LoggingState()


def get_category_for_module(module_name: str) -> str:
    """Category for a dotted module path ("system" when nothing matches)."""
    for prefix, category in MODULE_ROUTING:
        if module_name == prefix or module_name.startswith(prefix + "."):
            return category
    return "system"


def get_logger(module_name: str) -> logging.Logger:
    """
    Category logger for a module.

    Example:
        logger = get_logger(__name__)
        logger.info("Saving order ORD-1001")
    """
    name = f"{ROOT_LOGGER}.{get_category_for_module(module_name)}"
    logger = logging.getLogger(name)
    if name not in _state.loggers and not logger.handlers:
        # Before setup, let records reach whatever the host (pytest, caller) configured
        logger.setLevel(logging.DEBUG)
    return logger


# =============================================================================
# Formatters
# =============================================================================

class JSONFormatter(logging.Formatter):
    """
    One JSON object per line: ts, level, cat, op, msg (+ data, exception).

    Records that already hold a StructuredLogger entry are re-keyed to the
    same short names instead of being wrapped a second time.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        structured = self._structured(message)
        if structured is not None:
            return json.dumps(structured, default=str)

        entry = {
            "ts": datetime.now().isoformat(),
            "level": record.levelname,
            "cat": self._category(record.name),
            "op": get_operation_id(),
            "msg": message,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)

    @staticmethod
    def _structured(message: str) -> Optional[dict]:
        if not (message.startswith("{") and message.endswith("}")):
            return None
        try:
            entry = json.loads(message)
        except json.JSONDecodeError:
            return None
        if not isinstance(entry, dict):
            return None

        renamed = {"timestamp": "ts", "category": "cat", "message": "msg"}
        for old, new in renamed.items():
            if old in entry:
                entry[new] = entry.pop(old)
        if isinstance(entry.get("cat"), str):
            entry["cat"] = entry["cat"].lower()
        entry.setdefault("op", get_operation_id())
        return entry

    @staticmethod
    def _category(logger_name: str) -> str:
        category = logger_name.rpartition(".")[2]
        return category if category in CATEGORY_FILES else "system"


class ConsoleFormatter(logging.Formatter):
    """``[LEVEL  ] [op] message``, coloured when stderr is a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        level = f"[{record.levelname:7}]"
        if self.use_colors:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"
        return f"{level} [{get_operation_id()}] {record.getMessage()}"


# =============================================================================
# Setup / teardown
# =============================================================================

def _run_id() -> str:
    """Per-process file stamp: start time plus pid, fixed for the session."""
    if _state.run_id is None:
        _state.run_id = f"{datetime.now():%H%M%S}_{os.getpid()}"
    return _state.run_id


def _detach_handlers(logger: logging.Logger) -> None:
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)


def setup_category_logging(
    env: str,
    log_dir: str = "./logs",
    level: str = "INFO",
    console: bool = False,
    verbose: bool = False,
    json_files: bool = True,
) -> Dict[str, logging.Logger]:
    """
    Attach file (and optionally stderr) handlers to the category loggers.

    Files: ``{log_dir}/{YYYY-MM-DD}/storehub_{env}_{suffix}_{run}.log``.

    Args:
        env: Environment name used in file names.
        log_dir: Base directory for log files.
        level: Level for all categories (ignored when verbose).
        console: Mirror warnings (everything when verbose) to stderr.
        verbose: DEBUG everywhere.
        json_files: JSON lines in files, plain text otherwise.

    Returns:
        Category name -> logger.
    """
    shutdown_logging()

    _state.level = level.upper()
    _state.verbose = verbose
    numeric_level = getattr(logging, _state.effective_level, logging.INFO)

    day = datetime.now().strftime("%Y-%m-%d")
    day_dir = Path(log_dir) / day
    day_dir.mkdir(parents=True, exist_ok=True)

    if json_files:
        file_formatter: logging.Formatter = JSONFormatter()
    else:
        file_formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
        )

    for category, suffix in CATEGORY_FILES.items():
        logger = logging.getLogger(f"{ROOT_LOGGER}.{category}")
        _detach_handlers(logger)
        logger.setLevel(numeric_level)
        logger.propagate = False

        file_handler = logging.FileHandler(
            day_dir / f"storehub_{env}_{suffix}_{day}_{_run_id()}.log", encoding="utf-8"
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(numeric_level)

        queue: Queue = Queue(-1)
        logger.addHandler(logging.handlers.QueueHandler(queue))
        listener = logging.handlers.QueueListener(queue, file_handler, respect_handler_level=True)
        listener.start()
        _state.listeners.append(listener)

        if console:
            stream = logging.StreamHandler(sys.stderr)
            stream.setFormatter(ConsoleFormatter(use_colors=sys.stderr.isatty()))
            stream.setLevel(logging.DEBUG if verbose else logging.WARNING)
            logger.addHandler(stream)

        _state.loggers[category] = logger

    return dict(_state.loggers)


def flush_all_loggers() -> None:
    """Flush stderr handlers; queued file records are flushed by shutdown_logging."""
    for logger in _state.loggers.values():
        for handler in logger.handlers:
            handler.flush()


def shutdown_logging() -> None:
    """Drain the queues and close the log files."""
    for listener in _state.listeners:
        listener.stop()
        for handler in listener.handlers:
            handler.close()
    _state.listeners.clear()


def reset_logging() -> None:
    """Detach everything and restore pre-setup behaviour (used by tests)."""
    global _state
    shutdown_logging()
    for category in CATEGORY_FILES:
        logger = logging.getLogger(f"{ROOT_LOGGER}.{category}")
        _detach_handlers(logger)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
    _state = _LoggingState()
