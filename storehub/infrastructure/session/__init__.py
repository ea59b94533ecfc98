"""Session store implementations."""

from .file_session import FileSessionStore
from .memory_session import MemorySessionStore

__all__ = ["FileSessionStore", "MemorySessionStore"]
