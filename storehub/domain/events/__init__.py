"""Domain events."""

from .event_types import EventType, Notice, NoticeLevel

__all__ = ["EventType", "Notice", "NoticeLevel"]
