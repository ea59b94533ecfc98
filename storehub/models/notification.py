"""Notification model for the bell/indicator."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Notification(BaseModel):
    """A user notification (order, company, points, service, marketing, security)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    title: str = ""
    title_ar: Optional[str] = None
    message: str = ""
    message_ar: Optional[str] = None
    notification_type: Optional[str] = None
    notification_type_display: Optional[str] = None
    is_read: bool = False
    link: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    read_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value):
        return str(value) if value is not None else value
