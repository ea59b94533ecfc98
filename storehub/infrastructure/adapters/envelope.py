"""
Response envelope validation at the API boundary.

Paginated endpoints must answer ``{"results": [...], "count": N}``. Any
other shape fails loudly with EnvelopeError instead of being guessed at.
"""

from __future__ import annotations

from typing import Any, Dict, List, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from ...domain.exceptions import EnvelopeError
from ...models.page import Page

M = TypeVar("M", bound=BaseModel)


class PaginatedBody(BaseModel):
    """Server pagination envelope."""

    model_config = ConfigDict(extra="ignore")

    results: List[Dict[str, Any]]
    count: int


class UnreadCountBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    unread_count: int


def parse_model(body: Any, model: type[M]) -> M:
    """Validate one object payload into model."""
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise EnvelopeError(f"Invalid {model.__name__} payload: {e}") from e


def parse_page(body: Any, item_model: type[M]) -> Page[M]:
    """Validate a paginated payload into a Page of item_model."""
    envelope = parse_model(body, PaginatedBody)
    items = [parse_model(item, item_model) for item in envelope.results]
    return Page(items=items, total=envelope.count)
