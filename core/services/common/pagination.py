from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, Sequence, TypeVar

from core.exceptions import ValidationError

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    data: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 50
    total_pages: int = 0


def page_offset(page: int, limit: int) -> int:
    """Row offset of a 1-based page; repositories apply it with LIMIT/OFFSET."""
    if page < 1:
        raise ValidationError("Page must be 1 or greater.", code="INVALID_PAGE")
    if limit < 1:
        raise ValidationError("Limit must be 1 or greater.", code="INVALID_PAGE")
    return (page - 1) * limit


def build_page(rows: Sequence[T], total: int, page: int, limit: int) -> Page[T]:
    return Page(
        data=list(rows),
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if total else 0,
    )


__all__ = ["Page", "page_offset", "build_page"]
