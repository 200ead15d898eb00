from __future__ import annotations

from typing import Any, Iterable, Sequence

from sqlalchemy import Select, false, func, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from infra.db.codec import to_json


def text_search(columns: Iterable[Any], needle: str) -> ColumnElement[bool]:
    """Case-insensitive substring match over any of ``columns``."""
    lowered = needle.lower()
    return or_(*(func.lower(column).contains(lowered, autoescape=True) for column in columns))


def json_list_contains_any(column: Any, values: Sequence[Any]) -> ColumnElement[bool]:
    """Match rows whose JSON list column holds at least one of ``values``."""
    if not values:
        return false()
    return or_(*(column.contains(to_json(value), autoescape=True) for value in values))


def count_rows(session: Session, stmt: Select) -> int:
    total = session.execute(select(func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()
    return int(total or 0)


def window(stmt: Select, offset: int = 0, limit: int | None = None) -> Select:
    if offset:
        stmt = stmt.offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)
    return stmt


__all__ = ["text_search", "json_list_contains_any", "count_rows", "window"]
