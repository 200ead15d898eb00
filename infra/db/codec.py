from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any


def to_json(payload: Any) -> str:
    return json.dumps(payload, default=str, ensure_ascii=False)


def list_from_json(raw: str | None) -> list[Any]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return []
    return value if isinstance(value, list) else []


def dict_from_json(raw: str | None) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    return value if isinstance(value, dict) else {}


def to_db_datetime(value: datetime | None) -> datetime | None:
    """SQLite keeps naive timestamps; everything is stored as naive UTC."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.replace(tzinfo=None)


def from_db_datetime(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


__all__ = [
    "to_json",
    "list_from_json",
    "dict_from_json",
    "to_db_datetime",
    "from_db_datetime",
]
