from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4


def generate_id() -> str:
    return str(uuid4())


def generate_reference(prefix: str) -> str:
    """Human-facing reference such as ``AUTO-20260101120000123456``."""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")
    return f"{prefix}-{stamp}"


__all__ = ["generate_id", "generate_reference"]
