from __future__ import annotations

import os


DEFAULT_RETENTION_DAYS = 365
DEFAULT_QUERY_LIMIT = 50
EXPORT_LIMIT = 10000


def audit_retention_days() -> int:
    raw = (os.getenv("JC_AUDIT_RETENTION_DAYS", "") or "").strip()
    if not raw:
        return DEFAULT_RETENTION_DAYS
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_RETENTION_DAYS
    return value if value > 0 else DEFAULT_RETENTION_DAYS


__all__ = [
    "DEFAULT_RETENTION_DAYS",
    "DEFAULT_QUERY_LIMIT",
    "EXPORT_LIMIT",
    "audit_retention_days",
]
