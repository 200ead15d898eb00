from __future__ import annotations

import os


DEFAULT_CURRENCY = "USD"


def default_currency() -> str:
    raw = (os.getenv("JC_DEFAULT_CURRENCY", DEFAULT_CURRENCY) or "").strip().upper()
    return raw or DEFAULT_CURRENCY


def resolve_currency(value: str | None) -> str:
    return (value or "").strip().upper() or default_currency()


__all__ = ["DEFAULT_CURRENCY", "default_currency", "resolve_currency"]
