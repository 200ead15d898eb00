from __future__ import annotations

import json
import logging
import os
import re
import sys
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Iterator, Mapping

from infra.path import user_data_dir
from infra.version import get_app_version

REDACTED = "<redacted>"

_TRACE_ID_CTX: ContextVar[str | None] = ContextVar("jc_trace_id", default=None)
_SECRET_PAIR_PATTERN = re.compile(
    r"(?i)\b(password|token|secret|api[_-]?key|authorization)\b\s*[:=]\s*([^\s,;]+)"
)
# credentials embedded in database URLs (JC_DB_URL)
_URL_CREDENTIALS_PATTERN = re.compile(r"(?i)(\b[a-z][a-z0-9+.-]*://[^:/\s]+:)([^@\s]+)(@)")


def create_trace_id() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"jc-{stamp}-{uuid.uuid4().hex[:8]}"


def current_trace_id() -> str | None:
    value = _TRACE_ID_CTX.get()
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


@contextmanager
def bind_trace_id(trace_id: str | None = None) -> Iterator[str]:
    """Tag every log record emitted inside the block with one trace id."""
    normalized = (trace_id or "").strip() or create_trace_id()
    token = _TRACE_ID_CTX.set(normalized)
    try:
        yield normalized
    finally:
        _TRACE_ID_CTX.reset(token)


def redact_text(value: str) -> str:
    text = str(value or "")
    text = _URL_CREDENTIALS_PATTERN.sub(lambda m: f"{m.group(1)}{REDACTED}{m.group(3)}", text)
    text = _SECRET_PAIR_PATTERN.sub(lambda m: f"{m.group(1)}={REDACTED}", text)
    return text


class TraceIdLogFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = current_trace_id() or "-"
        return True


class SupportEventLog:
    """Append-only JSON-lines file of startup and crash events."""

    def __init__(self, events_path: str | Path | None = None) -> None:
        if events_path is None:
            events_path = user_data_dir() / "logs" / "support-events.jsonl"
        self._events_path = Path(events_path)
        self._events_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()

    @property
    def events_path(self) -> Path:
        return self._events_path

    def emit_event(
        self,
        *,
        event_type: str,
        message: str,
        level: str = "INFO",
        data: Mapping[str, Any] | None = None,
    ) -> str:
        trace_id = current_trace_id() or create_trace_id()
        payload: dict[str, Any] = {
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
            "event_type": (event_type or "").strip() or "support.event",
            "level": (level or "INFO").strip().upper(),
            "trace_id": trace_id,
            "message": redact_text(message),
            "app_version": get_app_version(),
            "pid": os.getpid(),
        }
        if data:
            payload["data"] = {str(k): redact_text(str(v)) for k, v in data.items()}

        line = json.dumps(payload, ensure_ascii=True, sort_keys=True)
        with self._lock:
            with self._events_path.open("a", encoding="utf-8") as handle:
                handle.write(line)
                handle.write("\n")
        return trace_id

    def read_events(self, *, trace_id: str | None = None) -> list[dict[str, Any]]:
        if not self._events_path.exists():
            return []
        expected = (trace_id or "").strip()
        events: list[dict[str, Any]] = []
        for line in self._events_path.read_text(encoding="utf-8", errors="ignore").splitlines():
            if not line.strip():
                continue
            try:
                payload = json.loads(line)
            except json.JSONDecodeError:
                continue
            if not isinstance(payload, dict):
                continue
            if expected and str(payload.get("trace_id") or "") != expected:
                continue
            events.append(payload)
        return events


_GLOBAL_SUPPORT: SupportEventLog | None = None
_HOOK_INSTALLED = False


def get_support_log() -> SupportEventLog:
    global _GLOBAL_SUPPORT
    if _GLOBAL_SUPPORT is None:
        _GLOBAL_SUPPORT = SupportEventLog()
    return _GLOBAL_SUPPORT


def install_crash_hook(support: SupportEventLog | None = None) -> None:
    global _HOOK_INSTALLED
    if _HOOK_INSTALLED:
        return

    recorder = support or get_support_log()
    previous_hook = sys.excepthook

    def _hook(exc_type: type[BaseException], exc_value: BaseException, exc_tb: Any) -> None:
        try:
            recorder.emit_event(
                event_type="app.crash",
                level="ERROR",
                message=f"Unhandled exception: {exc_value}",
                data={
                    "exception_type": getattr(exc_type, "__name__", str(exc_type)),
                    "stacktrace": "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
                },
            )
        except OSError:
            logging.getLogger(__name__).exception("Could not record crash event")
        previous_hook(exc_type, exc_value, exc_tb)

    sys.excepthook = _hook
    _HOOK_INSTALLED = True


__all__ = [
    "REDACTED",
    "SupportEventLog",
    "TraceIdLogFilter",
    "bind_trace_id",
    "create_trace_id",
    "current_trace_id",
    "get_support_log",
    "install_crash_hook",
    "redact_text",
]
