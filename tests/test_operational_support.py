from __future__ import annotations

import json
import logging

import infra.logging_config as logging_config
from infra.operational_support import (
    REDACTED,
    SupportEventLog,
    TraceIdLogFilter,
    bind_trace_id,
    current_trace_id,
    redact_text,
)


def test_support_event_log_emits_redacted_structured_event(tmp_path):
    events_path = tmp_path / "support-events.jsonl"
    support = SupportEventLog(events_path=events_path)

    with bind_trace_id("inc-test-123"):
        trace_id = support.emit_event(
            event_type="support.test",
            message="token=abc123 connecting to postgresql://app:s3cret@db/jobs",
            data={"db_url": "postgresql://app:s3cret@db/jobs", "rows": 3},
        )

    assert trace_id == "inc-test-123"
    rows = events_path.read_text(encoding="utf-8").splitlines()
    assert len(rows) == 1
    payload = json.loads(rows[0])
    assert payload["trace_id"] == "inc-test-123"
    assert payload["event_type"] == "support.test"
    assert payload["level"] == "INFO"
    assert "abc123" not in payload["message"]
    assert "s3cret" not in payload["message"]
    assert payload["data"]["db_url"] == f"postgresql://app:{REDACTED}@db/jobs"
    assert payload["data"]["rows"] == "3"


def test_read_events_filters_by_trace_id(tmp_path):
    support = SupportEventLog(events_path=tmp_path / "events.jsonl")
    with bind_trace_id("inc-a"):
        support.emit_event(event_type="export.started", message="a")
    with bind_trace_id("inc-b"):
        support.emit_event(event_type="export.started", message="b")
    with (tmp_path / "events.jsonl").open("a", encoding="utf-8") as handle:
        handle.write("not json\n")

    assert len(support.read_events()) == 2
    assert [e["message"] for e in support.read_events(trace_id="inc-b")] == ["b"]


def test_bind_trace_id_generates_and_restores():
    assert current_trace_id() is None
    with bind_trace_id() as outer:
        assert outer.startswith("jc-")
        with bind_trace_id("inner") as inner:
            assert current_trace_id() == inner == "inner"
        assert current_trace_id() == outer
    assert current_trace_id() is None


def test_redact_text_masks_secret_pairs():
    text = redact_text("password: hunter2, api_key=XYZ and plain words")

    assert "hunter2" not in text
    assert "XYZ" not in text
    assert "plain words" in text


def test_trace_filter_tags_records():
    record = logging.LogRecord("jc", logging.INFO, __file__, 1, "msg", None, None)
    with bind_trace_id("inc-log"):
        TraceIdLogFilter().filter(record)
    assert record.trace_id == "inc-log"

    TraceIdLogFilter().filter(record)
    assert record.trace_id == "-"


def test_setup_logging_writes_rotating_file_and_support_event(tmp_path, monkeypatch):
    support = SupportEventLog(events_path=tmp_path / "events.jsonl")
    monkeypatch.setattr(logging_config, "get_support_log", lambda: support)
    monkeypatch.setattr(logging_config, "install_crash_hook", lambda: None)
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = logging_config.setup_logging(log_dir=tmp_path / "logs")
        with bind_trace_id("inc-file"):
            logging.getLogger("core.services").info("hello from a service")
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    assert log_file.name == "job_costing.log"
    content = log_file.read_text(encoding="utf-8")
    assert "trace=inc-file core.services - hello from a service" in content
    assert [e["event_type"] for e in support.read_events()] == ["app.logging.initialized"]
