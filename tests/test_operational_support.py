from __future__ import annotations

import json
import logging

from infra.operational_support import (
    REDACTED,
    OperationalSupport,
    TraceIdLogFilter,
    bind_trace_id,
    current_trace_id,
    redact_text,
)


def test_operational_support_emits_redacted_structured_event(tmp_path):
    events_path = tmp_path / "support-events.jsonl"
    support = OperationalSupport(events_path=events_path)

    with bind_trace_id("inc-test-123"):
        trace_id = support.emit_event(
            event_type="support.test",
            message="migration failed on postgresql://rp:abc123@db/rp",
            data={
                "password": "StrongPass123",
                "scenario": "Q3 hiring",
                "nested": {"db_secret": "secret-value"},
            },
        )

    assert trace_id == "inc-test-123"
    rows = events_path.read_text(encoding="utf-8").splitlines()
    assert len(rows) == 1
    payload = json.loads(rows[0])
    assert payload["trace_id"] == "inc-test-123"
    assert payload["event_type"] == "support.test"
    assert "abc123" not in payload["message"]
    assert payload["data"]["password"] == REDACTED
    assert payload["data"]["nested"]["db_secret"] == REDACTED
    assert payload["data"]["scenario"] == "Q3 hiring"


def test_operational_support_capture_exception_records_crash_event(tmp_path):
    support = OperationalSupport(events_path=tmp_path / "support-events.jsonl")

    try:
        raise RuntimeError("secret=bad-secret")
    except RuntimeError as exc:
        with bind_trace_id("inc-crash-1"):
            support.capture_exception(
                exc_type=RuntimeError,
                exc_value=exc,
                exc_traceback=exc.__traceback__,
                context="unit-test",
            )

    [payload] = support.read_events(trace_id="inc-crash-1")
    assert payload["event_type"] == "app.crash"
    assert payload["level"] == "ERROR"
    assert "bad-secret" not in payload["message"]
    assert payload["data"]["exception_type"] == "RuntimeError"


def test_read_events_filters_by_trace_and_skips_garbage(tmp_path):
    events_path = tmp_path / "support-events.jsonl"
    support = OperationalSupport(events_path=events_path)
    support.emit_event(event_type="a", message="first", trace_id="inc-a")
    with events_path.open("a", encoding="utf-8") as handle:
        handle.write("not json\n\n")
    support.emit_event(event_type="b", message="second", trace_id="inc-b")

    assert [e["event_type"] for e in support.read_events()] == ["a", "b"]
    assert [e["message"] for e in support.read_events(trace_id="inc-b")] == ["second"]


def test_trace_id_binding_is_scoped_and_reaches_log_records():
    assert current_trace_id() is None
    record = logging.LogRecord("rp", logging.INFO, __file__, 1, "msg", None, None)

    with bind_trace_id(None) as generated:
        assert generated.startswith("inc-")
        assert current_trace_id() == generated
        TraceIdLogFilter().filter(record)

    assert record.trace_id == generated
    assert current_trace_id() is None


def test_redact_text_masks_secret_pairs_only():
    text = redact_text("password: hunter2, scenario=Q3")

    assert "hunter2" not in text
    assert f"password={REDACTED}" in text
    assert "scenario=Q3" in text


def test_redact_text_masks_database_url_credentials():
    text = redact_text("could not connect to postgresql+psycopg://rp:hunter2@db:5432/rp")

    assert "hunter2" not in text
    assert f"postgresql+psycopg://rp:{REDACTED}@db:5432/rp" in text
    assert redact_text("sqlite:///C:/data/resource_pulse.db") == "sqlite:///C:/data/resource_pulse.db"
