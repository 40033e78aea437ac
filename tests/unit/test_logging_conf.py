from __future__ import annotations

import json
import logging

from common.logging_conf import JsonFormatter, get_logger, setup_logging


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("antekhub.client", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_one_json_object_with_extras():
    line = JsonFormatter().format(
        _record("request.start", event="request_start", method="GET", path="/alumni")
    )

    payload = json.loads(line)
    assert payload["level"] == "INFO"
    assert payload["logger"] == "antekhub.client"
    assert payload["message"] == "request.start"
    assert payload["event"] == "request_start"
    assert payload["method"] == "GET"
    assert payload["path"] == "/alumni"
    assert "ts" in payload
    assert "lineno" not in payload


def test_formatter_does_not_overwrite_core_fields_and_stringifies_objects():
    line = JsonFormatter().format(_record("msg", level="spoofed", payload={"f": object()}))

    payload = json.loads(line)
    assert payload["level"] == "INFO"
    assert payload["payload"]["f"].startswith("<object object")


def test_setup_logging_is_idempotent(monkeypatch):
    root = logging.getLogger()
    saved = list(root.handlers)
    saved_level = root.level
    for h in saved:
        root.removeHandler(h)
    try:
        monkeypatch.setenv("LOG_LEVEL", "debug")
        setup_logging()
        setup_logging()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.DEBUG
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
        for h in saved:
            root.addHandler(h)
        root.setLevel(saved_level)


def test_get_logger_default_name():
    assert get_logger().name == "antekhub"
    assert get_logger("antekhub.client").name == "antekhub.client"


def test_formatter_without_extras_emits_only_core_fields():
    record = logging.getLogger("antekhub.client").makeRecord(
        "antekhub.client", logging.WARNING, __file__, 7, "plain %s", ("line",), None
    )

    payload = json.loads(JsonFormatter().format(record))
    assert set(payload) == {"ts", "level", "logger", "message"}
    assert payload["message"] == "plain line"
