import json
import logging

from core.logging import JSONFormatter


def _record(msg, *args, **extra):
    record = logging.LogRecord("performance.engine", logging.INFO, __file__, 10, msg, args, None)
    record.__dict__.update(extra)
    return record


def test_formats_one_json_object_per_record():
    line = JSONFormatter().format(_record("Closed period %s", "2025-03"))
    payload = json.loads(line)

    assert payload["level"] == "INFO"
    assert payload["logger"] == "performance.engine"
    assert payload["message"] == "Closed period 2025-03"
    assert "\n" not in line


def test_extra_fields_are_included():
    payload = json.loads(JSONFormatter().format(_record("hello", user_id="abc", period="2025-03")))
    assert payload["user_id"] == "abc"
    assert payload["period"] == "2025-03"
    assert "args" not in payload
