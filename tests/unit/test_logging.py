import json
import logging

from app.core.logging import JsonFormatter


def test_json_formatter_includes_context_fields():
    record = logging.LogRecord("app.services", logging.WARNING, __file__, 1, "dangling slug %s", ("b",), None)
    record.slug = "b"
    record.request_id = "req-1"

    line = json.loads(JsonFormatter().format(record))

    assert line["level"] == "WARNING"
    assert line["message"] == "dangling slug b"
    assert line["slug"] == "b"
    assert line["request_id"] == "req-1"
    assert "status_code" not in line
