"""Unit tests for structured logging."""

from __future__ import annotations

import io
import json
import logging

from workflow_designer.designer.logging import JsonFormatter, configure_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="workflow_designer.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Workflow committed %s",
        args=("now",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields() -> None:
    payload = json.loads(JsonFormatter().format(_record(node_count=3, action="add_node")))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "workflow_designer.test"
    assert payload["message"] == "Workflow committed now"
    assert payload["extra"] == {"node_count": 3, "action": "add_node"}
    assert "timestamp" in payload


def test_json_formatter_stringifies_unknown_types() -> None:
    payload = json.loads(JsonFormatter().format(_record(path=object)))

    assert payload["extra"]["path"] == str(object)


def test_configure_logging_does_not_stack_handlers() -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    stream = io.StringIO()
    try:
        configure_logging("debug", stream=stream)
        configure_logging("debug", stream=stream)

        logging.getLogger("workflow_designer.test").debug("hello", extra={"history_index": 2})

        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["extra"] == {"history_index": 2}
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
