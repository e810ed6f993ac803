from __future__ import annotations

import json
import logging
import sys

from recordstore.utils.logging import JsonFormatter, _json_formatter, configure_logging

EXPECTED_COUNT = 3
EXPECTED_TABLE = "users"


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.count = EXPECTED_COUNT
    record.table = EXPECTED_TABLE

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["count"] == EXPECTED_COUNT
    assert payload["table"] == EXPECTED_TABLE
    assert "pathname" not in payload
    assert "lineno" not in payload


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    record = _record()
    record.extra = {"count": EXPECTED_COUNT}

    payload = json.loads(_json_formatter(record))

    assert payload["count"] == EXPECTED_COUNT
    assert "extra" not in payload


def test_json_formatter_includes_exception_text() -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        record = logging.LogRecord("t", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    payload = json.loads(JsonFormatter().format(record))
    assert "ValueError: boom" in payload["exc_info"]


def test_json_formatter_stringifies_unserializable_extras() -> None:
    record = _record()
    record.path = object()

    payload = json.loads(_json_formatter(record))
    assert payload["path"].startswith("<object object")


def test_configure_logging_installs_json_handler() -> None:
    configure_logging(level="DEBUG", json_logs=True)
    root = logging.getLogger()

    assert root.level == logging.DEBUG
    assert any(isinstance(handler.formatter, JsonFormatter) for handler in root.handlers)

    configure_logging(level="WARNING", json_logs=False)
    assert not any(isinstance(handler.formatter, JsonFormatter) for handler in root.handlers)


def test_configure_logging_without_force_only_adjusts_level() -> None:
    configure_logging(level="INFO", json_logs=True)
    handlers = list(logging.getLogger().handlers)

    configure_logging(level="ERROR", json_logs=False, force=False)

    assert logging.getLogger().handlers == handlers
    assert logging.getLogger().level == logging.ERROR
    configure_logging(level="WARNING")
