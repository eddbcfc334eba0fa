"""
Where: extensibility/common/tests/test_json_logging.py
What: Unit tests for the JSON log formatter and YAML logging setup.
Why: Log lines must stay machine-readable and carry the request id.
"""

import json
import logging

from extensibility.common.core import logging_config
from extensibility.common.core.logging_config import CustomJsonFormatter, setup_logging
from extensibility.common.core.request_context import clear_request_id, set_request_id


def make_record(**extra):
    record = logging.LogRecord(
        name="gateway.pipeline",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="finished with status %s",
        args=("success",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_outputs_json_with_extras():
    line = CustomJsonFormatter().format(make_record(extension_point="pre-user-registration"))
    payload = json.loads(line)

    assert payload["level"] == "INFO"
    assert payload["logger"] == "gateway.pipeline"
    assert payload["message"] == "finished with status success"
    assert payload["extension_point"] == "pre-user-registration"
    assert "_time" in payload


def test_formatter_includes_context_request_id():
    set_request_id("req-42")
    try:
        payload = json.loads(CustomJsonFormatter().format(make_record()))
    finally:
        clear_request_id()

    assert payload["request_id"] == "req-42"


def test_formatter_serializes_unknown_types():
    payload = json.loads(CustomJsonFormatter().format(make_record(obj=object())))

    assert payload["obj"].startswith("<object object")


def test_setup_logging_falls_back_without_config(monkeypatch):
    calls = {}
    monkeypatch.setattr(
        logging_config.logging, "basicConfig", lambda **kwargs: calls.update(kwargs)
    )
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    setup_logging("/tmp/extensibility-missing-logging.yml")

    assert calls["level"] == "DEBUG"


def test_setup_logging_substitutes_environment(tmp_path, monkeypatch):
    config_file = tmp_path / "logging.yml"
    config_file.write_text(
        "version: 1\n"
        "disable_existing_loggers: false\n"
        "loggers:\n"
        "  extensibility-test:\n"
        "    level: ${LOG_LEVEL}\n"
    )
    captured = {}
    monkeypatch.setattr(logging_config.logging.config, "dictConfig", captured.update)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    setup_logging(str(config_file))

    assert captured["loggers"]["extensibility-test"]["level"] == "WARNING"
