import json
import logging

from i18n_center_api.logging_config import (
    CorrelationFilter,
    HumanFormatter,
    JsonFormatter,
    ServiceFilter,
    _safe_level,
    configure_logging,
    correlation_id_var,
)


def _record(msg="Translation saved", **extra):
    record = logging.LogRecord("i18n_center_api.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields() -> None:
    record = _record(component_id="abc", locale="es")
    ServiceFilter("i18n-center").filter(record)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Translation saved"
    assert payload["level"] == "INFO"
    assert payload["component_id"] == "abc"
    assert payload["locale"] == "es"
    assert payload["service"] == "i18n-center"
    assert "msg" not in payload


def test_correlation_filter_reads_context() -> None:
    token = correlation_id_var.set("req-42")
    try:
        record = _record()
        CorrelationFilter().filter(record)
    finally:
        correlation_id_var.reset(token)

    assert record.correlation_id == "req-42"
    assert "corr=req-42" in HumanFormatter().format(record)


def test_safe_level_falls_back_to_info() -> None:
    assert _safe_level("debug") == logging.DEBUG
    assert _safe_level("nonsense") == logging.INFO


def test_configure_logging_installs_single_handler() -> None:
    configure_logging("i18n-center", json_enabled=True, level_value="WARNING")
    configure_logging("i18n-center", json_enabled=False, level_value="INFO")

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, HumanFormatter)
    assert root.level == logging.INFO
    assert logging.getLogger("openai").level == logging.WARNING
