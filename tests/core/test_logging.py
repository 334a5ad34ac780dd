from __future__ import annotations

import json
import logging
import sys

from app.core.logging import _ContainerFormatter, _JsonFormatter, setup_logging


def _record(level: int = logging.INFO, msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="app.services.ledger",
        level=level,
        pathname="ledger.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


# ---- setup_logging ----


def test_setup_logging_sets_root_level() -> None:
    setup_logging("debug")
    assert logging.getLogger().level == logging.DEBUG

    setup_logging("warning")
    assert logging.getLogger().level == logging.WARNING


def test_setup_logging_defaults_to_info_for_unknown_level() -> None:
    setup_logging("nonexistent")
    assert logging.getLogger().level == logging.INFO


def test_setup_logging_quiets_http_clients_at_debug() -> None:
    setup_logging("debug")
    assert logging.getLogger("uvicorn").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING


def test_setup_logging_selects_json_formatter() -> None:
    setup_logging("info", json_format=True)
    (handler,) = logging.getLogger().handlers
    assert isinstance(handler.formatter, _JsonFormatter)

    setup_logging("info")
    (handler,) = logging.getLogger().handlers
    assert isinstance(handler.formatter, _ContainerFormatter)


# ---- container format ----


def test_container_formatter_excludes_location_for_info() -> None:
    output = _ContainerFormatter().format(_record())
    assert "hello" in output
    assert "[ledger.py:" not in output


def test_container_formatter_includes_location_for_warning() -> None:
    output = _ContainerFormatter().format(_record(logging.WARNING, "rejected"))
    assert "rejected" in output
    assert "[ledger.py:42]" in output


# ---- JSON format ----


def test_json_formatter_produces_valid_json() -> None:
    parsed = json.loads(_JsonFormatter().format(_record(msg="Credential minted")))
    assert parsed["level"] == "INFO"
    assert parsed["logger"] == "app.services.ledger"
    assert parsed["message"] == "Credential minted"
    assert "timestamp" in parsed


def test_json_formatter_lifts_ledger_fields() -> None:
    record = _record(
        logging.WARNING,
        "revoke_credential rejected",
        request_id="abc-123",
        caller="0xabc",
        credential_id=7,
        kind="TokenAlreadyRevoked",
    )
    parsed = json.loads(_JsonFormatter().format(record))
    assert parsed["request_id"] == "abc-123"
    assert parsed["caller"] == "0xabc"
    assert parsed["credential_id"] == 7
    assert parsed["kind"] == "TokenAlreadyRevoked"


def test_json_formatter_omits_absent_fields() -> None:
    parsed = json.loads(_JsonFormatter().format(_record()))
    assert "credential_id" not in parsed
    assert "caller" not in parsed


def test_json_formatter_includes_exception_info() -> None:
    formatter = _JsonFormatter()
    try:
        raise ValueError("listener broke")
    except ValueError:
        record = _record(logging.ERROR, "Event listener failed")
        record.exc_info = sys.exc_info()
        output = formatter.format(record)

    parsed = json.loads(output)
    assert "ValueError: listener broke" in parsed["exception"]
