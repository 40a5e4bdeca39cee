"""Tests for didregistry.core.logging module."""

from __future__ import annotations

import json
import logging

import pytest

from didregistry.core.logging import (
    JSONFormatter,
    OperationLogger,
    StandardFormatter,
    Transaction,
    configure_logging,
    current_transaction,
    transaction_context,
)


def _record(msg: str = "hello", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="didregistry.test",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestTransactionContext:
    def test_none_outside_context(self):
        assert current_transaction() is None

    def test_context_sets_and_resets(self):
        with transaction_context(block=3, sender="0xabc") as tx:
            assert current_transaction() == tx
            assert tx.block == 3
            assert tx.sender == "0xabc"
        assert current_transaction() is None

    def test_generates_unique_ids(self):
        with transaction_context() as first:
            pass
        with transaction_context() as second:
            pass
        assert first.id != second.id

    def test_uses_given_id(self):
        with transaction_context(transaction_id="tx-1") as tx:
            assert tx == Transaction(id="tx-1")

    def test_resets_on_error(self):
        with pytest.raises(RuntimeError):
            with transaction_context(block=1):
                raise RuntimeError("boom")
        assert current_transaction() is None


class TestJSONFormatter:
    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "didregistry.test"
        assert data["message"] == "hello"
        assert "at" not in data
        assert "block" not in data

    def test_includes_block_and_sender(self):
        with transaction_context(block=7, sender="0xalice", transaction_id="tx-json"):
            data = json.loads(JSONFormatter().format(_record()))
        assert data["transaction_id"] == "tx-json"
        assert data["block"] == 7
        assert data["sender"] == "0xalice"

    def test_warning_includes_location(self):
        data = json.loads(JSONFormatter().format(_record(level=logging.WARNING)))
        assert data["at"].endswith(":10")

    def test_operation_fields_at_top_level(self):
        record = _record()
        record.extra_data = {"operation": "create", "principal": "0xalice", "code": None, "arguments": {"did": "d"}}
        data = json.loads(JSONFormatter().format(record))
        assert data["operation"] == "create"
        assert data["principal"] == "0xalice"
        assert "code" not in data
        assert data["arguments"] == {"did": "d"}


class TestStandardFormatter:
    def test_prefixes_block_and_transaction(self):
        formatter = StandardFormatter(use_colors=False)
        with transaction_context(block=7, transaction_id="abcdef1234567890"):
            out = formatter.format(_record())
        assert "[block 7 tx abcdef12] hello" in out

    def test_no_prefix_outside_transaction(self):
        out = StandardFormatter(use_colors=False).format(_record())
        assert out.endswith("didregistry.test: hello")

    def test_does_not_mutate_record(self):
        record = _record()
        with transaction_context(block=1):
            StandardFormatter(use_colors=False).format(record)
        assert record.msg == "hello"


class TestConfigureLogging:
    def test_json_format_from_env(self, clean_env, monkeypatch, restore_root_logger):
        monkeypatch.setenv("DIDREGISTRY_LOG_FORMAT", "json")
        configure_logging()
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)

    def test_explicit_level(self, clean_env, restore_root_logger):
        configure_logging(level="WARNING", json_format=False)
        assert restore_root_logger.level == logging.WARNING
        assert isinstance(restore_root_logger.handlers[0].formatter, StandardFormatter)

    def test_level_from_env_when_not_given(self, clean_env, monkeypatch, restore_root_logger):
        monkeypatch.setenv("DIDREGISTRY_LOG_LEVEL", "ERROR")
        configure_logging(json_format=False)
        assert restore_root_logger.level == logging.ERROR

    def test_explicit_level_overrides_env(self, clean_env, monkeypatch, restore_root_logger):
        monkeypatch.setenv("DIDREGISTRY_LOG_LEVEL", "ERROR")
        configure_logging(level=logging.DEBUG, json_format=False)
        assert restore_root_logger.level == logging.DEBUG


class TestOperationLogger:
    def test_truncates_long_text(self):
        op_logger = OperationLogger()
        sanitized = op_logger._sanitize({"claim": "x" * 500, "nested": ["y" * 500]})
        assert sanitized["claim"].endswith("...")
        assert len(sanitized["claim"]) == OperationLogger.MAX_TEXT_LENGTH + 3
        assert sanitized["nested"][0].endswith("...")

    def test_bytes_rendered_as_hex(self):
        assert OperationLogger()._sanitize(b"\x01\x02") == "0102"

    def test_log_call_and_result(self, caplog):
        op_logger = OperationLogger(logging.getLogger("didregistry.test.ops"))
        with caplog.at_level(logging.DEBUG, logger="didregistry.test.ops"):
            op_logger.log_call("add_claim", {"claim": "c"})
            op_logger.log_result("add_claim", False, code="NotFound")
        messages = [r.getMessage() for r in caplog.records]
        assert "Operation call: add_claim" in messages
        assert "Operation result: add_claim -> failure (NotFound)" in messages

    def test_records_format_as_operation_json(self, caplog):
        op_logger = OperationLogger(logging.getLogger("didregistry.test.ops"))
        with caplog.at_level(logging.DEBUG, logger="didregistry.test.ops"):
            with transaction_context(block=4, sender="0xowner"):
                op_logger.log_call("verify_claim", {"caller": "0xowner", "principal": "0xalice", "claim": "c"})
                formatted = [json.loads(JSONFormatter().format(r)) for r in caplog.records]

        data = formatted[-1]
        assert data["operation"] == "verify_claim"
        assert data["caller"] == "0xowner"
        assert data["principal"] == "0xalice"
        assert data["block"] == 4
        assert data["arguments"]["claim"] == "c"
