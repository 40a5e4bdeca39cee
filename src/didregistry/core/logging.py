# SPDX-License-Identifier: MIT
# Copyright (c) 2026 didregistry Contributors

"""Structured logging configuration for the registry.

Log lines emitted while the host applies a signed call carry that call's
transaction: its id, the block height it is applied at and its sender.
Registry operations logged through :class:`OperationLogger` add the
operation name, target principal, caller and error code.

Provides:
- JSON formatter with registry fields at the top level (production)
- Standard one-line formatter (development)
- ``transaction_context`` for scoping the current transaction
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class Transaction:
    """The host transaction currently executing."""

    id: str
    block: int | None = None
    sender: str | None = None


_current_transaction: ContextVar[Transaction | None] = ContextVar("current_transaction", default=None)


def current_transaction() -> Transaction | None:
    """Return the transaction of the current context, or None outside one."""
    return _current_transaction.get()


@contextmanager
def transaction_context(
    block: int | None = None,
    sender: str | None = None,
    transaction_id: str | None = None,
) -> Generator[Transaction, None, None]:
    """Scope a transaction so every log line inside it is tagged with it.

    Example:
        with transaction_context(block=12, sender="0xabc") as tx:
            logger.info("Applying call")  # tagged with tx.id, block 12
    """
    tx = Transaction(id=transaction_id or str(uuid.uuid4()), block=block, sender=sender)
    token = _current_transaction.set(tx)
    try:
        yield tx
    finally:
        _current_transaction.reset(token)


# Keys of ``extra_data`` promoted to top-level log fields
OPERATION_FIELDS = ("operation", "principal", "caller", "code")


def registry_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Collect transaction and operation fields for ``record``."""
    fields: dict[str, Any] = {}

    tx = current_transaction()
    if tx is not None:
        fields["transaction_id"] = tx.id
        if tx.block is not None:
            fields["block"] = tx.block
        if tx.sender is not None:
            fields["sender"] = tx.sender

    extra = getattr(record, "extra_data", None) or {}
    for name in OPERATION_FIELDS:
        if extra.get(name) is not None:
            fields[name] = extra[name]
    return fields


class JSONFormatter(logging.Formatter):
    """One JSON object per line.

    Transaction and operation fields sit at the top level so log
    aggregation can filter by block, sender or operation directly.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(registry_fields(record))

        extra = getattr(record, "extra_data", None) or {}
        if "arguments" in extra:
            entry["arguments"] = extra["arguments"]

        if record.levelno >= logging.WARNING:
            entry["at"] = f"{record.module}:{record.lineno}"
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class StandardFormatter(logging.Formatter):
    """Human-readable one-line formatter.

    ``12:00:01 INFO     didregistry.identity.host: [block 7 tx 1a2b3c4d] Applied create``
    """

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__(datefmt="%H:%M:%S")
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:<8}"
        if self.use_colors:
            level = f"{self.LEVEL_COLORS.get(record.levelname, '')}{level}{self.RESET}"

        fields = registry_fields(record)
        context = []
        if "block" in fields:
            context.append(f"block {fields['block']}")
        if "transaction_id" in fields:
            context.append(f"tx {fields['transaction_id'][:8]}")
        prefix = f"[{' '.join(context)}] " if context else ""

        line = f"{self.formatTime(record, self.datefmt)} {level} {record.name}: {prefix}{record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    level: str | int | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Install registry formatters on the root logger.

    Arguments left as None fall back to configuration:
        DIDREGISTRY_LOG_LEVEL: log level (default INFO)
        DIDREGISTRY_LOG_FORMAT: "json" or "text" (default: JSON unless stderr is a TTY)
        DIDREGISTRY_LOG_FILE: extra JSON log file
    """
    from .config import get_config

    config = get_config()

    if level is None:
        level = config.log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_format is None:
        log_format = config.log_format.lower()
        json_format = log_format == "json" or (log_format != "text" and not sys.stderr.isatty())

    if log_file is None:
        log_file = config.log_file

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    handlers[0].setFormatter(JSONFormatter() if json_format else StandardFormatter())
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)


class OperationLogger:
    """Logger for registry operations.

    Logs operation arguments with long text truncated so that oversized
    (and therefore rejected) claims do not flood the log.
    """

    MAX_TEXT_LENGTH = 120

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("didregistry.operations")

    def log_call(
        self,
        operation: str,
        arguments: dict[str, Any],
        level: int = logging.DEBUG,
    ) -> None:
        """Log an operation call with sanitized arguments."""
        self.logger.log(
            level,
            f"Operation call: {operation}",
            extra={
                "extra_data": {
                    "operation": operation,
                    "principal": arguments.get("principal"),
                    "caller": arguments.get("caller"),
                    "arguments": self._sanitize(arguments),
                }
            },
        )

    def log_result(
        self,
        operation: str,
        success: bool,
        code: str | None = None,
        level: int = logging.DEBUG,
    ) -> None:
        """Log an operation result.

        Args:
            operation: Name of the operation
            success: Whether the call succeeded
            code: Error code of a failed call
            level: Log level
        """
        status = "success" if success else f"failure ({code})"
        self.logger.log(
            level,
            f"Operation result: {operation} -> {status}",
            extra={"extra_data": {"operation": operation, "code": code}},
        )

    def _sanitize(self, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: self._sanitize(value) for key, value in data.items()}
        elif isinstance(data, list):
            return [self._sanitize(item) for item in data]
        elif isinstance(data, bytes):
            return data.hex()
        elif isinstance(data, str) and len(data) > self.MAX_TEXT_LENGTH:
            return data[: self.MAX_TEXT_LENGTH] + "..."
        else:
            return data


# Default operation logger
operation_logger = OperationLogger()
