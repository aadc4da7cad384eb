# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Arbiter Contributors

"""Structured logging for Arbiter.

Selection code logs events with structured fields (chosen address,
candidate count, window size) through log_event(). Formatters render
those fields, together with the correlation ID of the trade being set
up, either as one JSON object per line or as ``key=value`` pairs.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

# Usually the offer or trade id a selection is made for
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    _correlation_id.set(correlation_id)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


@contextmanager
def correlation_context(
    correlation_id: str | None = None,
) -> Generator[str, None, None]:
    """Tag every log record emitted inside the block with a correlation ID.

    Args:
        correlation_id: Trade or offer id. If None, a UUID is generated.

    Yields:
        The correlation ID in effect.
    """
    cid = correlation_id or generate_correlation_id()
    token = _correlation_id.set(cid)
    try:
        yield cid
    finally:
        _correlation_id.reset(token)


def log_event(logger: logging.Logger, level: int, message: str, **data: Any) -> None:
    """Log a message with structured fields attached as ``extra_data``.

    The current correlation ID is stored on the record, so it survives
    formatting outside the correlation context.
    """
    logger.log(
        level,
        message,
        extra={"extra_data": data, "correlation_id": get_correlation_id()},
    )


def _event_data(record: logging.LogRecord) -> dict[str, Any]:
    data = getattr(record, "extra_data", None)
    return data if isinstance(data, dict) else {}


def _record_correlation_id(record: logging.LogRecord) -> str | None:
    return getattr(record, "correlation_id", None) or get_correlation_id()


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = _record_correlation_id(record)
        if correlation_id:
            log_data["correlation_id"] = correlation_id

        if record.levelno >= logging.WARNING:
            log_data["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        data = _event_data(record)
        if data:
            log_data["extra"] = data

        return json.dumps(log_data, default=str)


class StandardFormatter(logging.Formatter):
    """Single line text format for terminals.

    Structured fields are appended as sorted ``key=value`` pairs and the
    correlation ID, shortened to 8 characters, is prefixed in brackets.
    """

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)

        data = _event_data(record)
        if data:
            line += " " + " ".join(f"{key}={data[key]}" for key in sorted(data))

        correlation_id = _record_correlation_id(record)
        if correlation_id:
            line = f"[{correlation_id[:8]}] {line}"
        return line


def configure_logging(
    level: str | int | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Install Arbiter's formatters on the root logger.

    Arguments left as None fall back to ARBITER_LOG_LEVEL, ARBITER_LOG_FORMAT
    and ARBITER_LOG_FILE. With no format configured, JSON is used unless
    stderr is a terminal. File output is always JSON.
    """
    from .config import get_config

    config = get_config()

    if level is None:
        level = config.log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_format is None:
        format_env = config.log_format.lower()
        if format_env in ("json", "text"):
            json_format = format_env == "json"
        else:
            json_format = not sys.stderr.isatty()

    if log_file is None:
        log_file = config.log_file

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(JSONFormatter() if json_format else StandardFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
